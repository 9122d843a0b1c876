import streamlit as st
from typing import Optional
from supportbot.store import generate_session_id

SUGGESTED_QUESTIONS = (
    "Show me pricing plans",
    "reset password",
    "refund policy",
)

def init_session():
    """Initialize session state variables."""
    if "chat_session_id" not in st.session_state:
        st.session_state["chat_session_id"] = generate_session_id()
    if "pending_message" not in st.session_state:
        st.session_state["pending_message"] = None

def get_chat_session_id() -> str:
    """Get the session id of the conversation shown in the widget."""
    return st.session_state["chat_session_id"]

def start_new_chat() -> str:
    """Switch the widget to a fresh conversation."""
    st.session_state["chat_session_id"] = generate_session_id()
    st.session_state["pending_message"] = None
    return st.session_state["chat_session_id"]

def queue_message(message: str):
    """Remember a suggested question to send on the next rerun."""
    st.session_state["pending_message"] = message

def pop_pending_message() -> Optional[str]:
    message = st.session_state.get("pending_message")
    st.session_state["pending_message"] = None
    return message
