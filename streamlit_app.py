import streamlit as st
from supportbot.errors import StorageError
from supportbot.service import build_service
from supportbot.ui.validation import run_all_checks
from supportbot.ui.state import (
    SUGGESTED_QUESTIONS,
    get_chat_session_id,
    init_session,
    pop_pending_message,
    queue_message,
    start_new_chat,
)

# Page configuration
st.set_page_config(
    page_title="Support Chat",
    page_icon="💬",
    layout="centered",
)

# Run pre-flight checks, including table creation
errors = run_all_checks()

if errors:
    st.error("🚨 System Configuration Errors")
    for err in errors:
        st.write(f"- {err}")
    st.stop()


@st.cache_resource
def get_service():
    return build_service()


service = get_service()
init_session()
session_id = get_chat_session_id()

# Sidebar
st.sidebar.title("Support Chat")
st.sidebar.caption(f"Mode: {service.mode}")
st.sidebar.caption(f"Session: {session_id}")
if st.sidebar.button("New chat"):
    start_new_chat()
    st.rerun()

st.title("💬 How can we help?")

try:
    turns = service.conversation(session_id)
except StorageError as e:
    st.error(f"Could not load conversation: {e}")
    st.stop()

if not turns:
    with st.chat_message("assistant"):
        st.write("Hi! Ask me anything about your account, billing or our API.")
    cols = st.columns(len(SUGGESTED_QUESTIONS))
    for col, question in zip(cols, SUGGESTED_QUESTIONS):
        if col.button(question, use_container_width=True):
            queue_message(question)
            st.rerun()

for turn in turns:
    with st.chat_message(turn.role.value):
        st.write(turn.content)

prompt = st.chat_input("Type your question...") or pop_pending_message()

if prompt:
    with st.chat_message("user"):
        st.write(prompt)
    with st.chat_message("assistant"):
        with st.spinner("Thinking..."):
            try:
                result = service.send_message(session_id, prompt)
            except StorageError as e:
                st.error(f"Failed to process chat message: {e}")
                st.stop()
        st.write(result.reply)
        st.caption(f"{result.tokens_used} tokens")
