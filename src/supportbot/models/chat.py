from enum import Enum
from typing import Optional
from sqlmodel import Field
from supportbot.models.base import TimestampMixin, CreatedAtMixin


class TurnRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ChatSession(TimestampMixin, table=True):
    # Opaque id supplied by the widget (e.g. "session_1718000000000_k3j9x0a2b")
    id: str = Field(primary_key=True)


class Turn(CreatedAtMixin, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    # Not a foreign key: the user turn is written before touch_session registers the session
    session_id: str = Field(index=True)

    role: TurnRole
    content: str
