"""Wire models. Field names are camelCase on the wire, snake_case in Python."""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from supportbot.models.chat import ChatSession, Turn, TurnRole


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChatRequest(CamelModel):
    # Optional so that missing fields reach the service and get its 400, not a 422
    session_id: Optional[str] = None
    message: Optional[str] = None


class ChatResponse(CamelModel):
    reply: str
    tokens_used: int


class MessageOut(CamelModel):
    role: str
    content: str
    created_at: datetime

    @classmethod
    def from_turn(cls, turn: Turn) -> "MessageOut":
        role = turn.role.value if isinstance(turn.role, TurnRole) else str(turn.role)
        return cls(role=role, content=turn.content, created_at=turn.created_at)


class ConversationResponse(CamelModel):
    messages: List[MessageOut]


class SessionOut(CamelModel):
    id: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row: ChatSession) -> "SessionOut":
        return cls(id=row.id, created_at=row.created_at, updated_at=row.updated_at)


class SessionListResponse(CamelModel):
    sessions: List[SessionOut]


class SessionCreated(CamelModel):
    session_id: str


class HealthResponse(BaseModel):
    status: str
    mode: str


class ErrorResponse(BaseModel):
    error: str
    message: str
