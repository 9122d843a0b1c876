"""
Chat pipeline: store the user turn, read history, resolve, store the reply,
touch the session registry.
"""
from dataclasses import dataclass
from typing import List, Optional
from supportbot.config import Settings, settings as default_settings
from supportbot.docs import load_documents
from supportbot.errors import ValidationError
from supportbot.models.chat import Turn, TurnRole
from supportbot.resolver import ReplyResolver, build_resolver
from supportbot.store import ConversationStore
from supportbot.logging import logger


@dataclass
class ChatReply:
    reply: str
    tokens_used: int


class ChatService:
    def __init__(self, store: ConversationStore, resolver: ReplyResolver, history_window: int = 10):
        self.store = store
        self.resolver = resolver
        self.history_window = history_window

    @property
    def mode(self) -> str:
        return self.resolver.mode

    def send_message(self, session_id: Optional[str], message: Optional[str]) -> ChatReply:
        """
        Run one message through the pipeline.

        Raises ValidationError before touching storage when either input is
        blank. StorageError propagates from any store step; turns already
        written are not rolled back.
        """
        if not session_id or not session_id.strip() or not message or not message.strip():
            raise ValidationError("sessionId and message are required")

        user_turn_id = self.store.append_turn(session_id, TurnRole.USER, message)

        # One extra row so the window still holds history_window prior turns
        recent = self.store.history(session_id, limit=self.history_window + 1)
        prior = [t for t in recent if t.id != user_turn_id][-self.history_window:]
        logger.debug(f"Session {session_id}: {len(prior)} prior turns in context")

        resolution = self.resolver.resolve(message, prior)

        self.store.append_turn(session_id, TurnRole.ASSISTANT, resolution.reply)
        self.store.touch_session(session_id)

        logger.info(
            f"Session {session_id}: replied via {self.resolver.mode} ({resolution.tokens_used} tokens)"
        )
        return ChatReply(reply=resolution.reply, tokens_used=resolution.tokens_used)

    def conversation(self, session_id: str) -> List[Turn]:
        return self.store.history(session_id)


def build_service(cfg: Settings = default_settings, engine=None) -> ChatService:
    """Wire store, documents and resolver from settings."""
    if engine is None:
        from supportbot.db import engine as default_engine
        engine = default_engine
    documents = load_documents(cfg.DOCS_PATH)
    resolver = build_resolver(cfg, documents)
    return ChatService(ConversationStore(engine), resolver, history_window=cfg.HISTORY_WINDOW)
