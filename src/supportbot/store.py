"""
Conversation store: append-only turn log plus a session registry.

Every operation opens its own SQLModel Session so the store can be shared
between request threads; the database driver serializes concurrent writers.
"""
import random
import string
import time
from typing import Callable, List, Optional
from datetime import datetime, timezone
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select, desc
from supportbot.errors import StorageError
from supportbot.logging import logger
from supportbot.models.base import utc_now
from supportbot.models.chat import ChatSession, Turn, TurnRole

_BASE36 = string.digits + string.ascii_lowercase


def generate_session_id() -> str:
    """Build an id shaped like the widget's: session_<epoch ms>_<9 base36 chars>."""
    suffix = "".join(random.choices(_BASE36, k=9))
    return f"session_{int(time.time() * 1000)}_{suffix}"


class ConversationStore:
    def __init__(self, engine: Engine, clock: Callable[[], datetime] = utc_now):
        self.engine = engine
        self.clock = clock

    def _now(self) -> datetime:
        """Clock reading as an aware UTC datetime; naive readings are taken to be UTC."""
        now = self.clock()
        if now.tzinfo is None:
            return now.replace(tzinfo=timezone.utc)
        return now

    def append_turn(self, session_id: str, role: TurnRole, content: str) -> int:
        """Insert a turn and return its id. The session id needs no prior registration."""
        turn = Turn(session_id=session_id, role=TurnRole(role), content=content, created_at=self._now())
        try:
            with Session(self.engine) as session:
                session.add(turn)
                session.commit()
                session.refresh(turn)
                return turn.id
        except SQLAlchemyError as e:
            logger.error(f"Failed to store {TurnRole(role).value} turn for session {session_id}: {e}")
            raise StorageError(f"Could not store message for session {session_id}") from e

    def history(self, session_id: str, limit: Optional[int] = None) -> List[Turn]:
        """
        Turns for a session in chronological order.

        With a limit, the newest `limit` turns are selected and then returned
        oldest-first.
        """
        try:
            with Session(self.engine) as session:
                if limit is None:
                    stmt = (
                        select(Turn)
                        .where(Turn.session_id == session_id)
                        .order_by(Turn.created_at, Turn.id)
                    )
                    return list(session.exec(stmt).all())

                stmt = (
                    select(Turn)
                    .where(Turn.session_id == session_id)
                    .order_by(desc(Turn.created_at), desc(Turn.id))
                    .limit(limit)
                )
                newest = list(session.exec(stmt).all())
                newest.reverse()
                return newest
        except SQLAlchemyError as e:
            logger.error(f"Failed to read history for session {session_id}: {e}")
            raise StorageError(f"Could not read conversation {session_id}") from e

    def touch_session(self, session_id: str) -> ChatSession:
        """
        Idempotent upsert.

        Pre: the session may or may not exist.
        Post: exactly one row exists for session_id, updated_at is now and
        created_at is whatever it was when the row was first inserted.
        """
        now = self._now()
        try:
            with Session(self.engine) as session:
                row = session.get(ChatSession, session_id)
                if row is None:
                    row = ChatSession(id=session_id, created_at=now, updated_at=now)
                    session.add(row)
                    try:
                        session.commit()
                    except IntegrityError:
                        # Another writer inserted it first; fall through to the update
                        session.rollback()
                        row = session.get(ChatSession, session_id)
                        row.updated_at = now
                        session.add(row)
                        session.commit()
                else:
                    row.updated_at = now
                    session.add(row)
                    session.commit()
                session.refresh(row)
                return row
        except SQLAlchemyError as e:
            logger.error(f"Failed to update session {session_id}: {e}")
            raise StorageError(f"Could not update session {session_id}") from e

    def get_session(self, session_id: str) -> Optional[ChatSession]:
        try:
            with Session(self.engine) as session:
                return session.get(ChatSession, session_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load session {session_id}: {e}")
            raise StorageError(f"Could not load session {session_id}") from e

    def list_sessions(self) -> List[ChatSession]:
        """All sessions, most recently active first."""
        try:
            with Session(self.engine) as session:
                stmt = select(ChatSession).order_by(desc(ChatSession.updated_at), ChatSession.id)
                return list(session.exec(stmt).all())
        except SQLAlchemyError as e:
            logger.error(f"Failed to list sessions: {e}")
            raise StorageError("Could not list sessions") from e

    def create_session(self) -> ChatSession:
        """Register a freshly generated session id."""
        return self.touch_session(generate_session_id())
