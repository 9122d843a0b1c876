import pytest
from sqlalchemy import event
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine
from supportbot.docs import Document, DocumentSet
from supportbot.store import ConversationStore
import supportbot.models  # noqa: F401


# Use in-memory DB for testing; StaticPool keeps one connection so every
# Session sees the same database
@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(name="strict_engine")
def strict_engine_fixture():
    """Same as engine, but SQLite enforces foreign keys like server databases do."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(name="store")
def store_fixture(engine):
    return ConversationStore(engine)


@pytest.fixture(name="documents")
def documents_fixture():
    return DocumentSet.of(
        Document("Password Reset", "Use the Forgot password link."),
        Document("Refund Policy", "Refunds within 30 days."),
        Document("Subscription Plans", "Basic $9, Pro $29."),
        Document("Account Setup", "Click Sign up to register."),
        Document("Payment Methods", "We accept credit cards and PayPal."),
        Document("API Integration", "Generate an API key under Settings."),
    )
