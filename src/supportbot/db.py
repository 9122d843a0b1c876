from pathlib import Path
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine
from supportbot.config import settings
from supportbot.logging import logger

DATA_DIR = settings.DATA_DIR
DB_URL = settings.database_url


def make_engine(url: str) -> Engine:
    # FastAPI runs sync endpoints on a threadpool, so SQLite connections cross threads
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, echo=False, connect_args=connect_args)


engine = make_engine(DB_URL)


def init_db(target: Engine | None = None):
    target = target or engine
    database = target.url.database
    if target.url.drivername.startswith("sqlite") and database not in (None, "", ":memory:"):
        Path(database).parent.mkdir(parents=True, exist_ok=True)

    # Import all models here so SQLModel knows about them
    from supportbot.models import chat  # noqa: F401

    logger.info(f"Initializing database at {target.url}")
    SQLModel.metadata.create_all(target)
