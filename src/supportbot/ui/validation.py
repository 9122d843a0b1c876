from typing import List
from sqlmodel import Session, select
from supportbot.config import settings
from supportbot.db import engine, init_db, DATA_DIR
from supportbot.docs import load_documents
from supportbot.models.chat import ChatSession, Turn
from supportbot.logging import logger

def validate_schema() -> List[str]:
    """Validate that the chat tables are registered with SQLModel."""
    errors = []
    for model in (ChatSession, Turn):
        if not hasattr(model, "__table__"):
            errors.append(f"Model {model.__name__} is missing table definition.")
    return errors

def validate_docs() -> List[str]:
    """Validate that at least one support document loads."""
    if len(load_documents(settings.DOCS_PATH)) == 0:
        return [f"No support documents could be loaded from {settings.DOCS_PATH}"]
    return []

def validate_data_dir() -> List[str]:
    """Validate data directory exists and is writable."""
    errors = []
    try:
        DATA_DIR.mkdir(parents=True, exist_ok=True)
        test_file = DATA_DIR / ".write_test"
        test_file.touch()
        test_file.unlink()
    except OSError as e:
        errors.append(f"Cannot write to data directory {DATA_DIR}: {e}")
    return errors

def validate_db_init() -> List[str]:
    """Create missing tables; report instead of raising when the database is unreachable."""
    try:
        init_db(engine)
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        return [f"Database initialization failed: {e}"]
    return []

def validate_db_connection() -> List[str]:
    """Validate database connection and basic query capability."""
    errors = []
    try:
        with Session(engine) as session:
            session.exec(select(ChatSession).limit(1)).first()
    except Exception as e:
        logger.error(f"Database check failed: {e}")
        errors.append(f"Database connection failed: {e}")
    return errors

def run_all_checks() -> List[str]:
    """Run all validation checks."""
    errors = []
    errors.extend(validate_schema())
    errors.extend(validate_docs())
    errors.extend(validate_data_dir())
    errors.extend(validate_db_init())
    errors.extend(validate_db_connection())
    return errors
