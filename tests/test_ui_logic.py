import pytest
from unittest.mock import patch
from supportbot.ui import state
from supportbot.ui.validation import (
    validate_schema,
    validate_docs,
    validate_data_dir,
    validate_db_connection,
    validate_db_init,
    run_all_checks,
)


@pytest.fixture
def session_state():
    fake = {}
    with patch.object(state.st, "session_state", fake):
        yield fake


def test_init_session_generates_id_once(session_state):
    state.init_session()
    sid = state.get_chat_session_id()
    assert sid.startswith("session_")

    state.init_session()
    assert state.get_chat_session_id() == sid


def test_new_chat_replaces_id(session_state):
    state.init_session()
    old = state.get_chat_session_id()
    state.queue_message("refund policy")

    new = state.start_new_chat()

    assert new != old
    assert state.pop_pending_message() is None


def test_pending_message_is_consumed(session_state):
    state.init_session()
    state.queue_message(state.SUGGESTED_QUESTIONS[0])
    assert state.pop_pending_message() == "Show me pricing plans"
    assert state.pop_pending_message() is None


def test_validation(tmp_path, engine):
    assert not validate_schema()

    with patch("supportbot.ui.validation.DATA_DIR", tmp_path / "data"):
        assert not validate_data_dir()
    assert (tmp_path / "data").is_dir()

    with patch("supportbot.ui.validation.engine", engine):
        assert not validate_db_connection()


def test_validate_docs_reports_missing_file(tmp_path):
    with patch("supportbot.ui.validation.settings") as mock_settings:
        mock_settings.DOCS_PATH = tmp_path / "missing.json"
        errors = validate_docs()
    assert errors and "missing.json" in errors[0]


def test_unreachable_database_is_reported_not_raised(tmp_path, engine):
    with patch("supportbot.ui.validation.init_db", side_effect=RuntimeError("unable to open database file")), \
         patch("supportbot.ui.validation.DATA_DIR", tmp_path), \
         patch("supportbot.ui.validation.engine", engine):
        errors = run_all_checks()
    assert any("Database initialization failed: unable to open database file" in e for e in errors)


def test_db_init_creates_tables(engine):
    with patch("supportbot.ui.validation.engine", engine):
        assert not validate_db_init()
        assert not validate_db_connection()
