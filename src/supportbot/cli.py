import logging
import sys
import typer
from typing import Optional
from supportbot.config import settings, PLACEHOLDER_KEY_MARKERS
from supportbot.logging import logger

app = typer.Typer(no_args_is_help=True)

@app.callback()
def main():
    """
    Documentation-grounded support chat CLI.
    """
    logging.getLogger().setLevel(settings.LOG_LEVEL)

@app.command(name="doctor")
def doctor():
    """
    Check system configuration and environment health.
    """
    from supportbot.docs import load_documents

    logger.info("Running doctor check...")

    print("\n🩺 Support Chat Doctor\n")

    print(f"Python: {sys.version.split()[0]}")
    print(f"Prefix: {sys.prefix}")

    print("\n[Configuration]")
    print(f"ENVIRONMENT:    {settings.ENVIRONMENT}")
    print(f"OPENAI_MODEL:   {settings.OPENAI_MODEL}")
    print(f"HISTORY_WINDOW: {settings.HISTORY_WINDOW}")
    print(f"DATABASE:       {settings.database_url}")

    # Mask API Key
    if settings.OPENAI_API_KEY and settings.OPENAI_API_KEY.get_secret_value().strip():
        key = settings.OPENAI_API_KEY.get_secret_value()
        is_placeholder = any(marker in key for marker in PLACEHOLDER_KEY_MARKERS)
        api_key_status = "⚠️ Placeholder" if is_placeholder else "✅ Set"
    else:
        api_key_status = "❌ Missing"
    print(f"OPENAI_API_KEY: {api_key_status}")
    print(f"Reply mode:     {settings.resolution_mode}")

    docs = load_documents(settings.DOCS_PATH)
    if len(docs):
        print(f"\n[Documentation]  ✅ {len(docs)} documents in {settings.DOCS_PATH}")
    else:
        print(f"\n[Documentation]  ❌ No documents loaded from {settings.DOCS_PATH}")

    data_dir = settings.DATA_DIR
    if data_dir.exists() and data_dir.is_dir():
        print(f"[Data Directory] ✅ Found: {data_dir.absolute()}")
    else:
        print(f"[Data Directory] ❌ Missing: {data_dir.absolute()} (created by `supportbot db init`)")

    print("\nDoctor check complete.")


db_app = typer.Typer(help="Database management commands.")
app.add_typer(db_app, name="db")

@db_app.command("init")
def init():
    """Initialize the database tables."""
    from supportbot.db import init_db
    try:
        init_db()
        logger.info("Database initialized successfully.")
        print("✅ Database initialized.")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        print(f"❌ Failed: {e}")
        raise typer.Exit(code=1)


@app.command(name="serve")
def serve(
    host: str = typer.Option("0.0.0.0", help="Interface to bind"),
    port: Optional[int] = typer.Option(None, help="Port (defaults to PORT setting)"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
):
    """Run the HTTP API with uvicorn."""
    import uvicorn
    port = port or settings.PORT
    logger.info(f"Serving support chat API on {host}:{port} ({settings.ENVIRONMENT})")
    uvicorn.run("supportbot.api.app:app", host=host, port=port, reload=reload)


@app.command(name="ask")
def ask(session_id: str, message: str):
    """Send one message through the chat pipeline and print the reply."""
    from supportbot.db import init_db
    from supportbot.errors import StorageError, ValidationError
    from supportbot.service import build_service

    service = build_service(settings)
    try:
        init_db(service.store.engine)
        result = service.send_message(session_id, message)
    except ValidationError as e:
        print(f"❌ {e}")
        raise typer.Exit(code=2)
    except StorageError as e:
        logger.error(f"Chat failed: {e}")
        print(f"❌ Failed: {e}")
        raise typer.Exit(code=1)

    print(result.reply)
    print(f"\n[{service.mode}] tokens used: {result.tokens_used}")


@app.command(name="sessions")
def sessions():
    """List chat sessions, most recently active first."""
    from supportbot.db import engine, init_db
    from supportbot.store import ConversationStore

    init_db(engine)
    rows = ConversationStore(engine).list_sessions()
    if not rows:
        print("No sessions found.")
        return

    print(f"Found {len(rows)} sessions:")
    for row in rows:
        print(f"- {row.id}  created {row.created_at:%Y-%m-%d %H:%M}  updated {row.updated_at:%Y-%m-%d %H:%M}")


@app.command(name="history")
def history(session_id: str, limit: Optional[int] = typer.Option(None, help="Only the last N turns")):
    """Print the turns of a session in order."""
    from supportbot.db import engine, init_db
    from supportbot.store import ConversationStore

    init_db(engine)
    turns = ConversationStore(engine).history(session_id, limit=limit)
    if not turns:
        print(f"No messages for {session_id}.")
        return

    for turn in turns:
        print(f"[{turn.created_at:%H:%M:%S}] {turn.role.value}: {turn.content}")


if __name__ == "__main__":
    app()
