"""
HTTP surface for the chat widget.

Run with `supportbot serve` or `uvicorn supportbot.api.app:app`.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from supportbot.api.schemas import (
    ChatRequest,
    ChatResponse,
    ConversationResponse,
    ErrorResponse,
    HealthResponse,
    MessageOut,
    SessionCreated,
    SessionListResponse,
    SessionOut,
)
from supportbot.config import Settings, settings as default_settings
from supportbot.db import init_db
from supportbot.errors import StorageError, ValidationError
from supportbot.logging import logger, request_scope
from supportbot.service import ChatService, build_service


def _error(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, message=message).model_dump(),
    )


def create_app(service: Optional[ChatService] = None, cfg: Settings = default_settings) -> FastAPI:
    if service is None:
        service = build_service(cfg)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        logging.getLogger().setLevel(cfg.LOG_LEVEL)
        init_db(service.store.engine)
        logger.info(f"Support chat API ready (mode={service.mode}, env={cfg.ENVIRONMENT})")
        yield

    app = FastAPI(title="Support Chat API", version="0.1.0", lifespan=lifespan)
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        incoming = request.headers.get("X-Request-ID")
        with request_scope(incoming) as rid:
            response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return _error(400, "Invalid request", "Request body must be a JSON object")

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        message = str(exc) if cfg.ENVIRONMENT == "development" else "Something went wrong"
        return _error(500, "Internal server error", message)

    @app.post("/api/chat", response_model=ChatResponse)
    def chat(body: ChatRequest):
        try:
            result = service.send_message(body.session_id, body.message)
        except ValidationError as e:
            return _error(400, "Missing required fields", str(e))
        except StorageError as e:
            return _error(500, "Failed to process chat message", str(e))
        return ChatResponse(reply=result.reply, tokens_used=result.tokens_used)

    @app.get("/api/conversations/{session_id}", response_model=ConversationResponse)
    def conversation(session_id: str):
        try:
            turns = service.conversation(session_id)
        except StorageError as e:
            return _error(500, "Failed to fetch conversation", str(e))
        return ConversationResponse(messages=[MessageOut.from_turn(t) for t in turns])

    @app.get("/api/sessions", response_model=SessionListResponse)
    def list_sessions():
        try:
            rows = service.store.list_sessions()
        except StorageError as e:
            return _error(500, "Failed to fetch sessions", str(e))
        return SessionListResponse(sessions=[SessionOut.from_row(r) for r in rows])

    @app.post("/api/sessions", response_model=SessionCreated)
    def create_session():
        try:
            row = service.store.create_session()
        except StorageError as e:
            return _error(500, "Failed to create session", str(e))
        return SessionCreated(session_id=row.id)

    @app.get("/health", response_model=HealthResponse)
    def health():
        return HealthResponse(status="ok", mode=service.mode)

    return app


app = create_app()
