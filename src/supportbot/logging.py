import logging
import sys
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

# Set per HTTP request; copied into threadpool workers by Starlette
request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

NO_REQUEST = "-"

def new_request_id() -> str:
    return uuid.uuid4().hex[:12]

def get_request_id() -> str:
    """Current request id, or "-" outside a request scope."""
    return request_id_ctx.get() or NO_REQUEST

@contextmanager
def request_scope(request_id: Optional[str] = None) -> Iterator[str]:
    """Bind a request id for the duration of the block and restore the previous one after."""
    rid = request_id or new_request_id()
    token = request_id_ctx.set(rid)
    try:
        yield rid
    finally:
        request_id_ctx.reset(token)

class RequestIDFilter(logging.Filter):
    def filter(self, record):
        record.request_id = get_request_id()
        return True

def configure_logging(level: str = "INFO"):
    """Send all records to stderr with the request id in every line."""
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s | %(levelname)-8s | [%(request_id)s] | %(name)s:%(funcName)s:%(lineno)d - %(message)s"
    ))
    handler.addFilter(RequestIDFilter())
    root.addHandler(handler)

    for noisy in ("httpx", "httpcore", "openai", "watchdog"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

configure_logging()
logger = logging.getLogger("supportbot")
