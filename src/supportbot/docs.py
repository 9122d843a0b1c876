"""
Static support documentation.

Documents are loaded once at startup and handed to the resolver as an
immutable DocumentSet. A missing or malformed file yields an empty set, in
which case every rule lookup misses and replies fall back to the default
sentence.
"""
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Tuple
from pydantic import TypeAdapter, ValidationError as PydanticValidationError
from supportbot.logging import logger


@dataclass(frozen=True)
class Document:
    title: str
    content: str


_DOCUMENT_LIST = TypeAdapter(List[Document])


@dataclass(frozen=True)
class DocumentSet:
    documents: Tuple[Document, ...] = ()

    @classmethod
    def of(cls, *documents: Document) -> "DocumentSet":
        return cls(tuple(documents))

    def __iter__(self) -> Iterator[Document]:
        return iter(self.documents)

    def __len__(self) -> int:
        return len(self.documents)

    def find_by_title(self, *needles: str) -> Optional[Document]:
        """First document (in file order) whose title contains any needle, case-insensitive."""
        lowered = [n.lower() for n in needles]
        for doc in self.documents:
            title = doc.title.lower()
            if any(n in title for n in lowered):
                return doc
        return None


def parse_documents(raw: str) -> DocumentSet:
    """Parse a JSON array of {title, content} objects. Raises on bad input."""
    data = json.loads(raw)
    return DocumentSet(tuple(_DOCUMENT_LIST.validate_python(data)))


def load_documents(path: Path) -> DocumentSet:
    """Load documentation from disk, degrading to an empty set on any failure."""
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.error(f"Error loading documentation from {path}: {e}")
        return DocumentSet()

    try:
        docs = parse_documents(raw)
    except (json.JSONDecodeError, PydanticValidationError) as e:
        logger.error(f"Documentation at {path} is not a valid list of {{title, content}} records: {e}")
        return DocumentSet()

    logger.info(f"Loaded {len(docs)} documents from {path}")
    return docs
