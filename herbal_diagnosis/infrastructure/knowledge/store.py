"""
Name: Knowledge Store

Responsibilities:
  - Load every knowledge source exactly once (idempotent under threads)
  - Merge sources in a fixed order into one read-only document tuple
  - Isolate failing sources (they contribute zero documents)
  - Keep document ids unique across the corpus (first occurrence wins)

Collaborators:
  - infrastructure/knowledge/sources.py: KnowledgeSource implementations
  - application/retriever.py: reads documents()

Constraints:
  - Read-only after initialization
  - Late callers block on the lock, then observe the completed tuple
"""

from threading import Lock
from typing import Iterable, Optional, Sequence, Tuple

from ...domain.entities import Document
from ...domain.services import KnowledgeSource
from ...exceptions import KnowledgeSourceError
from ...logger import logger
from .sources import default_sources


class KnowledgeStore:
    """
    R: Thread-safe, lazily initialized corpus.
    """

    def __init__(self, sources: Optional[Iterable[KnowledgeSource]] = None):
        self._sources: Tuple[KnowledgeSource, ...] = tuple(
            default_sources() if sources is None else sources
        )
        self._lock = Lock()
        self._initialized = False
        self._documents: Tuple[Document, ...] = ()
        self._failed_sources: Tuple[str, ...] = ()

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def failed_sources(self) -> Tuple[str, ...]:
        return self._failed_sources

    def initialize(self) -> None:
        """R: Load all sources once; subsequent calls are no-ops."""
        if self._initialized:
            return
        with self._lock:
            if self._initialized:
                return
            self._documents, self._failed_sources = self._load_all()
            self._initialized = True

    def documents(self) -> Sequence[Document]:
        self.initialize()
        return self._documents

    def _load_all(self) -> Tuple[Tuple[Document, ...], Tuple[str, ...]]:
        merged = []
        seen_ids = set()
        failed = []

        for source in self._sources:
            try:
                loaded = list(source.load())
            except Exception as exc:
                # R: Custom sources may raise anything; wrap to get an error_id
                error = (
                    exc
                    if isinstance(exc, KnowledgeSourceError)
                    else KnowledgeSourceError(
                        f"Knowledge source {source.name} failed to load",
                        original_error=exc,
                    )
                )
                failed.append(source.name)
                logger.warning(
                    "Knowledge source failed to load",
                    extra={
                        "source": source.name,
                        "error_id": error.error_id,
                        "error": str(error),
                        "error_type": type(exc).__name__,
                    },
                )
                continue

            added = 0
            for document in loaded:
                if document.id in seen_ids:
                    logger.warning(
                        "Duplicate knowledge document dropped",
                        extra={"source": source.name, "document_id": document.id},
                    )
                    continue
                seen_ids.add(document.id)
                merged.append(document)
                added += 1

            logger.info(
                "Knowledge source loaded",
                extra={"source": source.name, "documents": added},
            )

        logger.info(
            "Knowledge store initialized",
            extra={"documents": len(merged), "failed_sources": failed},
        )
        return tuple(merged), tuple(failed)
