"""
Name: Keyword Retriever

Responsibilities:
  - Rank corpus documents against a free-text query by token overlap
  - Boost matches on document metadata over matches on content
  - Offer a category-filtered variant over a wider candidate pool

Collaborators:
  - infrastructure/knowledge/store.py: provides the document sequence
  - application/rag_pipeline.py: main caller

Constraints:
  - Lexical only (no embeddings)
  - Deterministic: equal scores keep corpus order (sorted() is stable)
  - Stateless per query; safe to share across threads

Notes:
  - score = overlap(content) + METADATA_BOOST * overlap(metadata JSON)
  - overlap = |Q ∩ D| / max(|Q|, |D|) over token sets
"""

import json
import re
from typing import Iterable, List, Sequence

from ..domain.entities import Document, RetrievalResult
from ..logger import logger

METADATA_BOOST = 1.5
MIN_TOKEN_LENGTH = 3
MIN_CATEGORY_CANDIDATES = 10

_NON_WORD = re.compile(r"[^\w\s]")


def tokenize(text: str) -> List[str]:
    """
    R: Lower-case, strip punctuation, split on whitespace, drop short tokens.
    """
    cleaned = _NON_WORD.sub(" ", text.lower())
    return [token for token in cleaned.split() if len(token) >= MIN_TOKEN_LENGTH]


def token_overlap(query_tokens: Iterable[str], doc_tokens: Iterable[str]) -> float:
    query_set = set(query_tokens)
    doc_set = set(doc_tokens)
    if not query_set or not doc_set:
        return 0.0
    return len(query_set & doc_set) / max(len(query_set), len(doc_set))


def metadata_text(document: Document) -> str:
    return json.dumps(
        document.metadata.to_dict(), ensure_ascii=False, separators=(",", ":")
    )


class KeywordRetriever:
    """
    R: Token-overlap retriever over a fixed document collection.

    Args:
        store: Anything exposing documents() (usually KnowledgeStore)
        category_candidate_k: Candidate pool for retrieve_by_category (>= 10)
    """

    def __init__(self, store, category_candidate_k: int = MIN_CATEGORY_CANDIDATES):
        self._store = store
        self._category_candidate_k = max(category_candidate_k, MIN_CATEGORY_CANDIDATES)

    def score(self, query_tokens: Sequence[str], document: Document) -> float:
        content_score = token_overlap(query_tokens, tokenize(document.content))
        metadata_score = token_overlap(query_tokens, tokenize(metadata_text(document)))
        return content_score + metadata_score * METADATA_BOOST

    def similarity_search(self, query: str, k: int = 3) -> List[RetrievalResult]:
        """
        R: Top-k documents with a positive score, highest first.

        Returns an empty list for an empty/punctuation-only query or k <= 0.
        """
        if k <= 0:
            return []
        query_tokens = tokenize(query)
        if not query_tokens:
            return []

        scored = [
            RetrievalResult(document=document, score=self.score(query_tokens, document))
            for document in self._store.documents()
        ]
        ranked = sorted(
            (result for result in scored if result.score > 0),
            key=lambda result: result.score,
            reverse=True,
        )
        results = ranked[:k]

        logger.debug(
            "Retrieval completed",
            extra={
                "query_tokens": len(query_tokens),
                "candidates": len(scored),
                "matched": len(ranked),
                "returned": len(results),
            },
        )
        return results

    def retrieve(self, query: str, k: int = 3) -> List[RetrievalResult]:
        return self.similarity_search(query, k)

    def retrieve_by_category(
        self, query: str, categories: Sequence[str], k: int = 3
    ) -> List[RetrievalResult]:
        """
        R: Top-k of the candidate pool restricted to the given categories.

        A document matches when its category equals one of `categories`, or
        its symptoms/herbs contain one of them.
        """
        wanted = set(categories)
        candidates = self.similarity_search(query, self._category_candidate_k)
        filtered = [
            result
            for result in candidates
            if result.document.metadata.category in wanted
            or wanted.intersection(result.document.metadata.symptoms)
            or wanted.intersection(result.document.metadata.herbs)
        ]
        return filtered[:k]
