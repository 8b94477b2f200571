"""Scores indexed documents against a query."""

import logging

from . import settings
from .schemas import MatchResult, SearchDocument
from .scoring import NO_MATCH, score_with_ranges
from .sorting import SortDirection, sort_records

logger = logging.getLogger(__name__)


def score_document(document: SearchDocument, query: str) -> MatchResult:
    """
    Scores every searchable field of the document and keeps the best one.
    On equal scores the earlier field wins, so a name beats an identifier.
    """
    best_score, best_field, best_ranges = NO_MATCH, None, []
    for field, text in document.texts.items():
        value, ranges = score_with_ranges(text, query)
        if value > best_score:
            best_score, best_field, best_ranges = value, field, ranges
    return MatchResult(
        doc_id=document.doc_id, score=best_score, field=best_field, ranges=best_ranges
    )


def search(
    index: list[SearchDocument],
    query: str,
    threshold: int = settings.MATCH_THRESHOLD,
) -> dict[str, MatchResult]:
    """
    Returns the documents scoring above `threshold`, keyed by document id.
    A blank query returns an empty mapping, meaning "no filtering".
    """
    if not query or not query.strip():
        return {}

    matches: dict[str, MatchResult] = {}
    for document in index:
        result = score_document(document, query)
        if result.score > threshold:
            matches[document.doc_id] = result

    logger.debug(f"Query {query!r}: {len(matches)} of {len(index)} documents matched.")
    return matches


def rank_matches(
    matches: dict[str, MatchResult], index: list[SearchDocument]
) -> list[tuple[SearchDocument, MatchResult]]:
    """Pairs matched documents with their results, best score first, ties in index order."""
    seen = set()
    pairs = []
    for document in index:
        if document.doc_id in matches and document.doc_id not in seen:
            seen.add(document.doc_id)
            pairs.append((document, matches[document.doc_id]))
    return sort_records(pairs, lambda pair: pair[1].score, SortDirection.DESC)
