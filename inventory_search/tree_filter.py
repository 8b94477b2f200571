"""Rebuilds the inventory tree keeping only the branches relevant to a search."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from . import settings
from .indexer import build_index, group_doc_id, item_doc_id
from .schemas import InventoryGroup, MatchResult, SearchDocument
from .search import search

logger = logging.getLogger(__name__)


class ItemInclusionPolicy(str, Enum):
    """Which items of a matching group are shown."""

    # Every item when the group's own score is at least the strong-match
    # score, otherwise only the items that match on their own.
    STRONG_GROUP_MATCH = "strong_group_match"
    # Every item whenever the group matches at all.
    ANY_GROUP_MATCH = "any_group_match"


@dataclass(frozen=True)
class FilteredTree:
    query: str
    groups: list[InventoryGroup]
    matches: dict[str, MatchResult] = field(default_factory=dict)

    @property
    def is_filtered(self) -> bool:
        return bool(self.query and self.query.strip())

    @property
    def item_count(self) -> int:
        return count_items(self.groups)


def count_items(tree: list[InventoryGroup]) -> int:
    return sum(len(group.items) + count_items(group.subgroups) for group in tree)


def _highlights(match: MatchResult) -> Optional[dict[str, list]]:
    # Ranges only mean something for the field that produced them.
    if match.field is None:
        return None
    return {match.field: match.ranges}


def filter_tree(
    tree: list[InventoryGroup],
    matches: dict[str, MatchResult],
    policy: Union[ItemInclusionPolicy, str] = settings.ITEM_INCLUSION_POLICY,
    strong_match_score: int = settings.STRONG_MATCH_SCORE,
) -> list[InventoryGroup]:
    """
    Keeps a group when it matches itself, or holds a matching item, or holds a
    subgroup that is kept. Nothing is ever added, reordered or renamed.

    An empty `matches` mapping is what a blank query produces and returns the
    tree unchanged.
    """
    if not matches:
        return tree

    policy = ItemInclusionPolicy(policy)

    def _filter(groups: list[InventoryGroup], path: tuple[str, ...]) -> list[InventoryGroup]:
        kept = []
        for group in groups:
            current_path = path + (group.key,)
            subgroups = _filter(group.subgroups, current_path)
            group_match = matches.get(group_doc_id(group, path))
            keep_all_items = group_match is not None and (
                policy is ItemInclusionPolicy.ANY_GROUP_MATCH
                or group_match.score >= strong_match_score
            )

            items = []
            for position, item in enumerate(group.items):
                item_match = matches.get(item_doc_id(item, current_path, position))
                if item_match is not None:
                    items.append(item.model_copy(update={"matches": _highlights(item_match)}))
                elif keep_all_items:
                    items.append(item)

            if group_match is None and not items and not subgroups:
                continue

            kept.append(
                group.model_copy(
                    update={
                        "items": items,
                        "subgroups": subgroups,
                        "matches": _highlights(group_match) if group_match else None,
                    }
                )
            )
        return kept

    return _filter(tree, ())


def search_tree(
    tree: list[InventoryGroup],
    query: str,
    index: Optional[list[SearchDocument]] = None,
    threshold: int = settings.MATCH_THRESHOLD,
    policy: Union[ItemInclusionPolicy, str] = settings.ITEM_INCLUSION_POLICY,
    strong_match_score: int = settings.STRONG_MATCH_SCORE,
    search_numeric_fields: bool = settings.SEARCH_NUMERIC_FIELDS,
) -> FilteredTree:
    """
    Index, score and filter in one call. Pass `index` to reuse the documents
    of an unchanged snapshot.
    """
    if not query or not query.strip():
        return FilteredTree(query=query or "", groups=tree)

    if index is None:
        index = build_index(tree, search_numeric_fields=search_numeric_fields)
    matches = search(index, query, threshold=threshold)
    if not matches:
        # A real query with no hits hides everything.
        return FilteredTree(query=query, groups=[])

    groups = filter_tree(tree, matches, policy=policy, strong_match_score=strong_match_score)
    logger.debug(f"Query {query!r}: kept {len(groups)} of {len(tree)} root groups.")
    return FilteredTree(query=query, groups=groups, matches=matches)
