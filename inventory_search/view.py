import logging
from typing import Optional, Union

from . import settings
from .alerts import Tiering, configured_severity, evaluate_alerts
from .indexer import build_index, flatten_items
from .schemas import Alert, GroupSummary, InventoryGroup, MatchResult, SearchDocument
from .search import rank_matches, search
from .summary import summarize_groups
from .tree_filter import FilteredTree, ItemInclusionPolicy, search_tree

logger = logging.getLogger(__name__)


class InventoryView:
    """
    Search, alerts and totals over one inventory snapshot.

    The snapshot is indexed once, when the view is built. A new snapshot
    means a new view; queries never change the view.
    """

    def __init__(
        self,
        snapshot: list[InventoryGroup],
        threshold: int = settings.MATCH_THRESHOLD,
        policy: Union[ItemInclusionPolicy, str] = settings.ITEM_INCLUSION_POLICY,
        strong_match_score: int = settings.STRONG_MATCH_SCORE,
        search_numeric_fields: bool = settings.SEARCH_NUMERIC_FIELDS,
        tiering: Tiering = configured_severity,
    ):
        self.snapshot = snapshot
        self.threshold = threshold
        self.policy = ItemInclusionPolicy(policy)
        self.strong_match_score = strong_match_score
        self.tiering = tiering
        self.index: list[SearchDocument] = build_index(
            snapshot, search_numeric_fields=search_numeric_fields
        )
        logger.debug(f"View ready: {len(self.index)} documents.")

    def search(self, query: str) -> FilteredTree:
        return search_tree(
            self.snapshot,
            query,
            index=self.index,
            threshold=self.threshold,
            policy=self.policy,
            strong_match_score=self.strong_match_score,
        )

    def best_matches(
        self, query: str, limit: Optional[int] = 10
    ) -> list[tuple[SearchDocument, MatchResult]]:
        ranked = rank_matches(search(self.index, query, threshold=self.threshold), self.index)
        return ranked if limit is None else ranked[:limit]

    def alerts(self, tiering: Optional[Tiering] = None) -> list[Alert]:
        return evaluate_alerts(flatten_items(self.snapshot), tiering=tiering or self.tiering)

    def summary(self) -> list[GroupSummary]:
        return summarize_groups(self.snapshot)
