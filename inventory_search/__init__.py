from .alerts import (
    evaluate_alerts,
    filter_alerts,
    make_tiering,
    sort_alerts,
    three_tier_severity,
    two_tier_severity,
)
from .indexer import build_index, flatten_items
from .schemas import Alert, FlattenedItem, InventoryGroup, InventoryItem, MatchResult
from .scoring import highlight_segments, match_ranges, score, score_match
from .search import rank_matches, search
from .snapshot import load_snapshot, parse_snapshot
from .sorting import SortDirection, sort_records
from .summary import summarize_groups
from .tree_filter import FilteredTree, ItemInclusionPolicy, filter_tree, search_tree
from .view import InventoryView
