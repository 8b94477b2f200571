import argparse
import sys
from pathlib import Path

from inventory_search import settings
from inventory_search.alerts import alerts_frame, two_tier_severity
from inventory_search.logger import setup_logger
from inventory_search.schemas import InventoryGroup
from inventory_search.scoring import highlight_segments
from inventory_search.snapshot import load_snapshot
from inventory_search.view import InventoryView

logger = setup_logger("inventory_search")


def _highlight(text: str, ranges) -> str:
    """Marks highlighted fragments with [brackets] for the console."""
    return "".join(
        f"[{fragment}]" if highlighted else fragment
        for fragment, highlighted in highlight_segments(text, ranges)
    )


def print_tree(groups: list[InventoryGroup], indent: int = 0):
    for group in groups:
        prefix = "  " * indent
        logger.info(f"{prefix}📁 {_highlight(group.group_name, group.highlights('group_name'))}")
        for item in group.items:
            logger.info(
                f"{prefix}  - {_highlight(item.name, item.highlights('name'))} "
                f"({item.item_id}): {item.available:g} {item.unit}".rstrip()
            )
        print_tree(group.subgroups, indent + 1)


def run_process(argv: list[str] | None = None) -> int:
    """Loads a snapshot and prints the filtered tree, alerts and/or group totals."""
    parser = argparse.ArgumentParser(description="Search an inventory snapshot and list low-stock alerts.")
    parser.add_argument(
        "snapshot",
        nargs="?",
        type=Path,
        default=settings.INPUT_DIR / settings.SNAPSHOT_FILENAME,
        help="Path to the inventory snapshot JSON (list of root groups).",
    )
    parser.add_argument("-q", "--query", default="", help="Search text.")
    parser.add_argument("--alerts", action="store_true", help="Print low-stock alerts.")
    parser.add_argument("--summary", action="store_true", help="Print per-group totals.")
    parser.add_argument(
        "--two-tier", action="store_true", help="Use Critical/Warning severities only."
    )
    args = parser.parse_args(argv)

    logger.info("--- Inventory Search ---")
    snapshot = load_snapshot(args.snapshot)
    if not snapshot:
        logger.error(f"❌ No inventory loaded from {args.snapshot}.")
        return 1

    view = InventoryView(snapshot)

    result = view.search(args.query)
    if result.is_filtered:
        logger.info(f"🔎 '{args.query}': {result.item_count} items in {len(result.groups)} groups")
    print_tree(result.groups)

    if args.alerts:
        alerts = view.alerts(two_tier_severity if args.two_tier else None)
        logger.info(f"\n⚠️ {len(alerts)} items require attention")
        if alerts:
            logger.info(alerts_frame(alerts).to_string(index=False))

    if args.summary:
        logger.info("\n--- Group Totals ---")
        for row in view.summary():
            logger.info(
                f"{'  ' * row.depth}{row.group_name}: {row.item_count} items, "
                f"{row.total_quantity:g} units, value {row.total_value:.2f}, "
                f"{row.low_stock_count} low"
            )

    logger.info("\n--- Done ---")
    return 0


if __name__ == "__main__":
    sys.exit(run_process())
