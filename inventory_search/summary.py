import logging

import pandas as pd

from .alerts import is_alertable
from .indexer import flatten_items
from .schemas import GroupSummary, InventoryGroup

logger = logging.getLogger(__name__)

PATH_SEPARATOR = " > "

INVENTORY_COLUMNS = [
    "item_id",
    "name",
    "main_group",
    "subgroup",
    "group_path",
    "available",
    "defective",
    "unit",
    "cost_per_unit",
    "minimum_stock",
    "stock_value",
    "low_stock",
]

METRIC_COLUMNS = [
    "item_count",
    "total_quantity",
    "total_defective",
    "total_value",
    "low_stock_count",
]


def inventory_frame(tree: list[InventoryGroup]) -> pd.DataFrame:
    """One row per item, in tree order, with its group context."""
    rows = []
    for item in flatten_items(tree):
        cost = float(item.cost_per_unit)
        rows.append(
            {
                "item_id": item.item_id,
                "name": item.name,
                "main_group": item.main_group,
                "subgroup": item.subgroup,
                "group_path": PATH_SEPARATOR.join(item.path),
                "available": item.available,
                "defective": item.defective,
                "unit": item.unit,
                "cost_per_unit": cost,
                "minimum_stock": item.minimum_stock,
                "stock_value": item.available * cost,
                "low_stock": is_alertable(item.available, item.minimum_stock),
            }
        )
    return pd.DataFrame(rows, columns=INVENTORY_COLUMNS)


def _group_template(tree: list[InventoryGroup]) -> pd.DataFrame:
    rows = []

    def _walk(groups, path, depth):
        for group in groups:
            current_path = path + (group.key,)
            rows.append(
                {
                    "group_path": PATH_SEPARATOR.join(current_path),
                    "group_key": group.key,
                    "group_name": group.group_name,
                    "depth": depth,
                }
            )
            _walk(group.subgroups, current_path, depth + 1)

    _walk(tree, (), 0)
    return pd.DataFrame(rows, columns=["group_path", "group_key", "group_name", "depth"])


def summarize_groups(tree: list[InventoryGroup]) -> list[GroupSummary]:
    """
    Totals over each group's direct items, one row per group in tree order.
    Groups without items are listed with zero totals.
    """
    template = _group_template(tree)
    if template.empty:
        return []

    items_df = inventory_frame(tree)
    if items_df.empty:
        summary_df = template.assign(**{column: 0 for column in METRIC_COLUMNS})
    else:
        totals = (
            items_df.groupby("group_path", sort=False)
            .agg(
                item_count=("item_id", "count"),
                total_quantity=("available", "sum"),
                total_defective=("defective", "sum"),
                total_value=("stock_value", "sum"),
                low_stock_count=("low_stock", "sum"),
            )
            .reset_index()
        )
        # Left merge keeps every group of the template, in template order
        summary_df = pd.merge(template, totals, on="group_path", how="left")
        summary_df[METRIC_COLUMNS] = summary_df[METRIC_COLUMNS].fillna(0)

    logger.debug(f"Summarized {len(summary_df)} groups.")
    return [GroupSummary(**row) for row in summary_df.to_dict("records")]
