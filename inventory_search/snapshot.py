"""
Turns the raw inventory payload into validated tree models.

The payload comes from the inventory API and is loosely typed: numbers may
arrive as strings, be null or be missing. Values are coerced conservatively
(anything unusable becomes 0) and a node that cannot be validated at all is
skipped with a warning instead of failing the whole snapshot.
"""

import json
import logging
import math
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .schemas import InventoryGroup, InventoryItem

logger = logging.getLogger(__name__)

ITEM_NUMBER_FIELDS = ("quantity", "defective", "stock_limit")


def _to_number(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _to_decimal(value: Any) -> Decimal:
    if value is None or isinstance(value, bool):
        return Decimal("0")
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        return Decimal("0")
    return number if number.is_finite() else Decimal("0")


def _to_text(value: Any) -> str:
    return "" if value is None else str(value)


def parse_item(raw: Any) -> InventoryItem | None:
    if not isinstance(raw, dict):
        logger.warning(f"⚠️ Skipping item that is not an object: {raw!r}")
        return None

    row = {
        "item_id": _to_text(raw.get("item_id")),
        "name": _to_text(raw.get("name")),
        "unit": _to_text(raw.get("unit")),
        "cost_per_unit": _to_decimal(raw.get("cost_per_unit")),
    }
    for key in ITEM_NUMBER_FIELDS:
        row[key] = _to_number(raw.get(key))

    try:
        return InventoryItem.model_validate(row)
    except ValidationError as e:
        logger.warning(f"⚠️ Skipping invalid item {row['item_id']!r}: {e}")
        return None


def parse_group(raw: Any) -> InventoryGroup | None:
    if not isinstance(raw, dict):
        logger.warning(f"⚠️ Skipping group that is not an object: {raw!r}")
        return None

    group_id = raw.get("group_id")
    items = [item for item in map(parse_item, raw.get("items") or []) if item is not None]
    subgroups = [
        group for group in map(parse_group, raw.get("subgroups") or []) if group is not None
    ]

    try:
        return InventoryGroup(
            group_id=None if group_id in (None, "") else str(group_id),
            group_name=_to_text(raw.get("group_name")),
            items=items,
            subgroups=subgroups,
        )
    except ValidationError as e:
        logger.warning(f"⚠️ Skipping invalid group {group_id!r}: {e}")
        return None


def parse_snapshot(raw: Any) -> list[InventoryGroup]:
    """Parses the list of root groups returned by the inventory API."""
    if not isinstance(raw, list):
        logger.error(f"❌ Snapshot must be a list of groups, got {type(raw).__name__}.")
        return []

    tree = [group for group in map(parse_group, raw) if group is not None]
    logger.debug(f"Parsed {len(tree)} of {len(raw)} root groups.")
    return tree


def load_snapshot(file_path: Path) -> list[InventoryGroup]:
    """
    Reads a snapshot JSON file, trying UTF-8 (with BOM support) first and
    Latin-1 as a fallback. Missing or unreadable files give an empty tree.
    """
    try:
        text = file_path.read_text(encoding="utf-8-sig")
    except FileNotFoundError:
        logger.info(f"INFO: Snapshot not found at {file_path}, skipping.")
        return []
    except UnicodeDecodeError:
        logger.info(f"INFO: UTF-8 decoding failed for {file_path.name}. Retrying with 'latin-1'.")
        text = file_path.read_text(encoding="latin-1")

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error(f"❌ Could not parse {file_path.name}. Reason: {e}")
        return []

    return parse_snapshot(raw)
