"""Flattens the inventory tree into searchable documents and item rows."""

import logging
from decimal import Decimal

from . import settings
from .schemas import (
    DocumentType,
    FlattenedItem,
    InventoryGroup,
    InventoryItem,
    SearchDocument,
)

logger = logging.getLogger(__name__)

GROUP_PREFIX = "group-"
ITEM_PREFIX = "item-"
KEY_SEPARATOR = "/"


def _escape_key(key: str) -> str:
    return key.replace("%", "%25").replace(KEY_SEPARATOR, "%2F")


def group_doc_id(group: InventoryGroup, path: tuple[str, ...] = ()) -> str:
    """
    Group keys are only unique among siblings, so the id carries the keys of
    the enclosing groups: "group-g1" for a root group, "group-g1/g2" below it.
    """
    return GROUP_PREFIX + KEY_SEPARATOR.join(_escape_key(key) for key in path + (group.key,))


def item_doc_id(item: InventoryItem, path: tuple[str, ...] = (), position: int = 0) -> str:
    """
    "item-<item_id>". An item without an id is addressed by its place in the
    tree instead, e.g. "item-g1/g2#3", so id-less items never share a document.
    """
    if item.item_id:
        return f"{ITEM_PREFIX}{item.item_id}"
    location = KEY_SEPARATOR.join(_escape_key(key) for key in path)
    return f"{ITEM_PREFIX}{location}#{position}"


def _format_number(value) -> str:
    """Renders 5.0 as "5" and Decimal("12.50") as "12.5"."""
    if isinstance(value, Decimal):
        return format(value.normalize(), "f")
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _item_texts(item: InventoryItem, search_numeric_fields: bool) -> dict[str, str]:
    texts = {"name": item.name, "item_id": item.item_id}
    if search_numeric_fields:
        texts["quantity"] = _format_number(item.available)
        texts["cost_per_unit"] = _format_number(item.cost_per_unit)
    return texts


def build_index(
    tree: list[InventoryGroup],
    search_numeric_fields: bool = settings.SEARCH_NUMERIC_FIELDS,
) -> list[SearchDocument]:
    """
    Walks the tree depth-first, pre-order, and emits one document per group
    followed by one per direct item, then recurses into the subgroups.
    The same tree always yields the same documents in the same order.
    """
    documents: list[SearchDocument] = []

    def _walk(groups: list[InventoryGroup], path: tuple[str, ...]):
        for group in groups:
            current_path = path + (group.key,)
            documents.append(
                SearchDocument(
                    doc_id=group_doc_id(group, path),
                    doc_type=DocumentType.GROUP,
                    texts={"group_name": group.group_name},
                    source=group,
                    path=path,
                )
            )
            for position, item in enumerate(group.items):
                documents.append(
                    SearchDocument(
                        doc_id=item_doc_id(item, current_path, position),
                        doc_type=DocumentType.ITEM,
                        texts=_item_texts(item, search_numeric_fields),
                        source=item,
                        path=current_path,
                    )
                )
            _walk(group.subgroups, current_path)

    _walk(tree, ())
    logger.debug(f"Indexed {len(documents)} documents.")
    return documents


def flatten_items(tree: list[InventoryGroup]) -> list[FlattenedItem]:
    """
    Lists every item of the tree in depth-first order with its ancestor context:
    the root group's name, the immediate parent's name (or the main group label
    for items sitting directly in a root group) and the path of group keys.
    """
    flattened: list[FlattenedItem] = []

    def _walk(groups, main_group, is_root, path):
        for group in groups:
            current_main = group.group_name if is_root else main_group
            subgroup = settings.MAIN_GROUP_LABEL if is_root else group.group_name
            current_path = path + (group.key,)
            for item in group.items:
                flattened.append(
                    FlattenedItem(
                        item_id=item.item_id,
                        name=item.name,
                        available=item.available,
                        defective=item.defective,
                        unit=item.unit,
                        cost_per_unit=item.cost_per_unit,
                        minimum_stock=item.minimum_stock,
                        main_group=current_main,
                        subgroup=subgroup,
                        path=current_path,
                    )
                )
            _walk(group.subgroups, current_main, False, current_path)

    _walk(tree, "", True, ())
    return flattened
