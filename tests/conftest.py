"""Shared inventory trees for the test suite."""

from decimal import Decimal

import pytest

from inventory_search.schemas import InventoryGroup, InventoryItem


def make_item(item_id, name, available=0, minimum=0, cost="0", unit="pcs", defective=0):
    return InventoryItem(
        item_id=item_id,
        name=name,
        available=available,
        minimum_stock=minimum,
        cost_per_unit=Decimal(cost),
        unit=unit,
        defective=defective,
    )


def make_group(name, items=(), subgroups=(), group_id=None):
    return InventoryGroup(
        group_id=group_id,
        group_name=name,
        items=list(items),
        subgroups=list(subgroups),
    )


def item_positions(tree, path=()):
    """(group key path, item id) for every item, in tree order."""
    positions = []
    for group in tree:
        current = path + (group.key,)
        positions.extend((current, item.item_id) for item in group.items)
        positions.extend(item_positions(group.subgroups, current))
    return positions


@pytest.fixture
def fasteners_tree():
    return [
        make_group(
            "Fasteners",
            items=[
                make_item("bolt-1", "M8 Bolt", available=5, minimum=10),
                make_item("bolt-2", "M10 Bolt", available=20, minimum=10),
            ],
        )
    ]


@pytest.fixture
def hardware_tree():
    return [
        make_group(
            "Plumbing",
            group_id="g1",
            items=[
                make_item("p-1", "Plumbing Wrench", available=3, minimum=5, cost="12.50"),
                make_item("p-2", "Pipe Tape", available=50, minimum=10, cost="2", unit="roll"),
            ],
            subgroups=[
                make_group(
                    "Valves",
                    group_id="g2",
                    items=[make_item("v-1", "Ball Valve", available=0, minimum=4, cost="30")],
                )
            ],
        ),
        make_group(
            "Electrical",
            group_id="g3",
            items=[
                make_item("e-1", "Copper Wire", available=100, minimum=0, cost="1.25", unit="m"),
                make_item("e-2", "Wire Nut", available=8, minimum=8, cost="0.10", defective=2),
            ],
            subgroups=[
                make_group(
                    "Switches",
                    items=[make_item("s-1", "Toggle Switch", available=2, minimum=10, cost="4")],
                )
            ],
        ),
    ]
