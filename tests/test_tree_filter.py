"""Tests for rebuilding the filtered inventory tree."""

import pytest

from conftest import item_positions, make_group, make_item
from inventory_search.indexer import build_index
from inventory_search.search import search
from inventory_search.snapshot import parse_snapshot
from inventory_search.tree_filter import (
    ItemInclusionPolicy,
    count_items,
    filter_tree,
    search_tree,
)


def test_scenario_item_query_keeps_only_matching_item(fasteners_tree):
    """Searching 'm8' keeps the Fasteners group with the M8 bolt only."""
    result = search_tree(fasteners_tree, "m8")
    assert [group.group_name for group in result.groups] == ["Fasteners"]
    items = result.groups[0].items
    assert [item.item_id for item in items] == ["bolt-1"]
    assert items[0].matches == {"name": [(0, 1)]}


def test_scenario_empty_query_returns_tree_unchanged(fasteners_tree):
    result = search_tree(fasteners_tree, "")
    assert result.groups is fasteners_tree
    assert not result.is_filtered
    assert count_items(result.groups) == 2


def test_filter_tree_with_blank_query_matches_is_identity(hardware_tree):
    index = build_index(hardware_tree)
    assert filter_tree(hardware_tree, search(index, "")) == hardware_tree
    assert filter_tree(hardware_tree, search(index, "  ")) is hardware_tree


def test_strong_group_match_keeps_all_items(hardware_tree):
    """An exact group name match shows every item of that group."""
    result = search_tree(hardware_tree, "plumbing")
    assert len(result.groups) == 1
    plumbing = result.groups[0]
    assert plumbing.matches == {"group_name": [(0, 7)]}
    assert [item.item_id for item in plumbing.items] == ["p-1", "p-2"]
    # Only the independently matching item carries highlight ranges
    assert plumbing.items[0].matches == {"name": [(0, 7)]}
    assert plumbing.items[1].matches is None
    assert plumbing.subgroups == []


def test_weak_group_match_keeps_group_but_not_its_items(hardware_tree):
    """Below the strong-match score only matching items are kept."""
    result = search_tree(hardware_tree, "trical")
    assert [group.key for group in result.groups] == ["g3"]
    electrical = result.groups[0]
    assert electrical.matches == {"group_name": [(4, 9)]}
    assert electrical.items == []
    assert electrical.subgroups == []


def test_any_group_match_policy_keeps_all_items(hardware_tree):
    result = search_tree(hardware_tree, "trical", policy=ItemInclusionPolicy.ANY_GROUP_MATCH)
    assert [item.item_id for item in result.groups[0].items] == ["e-1", "e-2"]


def test_policy_accepts_names(hardware_tree):
    result = search_tree(hardware_tree, "trical", policy="any_group_match")
    assert result.item_count == 2


def test_strong_match_score_is_configurable(hardware_tree):
    result = search_tree(hardware_tree, "trical", strong_match_score=60)
    assert result.item_count == 2


def test_unknown_policy_is_rejected(hardware_tree):
    matches = search(build_index(hardware_tree), "plumbing")
    with pytest.raises(ValueError):
        filter_tree(hardware_tree, matches, policy="everything")


def test_ancestors_of_nested_match_are_kept(hardware_tree):
    """A matching item deep in the tree keeps its whole ancestor chain."""
    result = search_tree(hardware_tree, "ball")
    assert [group.key for group in result.groups] == ["g1"]
    plumbing = result.groups[0]
    assert plumbing.matches is None
    assert plumbing.items == []
    assert [group.key for group in plumbing.subgroups] == ["g2"]
    assert [item.item_id for item in plumbing.subgroups[0].items] == ["v-1"]


def test_matching_subgroup_is_kept_without_unrelated_siblings(hardware_tree):
    result = search_tree(hardware_tree, "switches")
    assert [group.key for group in result.groups] == ["g3"]
    electrical = result.groups[0]
    assert electrical.items == []
    assert [group.key for group in electrical.subgroups] == ["Switches"]
    assert [item.item_id for item in electrical.subgroups[0].items] == ["s-1"]


def test_query_without_hits_hides_everything(hardware_tree):
    result = search_tree(hardware_tree, "zzzz")
    assert result.groups == []
    assert result.matches == {}
    assert result.is_filtered


@pytest.mark.parametrize("query", ["wire", "plumbing", "ball", "p", "trical", "va", "s-1"])
def test_output_is_a_mask_of_the_input(hardware_tree, query):
    """Items keep their position, no new items appear and order is preserved."""
    before = item_positions(hardware_tree)
    after = item_positions(search_tree(hardware_tree, query).groups)
    assert set(after) <= set(before)
    assert after == [position for position in before if position in after]


def test_filtering_does_not_mutate_the_input(hardware_tree):
    before = [group.model_dump() for group in hardware_tree]
    search_tree(hardware_tree, "wire")
    search_tree(hardware_tree, "plumbing", policy="any_group_match")
    assert [group.model_dump() for group in hardware_tree] == before


def test_prebuilt_index_is_reused(hardware_tree):
    index = build_index(hardware_tree)
    assert search_tree(hardware_tree, "wire", index=index) == search_tree(hardware_tree, "wire")


def test_count_items(hardware_tree):
    assert count_items(hardware_tree) == 6
    assert count_items([]) == 0


def test_highlights_are_kept_for_the_matching_field_only(fasteners_tree):
    """A match on the item id does not highlight the item name."""
    result = search_tree(fasteners_tree, "bolt-1")
    item = result.groups[0].items[0]
    assert item.item_id == "bolt-1"
    assert item.matches == {"item_id": [(0, 5)]}
    assert item.highlights("name") == []
    assert item.highlights("item_id") == [(0, 5)]


def test_items_without_id_match_independently():
    """Id-less items are kept or dropped on their own score."""
    tree = parse_snapshot(
        [{"group_name": "Misc", "items": [{"name": "Hammer"}, {"name": "Glue"}]}]
    )
    result = search_tree(tree, "hammer")
    items = result.groups[0].items
    assert [item.name for item in items] == ["Hammer"]
    assert items[0].highlights() == [(0, 5)]


def test_groups_sharing_a_key_under_different_parents():
    """Only the group that matched is kept, not its namesake elsewhere in the tree."""
    tree = [
        make_group(
            "A",
            group_id="a",
            subgroups=[make_group("Bolts", items=[make_item("b-1", "Hex")], group_id="1")],
        ),
        make_group(
            "B",
            group_id="b",
            subgroups=[make_group("Nails", items=[make_item("n-1", "Brad")], group_id="1")],
        ),
    ]
    result = search_tree(tree, "bolts")
    assert [group.group_name for group in result.groups] == ["A"]
    bolts = result.groups[0].subgroups[0]
    assert bolts.group_name == "Bolts"
    assert bolts.highlights() == [(0, 4)]
    assert [item.item_id for item in bolts.items] == ["b-1"]
