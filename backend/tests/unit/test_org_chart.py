from __future__ import annotations

from unittest.mock import patch

import pytest
from pydantic import ValidationError

from app.models.org_chart import OrgNode
from app.services.org_chart import (
    OrgHierarchyError,
    build_org_tree,
    build_subordinate_map,
    count_nodes,
    ensure_acyclic,
    find_revisited_employee,
    root_candidates,
    select_root,
)
from tests.conftest import make_record


def _ids(node: OrgNode) -> list[str]:
    ids = [node.id]
    for child in node.children:
        ids.extend(_ids(child))
    return ids


def test_empty_collection_returns_none():
    assert build_org_tree([]) is None
    assert build_org_tree([], root_id="1") is None


def test_single_manager_and_report():
    records = [make_record("1"), make_record("2", "1")]

    tree = build_org_tree(records)

    assert tree is not None
    assert tree.id == "1"
    assert [c.id for c in tree.children] == ["2"]
    assert tree.children[0].children == ()


def test_node_carries_display_fields(small_org):
    tree = build_org_tree(small_org)

    assert tree.name == "Kim Minsu"
    assert tree.position == "CEO"
    assert tree.department == "Management"
    assert tree.email == "emp1@example.com"
    assert tree.phone is None
    assert tree.profile_image_url is None


def test_phone_and_profile_image_are_copied():
    records = [make_record("1", phone="010-1234-5678", profile_image_url="https://cdn.example.com/1.png")]

    tree = build_org_tree(records)

    assert tree.phone == "010-1234-5678"
    assert tree.profile_image_url == "https://cdn.example.com/1.png"


def test_children_follow_collection_order():
    records = [
        make_record("1"),
        make_record("c", "1"),
        make_record("a", "1"),
        make_record("b", "1"),
    ]

    tree = build_org_tree(records)

    assert [c.id for c in tree.children] == ["c", "a", "b"]


def test_nested_hierarchy(small_org):
    tree = build_org_tree(small_org)

    assert [c.id for c in tree.children] == ["2", "3"]
    cto, cfo = tree.children
    assert [c.id for c in cto.children] == ["4"]
    assert cfo.children == ()


def test_manager_listed_after_report():
    records = [make_record("2", "1"), make_record("1")]

    tree = build_org_tree(records)

    assert tree.id == "1"
    assert [c.id for c in tree.children] == ["2"]


def test_every_reachable_record_appears_once(small_org):
    tree = build_org_tree(small_org)

    assert sorted(_ids(tree)) == ["1", "2", "3", "4"]
    assert count_nodes(tree) == len(small_org)


def test_disconnected_records_are_omitted():
    records = [
        make_record("1"),
        make_record("2", "1"),
        make_record("10"),
        make_record("11", "10"),
        make_record("20", "missing-manager"),
    ]

    tree = build_org_tree(records)

    assert _ids(tree) == ["1", "2"]
    assert count_nodes(tree) == 2


def test_explicit_root_selects_subtree(small_org):
    tree = build_org_tree(small_org, root_id="2")

    assert tree.id == "2"
    assert _ids(tree) == ["2", "4"]


def test_explicit_root_may_have_a_manager(small_org):
    tree = build_org_tree(small_org, root_id="4")

    assert tree.id == "4"
    assert tree.children == ()


def test_unknown_root_falls_back_to_first_top_level():
    records = [make_record("2", "1"), make_record("1"), make_record("3")]

    tree = build_org_tree(records, root_id="does-not-exist")

    assert tree.id == "1"


def test_first_top_level_record_is_root():
    records = [make_record("5", "9"), make_record("7"), make_record("8")]

    assert select_root(records).id == "7"


def test_empty_manager_id_counts_as_top_level():
    records = [make_record("2", "1"), make_record("1", "")]

    assert select_root(records).id == "1"


def test_falls_back_to_first_record_when_everyone_has_a_manager():
    records = [make_record("a", "x"), make_record("b", "a")]

    tree = build_org_tree(records)

    assert tree.id == "a"
    assert [c.id for c in tree.children] == ["b"]


def test_select_root_empty():
    assert select_root([]) is None


def test_duplicate_id_lookup_uses_last_record():
    records = [
        make_record("1", name="First"),
        make_record("1", name="Second"),
    ]

    assert select_root(records, root_id="1").name == "Second"


def test_two_node_cycle_does_not_terminate():
    # Known non-terminating case: the builder itself has no cycle guard.
    records = [make_record("1", "2"), make_record("2", "1")]

    assert select_root(records).id == "1"
    with pytest.raises(RecursionError):
        build_org_tree(records)


def test_ensure_acyclic_reports_two_node_cycle():
    records = [make_record("1", "2"), make_record("2", "1")]

    with pytest.raises(OrgHierarchyError) as exc_info:
        ensure_acyclic(records)

    assert exc_info.value.employee_id == "1"
    assert exc_info.value.root_id == "1"
    assert "more than once" in str(exc_info.value)


def test_ensure_acyclic_reports_self_manager():
    records = [make_record("1", "1")]

    with pytest.raises(OrgHierarchyError):
        ensure_acyclic(records)


def test_ensure_acyclic_reports_cycle_through_explicit_root():
    records = [
        make_record("1"),
        make_record("2", "3"),
        make_record("3", "2"),
    ]

    ensure_acyclic(records)
    with pytest.raises(OrgHierarchyError) as exc_info:
        ensure_acyclic(records, root_id="2")
    assert exc_info.value.root_id == "2"


def test_ensure_acyclic_accepts_empty_collection():
    assert ensure_acyclic([]) is None


def test_ensure_acyclic_selects_root_once(small_org):
    records = small_org + [make_record("1", "4", name="Duplicate CEO")]

    with patch("app.services.org_chart.select_root", wraps=select_root) as mock_select:
        with pytest.raises(OrgHierarchyError) as exc_info:
            ensure_acyclic(records, root_id="1")

    mock_select.assert_called_once()
    assert exc_info.value.root_id == "1"
    assert exc_info.value.employee_id == "1"


def test_cycle_outside_root_component_is_ignored():
    records = [
        make_record("1"),
        make_record("2", "1"),
        make_record("8", "9"),
        make_record("9", "8"),
    ]

    ensure_acyclic(records)
    assert _ids(build_org_tree(records)) == ["1", "2"]


def test_find_revisited_employee_none_for_valid_tree(small_org):
    assert find_revisited_employee(small_org) is None
    assert find_revisited_employee([]) is None


def test_find_revisited_employee_flags_duplicate_ids():
    records = [
        make_record("1"),
        make_record("2", "1"),
        make_record("2", "1"),
    ]

    assert find_revisited_employee(records) == "2"


def test_build_subordinate_map(small_org):
    subordinates = build_subordinate_map(small_org)

    assert {k: [r.id for r in v] for k, v in subordinates.items()} == {
        "1": ["2", "3"],
        "2": ["4"],
    }


def test_root_candidates(small_org):
    extra = small_org + [make_record("9", name="Jung Yuna", department="Sales")]

    candidates = root_candidates(extra)

    assert [(c.id, c.name, c.department) for c in candidates] == [
        ("1", "Kim Minsu", "Management"),
        ("9", "Jung Yuna", "Sales"),
    ]


def test_count_nodes_none():
    assert count_nodes(None) == 0


def test_org_node_is_immutable(small_org):
    tree = build_org_tree(small_org)

    with pytest.raises(ValidationError):
        tree.name = "Someone else"


def test_build_is_repeatable(small_org):
    assert build_org_tree(small_org) == build_org_tree(small_org)
