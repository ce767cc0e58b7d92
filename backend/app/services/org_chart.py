"""Org tree builder: turn a flat employee list into one reporting tree."""

from __future__ import annotations

import logging
from collections import defaultdict, deque
from collections.abc import Sequence

from app.models.employee import EmployeeRecord
from app.models.org_chart import OrgNode, RootCandidate

logger = logging.getLogger(__name__)


class OrgHierarchyError(Exception):
    def __init__(self, employee_id: str, root_id: str) -> None:
        self.employee_id = employee_id
        self.root_id = root_id
        super().__init__(
            f"Employee '{employee_id}' is reached more than once below '{root_id}' "
            "(manager cycle or duplicate employee id)"
        )


def is_top_level(record: EmployeeRecord) -> bool:
    return not record.manager_id


def root_candidates(records: Sequence[EmployeeRecord]) -> list[RootCandidate]:
    return [
        RootCandidate(id=r.id, name=r.name, department=r.department)
        for r in records
        if is_top_level(r)
    ]


def build_subordinate_map(records: Sequence[EmployeeRecord]) -> dict[str, list[EmployeeRecord]]:
    """Map manager id -> direct reports, each list in collection order."""
    subordinates: dict[str, list[EmployeeRecord]] = defaultdict(list)
    for record in records:
        if record.manager_id:
            subordinates[record.manager_id].append(record)
    return dict(subordinates)


def select_root(
    records: Sequence[EmployeeRecord],
    root_id: str | None = None,
) -> EmployeeRecord | None:
    """Pick the tree root.

    An explicit ``root_id`` wins when it matches a record. Otherwise the first
    record without a manager is used, and failing that the first record.
    """
    if not records:
        return None

    if root_id:
        # Last record wins for a duplicated id.
        by_id = {r.id: r for r in records}
        if root_id in by_id:
            return by_id[root_id]
        logger.debug("Root %s not found among %d employees", root_id, len(records))

    for record in records:
        if is_top_level(record):
            return record

    return records[0]


def build_org_tree(
    records: Sequence[EmployeeRecord],
    root_id: str | None = None,
) -> OrgNode | None:
    """Build the reporting tree below the selected root.

    Returns ``None`` for an empty collection. Records not reachable from the
    root are left out. Manager cycles through the root are not detected here
    and recurse until ``RecursionError``; call :func:`ensure_acyclic` first
    when the data is not trusted.
    """
    root = select_root(records, root_id)
    if root is None:
        return None

    subordinates = build_subordinate_map(records)

    def _build(record: EmployeeRecord) -> OrgNode:
        return OrgNode(
            id=record.id,
            name=record.name,
            position=record.position,
            department=record.department,
            email=record.email,
            phone=record.phone,
            profile_image_url=record.profile_image_url,
            children=tuple(_build(sub) for sub in subordinates.get(record.id, [])),
        )

    return _build(root)


def _first_revisit(records: Sequence[EmployeeRecord], root: EmployeeRecord) -> str | None:
    subordinates = build_subordinate_map(records)
    visited = {root.id}
    queue = deque([root.id])

    # Each id is enqueued at most once, so the walk is bounded by len(records).
    while queue:
        current = queue.popleft()
        for sub in subordinates.get(current, []):
            if sub.id in visited:
                return sub.id
            visited.add(sub.id)
            queue.append(sub.id)

    return None


def find_revisited_employee(
    records: Sequence[EmployeeRecord],
    root_id: str | None = None,
) -> str | None:
    """Breadth-first walk from the root; return the first id reached twice."""
    root = select_root(records, root_id)
    if root is None:
        return None
    return _first_revisit(records, root)


def ensure_acyclic(
    records: Sequence[EmployeeRecord],
    root_id: str | None = None,
) -> None:
    root = select_root(records, root_id)
    if root is None:
        return

    revisited = _first_revisit(records, root)
    if revisited is not None:
        raise OrgHierarchyError(revisited, root.id)


def count_nodes(node: OrgNode | None) -> int:
    if node is None:
        return 0
    return 1 + sum(count_nodes(child) for child in node.children)
