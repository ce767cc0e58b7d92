#!/usr/bin/env python3
"""Print the organization chart of all active employees.

Run from the backend/ directory:

    python3 scripts/org_chart.py [--root EMPLOYEE_ID] [--format text|json] [--verbose]

Reads employees from Cosmos DB (read-only), rejects manager cycles, and
writes the reporting tree to stdout as an indented outline or as JSON.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys

_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from app.core.config import Settings  # noqa: E402
from app.models.employee import EmployeeRecord  # noqa: E402
from app.models.org_chart import OrgNode  # noqa: E402
from app.services.employee_service import EmployeeService  # noqa: E402
from app.services.org_chart import (  # noqa: E402
    OrgHierarchyError,
    build_org_tree,
    count_nodes,
    ensure_acyclic,
)

logger = logging.getLogger(__name__)

INDENT = "    "


def format_node(node: OrgNode) -> str:
    label = node.name
    if node.position:
        label += f" - {node.position}"
    if node.department:
        label += f" ({node.department})"
    return label


def render_outline(node: OrgNode, depth: int = 0) -> list[str]:
    lines = [f"{INDENT * depth}{format_node(node)}"]
    for child in node.children:
        lines.extend(render_outline(child, depth + 1))
    return lines


def render(node: OrgNode, fmt: str) -> str:
    if fmt == "json":
        return node.model_dump_json(indent=2)
    return "\n".join(render_outline(node))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Print the reporting hierarchy of all active employees",
    )
    parser.add_argument(
        "--root",
        default=None,
        help="Employee id to use as the top of the chart (default: first employee without a manager)",
    )
    parser.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )
    return parser.parse_args(argv)


def build_chart(employees: list[EmployeeRecord], root_id: str | None, fmt: str) -> str | None:
    ensure_acyclic(employees, root_id)
    tree = build_org_tree(employees, root_id)
    if tree is None:
        return None

    logger.info("Placed %d of %d employees under %s", count_nodes(tree), len(employees), tree.name)
    return render(tree, fmt)


async def load_employees(settings: Settings) -> list[EmployeeRecord]:
    service = EmployeeService()
    await service.initialize(settings)
    if not service.initialized:
        raise RuntimeError("Cosmos DB is not configured")
    try:
        return await service.get_active_employees()
    finally:
        await service.close()


async def run(args: argparse.Namespace) -> int:
    settings = Settings()
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(message)s")

    logger.info("Loading active employees...")
    employees = await load_employees(settings)
    logger.info("Found %d employees", len(employees))

    try:
        output = build_chart(employees, args.root, args.format)
    except OrgHierarchyError as e:
        logger.error("Cannot build org chart: %s", e)
        return 1

    if output is None:
        logger.warning("No employees found. Exiting.")
        return 1

    sys.stdout.write(output + "\n")
    return 0


def main() -> None:
    args = parse_args()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
