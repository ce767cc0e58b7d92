"""Org chart models derived from employee records."""

from __future__ import annotations

from pydantic import BaseModel


class OrgNode(BaseModel):
    """One employee in the reporting tree, with direct reports in source order."""

    model_config = {"frozen": True}

    id: str
    name: str
    position: str
    department: str
    email: str
    phone: str | None = None
    profile_image_url: str | None = None
    children: tuple[OrgNode, ...] = ()


class RootCandidate(BaseModel):
    id: str
    name: str
    department: str


class OrgChartResponse(BaseModel):
    root: OrgNode | None
    employee_count: int
    node_count: int
    root_candidates: list[RootCandidate]
