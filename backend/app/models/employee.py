"""Employee models for Cosmos DB employee records."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, Field


class EmployeeRecord(BaseModel):
    """A stored employee document, including the optional manager reference."""

    id: str
    employee_number: str | None = None
    name: str = ""
    position: str = ""
    rank: str | None = None
    email: str = ""
    phone: str | None = None
    company: str | None = None
    department: str = ""
    team: str | None = None
    hire_date: str | None = None
    resignation_date: str | None = None
    profile_image_url: str | None = None
    status: str = "active"
    manager_id: str | None = None
    created_at: str | None = None


class EmployeeSummary(BaseModel):
    """Minimal employee info for lists."""

    id: str
    employee_number: str | None = None
    name: str = ""
    position: str = ""
    department: str = ""
    email: str = ""
    status: str = "active"


class EmployeeDetail(EmployeeRecord):
    tenure: str = "N/A"


class DuplicateCheckRequest(BaseModel):
    # Not validated here; check_duplicate rejects bad fields and values.
    field: Any = None
    value: str | int | None = None
    exclude_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("exclude_id", "excludeId"),
    )


class DuplicateCheckResponse(BaseModel):
    exists: bool
