from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient
from starlette.testclient import TestClient

from app.main import app
from app.models.employee import EmployeeRecord


def make_record(
    employee_id: str,
    manager_id: str | None = None,
    *,
    name: str | None = None,
    position: str = "Engineer",
    department: str = "Development",
    **extra,
) -> EmployeeRecord:
    return EmployeeRecord(
        id=employee_id,
        manager_id=manager_id,
        name=name or f"Employee {employee_id}",
        position=position,
        department=department,
        email=f"emp{employee_id}@example.com",
        **extra,
    )


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
async def async_client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def small_org() -> list[EmployeeRecord]:
    """CEO with two direct reports; the CTO has one report of their own."""
    return [
        make_record("1", name="Kim Minsu", position="CEO", department="Management"),
        make_record("2", "1", name="Lee Jiyoung", position="CTO"),
        make_record("3", "1", name="Park Sora", position="CFO", department="Finance"),
        make_record("4", "2", name="Choi Hana", position="Backend Developer"),
    ]
