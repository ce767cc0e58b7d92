"""Cosmos DB employee service."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any

from azure.cosmos.aio import CosmosClient

from app.core.config import Settings
from app.models.employee import EmployeeDetail, EmployeeRecord, EmployeeSummary

logger = logging.getLogger(__name__)

_SEARCH_FIELDS = ("name", "department", "rank", "position")

_ACTIVE_FILTER = "(NOT IS_DEFINED(c.status) OR c.status != 'resigned')"


def _parse_date(value: str) -> date | None:
    for fmt in ("%Y-%m-%dT%H:%M:%S", "%Y-%m-%d"):
        try:
            return datetime.strptime(value[:19], fmt).date()  # noqa: DTZ007
        except ValueError:
            continue
    return None


def calculate_tenure(
    hire_date: str | None,
    resignation_date: str | None = None,
    today: date | None = None,
) -> str:
    if not hire_date:
        return "N/A"

    start = _parse_date(hire_date)
    if start is None:
        return "N/A"

    end = _parse_date(resignation_date) if resignation_date else None
    if end is None:
        end = today or date.today()  # noqa: DTZ011

    years = end.year - start.year
    months = end.month - start.month
    if months < 0:
        years -= 1
        months += 12

    return f"{years}y {months}m"


class EmployeeService:
    def __init__(self) -> None:
        self.client: CosmosClient | None = None
        self.container: Any = None
        self.initialized: bool = False
        self.max_org_chart_employees: int = 1000

    async def initialize(self, settings: Settings) -> None:
        if self.initialized:
            return

        endpoint = settings.COSMOS_DB_ENDPOINT
        key = settings.COSMOS_DB_KEY
        database_name = settings.COSMOS_DB_DATABASE
        container_name = settings.COSMOS_DB_EMPLOYEES_CONTAINER

        if not endpoint or not key:
            logger.warning("Cosmos DB credentials missing, service not initialized")
            return

        self.client = CosmosClient(endpoint, key)
        db = self.client.get_database_client(database_name)
        self.container = db.get_container_client(container_name)
        self.max_org_chart_employees = settings.ORG_CHART_MAX_EMPLOYEES
        self.initialized = True
        logger.info("EmployeeService initialized (container=%s)", container_name)

    async def close(self) -> None:
        if self.client:
            await self.client.close()
            self.client = None
            self.container = None
            self.initialized = False

    async def _query(self, query: str, params: list[dict[str, Any]] | None = None) -> list[Any]:
        items: list[Any] = []
        async for item in self.container.query_items(
            query=query,
            parameters=params or [],
            enable_cross_partition_query=True,
        ):
            items.append(item)
        return items

    async def get_employee(self, employee_id: str) -> EmployeeDetail | None:
        if not self.container:
            return None

        items = await self._query(
            "SELECT * FROM c WHERE c.id = @id",
            [{"name": "@id", "value": employee_id}],
        )
        if not items:
            return None

        return self._transform_employee(items[0])

    async def get_employees(
        self,
        skip: int = 0,
        limit: int = 50,
        search: str = "",
        include_resigned: bool = False,
    ) -> list[EmployeeSummary]:
        if not self.container:
            return []

        conditions: list[str] = []
        params: list[dict[str, Any]] = [
            {"name": "@skip", "value": skip},
            {"name": "@limit", "value": limit},
        ]

        if not include_resigned:
            conditions.append(_ACTIVE_FILTER)

        if search:
            matches = " OR ".join(f"CONTAINS(c.{field}, @search, true)" for field in _SEARCH_FIELDS)
            conditions.append(f"({matches})")
            params.append({"name": "@search", "value": search})

        where = f" WHERE {' AND '.join(conditions)}" if conditions else ""
        query = f"SELECT * FROM c{where} ORDER BY c.created_at DESC OFFSET @skip LIMIT @limit"

        results: list[EmployeeSummary] = []
        for item in await self._query(query, params):
            detail = self._transform_employee(item)
            results.append(
                EmployeeSummary(
                    id=detail.id,
                    employee_number=detail.employee_number,
                    name=detail.name,
                    position=detail.position,
                    department=detail.department,
                    email=detail.email,
                    status=detail.status,
                )
            )

        return results

    async def get_active_employees(self, limit: int | None = None) -> list[EmployeeRecord]:
        """All non-resigned employees, newest first; the org chart input."""
        if not self.container:
            return []

        query = f"SELECT * FROM c WHERE {_ACTIVE_FILTER} ORDER BY c.created_at DESC OFFSET 0 LIMIT @limit"
        params = [{"name": "@limit", "value": limit or self.max_org_chart_employees}]

        records = [self._transform_employee(item) for item in await self._query(query, params)]
        logger.debug("Loaded %d active employees", len(records))
        return records

    async def _value_exists(self, field: str, value: str, exclude_id: str | None) -> bool:
        if not self.container:
            raise RuntimeError("EmployeeService not initialized")

        query = f"SELECT VALUE COUNT(1) FROM c WHERE c.{field} = @value"
        params: list[dict[str, Any]] = [{"name": "@value", "value": value}]
        if exclude_id:
            query += " AND c.id != @exclude_id"
            params.append({"name": "@exclude_id", "value": exclude_id})

        counts = await self._query(query, params)
        return bool(counts) and counts[0] > 0

    async def employee_number_exists(self, value: str, exclude_id: str | None = None) -> bool:
        return await self._value_exists("employee_number", value, exclude_id)

    async def email_exists(self, value: str, exclude_id: str | None = None) -> bool:
        return await self._value_exists("email", value, exclude_id)

    async def check_connection(self) -> bool:
        if not self.container:
            return False
        try:
            await self._query("SELECT VALUE COUNT(1) FROM c")
            return True
        except Exception:
            logger.exception("Cosmos DB connection check failed")
            return False

    def _transform_employee(self, raw: dict[str, Any]) -> EmployeeDetail:
        # Every record field is a string; numeric ids and numbers are stringified.
        data: dict[str, Any] = {
            field: str(raw[field])
            for field in EmployeeRecord.model_fields
            if raw.get(field) is not None
        }
        data["id"] = str(raw.get("id") or "unknown")
        data["tenure"] = calculate_tenure(data.get("hire_date"), data.get("resignation_date"))

        return EmployeeDetail(**data)


employee_service = EmployeeService()
