from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from app.models.org_chart import OrgChartResponse
from app.services.employee_service import employee_service
from app.services.org_chart import (
    OrgHierarchyError,
    build_org_tree,
    count_nodes,
    ensure_acyclic,
    root_candidates,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/org-chart", tags=["org-chart"])


@router.get("", response_model=OrgChartResponse)
async def get_org_chart(root_id: str | None = None):
    try:
        employees = await employee_service.get_active_employees()
    except Exception as err:
        logger.exception("Failed to load employees for org chart")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve employees",
        ) from err

    try:
        ensure_acyclic(employees, root_id)
    except OrgHierarchyError as e:
        logger.error("Invalid reporting hierarchy: %s", e)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Invalid reporting hierarchy: {e}",
        ) from e

    root = build_org_tree(employees, root_id)
    node_count = count_nodes(root)

    logger.info(
        "Org chart built: root=%s, %d of %d employees placed",
        root.id if root else None,
        node_count,
        len(employees),
    )
    return OrgChartResponse(
        root=root,
        employee_count=len(employees),
        node_count=node_count,
        root_candidates=root_candidates(employees),
    )
