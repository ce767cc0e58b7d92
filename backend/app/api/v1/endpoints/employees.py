from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from app.models.employee import (
    DuplicateCheckRequest,
    DuplicateCheckResponse,
    EmployeeDetail,
    EmployeeSummary,
)
from app.services.duplicate_check import (
    DuplicateCheckError,
    DuplicateCheckValidationError,
    check_duplicate,
)
from app.services.employee_service import employee_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/employees", tags=["employees"])


@router.get("", response_model=list[EmployeeSummary])
async def list_employees(
    skip: int = 0,
    limit: int = 50,
    search: str = "",
    include_resigned: bool = False,
):
    try:
        return await employee_service.get_employees(
            skip=skip,
            limit=limit,
            search=search,
            include_resigned=include_resigned,
        )
    except Exception as err:
        logger.exception("Failed to list employees")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve employees",
        ) from err


@router.post("/check-duplicate", response_model=DuplicateCheckResponse)
async def check_duplicate_value(request: DuplicateCheckRequest):
    logger.info("Duplicate check request field=%s exclude_id=%s", request.field, request.exclude_id)

    try:
        exists = await check_duplicate(request.field, request.value, request.exclude_id)
    except DuplicateCheckValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e
    except DuplicateCheckError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Duplicate check failed: {e}",
        ) from e

    return DuplicateCheckResponse(exists=exists)


@router.get("/{employee_id}", response_model=EmployeeDetail)
async def get_employee(employee_id: str):
    try:
        employee = await employee_service.get_employee(employee_id)
    except Exception as err:
        logger.exception("Failed to get employee %s", employee_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve employee",
        ) from err

    if not employee:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Employee with id '{employee_id}' not found",
        )

    return employee
