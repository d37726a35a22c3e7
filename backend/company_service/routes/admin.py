from fastapi import APIRouter, Depends, Query

from company_service.container import ServiceContainer, get_container
from company_service.schemas.company import (
    CompanyListResponse,
    CompanyOut,
    CompanyPageResponse,
    CompanyResponse,
    RejectSchema,
)
from company_service.utils.identity import AuthenticatedIdentity, require_role

router = APIRouter()

current_admin = require_role("admin")


def _companies(items) -> list:
    return [CompanyOut.model_validate(c) for c in items]


@router.get("/admin/pending", response_model=CompanyListResponse)
async def pending_companies(
    admin: AuthenticatedIdentity = Depends(current_admin),
    container: ServiceContainer = Depends(get_container),
):
    return CompanyListResponse(companies=_companies(await container.approvals.list_pending()))


@router.get("/admin/all", response_model=CompanyListResponse)
async def all_companies(
    admin: AuthenticatedIdentity = Depends(current_admin),
    container: ServiceContainer = Depends(get_container),
):
    return CompanyListResponse(companies=_companies(await container.approvals.list_all()))


@router.get("/admin/{company_id}", response_model=CompanyResponse)
async def company_details(
    company_id: str,
    admin: AuthenticatedIdentity = Depends(current_admin),
    container: ServiceContainer = Depends(get_container),
):
    company = await container.approvals.get_details(company_id)
    return CompanyResponse(company=CompanyOut.model_validate(company))


@router.post("/admin/{company_id}/approve", response_model=CompanyResponse)
async def approve_company(
    company_id: str,
    admin: AuthenticatedIdentity = Depends(current_admin),
    container: ServiceContainer = Depends(get_container),
):
    company = await container.approvals.approve(company_id, admin.subject_id)
    return CompanyResponse(company=CompanyOut.model_validate(company), message="Company approved successfully")


@router.post("/admin/{company_id}/reject", response_model=CompanyResponse)
async def reject_company(
    company_id: str,
    payload: RejectSchema,
    admin: AuthenticatedIdentity = Depends(current_admin),
    container: ServiceContainer = Depends(get_container),
):
    company = await container.approvals.reject(company_id, payload.reason, admin.subject_id)
    return CompanyResponse(company=CompanyOut.model_validate(company), message="Company rejected successfully")


@router.get("/companies", response_model=CompanyPageResponse)
async def list_companies(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    admin: AuthenticatedIdentity = Depends(current_admin),
    container: ServiceContainer = Depends(get_container),
):
    result = await container.credentials.paginate(page, limit)
    return CompanyPageResponse(
        companies=_companies(result.items),
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
    )


@router.patch("/companies/{company_id}/block", response_model=CompanyResponse)
async def block_company(
    company_id: str,
    admin: AuthenticatedIdentity = Depends(current_admin),
    container: ServiceContainer = Depends(get_container),
):
    company = await container.credentials.block(company_id)
    return CompanyResponse(company=CompanyOut.model_validate(company), message="Company blocked successfully")


@router.patch("/companies/{company_id}/unblock", response_model=CompanyResponse)
async def unblock_company(
    company_id: str,
    admin: AuthenticatedIdentity = Depends(current_admin),
    container: ServiceContainer = Depends(get_container),
):
    company = await container.credentials.unblock(company_id)
    return CompanyResponse(company=CompanyOut.model_validate(company), message="Company unblocked successfully")
