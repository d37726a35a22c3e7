from fastapi import APIRouter, Depends

from company_service.container import ServiceContainer, get_container
from company_service.schemas.company import (
    CompanyOut,
    CompanyResponse,
    DashboardResponse,
    ProfileResponse,
    ProfileStepOut,
    ProfileStepResponse,
    Step2Schema,
    Step3Schema,
)
from company_service.utils.identity import AuthenticatedIdentity, require_role

router = APIRouter()

current_company = require_role("company")


@router.post("/profile/step2", response_model=CompanyResponse)
async def complete_step2(
    payload: Step2Schema,
    identity: AuthenticatedIdentity = Depends(current_company),
    container: ServiceContainer = Depends(get_container),
):
    company = await container.profiles.complete_step2(identity.subject_id, payload)
    return CompanyResponse(company=CompanyOut.model_validate(company), message="Step 2 completed successfully")


@router.post("/profile/step3", response_model=CompanyResponse)
async def complete_step3(
    payload: Step3Schema,
    identity: AuthenticatedIdentity = Depends(current_company),
    container: ServiceContainer = Depends(get_container),
):
    company = await container.profiles.complete_step3(identity.subject_id, payload)
    return CompanyResponse(
        company=CompanyOut.model_validate(company),
        message="Profile completed! Submitted for admin review.",
    )


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    identity: AuthenticatedIdentity = Depends(current_company),
    container: ServiceContainer = Depends(get_container),
):
    company, step = await container.profiles.get_profile(identity.subject_id)
    return ProfileResponse(company=CompanyOut.model_validate(company), profile_step=ProfileStepOut.model_validate(step))


@router.get("/profile/step", response_model=ProfileStepResponse)
async def get_profile_step(
    identity: AuthenticatedIdentity = Depends(current_company),
    container: ServiceContainer = Depends(get_container),
):
    return ProfileStepResponse(profile_step=await container.profiles.get_step(identity.subject_id))


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    identity: AuthenticatedIdentity = Depends(current_company),
    container: ServiceContainer = Depends(get_container),
):
    company = await container.credentials.get_or_404(identity.subject_id)
    step = await container.profiles.get_step(identity.subject_id)
    job_count = await container.job_counts.count_for(company.id)
    return DashboardResponse(company=CompanyOut.model_validate(company), profile_step=step, job_count=job_count)
