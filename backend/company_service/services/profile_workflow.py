import logging
from typing import Tuple, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from company_service.errors import InvalidProfileTransition, NotFound
from company_service.models import Company, CompanyProfileStep
from company_service.models.profile_step import DETAILS_STEP, SUBMITTED_STEP
from company_service.schemas.company import Step2Schema, Step3Schema
from company_service.utils.db import session_scope

logger = logging.getLogger(__name__)

APPROVED = "approved"
REJECTED = "rejected"


async def _load(session: AsyncSession, company_id: str) -> Tuple[Company, CompanyProfileStep]:
    company = await session.get(Company, company_id)
    if not company:
        raise NotFound()
    result = await session.execute(select(CompanyProfileStep).where(CompanyProfileStep.company_id == company_id))
    step = result.scalars().first()
    if not step:
        raise NotFound("Profile step not found")
    return company, step


class ProfileWorkflow:
    """Self-service onboarding: 1 (registered) -> 3 (details) -> 4 (submitted)."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def complete_step2(self, company_id: str, data: Step2Schema) -> Company:
        async with session_scope(self._session_factory) as session:
            company, step = await _load(session, company_id)
            if step.submitted:
                raise InvalidProfileTransition("Profile already submitted for review")

            company.industry = data.industry
            company.size = data.size
            company.website = str(data.website) if data.website else None
            company.description = data.description
            company.headquarters = data.headquarters

            step.basic_info_completed = True
            step.company_details_completed = True
            step.advance_to(DETAILS_STEP)
        logger.info("Company %s completed step 2", company_id)
        return company

    async def complete_step3(self, company_id: str, data: Step3Schema) -> Company:
        async with session_scope(self._session_factory) as session:
            company, step = await _load(session, company_id)
            if step.submitted:
                raise InvalidProfileTransition("Profile already submitted for review")
            if not step.company_details_completed:
                raise InvalidProfileTransition("Company details (step 2) must be completed first")

            company.contact_person_name = data.contact_person_name
            company.contact_person_title = data.contact_person_title
            company.contact_person_email = str(data.contact_person_email)
            company.contact_person_phone = data.contact_person_phone
            company.profile_completed = True

            step.contact_info_completed = True
            step.advance_to(SUBMITTED_STEP)
        logger.info("Company %s submitted profile for review", company_id)
        return company

    async def get_profile(self, company_id: str) -> Tuple[Company, CompanyProfileStep]:
        async with self._session_factory() as session:
            return await _load(session, company_id)

    async def get_step(self, company_id: str) -> Union[int, str]:
        # read through on every call; approval state can change between polls
        company, step = await self.get_profile(company_id)
        if company.is_verified:
            return APPROVED
        if company.rejection_reason:
            return REJECTED
        return step.current_step
