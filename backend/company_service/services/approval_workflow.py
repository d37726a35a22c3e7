import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from company_service.errors import NotFound, ValidationError
from company_service.models import Company
from company_service.services.credential_store import CredentialStore
from company_service.services.notifications import Notifier
from company_service.utils.db import session_scope

logger = logging.getLogger(__name__)

MAX_REASON_LENGTH = 500


class ApprovalWorkflow:
    """Admin review of submitted companies.

    A persisted decision is authoritative: the follow-up email is best effort
    and a failed send is only logged.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        credentials: CredentialStore,
        notifier: Notifier,
    ):
        self._session_factory = session_factory
        self._credentials = credentials
        self._notifier = notifier

    async def list_pending(self) -> List[Company]:
        return await self._credentials.list_pending()

    async def list_all(self) -> List[Company]:
        return await self._credentials.list_all_for_admin()

    async def get_details(self, company_id: str) -> Company:
        return await self._credentials.get_or_404(company_id)

    async def approve(self, company_id: str, admin_id: str) -> Company:
        async with session_scope(self._session_factory) as session:
            company = await session.get(Company, company_id)
            if not company:
                raise NotFound()
            company.mark_approved(admin_id)
        logger.info("Company %s approved by admin %s", company_id, admin_id)

        sent = await self._notifier.notify(company.email, "approval", {"company_name": company.company_name})
        if not sent:
            logger.warning("Approval email to %s was not delivered", company.email)
        return company

    async def reject(self, company_id: str, reason: str, admin_id: str) -> Company:
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("Rejection reason is required")
        if len(reason) > MAX_REASON_LENGTH:
            raise ValidationError("Rejection reason too long")

        async with session_scope(self._session_factory) as session:
            company = await session.get(Company, company_id)
            if not company:
                raise NotFound()
            company.mark_rejected(reason, admin_id)
        logger.info("Company %s rejected by admin %s", company_id, admin_id)

        sent = await self._notifier.notify(
            company.email, "rejection", {"company_name": company.company_name, "reason": reason}
        )
        if not sent:
            logger.warning("Rejection email to %s was not delivered", company.email)
        return company
