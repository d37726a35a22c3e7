import logging
import math
from dataclasses import dataclass
from typing import Generic, List, Optional, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from company_service.errors import DuplicateIdentity, InvalidCredentials, NotFound, ValidationError
from company_service.helpers.otp_utils import normalize_email
from company_service.models import Company, CompanyProfileStep
from company_service.models.profile_step import FIRST_STEP
from company_service.utils.auth_utils import MAX_PASSWORD_BYTES, hash_password_async, password_fits, verify_password_async
from company_service.utils.db import session_scope

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    items: List[T]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


class CredentialStore:
    """Company identity records and password checks."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], bcrypt_rounds: int = 10):
        self._session_factory = session_factory
        self._bcrypt_rounds = bcrypt_rounds

    async def register(self, email: str, password: str, company_name: str) -> Company:
        email = normalize_email(email)
        if await self.get_by_email(email):
            raise DuplicateIdentity()
        if not password_fits(password):
            raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

        password_hash = await hash_password_async(password, self._bcrypt_rounds)
        company = Company(
            email=email,
            password_hash=password_hash,
            company_name=company_name.strip(),
            is_verified=False,
            is_blocked=False,
            profile_completed=False,
        )
        try:
            async with session_scope(self._session_factory) as session:
                session.add(company)
                await session.flush()
                session.add(CompanyProfileStep(company_id=company.id, current_step=FIRST_STEP))
        except IntegrityError:
            # lost a race against a concurrent registration for the same email
            raise DuplicateIdentity()
        logger.info("Registered company %s (%s)", company.id, email)
        return company

    async def verify_credentials(self, email: str, password: str) -> Company:
        company = await self.get_by_email(email)
        if not company:
            raise InvalidCredentials()
        if not await verify_password_async(password, company.password_hash):
            raise InvalidCredentials()
        return company

    async def get(self, company_id: str) -> Optional[Company]:
        async with self._session_factory() as session:
            return await session.get(Company, company_id)

    async def get_or_404(self, company_id: str) -> Company:
        company = await self.get(company_id)
        if not company:
            raise NotFound()
        return company

    async def get_by_email(self, email: str) -> Optional[Company]:
        async with self._session_factory() as session:
            result = await session.execute(select(Company).where(Company.email == normalize_email(email)))
            return result.scalars().first()

    async def exists(self, email: str) -> bool:
        return await self.get_by_email(email) is not None

    async def _set_blocked(self, company_id: str, blocked: bool) -> Company:
        async with session_scope(self._session_factory) as session:
            company = await session.get(Company, company_id)
            if not company:
                raise NotFound()
            if company.is_blocked != blocked:
                company.is_blocked = blocked
            return company

    async def block(self, company_id: str) -> Company:
        company = await self._set_blocked(company_id, True)
        logger.info("Blocked company %s", company_id)
        return company

    async def unblock(self, company_id: str) -> Company:
        company = await self._set_blocked(company_id, False)
        logger.info("Unblocked company %s", company_id)
        return company

    async def list_pending(self) -> List[Company]:
        query = (
            select(Company)
            .where(
                Company.profile_completed.is_(True),
                Company.is_verified.is_(False),
                Company.is_blocked.is_(False),
            )
            .order_by(Company.created_at)
        )
        async with self._session_factory() as session:
            result = await session.execute(query)
            return list(result.scalars().all())

    async def list_all_for_admin(self) -> List[Company]:
        query = select(Company).where(Company.is_blocked.is_(False)).order_by(Company.created_at.desc())
        async with self._session_factory() as session:
            result = await session.execute(query)
            return list(result.scalars().all())

    async def paginate(self, page: int = 1, limit: int = 10) -> Page[Company]:
        page = max(page, 1)
        limit = max(limit, 1)
        async with self._session_factory() as session:
            total = await session.scalar(select(func.count()).select_from(Company))
            result = await session.execute(
                select(Company).order_by(Company.created_at.desc()).offset((page - 1) * limit).limit(limit)
            )
            return Page(items=list(result.scalars().all()), total=total or 0, page=page, limit=limit)
