import logging
from dataclasses import dataclass, field
from typing import Optional

from fastapi import Request
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from company_service.config import Settings
from company_service.services.approval_workflow import ApprovalWorkflow
from company_service.services.credential_store import CredentialStore
from company_service.services.job_count import JobCountClient
from company_service.services.notifications import EmailNotifier, Notifier
from company_service.services.otp_store import OtpStore
from company_service.services.profile_workflow import ProfileWorkflow
from company_service.utils.db import build_engine, build_session_factory, create_tables
from company_service.utils.identity import AuthGateway, CookieTokenIdentityProvider, TrustedHeaderIdentityProvider
from company_service.utils.token_utils import TokenService

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Every process-wide collaborator, built once and closed on shutdown."""

    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    redis: Redis
    notifier: Notifier
    job_counts: JobCountClient
    tokens: TokenService = field(init=False)
    credentials: CredentialStore = field(init=False)
    otps: OtpStore = field(init=False)
    profiles: ProfileWorkflow = field(init=False)
    approvals: ApprovalWorkflow = field(init=False)
    gateway: AuthGateway = field(init=False)

    def __post_init__(self):
        s = self.settings
        self.tokens = TokenService(s)
        self.credentials = CredentialStore(self.session_factory, bcrypt_rounds=s.bcrypt_rounds)
        self.otps = OtpStore(self.redis, self.credentials, self.notifier, ttl_seconds=s.otp_ttl_seconds)
        self.profiles = ProfileWorkflow(self.session_factory)
        self.approvals = ApprovalWorkflow(self.session_factory, self.credentials, self.notifier)

        providers = [CookieTokenIdentityProvider(self.tokens, s.access_cookie_name)]
        if s.trust_gateway_headers:
            providers.append(
                TrustedHeaderIdentityProvider(s.identity_header_id, s.identity_header_email, s.identity_header_role)
            )
        self.gateway = AuthGateway(providers)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ServiceContainer":
        engine = build_engine(settings.database_url)
        return cls(
            settings=settings,
            engine=engine,
            session_factory=build_session_factory(engine),
            redis=Redis.from_url(settings.redis_url, decode_responses=True),
            notifier=EmailNotifier(settings),
            job_counts=JobCountClient(settings.job_service_url, timeout=settings.job_service_timeout_seconds),
        )

    async def startup(self):
        await create_tables(self.engine)
        startup = getattr(self.notifier, "startup", None)
        if startup:
            await startup()
        logger.info("Company service collaborators initialized")

    async def shutdown(self):
        shutdown = getattr(self.notifier, "shutdown", None)
        if shutdown:
            await shutdown()
        await self.job_counts.aclose()
        await self.redis.aclose()
        await self.engine.dispose()
        logger.info("Company service collaborators closed")


def get_container(request: Request) -> ServiceContainer:
    container: Optional[ServiceContainer] = getattr(request.app.state, "container", None)
    if container is None:
        raise RuntimeError("Service container not initialized")
    return container
