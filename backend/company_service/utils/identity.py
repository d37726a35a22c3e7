from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from fastapi import Depends, Request

from company_service.errors import AdminNotAuthenticated, CompanyNotAuthenticated
from company_service.utils.token_utils import TokenService

ROLE_ERRORS = {
    "admin": AdminNotAuthenticated,
    "company": CompanyNotAuthenticated,
}


@dataclass(frozen=True)
class AuthenticatedIdentity:
    subject_id: str
    email: Optional[str]
    role: str
    source: str


class IdentityProvider(Protocol):
    def identify(self, request: Request) -> Optional[AuthenticatedIdentity]:
        ...


class CookieTokenIdentityProvider:
    """Verifies the access-token cookie locally."""

    source = "cookie"

    def __init__(self, tokens: TokenService, cookie_name: str):
        self._tokens = tokens
        self._cookie_name = cookie_name

    def identify(self, request: Request) -> Optional[AuthenticatedIdentity]:
        token = request.cookies.get(self._cookie_name)
        if not token:
            return None
        # a present but invalid token is an error, not an anonymous request
        claims = self._tokens.verify_access(token)
        return AuthenticatedIdentity(
            subject_id=claims.company_id,
            email=claims.email,
            role=claims.role,
            source=self.source,
        )


class TrustedHeaderIdentityProvider:
    """Reads identity headers set by the upstream gateway.

    Nothing here is verified. These headers must only be reachable from the
    gateway; if clients can set them directly, any identity can be spoofed.
    """

    source = "gateway"

    def __init__(self, id_header: str = "x-user-id", email_header: str = "x-user-email", role_header: str = "x-user-role"):
        self._id_header = id_header
        self._email_header = email_header
        self._role_header = role_header

    def identify(self, request: Request) -> Optional[AuthenticatedIdentity]:
        subject_id = (request.headers.get(self._id_header) or "").strip()
        if not subject_id:
            return None
        return AuthenticatedIdentity(
            subject_id=subject_id,
            email=request.headers.get(self._email_header),
            role=(request.headers.get(self._role_header) or "company").strip().lower(),
            source=self.source,
        )


class AuthGateway:
    def __init__(self, providers: Sequence[IdentityProvider]):
        self._providers = list(providers)

    def resolve(self, request: Request) -> Optional[AuthenticatedIdentity]:
        for provider in self._providers:
            identity = provider.identify(request)
            if identity is not None:
                return identity
        return None


async def current_identity(request: Request) -> Optional[AuthenticatedIdentity]:
    identity = request.app.state.container.gateway.resolve(request)
    request.state.identity = identity
    return identity


def require_role(required: str):
    error = ROLE_ERRORS.get(required, CompanyNotAuthenticated)

    async def _dependency(identity: Optional[AuthenticatedIdentity] = Depends(current_identity)) -> AuthenticatedIdentity:
        if identity is None or identity.role != required:
            raise error()
        return identity

    return _dependency
