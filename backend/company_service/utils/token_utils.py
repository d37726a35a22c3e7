from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from jose import JWTError, jwt

from company_service.config import Settings
from company_service.errors import InvalidAccessToken, InvalidRefreshToken

COMPANY_ROLE = "company"


@dataclass(frozen=True)
class TokenClaims:
    company_id: str
    email: str
    role: str = COMPANY_ROLE
    user_type: str = COMPANY_ROLE
    issued_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None

    @classmethod
    def from_payload(cls, payload: dict) -> "TokenClaims":
        return cls(
            company_id=str(payload.get("companyId") or payload["sub"]),
            email=payload["email"],
            role=payload.get("role", COMPANY_ROLE),
            user_type=payload.get("userType", COMPANY_ROLE),
            issued_at=_from_timestamp(payload.get("iat")),
            expires_at=_from_timestamp(payload.get("exp")),
        )


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


def _from_timestamp(value) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromtimestamp(int(value), tz=timezone.utc)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """Signs access and refresh tokens with separate secrets.

    Refresh tokens can only mint access tokens. Nothing is stored server side,
    so a leaked refresh token stays valid until it expires.
    """

    def __init__(self, settings: Settings, now: Callable[[], datetime] = _utcnow):
        self._access_secret = settings.jwt_secret_key
        self._refresh_secret = settings.jwt_refresh_secret_key
        self._algorithm = settings.jwt_algorithm
        self.access_ttl = timedelta(minutes=settings.access_token_expire_minutes)
        self.refresh_ttl = timedelta(days=settings.refresh_token_expire_days)
        self._now = now

    def _encode(self, company_id: str, email: str, secret: str, ttl: timedelta) -> str:
        issued = self._now()
        payload = {
            "sub": company_id,
            "companyId": company_id,
            "email": email,
            "role": COMPANY_ROLE,
            "userType": COMPANY_ROLE,
            "iat": int(issued.timestamp()),
            "exp": int((issued + ttl).timestamp()),
        }
        return jwt.encode(payload, secret, algorithm=self._algorithm)

    def _decode(self, token: str, secret: str) -> TokenClaims:
        payload = jwt.decode(token, secret, algorithms=[self._algorithm])
        return TokenClaims.from_payload(payload)

    def issue(self, company) -> TokenPair:
        return TokenPair(
            access_token=self._encode(company.id, company.email, self._access_secret, self.access_ttl),
            refresh_token=self._encode(company.id, company.email, self._refresh_secret, self.refresh_ttl),
        )

    def verify_access(self, token: str) -> TokenClaims:
        if not token:
            raise InvalidAccessToken()
        try:
            return self._decode(token, self._access_secret)
        except (JWTError, KeyError, ValueError):
            raise InvalidAccessToken()

    def verify_refresh(self, token: str) -> TokenClaims:
        if not token:
            raise InvalidRefreshToken()
        try:
            return self._decode(token, self._refresh_secret)
        except (JWTError, KeyError, ValueError):
            raise InvalidRefreshToken()

    def refresh(self, refresh_token: str) -> str:
        claims = self.verify_refresh(refresh_token)
        return self._encode(claims.company_id, claims.email, self._access_secret, self.access_ttl)
