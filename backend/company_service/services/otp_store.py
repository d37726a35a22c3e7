import hmac
import logging

from redis.asyncio import Redis
from redis.exceptions import WatchError

from company_service.errors import IdentityAlreadyExists, OtpDeliveryFailed, OtpMismatch, OtpNotFound
from company_service.helpers.otp_utils import generate_otp, normalize_email, otp_key
from company_service.services.credential_store import CredentialStore
from company_service.services.notifications import Notifier

logger = logging.getLogger(__name__)


class OtpStore:
    """One-time codes proving control of an email address before registration.

    Codes live in Redis under ``company_otp:<email>`` with an expiry, so an
    expired code and a missing code look the same to callers.
    """

    def __init__(self, redis: Redis, credentials: CredentialStore, notifier: Notifier, ttl_seconds: int = 300):
        self._redis = redis
        self._credentials = credentials
        self._notifier = notifier
        self.ttl_seconds = ttl_seconds

    async def _ensure_unregistered(self, email: str):
        if await self._credentials.exists(email):
            raise IdentityAlreadyExists()

    async def generate(self, email: str) -> str:
        email = normalize_email(email)
        await self._ensure_unregistered(email)

        code = generate_otp()
        key = otp_key(email)
        await self._redis.set(key, code, ex=self.ttl_seconds)
        logger.info("Stored company OTP for %s, expires in %ss", email, self.ttl_seconds)

        sent = await self._notifier.notify(
            email, "otp", {"otp": code, "minutes": max(self.ttl_seconds // 60, 1)}
        )
        if not sent:
            await self._redis.delete(key)
            raise OtpDeliveryFailed()
        return code

    async def verify(self, email: str, code: str):
        key = otp_key(email)
        code = (code or "").strip()
        async with self._redis.pipeline(transaction=True) as pipe:
            while True:
                try:
                    await pipe.watch(key)
                    stored = await pipe.get(key)
                    if stored is None:
                        raise OtpNotFound()
                    if isinstance(stored, bytes):
                        stored = stored.decode("utf-8")
                    if not hmac.compare_digest(stored, code):
                        raise OtpMismatch()
                    pipe.multi()
                    pipe.delete(key)
                    await pipe.execute()
                    break
                except WatchError:
                    # superseded by a concurrent resend; compare against the new value
                    continue
        logger.info("Verified company OTP for %s", normalize_email(email))

    async def resend(self, email: str) -> str:
        email = normalize_email(email)
        await self._ensure_unregistered(email)
        await self._redis.delete(otp_key(email))
        return await self.generate(email)

    async def ttl(self, email: str) -> int:
        return await self._redis.ttl(otp_key(email))
