import asyncio

import pytest

from company_service.errors import IdentityAlreadyExists, OtpDeliveryFailed, OtpMismatch, OtpNotFound
from company_service.helpers.otp_utils import is_valid_otp, otp_key
from company_service.services.otp_store import OtpStore

EMAIL = "b@x.com"


async def test_generate_stores_code_with_ttl_and_sends_it(container, notifier):
    code = await container.otps.generate(EMAIL)

    assert is_valid_otp(code)
    assert await container.redis.get(otp_key(EMAIL)) == code
    assert 0 < await container.otps.ttl(EMAIL) <= 300
    address, template, data = notifier.last("otp")
    assert (address, template, data["otp"]) == (EMAIL, "otp", code)


async def test_verify_succeeds_exactly_once(container):
    code = await container.otps.generate(EMAIL)

    await container.otps.verify(EMAIL, code)
    with pytest.raises(OtpNotFound):
        await container.otps.verify(EMAIL, code)


async def test_wrong_code_keeps_stored_code(container):
    code = await container.otps.generate(EMAIL)
    wrong = "000000" if code != "000000" else "111111"

    with pytest.raises(OtpMismatch):
        await container.otps.verify(EMAIL, wrong)
    assert await container.redis.get(otp_key(EMAIL)) == code
    await container.otps.verify(EMAIL, code)


async def test_expired_code_is_not_found(container):
    code = await container.otps.generate(EMAIL)
    await container.redis.pexpire(otp_key(EMAIL), 1)
    await asyncio.sleep(0.05)

    with pytest.raises(OtpNotFound):
        await container.otps.verify(EMAIL, code)


async def test_resend_supersedes_previous_code(container, monkeypatch):
    codes = iter(["111111", "222222"])
    monkeypatch.setattr("company_service.services.otp_store.generate_otp", lambda: next(codes))

    old = await container.otps.generate(EMAIL)
    new = await container.otps.resend(EMAIL)

    assert (old, new) == ("111111", "222222")
    with pytest.raises(OtpMismatch):
        await container.otps.verify(EMAIL, old)
    await container.otps.verify(EMAIL, new)


async def test_email_is_normalized(container):
    code = await container.otps.generate("  B@X.com ")
    await container.otps.verify("b@x.com", code)


async def test_registered_email_cannot_request_otp(container, register):
    await register("a@x.com", "secret1", "Acme")

    with pytest.raises(IdentityAlreadyExists):
        await container.otps.generate("a@x.com")
    with pytest.raises(IdentityAlreadyExists):
        await container.otps.resend("a@x.com")


async def test_failed_delivery_discards_code(container, notifier):
    notifier.succeed = False

    with pytest.raises(OtpDeliveryFailed):
        await container.otps.generate(EMAIL)
    assert await container.redis.get(otp_key(EMAIL)) is None


class _ResendOnFirstRead:
    """Redis wrapper whose first watched read lets another client resend the code."""

    def __init__(self, redis, on_read):
        self._redis = redis
        self._on_read = on_read
        self.reads = 0

    def pipeline(self, transaction=True):
        pipe = self._redis.pipeline(transaction=transaction)
        watched_get = pipe.get

        async def get(key):
            value = await watched_get(key)
            self.reads += 1
            if self._on_read is not None:
                on_read, self._on_read = self._on_read, None
                await on_read()
            return value

        pipe.get = get
        return pipe

    def __getattr__(self, name):
        return getattr(self._redis, name)


async def test_verify_retries_when_code_replaced_mid_transaction(container, notifier, monkeypatch):
    codes = iter(["111111", "222222"])
    monkeypatch.setattr("company_service.services.otp_store.generate_otp", lambda: next(codes))
    old = await container.otps.generate(EMAIL)

    async def resend():
        await container.otps.resend(EMAIL)

    racing = _ResendOnFirstRead(container.redis, resend)
    store = OtpStore(racing, container.credentials, notifier)

    # the old code matched on the first read, but the transaction must not delete the new one
    with pytest.raises(OtpMismatch):
        await store.verify(EMAIL, old)
    assert racing.reads == 2
    assert await container.redis.get(otp_key(EMAIL)) == "222222"

    await store.verify(EMAIL, "222222")
    assert await container.redis.get(otp_key(EMAIL)) is None
