import pytest

from company_service.errors import NotFound, ValidationError
from tests.test_profile_workflow import STEP2, STEP3


@pytest.fixture
def submitted(container, register):
    async def _submitted(email: str, name: str = "Acme"):
        company = await register(email, "secret1", name)
        await container.profiles.complete_step2(company.id, STEP2)
        return await container.profiles.complete_step3(company.id, STEP3)
    return _submitted


async def test_list_pending_filters_incomplete_verified_and_blocked(container, register, submitted):
    pending = await submitted("pending@acme.com")
    approved = await submitted("approved@acme.com")
    blocked = await submitted("blocked@acme.com")
    await register("draft@acme.com", "secret1", "Draft")

    await container.approvals.approve(approved.id, "admin-1")
    await container.credentials.block(blocked.id)

    ids = [c.id for c in await container.approvals.list_pending()]
    assert ids == [pending.id]


async def test_list_all_hides_blocked(container, register):
    visible = await register("one@acme.com", "secret1", "One")
    hidden = await register("two@acme.com", "secret1", "Two")
    await container.credentials.block(hidden.id)

    assert [c.id for c in await container.approvals.list_all()] == [visible.id]


async def test_approve_clears_rejection_and_notifies(container, notifier, submitted):
    company = await submitted("acme@acme.com")
    await container.approvals.reject(company.id, "Blurry logo", "admin-1")

    approved = await container.approvals.approve(company.id, "admin-2")

    assert approved.is_verified
    assert approved.rejection_reason is None
    assert approved.reviewed_by == "admin-2"
    assert approved.reviewed_at is not None
    address, _, data = notifier.last("approval")
    assert address == "acme@acme.com"
    assert data["company_name"] == "Acme"


async def test_reject_revokes_previous_approval(container, notifier, submitted):
    company = await submitted("acme@acme.com")
    await container.approvals.approve(company.id, "admin-1")

    rejected = await container.approvals.reject(company.id, "  Fake address  ", "admin-1")

    assert not rejected.is_verified
    assert rejected.rejection_reason == "Fake address"
    stored = await container.credentials.get(company.id)
    assert not stored.is_verified
    assert notifier.last("rejection")[2]["reason"] == "Fake address"


async def test_notification_failure_keeps_decision(container, notifier, submitted):
    company = await submitted("acme@acme.com")
    notifier.succeed = False

    await container.approvals.approve(company.id, "admin-1")

    assert (await container.credentials.get(company.id)).is_verified


@pytest.mark.parametrize("reason", ["", "   ", "x" * 501])
async def test_reject_requires_bounded_reason(container, submitted, reason):
    company = await submitted("acme@acme.com")

    with pytest.raises(ValidationError):
        await container.approvals.reject(company.id, reason, "admin-1")
    assert (await container.credentials.get(company.id)).rejection_reason is None


async def test_review_unknown_company(container):
    with pytest.raises(NotFound):
        await container.approvals.approve("missing", "admin-1")
    with pytest.raises(NotFound):
        await container.approvals.reject("missing", "reason", "admin-1")
    with pytest.raises(NotFound):
        await container.approvals.get_details("missing")
