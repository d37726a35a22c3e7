from typing import List, Tuple

import httpx
import pytest
from fakeredis import FakeAsyncRedis

from company_service.config import Settings
from company_service.container import ServiceContainer
from company_service.main import create_app
from company_service.services.job_count import JobCountClient
from company_service.utils.db import build_engine, build_session_factory

ADMIN_HEADERS = {"x-user-id": "admin-1", "x-user-email": "admin@portal.com", "x-user-role": "admin"}


class RecordingNotifier:
    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.sent: List[Tuple[str, str, dict]] = []

    async def notify(self, address: str, template: str, data: dict) -> bool:
        self.sent.append((address, template, dict(data)))
        return self.succeed

    def last(self, template: str) -> Tuple[str, str, dict]:
        for entry in reversed(self.sent):
            if entry[1] == template:
                return entry
        raise AssertionError(f"no {template} notification sent")


def _job_service(request: httpx.Request) -> httpx.Response:
    if request.url.path.endswith("/count"):
        return httpx.Response(200, json={"data": {"count": 3}})
    return httpx.Response(404)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        environment="development",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'company.db'}",
        jwt_secret_key="test-access-secret",
        jwt_refresh_secret_key="test-refresh-secret",
        bcrypt_rounds=10,
        trust_gateway_headers=True,
    )


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
async def container(settings, notifier):
    engine = build_engine(settings.database_url)
    container = ServiceContainer(
        settings=settings,
        engine=engine,
        session_factory=build_session_factory(engine),
        redis=FakeAsyncRedis(decode_responses=True),
        notifier=notifier,
        job_counts=JobCountClient("http://jobs.test", transport=httpx.MockTransport(_job_service)),
    )
    await container.startup()
    yield container
    await container.shutdown()


@pytest.fixture
def app(container):
    return create_app(container=container)


@pytest.fixture
async def client(app):
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver") as c:
        yield c


@pytest.fixture
async def admin_client(app):
    # separate cookie jar: a company cookie would otherwise win over the admin headers
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://testserver", headers=ADMIN_HEADERS
    ) as c:
        yield c


@pytest.fixture
def register(container):
    async def _register(email: str = "acme@acme.com", password: str = "secret1", name: str = "Acme"):
        return await container.credentials.register(email, password, name)
    return _register
