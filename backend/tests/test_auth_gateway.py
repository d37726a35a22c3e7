from types import SimpleNamespace

import pytest
from starlette.requests import Request

from company_service.errors import InvalidAccessToken
from company_service.utils.identity import AuthGateway, CookieTokenIdentityProvider, TrustedHeaderIdentityProvider
from company_service.utils.token_utils import TokenService


def _request(headers=None, cookies=None) -> Request:
    raw = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    if cookies:
        raw.append((b"cookie", "; ".join(f"{k}={v}" for k, v in cookies.items()).encode()))
    return Request({"type": "http", "method": "GET", "path": "/", "headers": raw, "query_string": b""})


@pytest.fixture
def tokens(settings):
    return TokenService(settings)


@pytest.fixture
def gateway(tokens):
    return AuthGateway([CookieTokenIdentityProvider(tokens, "companyToken"), TrustedHeaderIdentityProvider()])


def test_cookie_token_resolves_company(gateway, tokens):
    pair = tokens.issue(SimpleNamespace(id="c-1", email="acme@acme.com"))

    identity = gateway.resolve(_request(cookies={"companyToken": pair.access_token}))

    assert identity.subject_id == "c-1"
    assert identity.role == "company"
    assert identity.source == "cookie"


def test_invalid_cookie_token_is_an_error(gateway):
    with pytest.raises(InvalidAccessToken):
        gateway.resolve(_request(cookies={"companyToken": "forged"}))


def test_trusted_headers_resolve_identity(gateway):
    identity = gateway.resolve(_request(headers={"x-user-id": "admin-7", "x-user-role": "ADMIN"}))

    assert identity.subject_id == "admin-7"
    assert identity.role == "admin"
    assert identity.source == "gateway"


def test_cookie_takes_precedence_over_headers(gateway, tokens):
    pair = tokens.issue(SimpleNamespace(id="c-1", email="acme@acme.com"))

    identity = gateway.resolve(
        _request(headers={"x-user-id": "admin-7", "x-user-role": "admin"}, cookies={"companyToken": pair.access_token})
    )

    assert identity.subject_id == "c-1"


def test_anonymous_request(gateway):
    assert gateway.resolve(_request()) is None


def test_headers_ignored_without_trusted_provider(tokens):
    cookie_only = AuthGateway([CookieTokenIdentityProvider(tokens, "companyToken")])

    assert cookie_only.resolve(_request(headers={"x-user-id": "admin-7", "x-user-role": "admin"})) is None
