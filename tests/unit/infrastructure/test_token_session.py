import datetime
from types import SimpleNamespace

import pytest
from jose import jwt

from clinicguard.domain.permission import Role
from clinicguard.infrastructure.session.token_session import TokenSessionProvider
from tests.conftest import TEST_JWT_SECRET


def _request(headers=None, cookies=None, path="/queue"):
    return SimpleNamespace(
        headers=headers or {}, cookies=cookies or {}, url=SimpleNamespace(path=path)
    )


@pytest.fixture
def provider():
    return TokenSessionProvider(TEST_JWT_SECRET)


@pytest.mark.asyncio
async def test_bearer_token_resolves_session(provider):
    token = provider.issue("doc-7", Role.DOCTOR, clinic_id=3)
    session = await provider.resolve(_request({"authorization": f"Bearer {token}"}))
    assert session.is_authenticated
    assert session.user_id == "doc-7"
    assert session.resolved_role is Role.DOCTOR
    assert session.clinic_id == "3"


@pytest.mark.asyncio
async def test_cookie_token_resolves_session(provider):
    token = provider.issue("p-1", "PATIENT")
    session = await provider.resolve(_request(cookies={"session_token": token}))
    assert session.user_id == "p-1"
    assert session.role == "PATIENT"
    assert session.clinic_id is None


@pytest.mark.asyncio
async def test_header_wins_over_cookie(provider):
    header = provider.issue("from-header", "DOCTOR")
    cookie = provider.issue("from-cookie", "PATIENT")
    session = await provider.resolve(
        _request({"authorization": f"Bearer {header}"}, {"session_token": cookie})
    )
    assert session.user_id == "from-header"


@pytest.mark.asyncio
async def test_missing_token_is_anonymous(provider):
    session = await provider.resolve(_request())
    assert not session.is_authenticated
    assert session.user_id is None


@pytest.mark.asyncio
async def test_wrong_secret_is_anonymous(provider):
    forged = TokenSessionProvider("another-secret").issue("mallory", "SUPER_ADMIN")
    session = await provider.resolve(_request({"authorization": f"Bearer {forged}"}))
    assert not session.is_authenticated


@pytest.mark.asyncio
async def test_expired_token_is_anonymous(provider):
    token = provider.issue("u", "DOCTOR", expires_delta=datetime.timedelta(seconds=-30))
    session = await provider.resolve(_request({"authorization": f"Bearer {token}"}))
    assert not session.is_authenticated


@pytest.mark.asyncio
async def test_token_without_subject_is_anonymous(provider):
    token = jwt.encode({"role": "DOCTOR"}, TEST_JWT_SECRET, algorithm="HS256")
    session = await provider.resolve(_request(cookies={"session_token": token}))
    assert not session.is_authenticated


def test_extract_token_ignores_other_schemes(provider):
    assert provider.extract_token(_request({"authorization": "Basic abc"})) is None
    assert provider.extract_token(_request({"authorization": "Bearer "})) is None
