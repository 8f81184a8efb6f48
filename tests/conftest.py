import sys
from pathlib import Path

# Ensure the project's src directory is on sys.path for tests
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

import pytest

from clinicguard.config import Settings
from clinicguard.domain.permission import ROLE_PERMISSIONS
from clinicguard.domain.policy import PolicyEvaluator
from clinicguard.domain.session import SessionState

TEST_JWT_SECRET = "test-secret-do-not-use"


def make_session(role=None, user_id="user-1", clinic_id=None, **overrides) -> SessionState:
    """Authenticated session for ``role``; pass is_authenticated=False for anonymous."""
    values = dict(
        user_id=user_id,
        role=role,
        is_authenticated=True,
        clinic_id=clinic_id,
    )
    values.update(overrides)
    return SessionState(**values)


def make_evaluator(role=None, role_permissions=ROLE_PERMISSIONS, **session_kw) -> PolicyEvaluator:
    return PolicyEvaluator(make_session(role, **session_kw), role_permissions=role_permissions)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def settings():
    return Settings(jwt_secret=TEST_JWT_SECRET, dev_warnings=True, _env_file=None)


@pytest.fixture
def test_app(settings):
    """Fresh app plus its swappable collaborators.

    Returns (app, session_provider, audit_sink); set ``session_provider.session``
    to control who the caller is.
    """
    from tests.fixtures.app_factory import create_test_app

    return create_test_app(settings)
