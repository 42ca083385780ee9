"""
API test fixtures

The app runs against the in-memory services from the root conftest; the
lifespan (index creation) is not triggered because TestClient is not used
as a context manager. Tokens are signed with the configured secret so the
real authentication dependency runs.
"""

import jwt
import pytest
from fastapi.testclient import TestClient

from talentflow.api.deps import get_application_service, get_job_post_service
from talentflow.config.settings import settings
from talentflow.main import app


@pytest.fixture
def client(job_post_service, application_service):
    app.dependency_overrides[get_job_post_service] = lambda: job_post_service
    app.dependency_overrides[get_application_service] = lambda: application_service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth():
    """Authorization header for an ActorContext"""
    def _auth(actor):
        claims = {"sub": actor.actor_id, "email": actor.email, "role": actor.role.value}
        if actor.tenant_id:
            claims["organization_id"] = actor.tenant_id
        token = jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)
        return {"Authorization": f"Bearer {token}"}
    return _auth
