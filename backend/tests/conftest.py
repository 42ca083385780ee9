"""
Pytest Configuration and Fixtures

Shared fixtures: actors, in-memory repositories, a fixed clock, and engine
and service instances wired to them. Nothing here talks to MongoDB.
"""

import os
import tempfile

# Must be set before talentflow.config.settings is imported
os.environ.setdefault("LOGS_PATH", tempfile.mkdtemp(prefix="talentflow-logs-"))
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest

from talentflow.domain.enums import ApplicationStatus, JobPostStatus, Role
from talentflow.domain.models import ActorContext, JobPost
from talentflow.engine.audit_trail import AuditTrail
from talentflow.engine.executor import TransitionExecutor
from talentflow.engine.permission_gate import PermissionGate
from talentflow.engine.precondition_validator import PreconditionValidator
from talentflow.services.application_service import ApplicationService
from talentflow.services.job_post_service import JobPostService
from tests.fakes import (
    FakeApplicationRepository, FakeAuditRepository, FakeJobPostRepository,
    FakeTransactionRunner, MutableClock
)
from tests.factories import OTHER_TENANT, TENANT, FIXED_NOW, build_application, build_job_post


# =============================================================================
# Actors
# =============================================================================

@pytest.fixture
def hiring_manager() -> ActorContext:
    return ActorContext(actor_id="hm-1", email="hm1@example.com", role=Role.HIRING_MANAGER, tenant_id=TENANT)


@pytest.fixture
def other_hiring_manager() -> ActorContext:
    """Same organization, did not create the fixture job posts"""
    return ActorContext(actor_id="hm-2", email="hm2@example.com", role=Role.HIRING_MANAGER, tenant_id=TENANT)


@pytest.fixture
def recruiter() -> ActorContext:
    return ActorContext(actor_id="rec-1", email="rec1@example.com", role=Role.RECRUITER, tenant_id=TENANT)


@pytest.fixture
def outside_hiring_manager() -> ActorContext:
    return ActorContext(
        actor_id="hm-9", email="hm9@example.com", role=Role.HIRING_MANAGER, tenant_id=OTHER_TENANT
    )


@pytest.fixture
def outside_recruiter() -> ActorContext:
    return ActorContext(
        actor_id="rec-9", email="rec9@example.com", role=Role.RECRUITER, tenant_id=OTHER_TENANT
    )


@pytest.fixture
def candidate() -> ActorContext:
    return ActorContext(actor_id="cand-1", email="cand1@example.com", role=Role.CANDIDATE)


@pytest.fixture
def other_candidate() -> ActorContext:
    return ActorContext(actor_id="cand-2", email="cand2@example.com", role=Role.CANDIDATE)


# =============================================================================
# Repositories & engine
# =============================================================================

@pytest.fixture
def job_post_repo() -> FakeJobPostRepository:
    return FakeJobPostRepository()


@pytest.fixture
def application_repo() -> FakeApplicationRepository:
    return FakeApplicationRepository()


@pytest.fixture
def audit_repo() -> FakeAuditRepository:
    return FakeAuditRepository()


@pytest.fixture
def clock() -> MutableClock:
    return MutableClock(FIXED_NOW)


@pytest.fixture
def transaction_runner(job_post_repo, application_repo, audit_repo) -> FakeTransactionRunner:
    return FakeTransactionRunner(job_post_repo, application_repo, audit_repo)


@pytest.fixture
def permission_gate() -> PermissionGate:
    return PermissionGate()


@pytest.fixture
def executor(job_post_repo, application_repo, audit_repo, permission_gate, transaction_runner, clock):
    return TransitionExecutor(
        job_post_repo=job_post_repo,
        application_repo=application_repo,
        audit_trail=AuditTrail(audit_repo),
        permission_gate=permission_gate,
        precondition_validator=PreconditionValidator(),
        transaction_runner=transaction_runner,
        clock=clock
    )


@pytest.fixture
def job_post_service(job_post_repo, permission_gate, executor) -> JobPostService:
    return JobPostService(repo=job_post_repo, permission_gate=permission_gate, executor=executor)


@pytest.fixture
def application_service(job_post_repo, application_repo, permission_gate, executor) -> ApplicationService:
    return ApplicationService(
        job_post_repo=job_post_repo,
        application_repo=application_repo,
        permission_gate=permission_gate,
        executor=executor
    )


# =============================================================================
# Stored entities
# =============================================================================

@pytest.fixture
def make_job_post(job_post_repo):
    """Create and store a job post"""
    def _make(status: JobPostStatus = JobPostStatus.DRAFT, complete: bool = True, **overrides) -> JobPost:
        return job_post_repo.create(build_job_post(status, complete, **overrides))
    return _make


@pytest.fixture
def make_application(application_repo):
    """Create and store an application for a job post"""
    def _make(job_post: JobPost, status: ApplicationStatus = ApplicationStatus.APPLIED, **overrides):
        return application_repo.create(build_application(job_post, status, **overrides))
    return _make
