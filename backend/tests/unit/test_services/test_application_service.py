"""Application service tests"""

from datetime import timedelta

import pytest

from talentflow.domain.enums import ApplicationStatus, JobPostStatus
from talentflow.domain.errors import (
    ApplicationNotFoundError, AuthorizationError, InvalidTransitionError,
    JobPostNotFoundError, ValidationError
)
from talentflow.services.application_service import MAX_BULK_SIZE

from tests.factories import FIXED_NOW, OTHER_TENANT


# =============================================================================
# Apply
# =============================================================================

def test_candidate_applies_to_open_job_post(application_service, make_job_post, candidate, audit_repo):
    job_post = make_job_post(status=JobPostStatus.OPEN)

    application = application_service.apply_for_job(job_post.job_post_id, candidate)

    assert application.status == ApplicationStatus.APPLIED
    assert application.tenant_id == job_post.tenant_id
    assert application.candidate_id == candidate.actor_id
    assert application.candidate_email == candidate.email
    assert application.application_id.startswith("APP-")
    assert audit_repo.records == []


@pytest.mark.parametrize("status", [JobPostStatus.DRAFT, JobPostStatus.CLOSED, JobPostStatus.ARCHIVED])
def test_cannot_apply_unless_open(application_service, make_job_post, candidate, status):
    job_post = make_job_post(status=status)
    with pytest.raises(ValidationError) as exc_info:
        application_service.apply_for_job(job_post.job_post_id, candidate)
    assert exc_info.value.message == "Cannot apply for a job that is not OPEN."


def test_cannot_apply_twice(application_service, make_job_post, candidate):
    job_post = make_job_post(status=JobPostStatus.OPEN)
    application_service.apply_for_job(job_post.job_post_id, candidate)

    with pytest.raises(ValidationError) as exc_info:
        application_service.apply_for_job(job_post.job_post_id, candidate)
    assert exc_info.value.message == "You have already applied for this job."


def test_staff_cannot_apply(application_service, make_job_post, recruiter):
    job_post = make_job_post(status=JobPostStatus.OPEN)
    with pytest.raises(AuthorizationError) as exc_info:
        application_service.apply_for_job(job_post.job_post_id, recruiter)
    assert exc_info.value.message == "Only candidates can apply for jobs"


def test_apply_to_unknown_job_post(application_service, candidate):
    with pytest.raises(JobPostNotFoundError):
        application_service.apply_for_job("JOB-missing", candidate)


# =============================================================================
# Pipeline
# =============================================================================

def test_recruiter_moves_application_and_candidate_sees_history(
    application_service, make_job_post, make_application, recruiter, candidate
):
    application = make_application(make_job_post(status=JobPostStatus.OPEN))

    application_service.transition_application(
        application.application_id, ApplicationStatus.UNDER_REVIEW, recruiter, "Strong CV"
    )

    details = application_service.get_application(application.application_id, candidate)
    assert details["application"].status == ApplicationStatus.UNDER_REVIEW
    assert [r.reason for r in details["history"]] == ["Strong CV"]


def test_outside_recruiter_cannot_move_application(
    application_service, make_job_post, make_application, outside_recruiter
):
    application = make_application(make_job_post(status=JobPostStatus.OPEN))
    with pytest.raises(AuthorizationError):
        application_service.transition_application(
            application.application_id, ApplicationStatus.REJECTED, outside_recruiter
        )


def test_withdraw_uses_default_reason(application_service, make_job_post, make_application, candidate):
    application = make_application(
        make_job_post(status=JobPostStatus.OPEN), status=ApplicationStatus.INTERVIEW_SCHEDULED
    )

    updated = application_service.withdraw_application(application.application_id, candidate)

    assert updated.status == ApplicationStatus.WITHDRAWN
    history = application_service.get_history(application.application_id, candidate)
    assert history[0].reason == "Application withdrawn by candidate."
    assert history[0].from_status == ApplicationStatus.INTERVIEW_SCHEDULED


def test_withdraw_after_rejection_is_invalid(application_service, make_job_post, make_application, candidate):
    application = make_application(make_job_post(status=JobPostStatus.OPEN), status=ApplicationStatus.REJECTED)
    with pytest.raises(InvalidTransitionError):
        application_service.withdraw_application(application.application_id, candidate)


def test_other_candidate_cannot_view(application_service, make_job_post, make_application, other_candidate):
    application = make_application(make_job_post(status=JobPostStatus.OPEN))
    with pytest.raises(AuthorizationError):
        application_service.get_application(application.application_id, other_candidate)


def test_unknown_application(application_service, recruiter):
    with pytest.raises(ApplicationNotFoundError):
        application_service.get_history("APP-missing", recruiter)


# =============================================================================
# Listing
# =============================================================================

def test_candidate_lists_own_applications_newest_first(
    application_service, make_job_post, make_application, candidate
):
    older = make_application(make_job_post(status=JobPostStatus.OPEN), application_date=FIXED_NOW - timedelta(days=1))
    newer = make_application(make_job_post(status=JobPostStatus.OPEN), application_date=FIXED_NOW)
    make_application(make_job_post(status=JobPostStatus.OPEN), candidate_id="cand-2")

    applications, total = application_service.list_my_applications(candidate)

    assert total == 2
    assert [a.application_id for a in applications] == [newer.application_id, older.application_id]


def test_staff_have_no_own_applications(application_service, recruiter):
    with pytest.raises(AuthorizationError):
        application_service.list_my_applications(recruiter)


def test_staff_list_applications_for_their_job_post(
    application_service, make_job_post, make_application, recruiter
):
    job_post = make_job_post(status=JobPostStatus.OPEN)
    first = make_application(job_post)
    second = make_application(job_post, candidate_id="cand-2")
    make_application(make_job_post(status=JobPostStatus.OPEN))

    applications, total = application_service.list_applications_for_job(job_post.job_post_id, recruiter)

    assert total == 2
    assert {a.application_id for a in applications} == {first.application_id, second.application_id}


def test_applications_for_job_post_hidden_from_outsiders_and_candidates(
    application_service, make_job_post, make_application, outside_recruiter, candidate
):
    job_post = make_job_post(status=JobPostStatus.OPEN)
    make_application(job_post)

    for actor in (outside_recruiter, candidate):
        with pytest.raises(AuthorizationError):
            application_service.list_applications_for_job(job_post.job_post_id, actor)


def test_applications_for_unknown_job_post(application_service, recruiter):
    with pytest.raises(JobPostNotFoundError):
        application_service.list_applications_for_job("JOB-missing", recruiter)


# =============================================================================
# Bulk transition
# =============================================================================

def test_bulk_transition_reports_each_failure(
    application_service, make_job_post, make_application, recruiter, application_repo, audit_repo
):
    job_post = make_job_post(status=JobPostStatus.OPEN)
    applied = make_application(job_post)
    also_applied = make_application(job_post, candidate_id="cand-2")
    hired = make_application(job_post, candidate_id="cand-3", status=ApplicationStatus.HIRED)
    outside = make_application(
        make_job_post(status=JobPostStatus.OPEN, tenant_id=OTHER_TENANT), candidate_id="cand-4"
    )

    result = application_service.bulk_transition(
        [applied.application_id, hired.application_id, "APP-missing", outside.application_id,
         also_applied.application_id],
        ApplicationStatus.UNDER_REVIEW,
        recruiter,
        reason="Screening"
    )

    assert result.total_requested == 5
    assert result.success_count == 2
    assert result.failure_count == 3
    assert [(e.application_id, e.error) for e in result.errors] == [
        (hired.application_id, "INVALID_TRANSITION"),
        ("APP-missing", "APPLICATION_NOT_FOUND"),
        (outside.application_id, "AUTHORIZATION_ERROR"),
    ]
    assert result.errors[0].reason == "Invalid state transition from HIRED to UNDER_REVIEW"
    for application in (applied, also_applied):
        assert application_repo.items[application.application_id].status == ApplicationStatus.UNDER_REVIEW
    assert [r.reason for r in audit_repo.records] == ["Screening", "Screening"]


def test_bulk_transition_caps_batch_size(application_service, recruiter, audit_repo):
    ids = [f"APP-{i}" for i in range(MAX_BULK_SIZE + 1)]
    with pytest.raises(ValidationError) as exc_info:
        application_service.bulk_transition(ids, ApplicationStatus.REJECTED, recruiter)
    assert exc_info.value.message == f"Cannot update more than {MAX_BULK_SIZE} applications at once"
    assert audit_repo.records == []


def test_bulk_transition_needs_ids(application_service, recruiter):
    with pytest.raises(ValidationError):
        application_service.bulk_transition([], ApplicationStatus.REJECTED, recruiter)


def test_candidates_cannot_bulk_transition(application_service, make_job_post, make_application, candidate):
    application = make_application(make_job_post(status=JobPostStatus.OPEN))
    with pytest.raises(AuthorizationError):
        application_service.bulk_transition(
            [application.application_id], ApplicationStatus.WITHDRAWN, candidate
        )
