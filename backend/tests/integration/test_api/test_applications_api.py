"""Application endpoint tests"""

from talentflow.domain.enums import ApplicationStatus, JobPostStatus

JOB_POSTS = "/api/v1/job-posts"
APPLICATIONS = "/api/v1/applications"


def test_apply_once(client, auth, candidate, make_job_post):
    job_post = make_job_post(status=JobPostStatus.OPEN)

    first = client.post(f"{JOB_POSTS}/{job_post.job_post_id}/apply", headers=auth(candidate))
    assert first.status_code == 201
    assert first.json()["status"] == "APPLIED"
    assert first.json()["tenant_id"] == job_post.tenant_id

    second = client.post(f"{JOB_POSTS}/{job_post.job_post_id}/apply", headers=auth(candidate))
    assert second.status_code == 400
    assert second.json()["error"]["message"] == "You have already applied for this job."


def test_apply_to_draft_is_rejected(client, auth, candidate, make_job_post):
    job_post = make_job_post()
    response = client.post(f"{JOB_POSTS}/{job_post.job_post_id}/apply", headers=auth(candidate))
    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Cannot apply for a job that is not OPEN."


def test_pipeline_and_details(client, auth, candidate, recruiter, make_job_post, make_application):
    application = make_application(make_job_post(status=JobPostStatus.OPEN))
    url = f"{APPLICATIONS}/{application.application_id}"

    moved = client.post(
        f"{url}/transition", json={"target_status": "UNDER_REVIEW", "reason": "Shortlisted"}, headers=auth(recruiter)
    )
    assert moved.status_code == 200
    assert moved.json()["status"] == "UNDER_REVIEW"

    details = client.get(url, headers=auth(candidate)).json()
    assert details["application"]["status"] == "UNDER_REVIEW"
    assert details["history"][0]["reason"] == "Shortlisted"
    assert details["history"][0]["entity_kind"] == "APPLICATION"


def test_applied_to_hired_is_rejected(client, auth, recruiter, make_job_post, make_application):
    application = make_application(make_job_post(status=JobPostStatus.OPEN))
    response = client.post(
        f"{APPLICATIONS}/{application.application_id}/transition",
        json={"target_status": "HIRED"},
        headers=auth(recruiter),
    )
    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Invalid state transition from APPLIED to HIRED"


def test_candidate_cannot_advance_own_application(client, auth, candidate, make_job_post, make_application):
    application = make_application(make_job_post(status=JobPostStatus.OPEN))
    response = client.post(
        f"{APPLICATIONS}/{application.application_id}/transition",
        json={"target_status": "UNDER_REVIEW"},
        headers=auth(candidate),
    )
    assert response.status_code == 403


def test_withdraw(client, auth, candidate, other_candidate, make_job_post, make_application):
    application = make_application(make_job_post(status=JobPostStatus.OPEN))
    url = f"{APPLICATIONS}/{application.application_id}"

    assert client.delete(url, headers=auth(other_candidate)).status_code == 403

    response = client.delete(url, headers=auth(candidate))
    assert response.status_code == 200
    assert response.json()["status"] == "WITHDRAWN"

    history = client.get(f"{url}/history", headers=auth(candidate)).json()
    assert history[0]["reason"] == "Application withdrawn by candidate."

    again = client.delete(url, headers=auth(candidate))
    assert again.status_code == 400
    assert again.json()["error"]["code"] == "ALREADY_IN_STATUS"


def test_hired_application_cannot_be_withdrawn(client, auth, candidate, make_job_post, make_application):
    application = make_application(make_job_post(status=JobPostStatus.OPEN), status=ApplicationStatus.HIRED)
    response = client.delete(f"{APPLICATIONS}/{application.application_id}", headers=auth(candidate))
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_TRANSITION"


def test_unknown_application_is_404(client, auth, recruiter):
    response = client.get(f"{APPLICATIONS}/APP-missing", headers=auth(recruiter))
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "APPLICATION_NOT_FOUND"


def test_my_applications(client, auth, candidate, recruiter, make_job_post, make_application):
    mine = make_application(make_job_post(status=JobPostStatus.OPEN))
    make_application(make_job_post(status=JobPostStatus.OPEN), candidate_id="cand-2")

    response = client.get(f"{APPLICATIONS}/me", headers=auth(candidate))
    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 1
    assert body["items"][0]["application_id"] == mine.application_id

    assert client.get(f"{APPLICATIONS}/me", headers=auth(recruiter)).status_code == 403


def test_applications_of_a_job_post(client, auth, recruiter, candidate, make_job_post, make_application):
    job_post = make_job_post(status=JobPostStatus.OPEN)
    make_application(job_post)
    make_application(job_post, candidate_id="cand-2")
    url = f"{JOB_POSTS}/{job_post.job_post_id}/applications"

    response = client.get(url, headers=auth(recruiter))
    assert response.status_code == 200
    assert response.json()["total"] == 2

    assert client.get(url, headers=auth(candidate)).status_code == 403
    assert client.get(f"{JOB_POSTS}/JOB-missing/applications", headers=auth(recruiter)).status_code == 404


def test_bulk_transition(client, auth, recruiter, make_job_post, make_application, application_repo):
    job_post = make_job_post(status=JobPostStatus.OPEN)
    applied = make_application(job_post)
    hired = make_application(job_post, status=ApplicationStatus.HIRED, candidate_id="cand-2")

    response = client.post(
        f"{APPLICATIONS}/bulk-transition",
        json={"application_ids": [applied.application_id, hired.application_id], "target_status": "UNDER_REVIEW"},
        headers=auth(recruiter),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["total_requested"] == 2
    assert body["success_count"] == 1
    assert body["failure_count"] == 1
    assert body["errors"] == [{
        "application_id": hired.application_id,
        "error": "INVALID_TRANSITION",
        "reason": "Invalid state transition from HIRED to UNDER_REVIEW",
    }]
    assert application_repo.items[applied.application_id].status == ApplicationStatus.UNDER_REVIEW


def test_bulk_transition_rejects_bad_batches(client, auth, recruiter, candidate):
    url = f"{APPLICATIONS}/bulk-transition"

    empty = client.post(url, json={"application_ids": [], "target_status": "REJECTED"}, headers=auth(recruiter))
    assert empty.status_code == 400
    assert empty.json()["error"]["code"] == "VALIDATION_ERROR"

    too_many = client.post(
        url,
        json={"application_ids": [f"APP-{i}" for i in range(101)], "target_status": "REJECTED"},
        headers=auth(recruiter),
    )
    assert too_many.status_code == 400
    assert too_many.json()["error"]["message"] == "Cannot update more than 100 applications at once"

    denied = client.post(url, json={"application_ids": ["APP-1"], "target_status": "WITHDRAWN"}, headers=auth(candidate))
    assert denied.status_code == 403
