"""
Tests for Applications API endpoints.

Covers the full candidate/employer flow:
apply → review → accept/reject, duplicate applications,
withdraw and re-apply, role-scoped reads, and status emails.
"""
import uuid
from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.models.job import Job, JobStatus
from jobboard.models.user import User, UserRole
from jobboard.services.email import email_service
from jobboard.services.tokens import create_access_token
from jobboard.services.users import token_payload_for


def application_payload(job: Job, **overrides) -> dict:
    payload = {
        "jobId": str(job.id),
        "coverLetter": "I have shipped FastAPI services for five years.",
        "resume": "https://files.example.com/casey-cv.pdf",
        "mobileNumber": "+49 151 0000000",
    }
    payload.update(overrides)
    return payload


async def apply(client: AsyncClient, headers: dict, job: Job, **overrides) -> dict:
    response = await client.post("/api/applications/", headers=headers, json=application_payload(job, **overrides))
    assert response.status_code == 201, response.text
    return response.json()["data"]


# ============================================================
# APPLY
# ============================================================

@pytest.mark.asyncio
async def test_apply_to_active_job(
    async_client: AsyncClient,
    candidate: User,
    candidate_headers: dict,
    active_job: Job
):
    """Scenario A: application is PENDING and linked to the job."""
    response = await async_client.post(
        "/api/applications/",
        headers=candidate_headers,
        json=application_payload(active_job)
    )

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Application submitted successfully"
    data = body["data"]
    assert data["status"] == "PENDING"
    assert data["appliedAt"]
    assert data["reviewedAt"] is None
    assert data["candidateId"] == str(candidate.id)
    assert data["employerId"] == str(active_job.employer_id)
    assert data["job"]["title"] == "Backend Developer"
    assert data["mobileNumber"] == "+49 151 0000000"
    assert data["availability"] == "NEGOTIABLE"

    job = await async_client.get(f"/api/jobs/{active_job.id}")
    assert data["id"] in job.json()["data"]["applications"]


@pytest.mark.asyncio
async def test_apply_falls_back_to_profile_contact(
    async_client: AsyncClient,
    candidate_headers: dict,
    active_job: Job
):
    """mobileNumber and location come from the profile when omitted."""
    payload = application_payload(active_job)
    del payload["mobileNumber"]

    response = await async_client.post("/api/applications/", headers=candidate_headers, json=payload)

    assert response.status_code == 201
    assert response.json()["data"]["mobileNumber"] == "555-0100"
    assert response.json()["data"]["location"] == "Berlin"


@pytest.mark.asyncio
async def test_apply_without_any_mobile_number(
    async_client: AsyncClient,
    make_user,
    headers_for,
    active_job: Job
):
    no_phone = await make_user("nophone@example.com", UserRole.CANDIDATE)
    payload = application_payload(active_job)
    del payload["mobileNumber"]

    response = await async_client.post("/api/applications/", headers=headers_for(no_phone), json=payload)

    assert response.status_code == 400
    assert response.json()["errors"] == [{"field": "mobileNumber", "message": "Mobile number is required"}]


@pytest.mark.asyncio
async def test_apply_with_expected_salary(
    async_client: AsyncClient,
    candidate_headers: dict,
    active_job: Job
):
    data = await apply(
        async_client,
        candidate_headers,
        active_job,
        expectedSalary=60000,
        expectedSalaryCurrency="EUR",
        availability="2_WEEKS",
    )

    assert data["expectedSalary"] == {"amount": 60000, "currency": "EUR"}
    assert data["availability"] == "2_WEEKS"


@pytest.mark.asyncio
async def test_apply_twice(async_client: AsyncClient, candidate_headers: dict, active_job: Job):
    """Scenario C: second application to the same job is a 400."""
    await apply(async_client, candidate_headers, active_job)

    response = await async_client.post(
        "/api/applications/",
        headers=candidate_headers,
        json=application_payload(active_job)
    )

    assert response.status_code == 400
    assert response.json() == {"message": "You have already applied for this job"}


@pytest.mark.asyncio
async def test_apply_to_closed_job(
    async_client: AsyncClient,
    candidate_headers: dict,
    active_job: Job,
    db: AsyncSession
):
    active_job.status = JobStatus.CLOSED.value
    await db.commit()

    response = await async_client.post(
        "/api/applications/",
        headers=candidate_headers,
        json=application_payload(active_job)
    )

    assert response.status_code == 400
    assert response.json() == {"message": "Job not found or not active"}


@pytest.mark.asyncio
async def test_apply_to_missing_job(async_client: AsyncClient, candidate_headers: dict, active_job: Job):
    payload = application_payload(active_job, jobId=str(uuid.uuid4()))

    response = await async_client.post("/api/applications/", headers=candidate_headers, json=payload)

    assert response.status_code == 400
    assert response.json()["message"] == "Job not found or not active"


# ============================================================
# STATUS UPDATES
# ============================================================

@pytest.mark.asyncio
async def test_employer_rejects_with_notes(
    async_client: AsyncClient,
    candidate_headers: dict,
    employer_headers: dict,
    active_job: Job
):
    """Scenario B: REJECTED with notes stamps reviewedAt."""
    application = await apply(async_client, candidate_headers, active_job)

    response = await async_client.patch(
        f"/api/applications/{application['id']}/status",
        headers=employer_headers,
        json={"status": "REJECTED", "employerNotes": "not a fit"}
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "REJECTED"
    assert data["employerNotes"] == "not a fit"
    assert data["reviewedAt"] is not None

    stored = await async_client.get(f"/api/applications/{application['id']}", headers=candidate_headers)
    assert stored.json()["data"]["employerNotes"] == "not a fit"
    assert stored.json()["data"]["status"] == "REJECTED"


@pytest.mark.asyncio
async def test_review_then_shortlist_then_accept(
    async_client: AsyncClient,
    candidate_headers: dict,
    employer_headers: dict,
    active_job: Job
):
    application = await apply(async_client, candidate_headers, active_job)
    url = f"/api/applications/{application['id']}/status"

    for status in ("REVIEWING", "SHORTLISTED", "ACCEPTED"):
        response = await async_client.patch(url, headers=employer_headers, json={"status": status})
        assert response.status_code == 200
        assert response.json()["data"]["status"] == status


@pytest.mark.asyncio
async def test_accepted_cannot_go_back_to_pending(
    async_client: AsyncClient,
    candidate_headers: dict,
    employer_headers: dict,
    active_job: Job
):
    application = await apply(async_client, candidate_headers, active_job)
    url = f"/api/applications/{application['id']}/status"
    await async_client.patch(url, headers=employer_headers, json={"status": "ACCEPTED"})

    response = await async_client.patch(url, headers=employer_headers, json={"status": "PENDING"})

    assert response.status_code == 400
    assert "ACCEPTED" in response.json()["message"]


@pytest.mark.asyncio
async def test_unknown_status_rejected(
    async_client: AsyncClient,
    candidate_headers: dict,
    employer_headers: dict,
    active_job: Job
):
    application = await apply(async_client, candidate_headers, active_job)

    response = await async_client.patch(
        f"/api/applications/{application['id']}/status",
        headers=employer_headers,
        json={"status": "HIRED"}
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Validation failed"


@pytest.mark.asyncio
async def test_other_employer_cannot_update_status(
    async_client: AsyncClient,
    candidate_headers: dict,
    other_employer_headers: dict,
    active_job: Job
):
    """An application on someone else's job looks missing."""
    application = await apply(async_client, candidate_headers, active_job)

    response = await async_client.patch(
        f"/api/applications/{application['id']}/status",
        headers=other_employer_headers,
        json={"status": "ACCEPTED"}
    )

    assert response.status_code == 404
    assert response.json() == {"message": "Application not found or access denied"}


@pytest.mark.asyncio
async def test_candidate_cannot_update_own_status(
    async_client: AsyncClient,
    candidate_headers: dict,
    active_job: Job
):
    """Candidates cannot move their own application; the route hides it."""
    application = await apply(async_client, candidate_headers, active_job)

    response = await async_client.patch(
        f"/api/applications/{application['id']}/status",
        headers=candidate_headers,
        json={"status": "ACCEPTED"}
    )

    assert response.status_code == 404
    assert response.json() == {"message": "Application not found or access denied"}

    unchanged = await async_client.get(f"/api/applications/{application['id']}", headers=candidate_headers)
    assert unchanged.json()["data"]["status"] == "PENDING"


@pytest.mark.asyncio
async def test_admin_can_update_any_status(
    async_client: AsyncClient,
    candidate_headers: dict,
    admin_headers: dict,
    active_job: Job
):
    application = await apply(async_client, candidate_headers, active_job)

    response = await async_client.patch(
        f"/api/applications/{application['id']}/status",
        headers=admin_headers,
        json={"status": "REVIEWING"}
    )

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_status_email_sent(
    async_client: AsyncClient,
    candidate_headers: dict,
    employer_headers: dict,
    active_job: Job,
    monkeypatch
):
    sent = []

    async def capture(**kwargs):
        sent.append(kwargs)
        return True

    monkeypatch.setattr(email_service, "send_application_status_email", capture)
    application = await apply(async_client, candidate_headers, active_job)
    url = f"/api/applications/{application['id']}/status"

    await async_client.patch(url, headers=employer_headers, json={"status": "REVIEWING"})
    await async_client.patch(url, headers=employer_headers, json={"status": "SHORTLISTED"})

    # REVIEWING is not announced
    assert len(sent) == 1
    assert sent[0]["email"] == "candidate@example.com"
    assert sent[0]["job_title"] == "Backend Developer"
    assert sent[0]["status"] == "SHORTLISTED"


@pytest.mark.asyncio
async def test_email_failure_does_not_fail_update(
    async_client: AsyncClient,
    candidate_headers: dict,
    employer_headers: dict,
    active_job: Job,
    monkeypatch
):
    async def explode(**kwargs):
        raise RuntimeError("smtp down")

    monkeypatch.setattr(email_service, "send_application_status_email", explode)
    application = await apply(async_client, candidate_headers, active_job)

    response = await async_client.patch(
        f"/api/applications/{application['id']}/status",
        headers=employer_headers,
        json={"status": "ACCEPTED"}
    )

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "ACCEPTED"


# ============================================================
# READS
# ============================================================

@pytest.mark.asyncio
async def test_get_application_scoped_by_role(
    async_client: AsyncClient,
    candidate_headers: dict,
    employer_headers: dict,
    other_employer_headers: dict,
    admin_headers: dict,
    make_user,
    headers_for,
    active_job: Job
):
    application = await apply(async_client, candidate_headers, active_job)
    url = f"/api/applications/{application['id']}"
    stranger = await make_user("stranger@example.com", UserRole.CANDIDATE)

    assert (await async_client.get(url, headers=candidate_headers)).status_code == 200
    assert (await async_client.get(url, headers=employer_headers)).status_code == 200
    assert (await async_client.get(url, headers=admin_headers)).status_code == 200
    assert (await async_client.get(url, headers=other_employer_headers)).status_code == 404
    assert (await async_client.get(url, headers=headers_for(stranger))).status_code == 404


@pytest.mark.asyncio
async def test_candidate_lists_own_applications(
    async_client: AsyncClient,
    candidate_headers: dict,
    employer: User,
    active_job: Job,
    db: AsyncSession
):
    second_job = Job(
        employer_id=employer.id,
        title="Frontend Developer",
        description="React",
        company="Acme",
        location="Remote",
        type="CONTRACT",
        experience="JUNIOR",
        salary_min=30000,
        salary_max=40000,
    )
    db.add(second_job)
    await db.commit()

    await apply(async_client, candidate_headers, active_job)
    await apply(async_client, candidate_headers, second_job)

    response = await async_client.get("/api/applications/candidate", headers=candidate_headers)
    assert response.json()["pagination"]["total"] == 2

    filtered = await async_client.get(
        "/api/applications/candidate",
        headers=candidate_headers,
        params={"jobId": str(second_job.id)}
    )
    assert [item["job"]["title"] for item in filtered.json()["data"]] == ["Frontend Developer"]


@pytest.mark.asyncio
async def test_employer_lists_and_counts_applications(
    async_client: AsyncClient,
    candidate: User,
    candidate_headers: dict,
    employer_headers: dict,
    make_user,
    headers_for,
    active_job: Job
):
    first = await apply(async_client, candidate_headers, active_job)
    other = await make_user("second@example.com", UserRole.CANDIDATE, phone="555-0200")
    await apply(async_client, headers_for(other), active_job)
    await async_client.patch(
        f"/api/applications/{first['id']}/status",
        headers=employer_headers,
        json={"status": "SHORTLISTED"}
    )

    listing = await async_client.get("/api/applications/employer", headers=employer_headers)
    assert listing.json()["pagination"]["total"] == 2

    shortlisted = await async_client.get(
        "/api/applications/employer",
        headers=employer_headers,
        params={"status": "SHORTLISTED"}
    )
    assert [item["id"] for item in shortlisted.json()["data"]] == [first["id"]]

    by_candidate = await async_client.get(
        "/api/applications/employer",
        headers=employer_headers,
        params={"candidateId": str(candidate.id)}
    )
    assert [item["id"] for item in by_candidate.json()["data"]] == [first["id"]]

    stats = await async_client.get("/api/applications/employer/stats", headers=employer_headers)
    assert stats.json()["data"] == {
        "total": 2,
        "pending": 1,
        "reviewing": 0,
        "shortlisted": 1,
        "rejected": 0,
        "accepted": 0,
    }


# ============================================================
# WITHDRAW
# ============================================================

@pytest.mark.asyncio
async def test_withdraw_pending_application(
    async_client: AsyncClient,
    candidate_headers: dict,
    active_job: Job
):
    """Scenario D: withdrawn application disappears from the job."""
    application = await apply(async_client, candidate_headers, active_job)

    response = await async_client.delete(
        f"/api/applications/{application['id']}/withdraw",
        headers=candidate_headers
    )

    assert response.status_code == 200
    assert response.json() == {"message": "Application withdrawn successfully"}

    gone = await async_client.get(f"/api/applications/{application['id']}", headers=candidate_headers)
    assert gone.status_code == 404

    job = await async_client.get(f"/api/jobs/{active_job.id}")
    assert application["id"] not in job.json()["data"]["applications"]


@pytest.mark.asyncio
async def test_reapply_after_withdraw(async_client: AsyncClient, candidate_headers: dict, active_job: Job):
    first = await apply(async_client, candidate_headers, active_job)
    await async_client.delete(f"/api/applications/{first['id']}/withdraw", headers=candidate_headers)

    second = await apply(async_client, candidate_headers, active_job)

    assert second["id"] != first["id"]
    assert second["status"] == "PENDING"


@pytest.mark.asyncio
async def test_cannot_withdraw_reviewed_application(
    async_client: AsyncClient,
    candidate_headers: dict,
    employer_headers: dict,
    active_job: Job
):
    application = await apply(async_client, candidate_headers, active_job)
    await async_client.patch(
        f"/api/applications/{application['id']}/status",
        headers=employer_headers,
        json={"status": "REVIEWING"}
    )

    response = await async_client.delete(
        f"/api/applications/{application['id']}/withdraw",
        headers=candidate_headers
    )

    assert response.status_code == 404
    assert response.json() == {"message": "Application not found or cannot be withdrawn"}


@pytest.mark.asyncio
async def test_cannot_withdraw_someone_elses_application(
    async_client: AsyncClient,
    candidate_headers: dict,
    make_user,
    headers_for,
    active_job: Job
):
    application = await apply(async_client, candidate_headers, active_job)
    other = await make_user("other@example.com", UserRole.CANDIDATE)

    response = await async_client.delete(
        f"/api/applications/{application['id']}/withdraw",
        headers=headers_for(other)
    )

    assert response.status_code == 404


# ============================================================
# EXPIRED TOKEN
# ============================================================

@pytest.mark.asyncio
async def test_expired_token_on_protected_route(async_client: AsyncClient, candidate: User, active_job: Job):
    """Scenario E: any protected route reports TOKEN_EXPIRED."""
    token = create_access_token(token_payload_for(candidate), expires_delta=timedelta(seconds=-5))

    response = await async_client.post(
        "/api/applications/",
        headers={"Authorization": f"Bearer {token}"},
        json=application_payload(active_job)
    )

    assert response.status_code == 401
    assert response.json() == {"message": "Token expired", "code": "TOKEN_EXPIRED"}
