"""Candidate-facing notifications sent after a change is committed."""

from typing import Optional

from api.services.collaborators import Notifier
from core.exceptions import NotificationFailure
from core.integrations.email import EmailTemplate
from core.outcome import Outcome, attempt
from database.models.candidates import Candidate, CandidateStatus
from database.models.jobs import Job


def reviewer_cc(job: Job) -> list[str]:
    """Job owner and company addresses, skipping missing ones and duplicates."""
    addresses = []
    for address in (job.hr.email if job.hr else None, job.company.email if job.company else None):
        if address and address not in addresses:
            addresses.append(address)
    return addresses


async def notify_application_received(
    notifier: Notifier,
    candidate: Candidate,
    job: Job,
    timeout: Optional[float] = None,
) -> Outcome[bool]:
    """Confirm receipt of an application to the candidate."""
    return await attempt(
        notifier.send(
            to=candidate.email,
            subject=f"Application Received - {job.title}",
            template=EmailTemplate.APPLICATION_RECEIVED,
            context={
                "candidate_name": candidate.name,
                "position": job.title,
                "company_name": job.company.name,
            },
        ),
        failure=NotificationFailure,
        timeout=timeout,
    )


async def notify_status_change(
    notifier: Notifier,
    candidate: Candidate,
    job: Job,
    status: CandidateStatus,
    timeout: Optional[float] = None,
) -> Outcome[bool]:
    """Tell the candidate about a new status, copying the job's reviewers."""
    return await attempt(
        notifier.send(
            to=candidate.email,
            subject=f"Application Update - {job.title}",
            template=EmailTemplate.STATUS_UPDATE,
            context={
                "candidate_name": candidate.name,
                "position": job.title,
                "company_name": job.company.name,
                "status": status.value,
            },
            cc=reviewer_cc(job),
        ),
        failure=NotificationFailure,
        timeout=timeout,
    )


async def send_custom_message(
    notifier: Notifier,
    candidate: Candidate,
    job: Job,
    body: str,
    subject: Optional[str] = None,
    timeout: Optional[float] = None,
) -> Outcome[bool]:
    """Deliver a reviewer-written message to the candidate."""
    return await attempt(
        notifier.send(
            to=candidate.email,
            subject=subject or f"Regarding your application - {job.title}",
            template=EmailTemplate.CUSTOM,
            context={"body": body, "company_name": job.company.name},
            cc=reviewer_cc(job),
        ),
        failure=NotificationFailure,
        timeout=timeout,
    )
