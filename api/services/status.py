"""
Candidate status workflow.

Status changes are persisted first and announced afterwards. Notifications
are best-effort: a failed email never undoes or fails a committed change.
Any state may move to any other state through a single update; bulk updates
are limited to final decisions.
"""

import asyncio
from typing import Optional, Sequence, Union
import logging

from api.services.collaborators import Notifier
from api.services.notifications import notify_status_change
from core.exceptions import InvalidInput, InvalidStatus, NotFound
from core.outcome import Outcome
from database.models.candidates import Candidate, CandidateStatus
from database.repository import ApplicationRepository

logger = logging.getLogger(__name__)

SINGLE_UPDATE_STATUSES = frozenset(CandidateStatus)
BULK_UPDATE_STATUSES = frozenset({CandidateStatus.APPROVED, CandidateStatus.REJECTED})


def parse_status(
    value: Union[str, CandidateStatus],
    allowed: frozenset = SINGLE_UPDATE_STATUSES,
) -> CandidateStatus:
    """
    Resolve a requested status against the allowed targets.

    Raises:
        InvalidStatus: Unknown value or a status not allowed here
    """
    try:
        status = CandidateStatus(value.upper() if isinstance(value, str) else value)
    except ValueError:
        raise InvalidStatus(f"Invalid status: {value}")
    if status not in allowed:
        raise InvalidStatus(f"Invalid status: {status.value}")
    return status


def rejection_reason_for(status: CandidateStatus, reason: Optional[str]) -> Optional[str]:
    """Reason kept on the candidate; only rejections carry one."""
    if status != CandidateStatus.REJECTED or reason is None:
        return None
    return reason.strip() or None


class StatusWorkflow:
    """Moves candidates between review states and notifies them."""

    def __init__(
        self,
        repository: ApplicationRepository,
        notifier: Notifier,
        notification_timeout: Optional[float] = 15.0,
    ):
        self.repository = repository
        self.notifier = notifier
        self.notification_timeout = notification_timeout

    async def set_status(
        self,
        candidate_id: int,
        company_id: int,
        status: Union[str, CandidateStatus],
        reason: Optional[str] = None,
    ) -> Candidate:
        """
        Change one candidate's status.

        Args:
            candidate_id: Candidate to update
            company_id: Caller's company scope
            status: PENDING, APPROVED or REJECTED
            reason: Rejection reason, discarded for other statuses

        Returns:
            The updated candidate

        Raises:
            InvalidStatus: Status is not a review state
            NotFound: Candidate is not visible to the company
        """
        target = parse_status(status, SINGLE_UPDATE_STATUSES)

        candidate = await self.repository.get_candidate(candidate_id, company_id)
        if candidate is None:
            raise NotFound("Candidate not found")

        rejection_reason = rejection_reason_for(target, reason)
        updated = await self.repository.update_status(
            [candidate.id], company_id, target, rejection_reason
        )
        if updated == 0:
            raise NotFound("Candidate not found")

        previous = candidate.status
        candidate.status = target
        candidate.rejection_reason = rejection_reason
        logger.info(f"Candidate {candidate.id} moved from {previous.value} to {target.value}")

        notified = await self._notify(candidate, target)
        notified.log_failure("status_update_email", candidate_id=candidate.id, status=target.value)

        return candidate

    async def bulk_set_status(
        self,
        candidate_ids: Sequence[int],
        company_id: int,
        status: Union[str, CandidateStatus],
        reason: Optional[str] = None,
    ) -> int:
        """
        Decide many candidates at once.

        Ids outside the company scope are dropped silently. Every affected
        candidate is notified concurrently; the returned count does not
        depend on how those notifications fare.

        Returns:
            Number of candidates updated

        Raises:
            InvalidStatus: Status is not APPROVED or REJECTED
            InvalidInput: No candidate ids were given
        """
        target = parse_status(status, BULK_UPDATE_STATUSES)

        ids = list(dict.fromkeys(candidate_ids or []))
        if not ids:
            raise InvalidInput("Candidate IDs are required")

        candidates = await self.repository.list_candidates(ids, company_id)
        if len(candidates) < len(ids):
            logger.info(
                f"Bulk update for company {company_id}: "
                f"{len(ids) - len(candidates)} id(s) out of scope"
            )

        rejection_reason = rejection_reason_for(target, reason)
        updated = await self.repository.update_status(
            [c.id for c in candidates], company_id, target, rejection_reason
        )

        for candidate in candidates:
            candidate.status = target
            candidate.rejection_reason = rejection_reason

        outcomes = await asyncio.gather(*(self._notify(c, target) for c in candidates))
        failed = 0
        for candidate, outcome in zip(candidates, outcomes):
            if not outcome.ok:
                failed += 1
                outcome.log_failure("status_update_email", candidate_id=candidate.id, status=target.value)

        logger.info(
            f"Bulk {target.value} for company {company_id}: {updated} updated, "
            f"{len(candidates) - failed}/{len(candidates)} notified"
        )
        return updated

    async def _notify(self, candidate: Candidate, status: CandidateStatus) -> Outcome[bool]:
        return await notify_status_change(
            self.notifier,
            candidate,
            candidate.job,
            status,
            timeout=self.notification_timeout,
        )
