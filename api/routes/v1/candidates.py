"""
Candidate review endpoints.

Viewing candidates, deciding on them, processing interview recordings and
emailing candidates. Every call is scoped to the caller's company.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Path, UploadFile, status

from api.dependencies import (
    get_app_settings,
    get_company_scope,
    get_review_service,
    get_reviewer_id,
    get_status_workflow,
    read_upload,
)
from api.schemas.candidates import (
    BulkStatusUpdateRequest,
    BulkStatusUpdateResponse,
    CandidateDetailResponse,
    CandidateEmailRequest,
    CandidateResponse,
    InterviewRecordingResponse,
    MessageResponse,
    StatusUpdateRequest,
)
from api.services import CandidateReviewService, StatusWorkflow
from core.config import Settings

router = APIRouter(prefix="/candidates", tags=["candidates"])


@router.post(
    "/bulk-status",
    response_model=BulkStatusUpdateResponse,
    summary="Bulk Update Status",
    description="Approve or reject many candidates. Ids outside your company are ignored.",
)
async def bulk_update_status(
    request: BulkStatusUpdateRequest,
    company_id: int = Depends(get_company_scope),
    workflow: StatusWorkflow = Depends(get_status_workflow),
):
    """Apply one decision to a batch of candidates."""
    updated = await workflow.bulk_set_status(
        request.candidate_ids,
        company_id,
        request.status,
        request.rejection_reason,
    )
    return BulkStatusUpdateResponse(updated_count=updated)


@router.get(
    "/{candidate_id}",
    response_model=CandidateDetailResponse,
    summary="Get Candidate Details",
    description="Candidate with form answers and interview history.",
)
async def get_candidate(
    candidate_id: int = Path(..., description="Candidate ID"),
    company_id: int = Depends(get_company_scope),
    service: CandidateReviewService = Depends(get_review_service),
):
    """Retrieve the complete candidate profile."""
    candidate = await service.get_candidate(candidate_id, company_id)
    return CandidateDetailResponse.from_candidate(candidate)


@router.patch(
    "/{candidate_id}/status",
    response_model=CandidateResponse,
    summary="Update Candidate Status",
    description="Move a candidate to PENDING, APPROVED or REJECTED and notify them.",
)
async def update_candidate_status(
    request: StatusUpdateRequest,
    candidate_id: int = Path(..., description="Candidate ID"),
    company_id: int = Depends(get_company_scope),
    workflow: StatusWorkflow = Depends(get_status_workflow),
):
    """Change a candidate's status; the email is best-effort."""
    candidate = await workflow.set_status(
        candidate_id,
        company_id,
        request.status,
        request.rejection_reason,
    )
    return CandidateResponse.model_validate(candidate)


@router.post(
    "/{candidate_id}/interviews",
    response_model=InterviewRecordingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Process Interview Recording",
    description="Upload interview feedback audio; returns its transcript and a drafted email.",
)
async def process_interview_recording(
    candidate_id: int = Path(..., description="Candidate ID"),
    audio: Optional[UploadFile] = File(None, description="Recorded feedback"),
    company_id: int = Depends(get_company_scope),
    reviewer_id: Optional[int] = Depends(get_reviewer_id),
    service: CandidateReviewService = Depends(get_review_service),
    settings: Settings = Depends(get_app_settings),
):
    """Transcribe recorded feedback and draft the candidate email."""
    recording = await service.process_interview_recording(
        candidate_id,
        company_id,
        await read_upload(audio, settings.max_recording_size_bytes),
        recorded_by=reviewer_id,
    )
    return InterviewRecordingResponse.model_validate(recording)


@router.post(
    "/{candidate_id}/email",
    response_model=MessageResponse,
    summary="Email Candidate",
    description="Send a custom email to the candidate, copying the job owner and company.",
)
async def send_candidate_email(
    request: CandidateEmailRequest,
    candidate_id: int = Path(..., description="Candidate ID"),
    company_id: int = Depends(get_company_scope),
    service: CandidateReviewService = Depends(get_review_service),
):
    """Deliver a reviewer-written message."""
    await service.send_candidate_email(candidate_id, company_id, request.body, request.subject)
    return MessageResponse(message="Email sent successfully")
