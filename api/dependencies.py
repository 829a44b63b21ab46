"""FastAPI dependencies for dependency injection."""

from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, UploadFile, status

from api.schemas.candidates import UploadedDocument
from api.services import CandidateReviewService, IntakePipeline, StatusWorkflow
from core.config import Settings
from database.repository import ApplicationRepository


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_repository(request: Request) -> ApplicationRepository:
    """Repository bound to the application's session factory."""
    return ApplicationRepository(request.app.state.session_factory)


def get_company_scope(
    x_company_id: Optional[int] = Header(None, description="Company the caller acts for"),
) -> int:
    """
    Company scope of a reviewer request.

    Authentication happens upstream; the gateway forwards the caller's company.
    """
    if x_company_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Company scope required",
        )
    return x_company_id


def get_reviewer_id(
    x_user_id: Optional[int] = Header(None, description="Reviewer performing the action"),
) -> Optional[int]:
    """Acting reviewer, when the gateway provides one."""
    return x_user_id


def get_intake_pipeline(
    request: Request,
    repository: ApplicationRepository = Depends(get_repository),
    settings: Settings = Depends(get_app_settings),
) -> IntakePipeline:
    state = request.app.state
    return IntakePipeline(
        repository=repository,
        document_store=state.document_store,
        scoring_engine=state.scoring_engine,
        notifier=state.notifier,
        extraction_timeout=settings.extraction_timeout_seconds,
        scoring_timeout=settings.scoring_timeout_seconds,
        notification_timeout=settings.notification_timeout_seconds,
    )


def get_status_workflow(
    request: Request,
    repository: ApplicationRepository = Depends(get_repository),
    settings: Settings = Depends(get_app_settings),
) -> StatusWorkflow:
    return StatusWorkflow(
        repository=repository,
        notifier=request.app.state.notifier,
        notification_timeout=settings.notification_timeout_seconds,
    )


def get_review_service(
    request: Request,
    repository: ApplicationRepository = Depends(get_repository),
    settings: Settings = Depends(get_app_settings),
) -> CandidateReviewService:
    state = request.app.state
    return CandidateReviewService(
        repository=repository,
        document_store=state.document_store,
        assistant=state.interview_assistant,
        notifier=state.notifier,
        transcription_timeout=settings.transcription_timeout_seconds,
        drafting_timeout=settings.scoring_timeout_seconds,
        notification_timeout=settings.notification_timeout_seconds,
    )


async def read_upload(upload: Optional[UploadFile], max_size: int) -> Optional[UploadedDocument]:
    """Read an uploaded file into memory, enforcing the size limit."""
    if upload is None:
        return None
    content = await upload.read(max_size + 1)
    if len(content) > max_size:
        raise HTTPException(
            status_code=status.HTTP_413_CONTENT_TOO_LARGE,
            detail=f"File exceeds the {max_size // (1024 * 1024)}MB limit",
        )
    return UploadedDocument(
        content=content,
        filename=upload.filename,
        content_type=upload.content_type,
    )
