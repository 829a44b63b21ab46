"""
Public application form endpoints.

No authentication: the form token in the URL is the only credential.
"""

import json
from typing import Any, Optional

from fastapi import APIRouter, Depends, File, Form, Path, UploadFile, status
from pydantic import ValidationError

from api.dependencies import get_app_settings, get_intake_pipeline, read_upload
from api.schemas.candidates import (
    ApplicationFormResponse,
    ApplicationSubmittedResponse,
    CandidateInfo,
)
from api.services import IntakePipeline
from core.config import Settings
from core.exceptions import InvalidInput

router = APIRouter(prefix="/public", tags=["public"])


def parse_answers(raw: Optional[str]) -> dict[str, Any]:
    """Decode the JSON answer map sent as a form field."""
    if not raw or not raw.strip():
        return {}
    try:
        answers = json.loads(raw)
    except json.JSONDecodeError:
        raise InvalidInput("Answers must be a JSON object")
    if not isinstance(answers, dict):
        raise InvalidInput("Answers must be a JSON object")
    return answers


@router.get(
    "/apply/{form_token}",
    response_model=ApplicationFormResponse,
    summary="Get Application Form",
    description="Job details and questions for a public application form.",
)
async def get_application_form(
    form_token: str = Path(..., description="Public form token"),
    pipeline: IntakePipeline = Depends(get_intake_pipeline),
):
    """Render data for the public application form."""
    return await pipeline.get_application_form(form_token)


@router.post(
    "/apply/{form_token}",
    response_model=ApplicationSubmittedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit Application",
    description="Submit an application with a CV and answers to the job's questions.",
)
async def submit_application(
    form_token: str = Path(..., description="Public form token"),
    name: str = Form(...),
    email: str = Form(...),
    phone: Optional[str] = Form(None),
    answers: Optional[str] = Form(None, description="JSON object of question id to answer"),
    cv: Optional[UploadFile] = File(None, description="CV as PDF or DOCX"),
    pipeline: IntakePipeline = Depends(get_intake_pipeline),
    settings: Settings = Depends(get_app_settings),
):
    """Accept an application; scoring and the confirmation email never fail the request."""
    try:
        candidate_info = CandidateInfo(name=name, email=email, phone=phone)
    except ValidationError as e:
        fields = ", ".join(str(error["loc"][0]) for error in e.errors())
        raise InvalidInput(f"Invalid applicant details: {fields}")

    resume = await read_upload(cv, settings.max_resume_size_bytes)
    candidate_id = await pipeline.submit_application(
        form_token,
        candidate_info,
        parse_answers(answers),
        resume,
    )
    return ApplicationSubmittedResponse(candidate_id=candidate_id)
