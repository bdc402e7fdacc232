# app/routers/intake.py
from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.core.errors import IntakeError, ValidationError
from app.core.settings import settings
from app.dependencies import get_intake_pipeline, read_submission_body
from app.lib.intake import POLICIES, IntakePipeline
from app.lib.submissions import SubmissionType

router = APIRouter(prefix="/api", tags=["intake"])


def error_response(kind: SubmissionType, exc: IntakeError) -> JSONResponse:
    # validation messages name the missing field; everything else stays generic
    message = exc.message if isinstance(exc, ValidationError) else POLICIES[kind].failure_message
    content: Dict[str, Any] = {"error": message}
    if settings.diagnostic_errors and not isinstance(exc, ValidationError):
        content["message"] = exc.detail
    return JSONResponse(status_code=exc.status_code, content=content)


async def _submit(kind: SubmissionType, payload: Dict[str, Any], pipeline: IntakePipeline):
    try:
        result = await pipeline.submit(kind, payload)
    except IntakeError as exc:
        return error_response(kind, exc)
    return result.body


@router.post("/contact")
async def submit_contact(
    payload: Dict[str, Any] = Depends(read_submission_body),
    pipeline: IntakePipeline = Depends(get_intake_pipeline),
):
    return await _submit(SubmissionType.CONTACT, payload, pipeline)


@router.post("/appointment")
async def submit_appointment(
    payload: Dict[str, Any] = Depends(read_submission_body),
    pipeline: IntakePipeline = Depends(get_intake_pipeline),
):
    return await _submit(SubmissionType.APPOINTMENT, payload, pipeline)


@router.post("/quote")
async def submit_quote(
    payload: Dict[str, Any] = Depends(read_submission_body),
    pipeline: IntakePipeline = Depends(get_intake_pipeline),
):
    """Group insurance quote request."""
    return await _submit(SubmissionType.QUOTE, payload, pipeline)


@router.post("/survey")
async def submit_survey(
    payload: Dict[str, Any] = Depends(read_submission_body),
    pipeline: IntakePipeline = Depends(get_intake_pipeline),
):
    return await _submit(SubmissionType.SURVEY, payload, pipeline)


@router.post("/newsletter")
async def subscribe_newsletter(
    payload: Dict[str, Any] = Depends(read_submission_body),
    pipeline: IntakePipeline = Depends(get_intake_pipeline),
):
    return await _submit(SubmissionType.NEWSLETTER, payload, pipeline)
