# backend/app/dependencies.py
import json
from typing import Any, Dict

from fastapi import Depends, Request

from app.core.errors import ValidationError
from app.core.mailer import NotificationDispatcher
from app.core.persistence import PersistenceGateway
from app.core.settings import settings
from app.lib.intake import IntakePipeline

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def get_persistence_gateway(request: Request) -> PersistenceGateway:
    return request.app.state.persistence


def get_notification_dispatcher(request: Request) -> NotificationDispatcher:
    return request.app.state.notifier


def get_intake_pipeline(
    gateway: PersistenceGateway = Depends(get_persistence_gateway),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> IntakePipeline:
    return IntakePipeline(
        gateway,
        dispatcher,
        links={"calendlyUrl": settings.calendly_url},
        notification_failure_fatal=settings.notification_failure_fatal,
    )


async def read_submission_body(request: Request) -> Dict[str, Any]:
    """Accept a JSON object or a url-encoded/multipart form; an empty body reads as {}."""
    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith(_FORM_TYPES):
        form = await request.form()
        return {k: v for k, v in form.items() if isinstance(v, str)}

    if not (await request.body()).strip():
        return {}
    try:
        data = await request.json()
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ValidationError("Request body must be a JSON object", detail=str(exc)) from exc
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data
