# app/lib/submissions.py
import json
from enum import Enum
from typing import Any, ClassVar, Dict, FrozenSet, Mapping, Optional, Tuple, Type

from psycopg.types.json import Jsonb
from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator
from pydantic import ValidationError as SchemaError
from pydantic.alias_generators import to_camel

from app.core.errors import ValidationError


class SubmissionType(str, Enum):
    CONTACT = "contact"
    APPOINTMENT = "appointment"
    QUOTE = "quote"
    SURVEY = "survey"
    NEWSLETTER = "newsletter"


class Submission(BaseModel):
    """Common parsing rules: camelCase or snake_case keys, unknown keys dropped,
    text trimmed, blank text treated as absent, bare numbers kept as text."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    # fields stored exactly as received
    raw_fields: ClassVar[FrozenSet[str]] = frozenset()

    @field_validator("*", mode="before")
    @classmethod
    def _clean_text(cls, value: Any, info: ValidationInfo) -> Any:
        if info.field_name in cls.raw_fields:
            return value
        if isinstance(value, (bool, list, dict)):
            return cls._non_text(value)
        if isinstance(value, (int, float)):
            return str(value)
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @classmethod
    def _non_text(cls, value: Any) -> Any:
        # left as is, so a text field rejects it
        return value

    def row(self) -> Dict[str, Any]:
        """Column -> value mapping in table column order."""
        return self.model_dump(by_alias=False)


class ContactSubmission(Submission):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    message: Optional[str] = None
    submission_type: Optional[str] = "general"

    @field_validator("submission_type", mode="after")
    @classmethod
    def _default_type(cls, value: Optional[str]) -> str:
        return value or "general"


class AppointmentRequest(Submission):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    preferred_date: Optional[str] = None
    preferred_time: Optional[str] = None
    message: Optional[str] = None


class QuoteRequest(Submission):
    company_name: Optional[str] = None
    contact_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    num_employees: Optional[str] = None
    current_provider: Optional[str] = None
    interested_in: Optional[str] = None


class SurveySubmission(Submission):
    raw_fields: ClassVar[FrozenSet[str]] = frozenset({"survey_data"})

    survey_type: Optional[str] = None
    survey_data: Any = None
    email: Optional[str] = None

    @classmethod
    def _non_text(cls, value: Any) -> Any:
        # surveys take any shape; keep it as its JSON text
        return json.dumps(value)

    def row(self) -> Dict[str, Any]:
        row = super().row()
        if self.survey_data is not None:
            row["survey_data"] = Jsonb(self.survey_data)
        return row


class NewsletterSubscription(Submission):
    email: Optional[str] = None
    name: Optional[str] = None


SCHEMAS: Dict[SubmissionType, Type[Submission]] = {
    SubmissionType.CONTACT: ContactSubmission,
    SubmissionType.APPOINTMENT: AppointmentRequest,
    SubmissionType.QUOTE: QuoteRequest,
    SubmissionType.SURVEY: SurveySubmission,
    SubmissionType.NEWSLETTER: NewsletterSubscription,
}

# Each inner tuple is a group of which at least one field must be present.
REQUIRED_FIELDS: Dict[SubmissionType, Tuple[Tuple[str, ...], ...]] = {
    SubmissionType.CONTACT: (("name",), ("email", "phone")),
    SubmissionType.APPOINTMENT: (("name",), ("email",)),
    SubmissionType.QUOTE: (("contact_name",), ("email",)),
    SubmissionType.SURVEY: (),
    SubmissionType.NEWSLETTER: (("email",),),
}

REQUIRED_MESSAGES: Dict[SubmissionType, str] = {
    SubmissionType.CONTACT: "Name and either email or phone number are required",
    SubmissionType.APPOINTMENT: "Name and email are required for appointment requests",
    SubmissionType.QUOTE: "Contact name and email are required for quote requests",
    SubmissionType.NEWSLETTER: "Email is required for newsletter subscription",
}


def missing_groups(kind: SubmissionType, submission: Submission) -> Tuple[Tuple[str, ...], ...]:
    return tuple(
        group
        for group in REQUIRED_FIELDS[kind]
        if not any(getattr(submission, field) for field in group)
    )


def validate_submission(kind: SubmissionType, payload: Mapping[str, Any]) -> Submission:
    """Parse a raw request body into the schema for `kind` and enforce its required fields."""
    schema = SCHEMAS[kind]
    try:
        submission = schema.model_validate(dict(payload))
    except SchemaError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
        raise ValidationError(
            f"Invalid value for {', '.join(fields) or 'request body'}",
            detail=str(exc),
        ) from exc

    if missing_groups(kind, submission):
        raise ValidationError(REQUIRED_MESSAGES[kind])
    return submission
