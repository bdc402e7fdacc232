# app/lib/intake.py
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from app.core.errors import NotificationError, PersistenceError
from app.core.mailer import Notification, NotificationDispatcher
from app.core.persistence import PersistenceGateway, StoredRow
from app.lib.notifications import contact_notification, quote_notification
from app.lib.submissions import Submission, SubmissionType, validate_submission

log = logging.getLogger("uvicorn.error")


@dataclass(frozen=True)
class SubmissionPolicy:
    table: str
    success_message: str
    failure_message: str
    # response key carrying the stored id; None hides the id
    id_field: Optional[str] = None
    upsert: bool = False
    # None means this type never emails staff
    notification: Optional[Callable[[Any, StoredRow], Notification]] = None
    # config values echoed back in the success body
    passthrough: Tuple[str, ...] = ()


POLICIES: Dict[SubmissionType, SubmissionPolicy] = {
    SubmissionType.CONTACT: SubmissionPolicy(
        table="contact_submissions",
        success_message="Thank you for contacting us. We will reach out to you soon!",
        failure_message="Failed to submit contact form",
        id_field="submissionId",
        notification=contact_notification,
    ),
    SubmissionType.APPOINTMENT: SubmissionPolicy(
        table="appointment_requests",
        success_message="Appointment request received. We will contact you to confirm.",
        failure_message="Failed to submit appointment request",
        id_field="appointmentId",
        passthrough=("calendlyUrl",),
    ),
    SubmissionType.QUOTE: SubmissionPolicy(
        table="quote_requests",
        success_message="Quote request received. We will prepare your personalized quote and contact you soon.",
        failure_message="Failed to submit quote request",
        id_field="quoteId",
        notification=quote_notification,
    ),
    SubmissionType.SURVEY: SubmissionPolicy(
        table="survey_submissions",
        success_message="Survey submitted successfully. We will review and reach out to guide your journey!",
        failure_message="Failed to submit survey",
        id_field="surveyId",
    ),
    SubmissionType.NEWSLETTER: SubmissionPolicy(
        table="newsletter_subscriptions",
        success_message="Successfully subscribed to our newsletter!",
        failure_message="Failed to subscribe to newsletter",
        upsert=True,
    ),
}


@dataclass
class IntakeResult:
    kind: SubmissionType
    submission: Submission
    stored: StoredRow
    notified: bool = False
    body: Dict[str, Any] = field(default_factory=dict)


class IntakePipeline:
    """
    validate -> persist -> (notify | skip) -> response body, one request at a time.

    Holds no per-request state; the gateway and dispatcher are shared
    process-wide. Any step that raises stops the remaining steps.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        dispatcher: NotificationDispatcher,
        links: Optional[Mapping[str, Any]] = None,
        notification_failure_fatal: bool = True,
    ):
        self.gateway = gateway
        self.dispatcher = dispatcher
        self.links = dict(links or {})
        self.notification_failure_fatal = notification_failure_fatal

    async def submit(self, kind: SubmissionType, payload: Mapping[str, Any]) -> IntakeResult:
        policy = POLICIES[kind]
        submission = validate_submission(kind, payload)
        stored = await self._persist(kind, policy, submission)
        log.info("[intake] stored %s submission id=%s", kind.value, stored.id)
        notified = await self._notify(kind, policy, submission, stored)
        return IntakeResult(
            kind=kind,
            submission=submission,
            stored=stored,
            notified=notified,
            body=self._success_body(policy, stored),
        )

    async def _persist(self, kind: SubmissionType, policy: SubmissionPolicy, submission: Submission) -> StoredRow:
        write = self.gateway.upsert if policy.upsert else self.gateway.insert
        try:
            return await write(policy.table, submission.row())
        except PersistenceError as exc:
            log.error("[intake] %s persistence failed: %s", kind.value, exc.detail, exc_info=True)
            raise

    async def _notify(
        self,
        kind: SubmissionType,
        policy: SubmissionPolicy,
        submission: Submission,
        stored: StoredRow,
    ) -> bool:
        if policy.notification is None:
            return False
        if not self.dispatcher.enabled:
            log.debug("[intake] email not configured; %s notification skipped", kind.value)
            return False
        try:
            return await self.dispatcher.notify(policy.notification(submission, stored))
        except NotificationError as exc:
            if self.notification_failure_fatal:
                log.error("[intake] %s notification failed: %s", kind.value, exc.detail, exc_info=True)
                raise
            log.warning(
                "[intake] %s id=%s saved but notification failed: %s",
                kind.value, stored.id, exc.detail,
            )
            return False

    def _success_body(self, policy: SubmissionPolicy, stored: StoredRow) -> Dict[str, Any]:
        body: Dict[str, Any] = {"success": True, "message": policy.success_message}
        if policy.id_field:
            body[policy.id_field] = stored.id
        for key in policy.passthrough:
            # unset config is left out of the body, not sent as null
            if self.links.get(key) is not None:
                body[key] = self.links[key]
        return body
