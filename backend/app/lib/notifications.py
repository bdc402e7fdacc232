# app/lib/notifications.py
from datetime import datetime
from html import escape
from typing import Any, Iterable, Optional, Tuple

from app.core.mailer import Notification
from app.core.persistence import StoredRow
from app.lib.submissions import ContactSubmission, QuoteRequest


def _value(value: Any, fallback: Optional[str] = None) -> str:
    if value is None or value == "":
        value = fallback if fallback is not None else ""
    if isinstance(value, datetime):
        value = value.isoformat()
    return escape(str(value))


def _render(heading: str, rows: Iterable[Tuple[str, str]]) -> str:
    lines = [f"<h2>{escape(heading)}</h2>"]
    lines += [f"<p><strong>{escape(label)}:</strong> {text}</p>" for label, text in rows]
    return "\n".join(lines)


def contact_notification(submission: ContactSubmission, stored: StoredRow) -> Notification:
    return Notification(
        subject=f"New Contact Form Submission - {submission.submission_type}",
        html=_render(
            "New Contact Form Submission",
            [
                ("Name", _value(submission.name)),
                ("Email", _value(submission.email, "Not provided")),
                ("Phone", _value(submission.phone, "Not provided")),
                ("Message", _value(submission.message)),
                ("Type", _value(submission.submission_type)),
                ("Submitted at", _value(stored.created_at)),
            ],
        ),
    )


def quote_notification(submission: QuoteRequest, stored: StoredRow) -> Notification:
    return Notification(
        subject=f"New Group Insurance Quote Request - {submission.company_name or 'Individual'}",
        html=_render(
            "New Quote Request",
            [
                ("Company", _value(submission.company_name, "N/A")),
                ("Contact Name", _value(submission.contact_name)),
                ("Email", _value(submission.email)),
                ("Phone", _value(submission.phone, "Not provided")),
                ("Number of Employees", _value(submission.num_employees, "Not specified")),
                ("Current Provider", _value(submission.current_provider, "None")),
                ("Interested In", _value(submission.interested_in, "General Information")),
                ("Submitted at", _value(stored.created_at)),
            ],
        ),
    )
