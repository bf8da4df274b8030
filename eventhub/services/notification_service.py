"""Best-effort registration confirmation emails.

Sending happens after the HTTP response (FastAPI background task). Any failure
is logged here and never reaches the caller of the registration.
"""
import logging
import smtplib
import ssl
from dataclasses import dataclass
from datetime import date, datetime, timezone
from email.message import EmailMessage
from html import escape

from eventhub.config import settings
from eventhub.models.event import Event

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EventSummary:
    event_id: str
    title: str
    date: date
    time: str
    location: str

    @classmethod
    def from_event(cls, event: Event) -> "EventSummary":
        return cls(
            event_id=event.event_id,
            title=event.title,
            date=event.date,
            time=event.time,
            location=event.location,
        )


def build_registration_email(user_name: str, summary: EventSummary) -> str:
    long_date = f"{summary.date:%A, %B} {summary.date.day}, {summary.date.year}"
    return f"""\
<!DOCTYPE html>
<html>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
  <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
    <h1 style="background-color: #4CAF50; color: white; padding: 20px; text-align: center;">
      Event Registration Confirmed!
    </h1>
    <p>Dear {escape(user_name)},</p>
    <p>Thank you for registering for our event. Your registration has been confirmed!</p>
    <div style="background-color: white; padding: 15px; border-left: 4px solid #4CAF50;">
      <h2>{escape(summary.title)}</h2>
      <p><strong>Date:</strong> {long_date}</p>
      <p><strong>Time:</strong> {escape(summary.time)}</p>
      <p><strong>Location:</strong> {escape(summary.location)}</p>
    </div>
    <p>We look forward to seeing you at the event!</p>
    <p style="font-size: 12px; color: #666;">&copy; {datetime.now(timezone.utc).year} Event Management Platform</p>
  </div>
</body>
</html>
"""


def _smtp_send(msg: EmailMessage) -> None:
    """Blocking SMTP send with STARTTLS."""
    context = ssl.create_default_context()
    with smtplib.SMTP(settings.EMAIL_HOST, settings.EMAIL_PORT, timeout=10) as server:
        server.starttls(context=context)
        if settings.EMAIL_USER:
            server.login(settings.EMAIL_USER, settings.EMAIL_PASSWORD)
        server.send_message(msg)


def notify_registration(to_email: str, user_name: str, summary: EventSummary) -> bool:
    """Send the confirmation email. Returns False instead of raising."""
    if not settings.EMAIL_ENABLED:
        logger.debug("Email disabled; skipping confirmation for event %s", summary.event_id)
        return False

    msg = EmailMessage()
    msg["Subject"] = f"Registration Confirmed: {summary.title}"
    msg["From"] = settings.EMAIL_FROM
    msg["To"] = to_email
    msg.set_content(f"You are registered for {summary.title} on {summary.date.isoformat()} at {summary.time}.")
    msg.add_alternative(build_registration_email(user_name, summary), subtype="html")

    try:
        _smtp_send(msg)
    except Exception:
        logger.exception("Failed to send registration email for event %s to %s", summary.event_id, to_email)
        return False

    logger.info("Registration email sent to %s for event %s", to_email, summary.event_id)
    return True
