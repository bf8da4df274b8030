"""Tests for the registration confirmation email."""
from datetime import date

from eventhub.config import settings
from eventhub.services import notification_service
from eventhub.services.notification_service import EventSummary, build_registration_email, notify_registration

SUMMARY = EventSummary(
    event_id="evt-1",
    title="Rock & Roll <Live>",
    date=date(2030, 3, 4),
    time="19:30",
    location="Main Hall",
)


def test_email_body_contains_event_details():
    html = build_registration_email("Ada", SUMMARY)
    assert "Dear Ada" in html
    assert "Monday, March 4, 2030" in html
    assert "19:30" in html
    assert "Main Hall" in html
    # User-supplied text is escaped
    assert "Rock &amp; Roll &lt;Live&gt;" in html


def test_notify_swallows_transport_errors(monkeypatch):
    def _boom(msg):
        raise OSError("network unreachable")

    monkeypatch.setattr(settings, "EMAIL_ENABLED", True)
    monkeypatch.setattr(notification_service, "_smtp_send", _boom)
    assert notify_registration("ada@example.com", "Ada", SUMMARY) is False


def test_notify_builds_multipart_message(monkeypatch):
    sent = []
    monkeypatch.setattr(settings, "EMAIL_ENABLED", True)
    monkeypatch.setattr(notification_service, "_smtp_send", sent.append)

    assert notify_registration("ada@example.com", "Ada", SUMMARY) is True
    msg = sent[0]
    assert msg["From"] == settings.EMAIL_FROM
    assert msg.is_multipart()
    assert msg.get_body(preferencelist=("html",)) is not None
