"""Unit tests for the iCalendar / vCard / InfoLog serializers."""

from datetime import timedelta

from conftest import FIXED_NOW
from egw_mcp.domain.schemas import CanonicalContact, CanonicalEvent, CanonicalTask
from egw_mcp.services.documents import contact_to_vcard, event_to_ical, task_to_payload


def test_event_document():
    event = CanonicalEvent(
        title="Standup",
        start=FIXED_NOW,
        end=FIXED_NOW + timedelta(minutes=30),
        location="Room 1",
        participants=["a@example.com"],
    )
    ics = event_to_ical(event, "abc123")
    assert ics.startswith("BEGIN:VCALENDAR")
    assert "PRODID:-//EGroupware MCP Server//EN" in ics
    assert "UID:abc123@egroupware-mcp" in ics
    assert "SUMMARY:Standup" in ics
    assert "DTSTART:20261017T120000Z" in ics
    assert "DTEND:20261017T123000Z" in ics
    assert "LOCATION:Room 1" in ics
    assert "mailto:a@example.com" in ics


def test_event_document_omits_placeholder_text():
    event = CanonicalEvent(title="x", start=FIXED_NOW, end=FIXED_NOW)
    assert "Not provided" not in event_to_ical(event, "u")


def test_contact_document():
    card = contact_to_vcard(CanonicalContact(
        first_name="John", last_name="Doe", email="john@example.com", phone="555-0100", company="Acme",
    ))
    assert "BEGIN:VCARD" in card
    assert "VERSION:3.0" in card
    assert "FN:John Doe" in card
    assert "N:Doe;John;;;" in card
    assert "john@example.com" in card
    assert "TEL;TYPE=WORK:555-0100" in card
    assert "ORG:Acme" in card


def test_contact_document_skips_missing_fields():
    card = contact_to_vcard(CanonicalContact(first_name="John", last_name="Doe"))
    assert "EMAIL" not in card
    assert "ORG" not in card
    assert "Not provided" not in card


def test_task_payload():
    payload = task_to_payload(CanonicalTask(subject="File taxes", due=FIXED_NOW, priority="high"))
    assert payload == {
        "summary": "File taxes",
        "description": "",
        "due": "2026-10-17T12:00:00+00:00",
        "priority": "high",
        "category": "",
        "responsible": "",
    }


def test_task_payload_without_due_date():
    assert task_to_payload(CanonicalTask(subject="x"))["due"] is None
