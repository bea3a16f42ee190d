import uuid
from datetime import timezone
from typing import Any, Dict

import vobject
from icalendar import Calendar, Event

from egw_mcp.domain.schemas import CanonicalContact, CanonicalEvent, CanonicalTask, provided

PRODID = "-//EGroupware MCP Server//EN"

def new_uid() -> str:
    return uuid.uuid4().hex

def event_to_ical(event: CanonicalEvent, uid: str) -> str:
    """
    Serialize an event as a single-VEVENT iCalendar document.
    Inputs:
        event: canonical event; start/end must be set.
        uid: resource id, also used for the UID property.
    Returns:
        iCalendar text with DTSTART/DTEND in UTC.
    """
    cal = Calendar()
    cal.add("prodid", PRODID)
    cal.add("version", "2.0")
    ev = Event()
    ev.add("uid", f"{uid}@egroupware-mcp")
    ev.add("dtstart", event.start.astimezone(timezone.utc))
    ev.add("dtend", event.end.astimezone(timezone.utc))
    ev.add("summary", event.title)
    ev.add("description", provided(event.description) or "")
    ev.add("location", provided(event.location) or "")
    for addr in event.participants:
        ev.add("attendee", f"mailto:{addr}")
    cal.add_component(ev)
    return cal.to_ical().decode("utf-8")

def contact_to_vcard(contact: CanonicalContact) -> str:
    """Serialize a contact as a vCard 3.0 document; empty optional properties are omitted."""
    card = vobject.vCard()
    card.add("fn").value = f"{contact.first_name} {contact.last_name}"
    card.add("n").value = vobject.vcard.Name(family=contact.last_name, given=contact.first_name)
    if provided(contact.email):
        email = card.add("email")
        email.value = contact.email
        email.type_param = "INTERNET"
    if provided(contact.phone):
        tel = card.add("tel")
        tel.value = contact.phone
        tel.type_param = "WORK"
    if provided(contact.company):
        card.add("org").value = [contact.company]
    if provided(contact.title):
        card.add("title").value = contact.title
    if provided(contact.notes):
        card.add("note").value = contact.notes
    return card.serialize()

def task_to_payload(task: CanonicalTask) -> Dict[str, Any]:
    """InfoLog JSON body."""
    return {
        "summary": task.subject,
        "description": provided(task.description) or "",
        "due": task.due.astimezone(timezone.utc).isoformat() if task.due else None,
        "priority": task.priority,
        "category": provided(task.category) or "",
        "responsible": provided(task.assignee) or "",
    }
