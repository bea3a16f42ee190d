"""
Turn whatever EGroupware hands back into ordered lists of records, and map
backend field-name dialects onto the canonical record fields.
"""
from datetime import tzinfo
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from egw_mcp.domain.schemas import NOT_PROVIDED, CanonicalContact, CanonicalEvent, CanonicalTask
from egw_mcp.services.dates import from_backend

BackendRecord = Dict[str, Any]

### --- accepted source names per canonical field, first present wins --- ###

EVENT_FIELDS: Dict[str, Tuple[str, ...]] = {
    "title": ("title", "summary", "name"),
    "start": ("start", "dtstart", "start_date"),
    "end": ("end", "dtend", "end_date"),
    "location": ("location",),
    "description": ("description", "des"),
    "participants": ("participants", "attendees"),
}

CONTACT_FIELDS: Dict[str, Tuple[str, ...]] = {
    "first_name": ("n_given", "given-name", "given_name", "firstname"),
    "last_name": ("n_family", "family-name", "family_name", "lastname"),
    "email": ("email", "mail", "email_home"),
    "phone": ("tel_work", "tel", "phone", "tel_cell"),
    "company": ("org_name", "org", "company"),
    "title": ("title",),
    "notes": ("note", "notes"),
}

TASK_FIELDS: Dict[str, Tuple[str, ...]] = {
    "subject": ("info_subject", "summary", "subject", "title"),
    "description": ("info_des", "description"),
    "due": ("info_enddate", "due", "due_date"),
    "priority": ("info_priority", "priority"),
    "status": ("info_status", "status"),
    "category": ("info_cat", "category"),
    "assignee": ("info_responsible", "responsible", "assigned_to"),
}

PRIORITIES = ("low", "normal", "high", "urgent")
UNKNOWN_NAME = "Unknown"

def normalize(raw: Any) -> List[BackendRecord]:
    """
    Coerce a backend payload into an ordered list of records.
    list -> unchanged; single mapping -> [mapping]; None / text (unparsed XML etc.) -> [].
    """
    if isinstance(raw, list):
        return raw
    if isinstance(raw, Mapping):
        return [dict(raw)]
    return []

def pick(record: Mapping[str, Any], names: Sequence[str]) -> Optional[Any]:
    """First present, non-empty value among `names`, else None."""
    for name in names:
        value = record.get(name)
        if value not in (None, ""):
            return value
    return None

def _text(record: Mapping[str, Any], names: Sequence[str], placeholder: str = NOT_PROVIDED) -> str:
    value = pick(record, names)
    if isinstance(value, (list, tuple)):
        value = ", ".join(str(v) for v in value if v)
    return str(value) if value not in (None, "") else placeholder

def to_event(record: Mapping[str, Any], zone: Optional[tzinfo] = None) -> CanonicalEvent:
    participants = pick(record, EVENT_FIELDS["participants"]) or []
    if isinstance(participants, str):
        participants = [participants]
    return CanonicalEvent(
        title=_text(record, EVENT_FIELDS["title"]),
        start=from_backend(pick(record, EVENT_FIELDS["start"]), zone),
        end=from_backend(pick(record, EVENT_FIELDS["end"]), zone),
        location=_text(record, EVENT_FIELDS["location"]),
        description=_text(record, EVENT_FIELDS["description"]),
        participants=[str(p) for p in participants],
    )

def to_contact(record: Mapping[str, Any]) -> CanonicalContact:
    """Names fall back to splitting the combined 'fn' field, then to 'Unknown'."""
    first = pick(record, CONTACT_FIELDS["first_name"])
    last = pick(record, CONTACT_FIELDS["last_name"])
    full = str(record.get("fn") or "").split()
    if first is None and full:
        first = full[0]
    if last is None and len(full) > 1:
        last = " ".join(full[1:])
    return CanonicalContact(
        first_name=str(first) if first else UNKNOWN_NAME,
        last_name=str(last) if last else UNKNOWN_NAME,
        email=_text(record, CONTACT_FIELDS["email"]),
        phone=_text(record, CONTACT_FIELDS["phone"]),
        company=_text(record, CONTACT_FIELDS["company"]),
        title=_text(record, CONTACT_FIELDS["title"]),
        notes=_text(record, CONTACT_FIELDS["notes"]),
    )

def to_task(record: Mapping[str, Any], zone: Optional[tzinfo] = None) -> CanonicalTask:
    priority = str(pick(record, TASK_FIELDS["priority"]) or "normal").lower()
    return CanonicalTask(
        subject=_text(record, TASK_FIELDS["subject"]),
        description=_text(record, TASK_FIELDS["description"]),
        due=from_backend(pick(record, TASK_FIELDS["due"]), zone),
        priority=priority if priority in PRIORITIES else "normal",
        status=_text(record, TASK_FIELDS["status"]),
        category=_text(record, TASK_FIELDS["category"]),
        assignee=_text(record, TASK_FIELDS["assignee"]),
    )
