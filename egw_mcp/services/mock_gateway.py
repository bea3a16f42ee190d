import itertools
import logging
from datetime import datetime
from typing import Callable, List, Optional

from egw_mcp.domain.schemas import CanonicalContact, CanonicalEvent, CanonicalTask, provided
from egw_mcp.services.dates import now_local
from egw_mcp.services.gateway import Gateway
from egw_mcp.services.normalize import BackendRecord

logger = logging.getLogger(__name__)

SAMPLE_CONTACTS: List[BackendRecord] = [
    {"n_given": "John", "n_family": "Doe", "email": "john.doe@example.com", "org_name": "Sample Corp"},
    {"n_given": "Jane", "n_family": "Smith", "email": "jane.smith@example.com", "org_name": "Tech Ltd"},
]

class MockGateway(Gateway):
    """
    Offline stand-in for LiveGateway.
    Fixed sample records plus whatever was saved through this instance, in the
    same backend dialect the live server uses (epoch seconds, n_given, info_*).
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or now_local
        self._ids = itertools.count(1)
        self.events: List[BackendRecord] = []
        self.contacts: List[BackendRecord] = []
        self.tasks: List[BackendRecord] = []

    def _next_id(self) -> str:
        return str(next(self._ids))

    def _epoch_now(self) -> int:
        return int(self._clock().timestamp())

    ### --- calendar --- ###

    async def save_event(self, event: CanonicalEvent) -> str:
        logger.debug("[TEST MODE] Would save event: %s", event.title)
        event_id = self._next_id()
        self.events.append({
            "id": event_id,
            "title": event.title,
            "start": int(event.start.timestamp()),
            "end": int(event.end.timestamp()),
            "location": provided(event.location) or "",
            "description": provided(event.description) or "",
            "participants": list(event.participants),
        })
        return event_id

    async def search_events(self, start: datetime, end: datetime) -> List[BackendRecord]:
        logger.debug("[TEST MODE] Would search events %s .. %s", start, end)
        now = self._epoch_now()
        samples = [
            {"title": "Sample Meeting", "start": now, "location": "Conference Room A"},
            {"title": "Project Review", "start": now + 3600, "location": "Office 123"},
        ]
        lo, hi = int(start.timestamp()), int(end.timestamp())
        saved = [e for e in self.events if lo <= e["start"] <= hi]
        return samples + saved

    ### --- addressbook --- ###

    async def save_contact(self, contact: CanonicalContact) -> str:
        logger.debug("[TEST MODE] Would save contact: %s %s", contact.first_name, contact.last_name)
        contact_id = self._next_id()
        self.contacts.append({
            "id": contact_id,
            "n_given": contact.first_name,
            "n_family": contact.last_name,
            "email": provided(contact.email) or "",
            "tel_work": provided(contact.phone) or "",
            "org_name": provided(contact.company) or "",
            "title": provided(contact.title) or "",
            "note": provided(contact.notes) or "",
        })
        return contact_id

    async def search_contacts(self, query: str) -> List[BackendRecord]:
        logger.debug("[TEST MODE] Would search contacts: %s", query)
        needle = query.lower()
        fields = ("n_given", "n_family", "email", "org_name")
        return [
            c for c in SAMPLE_CONTACTS + self.contacts
            if any(needle in str(c.get(f, "")).lower() for f in fields)
            or needle in f"{c.get('n_given', '')} {c.get('n_family', '')}".lower()
        ]

    ### --- infolog --- ###

    async def write_task(self, task: CanonicalTask) -> str:
        logger.debug("[TEST MODE] Would write task: %s", task.subject)
        task_id = self._next_id()
        self.tasks.append({
            "id": task_id,
            "info_subject": task.subject,
            "info_des": provided(task.description) or "",
            "info_enddate": int(task.due.timestamp()) if task.due else None,
            "info_priority": task.priority,
            "info_status": "open",
            "info_cat": provided(task.category) or "",
            "info_responsible": provided(task.assignee) or "",
        })
        return task_id

    async def search_tasks(self, status: str) -> List[BackendRecord]:
        logger.debug("[TEST MODE] Would search tasks: filter=%s", status)
        now = self._epoch_now()
        samples = [
            {"info_subject": "Sample Task", "info_status": "open", "info_enddate": now + 86400},
            {"info_subject": "Review Document", "info_status": "done", "info_enddate": now - 86400},
        ]
        records = samples + self.tasks
        if status == "all":
            return records
        return [t for t in records if t.get("info_status") == status]
