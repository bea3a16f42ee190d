"""
Tool dispatcher: validate arguments -> resolve dates -> call the gateway ->
normalize -> render text. Every failure becomes an is_error ToolResult.
"""
import logging
from datetime import datetime, timedelta
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Tuple, Type

from pydantic import BaseModel, ValidationError

from egw_mcp.domain.errors import ToolError, ToolValidationError, UnknownToolError
from egw_mcp.domain.schemas import (
    NOT_PROVIDED, CanonicalContact, CanonicalEvent, CanonicalTask, CreateCalendarEventArgs,
    CreateContactArgs, CreateTaskArgs, EmailMessage, GetCalendarEventsArgs, GetTasksArgs,
    SearchContactsArgs, SendEmailArgs, ToolRequest, ToolResult, provided,
)
from egw_mcp.services import dates
from egw_mcp.services.gateway import Gateway
from egw_mcp.services.normalize import BackendRecord, to_contact, to_event, to_task

logger = logging.getLogger(__name__)

Handler = Callable[[Any, datetime], Awaitable[str]]

def parse_arguments(model: Type[BaseModel], arguments: Any) -> Any:
    """Validate an argument bag against a tool model. Raises ToolValidationError."""
    try:
        return model.model_validate(arguments if arguments is not None else {})
    except ValidationError as e:
        problems = []
        for err in e.errors():
            where = ".".join(str(p) for p in err["loc"]) or "arguments"
            if err["type"] == "missing":
                problems.append(f"Missing required argument: {where}")
            else:
                problems.append(f"Invalid argument '{where}': {err['msg']}")
        raise ToolValidationError("; ".join(problems)) from e

def _records(raw: List[BackendRecord], limit: int) -> List[Mapping[str, Any]]:
    return [r for r in raw if isinstance(r, Mapping)][:limit]

def _bullets(lines: List[str], empty: str) -> str:
    return "\n".join(lines) if lines else empty

class ToolDispatcher:
    def __init__(self, gateway: Gateway, clock: Optional[Callable[[], datetime]] = None):
        """
        Inputs:
            gateway: live or mock EGroupware gateway.
            clock: returns the reference "now" for date resolution (aware datetime).
        """
        self._gateway = gateway
        self._clock = clock or dates.now_local
        self._handlers: Dict[str, Tuple[Type[BaseModel], Handler]] = {
            "create_calendar_event": (CreateCalendarEventArgs, self._create_calendar_event),
            "get_calendar_events": (GetCalendarEventsArgs, self._get_calendar_events),
            "create_contact": (CreateContactArgs, self._create_contact),
            "search_contacts": (SearchContactsArgs, self._search_contacts),
            "create_task": (CreateTaskArgs, self._create_task),
            "get_tasks": (GetTasksArgs, self._get_tasks),
            "send_email": (SendEmailArgs, self._send_email),
        }

    @property
    def tool_names(self) -> List[str]:
        return list(self._handlers)

    async def call(self, request: ToolRequest) -> ToolResult:
        return await self.dispatch(request.name, request.arguments)

    async def dispatch(self, name: str, arguments: Any = None) -> ToolResult:
        """Run one tool call. Never raises; failures come back with is_error=True."""
        logger.info("Tool call: %s", name)
        try:
            entry = self._handlers.get(name)
            if entry is None:
                raise UnknownToolError(name)
            model, handler = entry
            args = parse_arguments(model, arguments)
            text = await handler(args, self._clock())
            return ToolResult(text=text)
        except UnknownToolError as e:
            logger.warning("Rejected call to unknown tool %r", name)
            return ToolResult(text=f"❌ {e}", is_error=True)
        except ToolError as e:
            logger.warning("Tool %s failed: %s", name, e)
            return ToolResult(text=f"❌ Error executing {name}: {e}", is_error=True)
        except Exception as e:
            logger.exception("Unexpected error in tool %s", name)
            return ToolResult(text=f"❌ Error executing {name}: {e}", is_error=True)

    ### --- calendar --- ###

    async def _create_calendar_event(self, args: CreateCalendarEventArgs, now: datetime) -> str:
        start = dates.resolve(args.date, now)
        if args.time:
            start = dates.apply_time(start, args.time)
        event = CanonicalEvent(
            title=args.title,
            start=start,
            end=start + timedelta(minutes=args.duration),
            location=args.location or NOT_PROVIDED,
            description=args.description or NOT_PROVIDED,
            participants=list(args.attendees),
        )
        event_id = await self._gateway.save_event(event)
        return (
            "✅ Calendar event created successfully!\n\n"
            f"Title: {args.title}\n"
            f"Date: {dates.format_instant(start)}\n"
            f"Duration: {args.duration} minutes\n"
            f"Location: {args.location or 'Not specified'}\n"
            f"Event ID: {event_id}"
        )

    async def _get_calendar_events(self, args: GetCalendarEventsArgs, now: datetime) -> str:
        start = dates.resolve(args.start_date, now)
        end = dates.resolve(args.end_date, now)
        raw = await self._gateway.search_events(start, end)
        lines = []
        for record in _records(raw, args.limit):
            event = to_event(record, now.tzinfo)
            where = f" ({event.location})" if provided(event.location) else ""
            lines.append(f"• {event.title} - {dates.format_instant(event.start, 'Date not set')}{where}")
        return "📅 Upcoming Calendar Events:\n\n" + _bullets(lines, "No events found for the specified period.")

    ### --- contacts --- ###

    async def _create_contact(self, args: CreateContactArgs, now: datetime) -> str:
        contact = CanonicalContact(
            first_name=args.first_name,
            last_name=args.last_name,
            email=args.email or NOT_PROVIDED,
            phone=args.phone or NOT_PROVIDED,
            company=args.company or NOT_PROVIDED,
            title=args.title or NOT_PROVIDED,
            notes=args.notes or NOT_PROVIDED,
        )
        contact_id = await self._gateway.save_contact(contact)
        return (
            "✅ Contact created successfully!\n\n"
            f"Name: {contact.first_name} {contact.last_name}\n"
            f"Email: {contact.email}\n"
            f"Company: {contact.company}\n"
            f"Contact ID: {contact_id}"
        )

    async def _search_contacts(self, args: SearchContactsArgs, now: datetime) -> str:
        raw = await self._gateway.search_contacts(args.query)
        lines = []
        for record in _records(raw, args.limit):
            c = to_contact(record)
            email = f" ({c.email})" if provided(c.email) else ""
            company = f" - {c.company}" if provided(c.company) else ""
            lines.append(f"• {c.first_name} {c.last_name}{email}{company}")
        return "👥 Contact Search Results:\n\n" + _bullets(lines, "No contacts found matching your query.")

    ### --- tasks --- ###

    async def _create_task(self, args: CreateTaskArgs, now: datetime) -> str:
        due = dates.resolve(args.due_date, now) if args.due_date else None
        task = CanonicalTask(
            subject=args.title,
            description=args.description or NOT_PROVIDED,
            due=due,
            priority=args.priority,
            status="open",
            category=args.category or NOT_PROVIDED,
            assignee=args.assigned_to or NOT_PROVIDED,
        )
        task_id = await self._gateway.write_task(task)
        return (
            "✅ Task created successfully!\n\n"
            f"Title: {args.title}\n"
            f"Priority: {args.priority}\n"
            f"Due Date: {dates.format_instant(due)}\n"
            f"Task ID: {task_id}"
        )

    async def _get_tasks(self, args: GetTasksArgs, now: datetime) -> str:
        raw = await self._gateway.search_tasks(args.status)
        lines = []
        for record in _records(raw, args.limit):
            task = to_task(record, now.tzinfo)
            due = f" (Due: {dates.format_instant(task.due)})" if task.due else ""
            lines.append(f"• {task.subject} - {task.status}{due}")
        return "📋 Tasks:\n\n" + _bullets(lines, "No tasks found.")

    ### --- email --- ###

    async def _send_email(self, args: SendEmailArgs, now: datetime) -> str:
        message = EmailMessage(to=args.to, subject=args.subject, body=args.body, cc=args.cc, bcc=args.bcc)
        await self._gateway.send_email(message)
        return (
            "✅ Email request accepted!\n\n"
            f"To: {', '.join(message.to)}\n"
            f"Subject: {message.subject}\n"
            f"CC: {', '.join(message.cc) or 'None'}\n"
            f"BCC: {', '.join(message.bcc) or 'None'}\n\n"
            "Note: EGroupware GroupDAV cannot submit mail, so nothing was actually delivered."
        )
