from typing import Any, Dict, List

### --- tools/list declarations --- ###

def _str(description: str, **extra: Any) -> Dict[str, Any]:
    return {"type": "string", "description": description, **extra}

def _int(description: str) -> Dict[str, Any]:
    return {"type": "integer", "description": description}

def _str_list(description: str) -> Dict[str, Any]:
    return {"type": "array", "items": {"type": "string"}, "description": description}

def _schema(properties: Dict[str, Any], required: List[str] = ()) -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = list(required)
    return schema

TOOLS: List[Dict[str, Any]] = [
    {
        "name": "create_calendar_event",
        "description": "Create a new calendar event in EGroupware",
        "inputSchema": _schema({
            "title": _str("Event title"),
            "description": _str("Event description (optional)"),
            "date": _str("Event date (natural language like 'today', 'tomorrow', 'next week', or a specific date)"),
            "time": _str("Event time (optional, HH:MM, e.g. '14:30')"),
            "duration": _int("Duration in minutes (default: 60)"),
            "location": _str("Event location (optional)"),
            "attendees": _str_list("List of attendee email addresses (optional)"),
        }, required=["title", "date"]),
    },
    {
        "name": "get_calendar_events",
        "description": "Get upcoming calendar events from EGroupware",
        "inputSchema": _schema({
            "start_date": _str("Start date for search (optional, defaults to today)"),
            "end_date": _str("End date for search (optional, defaults to next week)"),
            "limit": _int("Maximum number of events to return (default: 10)"),
        }),
    },
    {
        "name": "create_contact",
        "description": "Create a new contact in EGroupware addressbook",
        "inputSchema": _schema({
            "first_name": _str("First name"),
            "last_name": _str("Last name"),
            "email": _str("Email address (optional)"),
            "phone": _str("Phone number (optional)"),
            "company": _str("Company name (optional)"),
            "title": _str("Job title (optional)"),
            "notes": _str("Additional notes (optional)"),
        }, required=["first_name", "last_name"]),
    },
    {
        "name": "search_contacts",
        "description": "Search for contacts in EGroupware addressbook",
        "inputSchema": _schema({
            "query": _str("Search query (name, email, company, etc.)"),
            "limit": _int("Maximum number of results (default: 10)"),
        }, required=["query"]),
    },
    {
        "name": "create_task",
        "description": "Create a new task in EGroupware InfoLog",
        "inputSchema": _schema({
            "title": _str("Task title"),
            "description": _str("Task description (optional)"),
            "due_date": _str("Due date (optional, can be natural language)"),
            "priority": _str("Task priority (default: normal)", enum=["low", "normal", "high", "urgent"]),
            "category": _str("Task category (optional)"),
            "assigned_to": _str("Email of person to assign task to (optional)"),
        }, required=["title"]),
    },
    {
        "name": "get_tasks",
        "description": "Get tasks from EGroupware InfoLog",
        "inputSchema": _schema({
            "status": _str("Filter by status (default: open)", enum=["open", "done", "all"]),
            "limit": _int("Maximum number of tasks to return (default: 10)"),
        }),
    },
    {
        "name": "send_email",
        "description": "Send an email through EGroupware (delivery is not supported by the backend yet; the call only confirms)",
        "inputSchema": _schema({
            "to": _str_list("Recipient email addresses"),
            "subject": _str("Email subject"),
            "body": _str("Email body content"),
            "cc": _str_list("CC recipients (optional)"),
            "bcc": _str_list("BCC recipients (optional)"),
        }, required=["to", "subject", "body"]),
    },
]

TOOL_NAMES = frozenset(t["name"] for t in TOOLS)
