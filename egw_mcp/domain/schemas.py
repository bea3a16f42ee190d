from datetime import datetime
from typing import List, Optional, Dict, Any, Literal
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

# Shown wherever a record field carries no value.
NOT_PROVIDED = "Not provided"

Priority = Literal["low", "normal", "high", "urgent"]
TaskStatusFilter = Literal["open", "done", "all"]

### --- tool requests / results --- ###

class ToolRequest(BaseModel):
    """One tools/call message: tool name + raw argument bag."""
    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)

class ToolResult(BaseModel):
    """Generic tool call result wrapper. Always well-formed; failures set is_error."""
    text: str
    is_error: bool = False

    def to_content(self) -> Dict[str, Any]:
        """Render as a tools/call result payload."""
        return {"content": [{"type": "text", "text": self.text}], "isError": self.is_error}

### --- per-tool arguments --- ###

class _Args(BaseModel):
    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data):
        """An explicit null means the argument was not given."""
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

class CreateCalendarEventArgs(_Args):
    """Schema for creating a calendar event."""
    title: str = Field(..., min_length=1)
    date: str  # natural language or literal date
    time: Optional[str] = None  # HH:MM
    duration: int = Field(60, ge=1)  # minutes
    description: Optional[str] = None
    location: Optional[str] = None
    attendees: List[EmailStr] = []

class GetCalendarEventsArgs(_Args):
    start_date: str = "today"
    end_date: str = "next week"
    limit: int = Field(10, ge=1)

class CreateContactArgs(_Args):
    """Schema for creating an addressbook contact."""
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    title: Optional[str] = None
    notes: Optional[str] = None

class SearchContactsArgs(_Args):
    query: str = Field(..., min_length=1)
    limit: int = Field(10, ge=1)

class CreateTaskArgs(_Args):
    """Schema for creating an InfoLog task."""
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    due_date: Optional[str] = None
    priority: Priority = "normal"
    category: Optional[str] = None
    assigned_to: Optional[str] = None

class GetTasksArgs(_Args):
    status: TaskStatusFilter = "open"
    limit: int = Field(10, ge=1)

class SendEmailArgs(_Args):
    """Schema for sending an email."""
    to: List[EmailStr]  # recipient list
    subject: str
    body: str
    cc: List[EmailStr] = []
    bcc: List[EmailStr] = []

    @field_validator("to", "cc", "bcc", mode="before")
    @classmethod
    def _wrap_single(cls, v):
        """Accept a bare address where a list is expected."""
        return [v] if isinstance(v, str) else v

### --- canonical records --- ###

class CanonicalEvent(BaseModel):
    title: str = NOT_PROVIDED
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    location: str = NOT_PROVIDED
    description: str = NOT_PROVIDED
    participants: List[str] = []

class CanonicalContact(BaseModel):
    first_name: str = NOT_PROVIDED
    last_name: str = NOT_PROVIDED
    email: str = NOT_PROVIDED
    phone: str = NOT_PROVIDED
    company: str = NOT_PROVIDED
    title: str = NOT_PROVIDED
    notes: str = NOT_PROVIDED

class CanonicalTask(BaseModel):
    subject: str = NOT_PROVIDED
    description: str = NOT_PROVIDED
    due: Optional[datetime] = None
    priority: Priority = "normal"
    status: str = NOT_PROVIDED
    category: str = NOT_PROVIDED
    assignee: str = NOT_PROVIDED

class EmailMessage(BaseModel):
    to: List[str]
    subject: str
    body: str
    cc: List[str] = []
    bcc: List[str] = []

def provided(value: Optional[str]) -> Optional[str]:
    """Map the display placeholder (or empty) back to None."""
    return None if value in (None, "", NOT_PROVIDED) else value
