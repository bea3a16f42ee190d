from datetime import datetime
from typing import Any, Dict, List

import pytest
from dateutil import tz

from egw_mcp.api.dispatcher import ToolDispatcher
from egw_mcp.services.gateway import Gateway
from egw_mcp.services.mock_gateway import MockGateway

FIXED_NOW = datetime(2026, 10, 17, 12, 0, tzinfo=tz.UTC)


def fixed_clock() -> datetime:
    return FIXED_NOW


class StubGateway(Gateway):
    """Returns canned raw payloads and records every call."""

    def __init__(self, **responses: Any) -> None:
        self.responses: Dict[str, Any] = responses
        self.calls: List[tuple] = []

    async def _answer(self, op: str, *args: Any) -> Any:
        self.calls.append((op, *args))
        value = self.responses.get(op)
        if isinstance(value, Exception):
            raise value
        return value

    async def save_event(self, event):
        return await self._answer("save_event", event) or "1"

    async def search_events(self, start, end):
        return await self._answer("search_events", start, end) or []

    async def save_contact(self, contact):
        return await self._answer("save_contact", contact) or "1"

    async def search_contacts(self, query):
        return await self._answer("search_contacts", query) or []

    async def write_task(self, task):
        return await self._answer("write_task", task) or "1"

    async def search_tasks(self, status):
        return await self._answer("search_tasks", status) or []


@pytest.fixture
def mock_gateway() -> MockGateway:
    return MockGateway(clock=fixed_clock)


@pytest.fixture
def dispatcher(mock_gateway: MockGateway) -> ToolDispatcher:
    return ToolDispatcher(mock_gateway, clock=fixed_clock)
