import abc
import base64
import logging
import random
from datetime import datetime, timezone
from typing import Any, List, Optional

import httpx

from egw_mcp.config import Settings, settings as default_settings
from egw_mcp.domain.errors import AuthenticationError, BackendRequestError
from egw_mcp.domain.schemas import CanonicalContact, CanonicalEvent, CanonicalTask, EmailMessage
from egw_mcp.services import documents
from egw_mcp.services.normalize import BackendRecord, normalize
from egw_mcp.services.session import Session

logger = logging.getLogger(__name__)

BASIC_AUTH_MARKER = "basic_auth_set"

class Gateway(abc.ABC):
    """One coroutine per (domain, verb) EGroupware capability."""

    @abc.abstractmethod
    async def save_event(self, event: CanonicalEvent) -> str: ...

    @abc.abstractmethod
    async def search_events(self, start: datetime, end: datetime) -> List[BackendRecord]: ...

    @abc.abstractmethod
    async def save_contact(self, contact: CanonicalContact) -> str: ...

    @abc.abstractmethod
    async def search_contacts(self, query: str) -> List[BackendRecord]: ...

    @abc.abstractmethod
    async def write_task(self, task: CanonicalTask) -> str: ...

    @abc.abstractmethod
    async def search_tasks(self, status: str) -> List[BackendRecord]: ...

    async def send_email(self, message: EmailMessage) -> bool:
        """
        Not functional: GroupDAV has no mail submission, so this reports
        success without contacting the backend.
        """
        logger.warning(
            "send_email is a stub; message to %s was not delivered", ", ".join(message.to)
        )
        return True

    async def aclose(self) -> None:
        return None

def _basic_auth(username: str, password: str) -> str:
    """Authorization header value for HTTP Basic auth."""
    token = base64.b64encode(f"{username}:{password}".encode()).decode()
    return f"Basic {token}"

def _placeholder_id() -> str:
    """Stand-in id when a write response carries none (not reconciled with the backend)."""
    return str(random.randint(0, 999))

def _iso_utc(instant: datetime) -> str:
    """ISO-8601 in UTC, as the backend range parameters expect."""
    return instant.astimezone(timezone.utc).isoformat()

class LiveGateway(Gateway):
    def __init__(self, cfg: Settings, session: Optional[Session] = None,
                 http_client: Optional[httpx.AsyncClient] = None):
        """
        EGroupware GroupDAV client.
        Inputs:
            cfg: Settings with URL + credentials.
            session: auth marker holder (a fresh one if omitted).
            http_client: injected client (tests); default trusts self-signed certs.
        """
        self._cfg = cfg
        self.session = session or Session()
        self._client = http_client or httpx.AsyncClient(
            base_url=cfg.egroupware_url,
            timeout=cfg.request_timeout,
            verify=cfg.verify_tls,
        )

    ### --- auth --- ###

    async def authenticate(self) -> None:
        """Set Basic auth on the client and probe GET /. Raises AuthenticationError unless 200."""
        self._client.headers["Authorization"] = _basic_auth(
            self._cfg.egroupware_username, self._cfg.egroupware_password
        )
        logger.info("Authenticating with EGroupware at %s", self._cfg.egroupware_url)
        try:
            response = await self._client.get("/")
        except httpx.HTTPError as e:
            logger.error("Authentication failed: %s", e)
            raise AuthenticationError(f"Failed to authenticate with EGroupware: {e}") from e
        if response.status_code != 200:
            logger.error("Authentication failed: status %s", response.status_code)
            raise AuthenticationError(
                f"Failed to authenticate with EGroupware (status {response.status_code})"
            )
        self.session.establish(BASIC_AUTH_MARKER)

    ### --- transport --- ###

    async def _send_once(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error("%s %s failed: %s", method, path, e)
            raise BackendRequestError(status_code=None, message=str(e) or type(e).__name__) from e

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Authenticated request. A 401 triggers exactly one re-auth + retry."""
        if not self.session.authenticated:
            await self.authenticate()
        response = await self._send_once(method, path, **kwargs)
        if response.status_code == 401:
            logger.warning("%s %s returned 401, re-authenticating once", method, path)
            self.session.invalidate()
            await self.authenticate()
            response = await self._send_once(method, path, **kwargs)
        if response.is_error:
            if response.status_code == 401:
                self.session.invalidate()
            logger.error("%s %s returned %s", method, path, response.status_code)
            raise BackendRequestError(
                status_code=response.status_code,
                message=(response.text or response.reason_phrase)[:200],
            )
        return response

    @staticmethod
    def _body(response: httpx.Response) -> Any:
        """JSON when it parses, raw text otherwise (GroupDAV often answers XML)."""
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def _written_id(self, response: httpx.Response) -> str:
        body = self._body(response)
        if isinstance(body, dict) and body.get("id") not in (None, ""):
            return str(body["id"])
        return _placeholder_id()

    ### --- calendar --- ###

    async def save_event(self, event: CanonicalEvent) -> str:
        uid = documents.new_uid()
        response = await self._request(
            "PUT", f"/calendar/{uid}.ics",
            content=documents.event_to_ical(event, uid).encode("utf-8"),
            headers={"Content-Type": "text/calendar; charset=utf-8"},
        )
        return self._written_id(response)

    async def search_events(self, start: datetime, end: datetime) -> List[BackendRecord]:
        response = await self._request(
            "GET", "/calendar/", params={"start": _iso_utc(start), "end": _iso_utc(end)}
        )
        return normalize(self._body(response))

    ### --- addressbook --- ###

    async def save_contact(self, contact: CanonicalContact) -> str:
        uid = documents.new_uid()
        response = await self._request(
            "PUT", f"/addressbook/{uid}.vcf",
            content=documents.contact_to_vcard(contact).encode("utf-8"),
            headers={"Content-Type": "text/vcard; charset=utf-8"},
        )
        return self._written_id(response)

    async def search_contacts(self, query: str) -> List[BackendRecord]:
        response = await self._request("GET", "/addressbook/", params={"search": query})
        return normalize(self._body(response))

    ### --- infolog --- ###

    async def write_task(self, task: CanonicalTask) -> str:
        response = await self._request("POST", "/infolog/", json=documents.task_to_payload(task))
        return self._written_id(response)

    async def search_tasks(self, status: str) -> List[BackendRecord]:
        response = await self._request("GET", "/infolog/", params={"filter": status})
        return normalize(self._body(response))

    async def aclose(self) -> None:
        await self._client.aclose()

def make_gateway(cfg: Settings = default_settings) -> Gateway:
    """Live gateway when credentials are configured, mock gateway in test mode."""
    if cfg.test_mode:
        from egw_mcp.services.mock_gateway import MockGateway
        logger.info("EGroupware gateway running in TEST MODE (no network access)")
        return MockGateway()
    logger.info("EGroupware gateway connecting to %s", cfg.egroupware_url)
    return LiveGateway(cfg)
