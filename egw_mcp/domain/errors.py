from typing import Optional


class ToolError(RuntimeError):
    """Base error for anything a tool call can fail with."""


class ToolValidationError(ToolError):
    """Raised when tool arguments are missing or malformed."""


class AuthenticationError(ToolError):
    """Raised when the credential exchange with EGroupware fails."""


class BackendRequestError(ToolError):
    """Raised when an EGroupware request fails (HTTP error, network error or timeout)."""

    def __init__(self, *, status_code: Optional[int], message: str) -> None:
        self.status_code = status_code
        self.message = message
        status = status_code if status_code is not None else "no response"
        super().__init__(f"EGroupware request failed ({status}): {message}")


class UnknownToolError(ToolError):
    """Raised for a tool name outside the published tool set."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}")
