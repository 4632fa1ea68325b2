"""Domain errors raised by the registry, agent catalog and relay.

None of these know about HTTP.  The app registers a single handler that
turns any ``RelayError`` into a JSON error response using ``status_code``
and ``to_body()``.
"""

from __future__ import annotations

from typing import Any


class RelayError(Exception):
    """Base class for errors surfaced to relay clients."""

    status_code: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_body(self) -> dict[str, Any]:
        return {"error": self.message}


class UnknownAgentError(RelayError, LookupError):
    """Raised when an agent name matches no alias in the catalog."""

    def __init__(self, agent_name: str) -> None:
        super().__init__(f"Unknown agent: {agent_name}")
        self.agent_name = agent_name


class MissingTargetError(RelayError):
    """Neither an existing session id nor an agent name was supplied."""

    def __init__(self) -> None:
        super().__init__("Either sessionId or agentName is required")


class MessageValidationError(RelayError, ValueError):
    """A required request field is missing or empty."""


class SessionNotFoundError(RelayError, LookupError):
    status_code = 404

    def __init__(self, session_id: str) -> None:
        super().__init__("Session not found")
        self.session_id = session_id


class UpstreamFailure(RelayError):
    """The agent runtime failed while producing a response."""

    status_code = 500

    def __init__(self, details: str, message: str = "Failed to process message") -> None:
        super().__init__(message)
        self.details = details

    def to_body(self) -> dict[str, Any]:
        return {"error": self.message, "details": self.details}
