"""
errors.py — Exception taxonomy for the transport, envelope and tool layers.

Every fault that can reach the session loop is one of these types. Only
OSError (a hard I/O failure on the stream) is allowed to escape the loop.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of domain failure kinds surfaced by tools and the provider."""

    UNKNOWN_TOOL = "unknown_tool"
    INVALID_CREDENTIAL = "invalid_credential"
    PROVIDER_FAILURE = "provider_failure"
    INVALID_RESPONSE = "invalid_response"


# ------------------------------------------------------------------
# Transport
# ------------------------------------------------------------------


class TransportError(Exception):
    """Base class for faults while reading one framed message."""


class FramingError(TransportError):
    """Missing or malformed Content-Length header."""


class TruncatedMessageError(TransportError):
    """The stream ended before the declared number of body bytes arrived."""

    def __init__(self, expected: int, received: int) -> None:
        super().__init__(f"Expected {expected} body bytes, stream ended after {received}")
        self.expected = expected
        self.received = received


class MessageEncodingError(TransportError):
    """Message body is not valid UTF-8."""


# ------------------------------------------------------------------
# Envelope
# ------------------------------------------------------------------


class EnvelopeParseError(Exception):
    """Malformed or incomplete JSON-RPC request envelope."""


# ------------------------------------------------------------------
# Tools and external provider
# ------------------------------------------------------------------


class ToolExecutionError(Exception):
    """Raised when a tool cannot produce a result."""

    def __init__(self, kind: ErrorKind, message: str, *, tool: str | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.tool = tool

    @classmethod
    def unknown_tool(cls, name: str) -> "ToolExecutionError":
        return cls(ErrorKind.UNKNOWN_TOOL, f"Unknown tool: {name}", tool=name)


class ProviderError(Exception):
    """Credential, connectivity or response-shape failure in the YNAB provider."""

    def __init__(self, kind: ErrorKind, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code

    @classmethod
    def invalid_credential(cls, message: str = "API token cannot be empty") -> "ProviderError":
        return cls(ErrorKind.INVALID_CREDENTIAL, message)

    @property
    def retryable(self) -> bool:
        if self.kind is not ErrorKind.PROVIDER_FAILURE:
            return False
        return self.status_code is None or self.status_code == 429 or self.status_code >= 500
