"""Error codes and exception types for the Lex conversation node."""

from __future__ import annotations

from enum import IntEnum


class ErrorCode(IntEnum):
    """Outcome reported across the node-facing boundary."""

    SUCCESS = 0
    INVALID_ARGUMENT = 1
    INVALID_LEX_CONFIGURATION = 2
    INVALID_RESULT = 3
    REMOTE_CALL_FAILED = 4
    SESSION_BUSY = 5


class LexNodeError(Exception):
    """Base class for failures raised inside the Lex conversation stack.

    Each subclass pins the :class:`ErrorCode` it maps to so callers at the
    ROS boundary can translate an exception into a status value without
    inspecting messages.
    """

    error_code: ErrorCode = ErrorCode.INVALID_ARGUMENT

    def __init__(self, message: str | None = None) -> None:
        self.reason = message
        super().__init__(message or self.error_code.name)


class InvalidArgument(LexNodeError):
    """Raised when a collaborator handed to construction is missing."""

    error_code = ErrorCode.INVALID_ARGUMENT


class InvalidLexConfiguration(LexNodeError):
    """Raised when a required Lex configuration value is missing or empty."""

    error_code = ErrorCode.INVALID_LEX_CONFIGURATION


class InvalidResult(LexNodeError):
    """Raised when a Lex result does not honour the PostContent wire contract."""

    error_code = ErrorCode.INVALID_RESULT


class RemoteCallFailed(LexNodeError):
    """Raised when the Lex runtime call fails at the transport or service."""

    error_code = ErrorCode.REMOTE_CALL_FAILED


class SessionBusy(LexNodeError):
    """Raised when a turn cannot claim the conversation session in time."""

    error_code = ErrorCode.SESSION_BUSY


__all__ = [
    "ErrorCode",
    "InvalidArgument",
    "InvalidLexConfiguration",
    "InvalidResult",
    "LexNodeError",
    "RemoteCallFailed",
    "SessionBusy",
]
