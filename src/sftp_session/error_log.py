"""Error logging collaborator for logical (non-fatal) SFTP errors.

`SftpSession` reports recoverable problems such as incomplete credentials or
upload size mismatches through an `ErrorLogger` instead of raising. Each
report carries a short, stable trace code (for example ``E086``).
"""

from typing import Protocol, runtime_checkable

import structlog

# Trace codes reported by SftpSession
INVALID_CREDENTIALS = "E076"
UNREADABLE_LOCAL_FILE = "E085"
FILE_SIZE_MISMATCH = "E086"


@runtime_checkable
class ErrorLogger(Protocol):
    """Interface for error log sinks."""

    def log_error(self, method: str, message: str, trace: str) -> None:
        """Record a logical error.

        Args:
            method: The session method reporting the error.
            message: Human-readable description.
            trace: Stable trace code identifying the error.
        """
        ...


def format_error(method: str, message: str, trace: str) -> str:
    """Render an error in the legacy single-line log format."""
    return f"-- SFTP Error: {method} - [ {message} ] [ {trace} ]"


class StructlogErrorLogger:
    """Error logger that emits one structlog event per reported error."""

    def __init__(self, logger_name: str = "sftp_session.errors") -> None:
        self._logger = structlog.get_logger(logger_name)

    def log_error(self, method: str, message: str, trace: str) -> None:
        self._logger.error(
            "sftp_error",
            method=method,
            message=message,
            trace=trace,
            line=format_error(method, message, trace),
        )
