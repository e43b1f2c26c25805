"""Standardized exceptions for the SFTP session package.

This module provides consistent exception types for connection, credential
and file operation failures raised by `SftpSession` and its transports.
"""

from collections.abc import Iterable


class SftpSessionError(Exception):
    """Base exception for all SFTP session errors."""

    def __init__(self, message: str, error_code: str | None = None) -> None:
        """Initialize the error with a message and optional error code.

        Args:
            message: Human-readable error message.
            error_code: Optional error code for programmatic handling.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class NotConnectedError(SftpSessionError):
    """Raised when an operation needs a transport before `connect` was called."""

    def __init__(self, operation: str) -> None:
        """Initialize not connected error.

        Args:
            operation: Name of the operation that was attempted.
        """
        super().__init__(
            f"Not connected to SFTP server; call connect() before {operation}()",
            "NOT_CONNECTED",
        )
        self.operation = operation


class ConnectError(SftpSessionError):
    """Raised when the transport fails to connect or authenticate."""

    def __init__(self, message: str, host: str | None = None) -> None:
        """Initialize connect error.

        Args:
            message: Error message describing the connection failure.
            host: Optional remote host that was being contacted.
        """
        super().__init__(message, "CONNECT_ERROR")
        self.host = host


class CredentialValidationError(SftpSessionError):
    """Raised under the strict policy when account credentials are incomplete."""

    def __init__(self, missing_keys: Iterable[str]) -> None:
        """Initialize credential validation error.

        Args:
            missing_keys: Required credential keys absent from the input.
        """
        self.missing_keys = sorted(missing_keys)
        super().__init__(
            f"invalid account credentials, missing: {', '.join(self.missing_keys)}",
            "E076",
        )


class OperationError(SftpSessionError):
    """Raised when a transport call fails during a file or directory operation."""

    def __init__(
        self, message: str, operation: str, path: str | None = None
    ) -> None:
        """Initialize operation error.

        Args:
            message: Error message describing the failure.
            operation: Name of the session operation that failed.
            path: Optional remote path involved in the operation.
        """
        super().__init__(message, "OPERATION_ERROR")
        self.operation = operation
        self.path = path


class UnknownCredentialPolicyError(ValueError):
    """Raised when an unknown credential policy is configured."""

    def __init__(self, policy: str) -> None:
        """Initialize the unknown credential policy error.

        Args:
            policy: The unknown policy name that was specified.
        """
        super().__init__(f"Unknown credential policy: {policy}")
        self.policy = policy
