"""SFTP Session Package.

A small adapter around an SFTP client library that validates account
credentials, forwards file operations and checks uploads for size mismatches.
"""

from .config import SftpSessionConfig, create_session_config
from .error_log import ErrorLogger, StructlogErrorLogger
from .exceptions import (
    ConnectError,
    CredentialValidationError,
    NotConnectedError,
    OperationError,
    SftpSessionError,
    UnknownCredentialPolicyError,
)
from .factory import create_session, create_transport
from .interfaces import SftpExtendedOperationsInterface, SftpInterface
from .observability import configure_logging
from .register import SessionRegister
from .session import (
    MISSING_FILE_SIZE,
    REQUIRED_ACCOUNT_CREDENTIALS,
    SftpSession,
)
from .transport import PysftpTransport, SftpTransport, SourceMode
from .utils import to_boolean

__version__ = "0.1.0"

__all__ = [
    "MISSING_FILE_SIZE",
    "REQUIRED_ACCOUNT_CREDENTIALS",
    "ConnectError",
    "CredentialValidationError",
    "ErrorLogger",
    "NotConnectedError",
    "OperationError",
    "PysftpTransport",
    "SessionRegister",
    "SftpExtendedOperationsInterface",
    "SftpInterface",
    "SftpSession",
    "SftpSessionConfig",
    "SftpSessionError",
    "SftpTransport",
    "SourceMode",
    "StructlogErrorLogger",
    "UnknownCredentialPolicyError",
    "configure_logging",
    "create_session",
    "create_session_config",
    "create_transport",
    "to_boolean",
]
