"""SFTP session: credential-validated connection and file operations.

This module provides the `SftpSession` class, which owns a single transport
handle, validates account credentials before connecting, and forwards file
and directory operations to the transport. Uploads are followed by a size
comparison between the local and remote file.
"""

import contextlib
import os
import posixpath
import threading
from collections.abc import Iterator, Mapping
from typing import Any, Self

import structlog

from sftp_session.error_log import (
    FILE_SIZE_MISMATCH,
    INVALID_CREDENTIALS,
    UNREADABLE_LOCAL_FILE,
    ErrorLogger,
    StructlogErrorLogger,
)
from sftp_session.exceptions import (
    ConnectError,
    CredentialValidationError,
    NotConnectedError,
    OperationError,
    SftpSessionError,
    UnknownCredentialPolicyError,
)
from sftp_session.register import SessionRegister
from sftp_session.transport import SftpTransport, SourceMode
from sftp_session.utils.booleans import to_boolean

# Get logger for this module
logger = structlog.get_logger(__name__)

REQUIRED_ACCOUNT_CREDENTIALS = frozenset(
    {
        "id",
        "uuid",
        "date",
        "is_encrypted",
        "account_host",
        "account_options",
        "account_username",
        "account_password",
        "default_directory",
        "is_secure_connection",
    }
)

# Returned by get_file_size when the remote path does not exist
MISSING_FILE_SIZE = -1

# "legacy" logs invalid credentials and still connects; "strict" raises
CREDENTIAL_POLICY_LEGACY = "legacy"
CREDENTIAL_POLICY_STRICT = "strict"
CREDENTIAL_POLICIES = (CREDENTIAL_POLICY_LEGACY, CREDENTIAL_POLICY_STRICT)


def split_remote_path(path: str) -> tuple[str, str]:
    """Split a remote path into its parent directory and leaf name.

    Trailing slashes are ignored, so ``/a/b/`` splits like ``/a/b``.
    """
    trimmed = path.rstrip("/") or "/"
    parent, leaf = posixpath.split(trimmed)
    return parent or ".", leaf


def _split_for(operation: str, path: str) -> tuple[str, str]:
    parent, leaf = split_remote_path(path)
    if not leaf:
        msg = f"SFTP {operation} needs a path with a final component, got {path!r}"
        raise OperationError(msg, operation, path)
    return parent, leaf


def _local_file_size(path: str) -> int | None:
    try:
        return os.path.getsize(path)
    except OSError:
        return None


class SftpSession:
    """A single remote SFTP session.

    The session starts disconnected. `connect` validates the credential set,
    merges it into the session register and opens the transport. Every other
    operation requires a connected transport and raises `NotConnectedError`
    otherwise. Mutating operations return the session for chaining.
    """

    def __init__(
        self,
        transport: SftpTransport,
        error_logger: ErrorLogger | None = None,
        credential_policy: str = CREDENTIAL_POLICY_LEGACY,
    ) -> None:
        """Initialize the session.

        Args:
            transport: Unconnected transport used for all remote calls.
            error_logger: Sink for logical errors. Defaults to structlog.
            credential_policy: ``"legacy"`` to log incomplete credentials and
                connect anyway, ``"strict"`` to raise instead.
        """
        if credential_policy not in CREDENTIAL_POLICIES:
            raise UnknownCredentialPolicyError(credential_policy)

        self._client = transport
        self._transport: SftpTransport | None = None
        self._error_logger = error_logger or StructlogErrorLogger()
        self._credential_policy = credential_policy
        self._register = SessionRegister()
        self._lock = threading.RLock()

    @property
    def register(self) -> SessionRegister:
        return self._register

    @property
    def is_connected(self) -> bool:
        return self._transport is not None

    @property
    def credential_policy(self) -> str:
        return self._credential_policy

    def append_to_register(self, subset: Mapping[str, Any]) -> Self:
        """Merge additional attributes into the session register."""
        self._register.merge(subset)
        return self

    def get(self, key: str, default: Any = None) -> Any:  # noqa: ANN401
        return self._register.get(key, default)

    def has(self, key: str) -> bool:
        return self._register.has(key)

    def all(self) -> dict[str, Any]:
        return self._register.all()

    def log_error(self, method: str, message: str, trace: str) -> None:
        self._error_logger.log_error(method, message, trace)

    def _require_transport(self, operation: str) -> SftpTransport:
        if self._transport is None:
            raise NotConnectedError(operation)
        return self._transport

    @contextlib.contextmanager
    def _operation(
        self, operation: str, path: str | None = None
    ) -> Iterator[SftpTransport]:
        """Hold the session lock and wrap transport failures."""
        with self._lock:
            transport = self._require_transport(operation)
            try:
                yield transport
            except SftpSessionError:
                raise
            except Exception as e:
                msg = f"SFTP {operation} failed: {e}"
                raise OperationError(msg, operation, path) from e

    # Connection

    @staticmethod
    def missing_credentials(credentials: Mapping[str, Any]) -> set[str]:
        """Return the required credential keys absent from `credentials`."""
        return set(REQUIRED_ACCOUNT_CREDENTIALS) - set(credentials.keys())

    def is_valid_account_credentials(self, credentials: Mapping[str, Any]) -> bool:
        return not self.missing_credentials(credentials)

    def connect(self, credentials: Mapping[str, Any]) -> Self:
        """Validate `credentials` and open the transport connection.

        On a successful login the working directory is whatever the remote
        account defaults to, usually its home directory.

        Args:
            credentials: The remote account credential set.

        Returns:
            The connected session.

        Raises:
            CredentialValidationError: Under the strict policy, when required
                keys are missing.
            ConnectError: When the transport fails to connect or log in.
        """
        with self._lock:
            missing = self.missing_credentials(credentials)
            if missing:
                self.log_error(
                    "connect", "invalid account credentials", INVALID_CREDENTIALS
                )
                logger.warning(
                    "Incomplete SFTP account credentials",
                    missing_keys=sorted(missing),
                    credential_policy=self._credential_policy,
                )
                if self._credential_policy == CREDENTIAL_POLICY_STRICT:
                    raise CredentialValidationError(missing)
            else:
                self._register.merge(credentials)

            host = self._register.get("account_host")
            username = self._register.get("account_username")
            password = self._register.get("account_password")

            transport = self._client
            try:
                transport.connect(host)
                transport.login(username, password)
            except Exception as e:
                msg = f"Failed to connect to SFTP server {host}: {e}"
                raise ConnectError(msg, host=host) from e

            self._transport = transport
            logger.debug("SFTP session connected", host=host, username=username)
            return self

    # Directory operations

    def change_directory(self, path: str) -> Self:
        with self._operation("change_directory", path) as transport:
            transport.chdir(path)
        return self

    def create_directory(self, absolute_path: str) -> Self:
        """Create a directory; `absolute_path` must be absolute."""
        parent, leaf = _split_for("create_directory", absolute_path)
        with self._operation("create_directory", absolute_path) as transport:
            transport.chdir(parent)
            transport.mkdir(leaf)
        return self

    def delete_directory(self, absolute_path: str, recursive: bool = False) -> Self:
        """Delete a directory, optionally with all of its contents."""
        parent, leaf = _split_for("delete_directory", absolute_path)
        with self._operation("delete_directory", absolute_path) as transport:
            transport.chdir(parent)
            transport.delete(leaf, self.to_boolean(recursive))
        return self

    def chmod(
        self, mode: str | int, absolute_path: str, recursive: bool = False
    ) -> Self:
        """Change permissions of a remote file or directory."""
        parent, leaf = _split_for("chmod", absolute_path)
        with self._operation("chmod", absolute_path) as transport:
            transport.chdir(parent)
            transport.chmod(mode, leaf, self.to_boolean(recursive))
        return self

    def get_pwd(self) -> str:
        with self._operation("get_pwd") as transport:
            return transport.pwd()

    def get_ls(self, path: str | None = None) -> list[str]:
        """List a directory, like ``/bin/ls``.

        With a `path`, the working directory is changed for the listing and
        restored afterwards.
        """
        with self._operation("get_ls", path) as transport:
            if path is None:
                return list(transport.nlist())

            previous = transport.pwd()
            transport.chdir(path)
            try:
                return list(transport.nlist())
            finally:
                transport.chdir(previous)

    # File operations

    def get_file_size(self, absolute_path: str) -> int:
        """Return the remote file size, or `MISSING_FILE_SIZE` if absent."""
        with self._operation("get_file_size", absolute_path) as transport:
            try:
                return int(transport.size(absolute_path))
            except FileNotFoundError:
                return MISSING_FILE_SIZE

    def upload_file(self, remote_path: str, local_path: str) -> Self:
        """Upload a local file, then compare local and remote sizes.

        An unreadable local file and a size mismatch are both reported to the
        error logger; neither raises.
        """
        with self._operation("upload_file", remote_path) as transport:
            if os.path.isfile(local_path) and os.access(local_path, os.R_OK):
                transport.put(remote_path, local_path, SourceMode.LOCAL_FILE)
                logger.debug(
                    "Uploaded local file",
                    remote_path=remote_path,
                    local_path=local_path,
                )
            else:
                self.log_error(
                    "upload_file",
                    f"cannot read/find local file (check local path): {local_path}",
                    UNREADABLE_LOCAL_FILE,
                )

            self.check_for_same_file_size(remote_path, local_path)
        return self

    def check_for_same_file_size(self, remote_file: str, local_file: str) -> Self:
        remote_size = self.get_file_size(remote_file)
        local_size = _local_file_size(local_file)
        if local_size is None or remote_size != local_size:
            local_repr = "missing" if local_size is None else str(local_size)
            self.log_error(
                "check_for_same_file_size",
                f"Error: The remote/local file size do not match: {remote_size}/{local_repr}",
                FILE_SIZE_MISMATCH,
            )
        return self

    def delete_file(self, absolute_path: str) -> Self:
        with self._operation("delete_file", absolute_path) as transport:
            transport.delete(absolute_path)
        return self

    def download_file(self, remote_path: str, local_path: str) -> Self:
        with self._operation("download_file", remote_path) as transport:
            transport.get(remote_path, local_path)
        return self

    def rename_file(self, old_path: str, new_path: str) -> Self:
        with self._operation("rename_file", old_path) as transport:
            transport.rename(old_path, new_path)
        return self

    def rename_directory(self, old_path: str, new_path: str) -> Self:
        with self._operation("rename_directory", old_path) as transport:
            transport.rename(old_path, new_path)
        return self

    def touch(self, path: str) -> Self:
        """Update access/modification time of `path`, creating it if missing."""
        with self._operation("touch", path) as transport:
            transport.touch(path)
        return self

    def upload_string(self, remote_path: str, content: str) -> Self:
        """Write `content` to `remote_path` as UTF-8 text."""
        if not isinstance(content, str):
            msg = f"upload_string expects str content, got {type(content).__name__}"
            raise TypeError(msg)
        with self._operation("upload_string", remote_path) as transport:
            transport.put(remote_path, content, SourceMode.STRING)
        return self

    def download_string(self, remote_path: str) -> str:
        with self._operation("download_string", remote_path) as transport:
            data = transport.get(remote_path)
            if isinstance(data, bytes | bytearray):
                return bytes(data).decode("utf-8")
        return "" if data is None else str(data)

    def get_stat(self, path: str) -> dict[str, Any]:
        with self._operation("get_stat", path) as transport:
            return dict(transport.stat(path))

    def get_lstat(self, path: str) -> dict[str, Any]:
        with self._operation("get_lstat", path) as transport:
            return dict(transport.lstat(path))

    @staticmethod
    def to_boolean(value: Any = None) -> bool:  # noqa: ANN401
        return to_boolean(value)
