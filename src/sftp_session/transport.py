"""SFTP transport collaborator and its pysftp implementation.

This module defines the `SftpTransport` protocol that `SftpSession` delegates
to, the `SourceMode` enumeration used by `put`, and `PysftpTransport`, the
production adapter over `pysftp.Connection`.
"""

import io
import posixpath
import stat
from collections.abc import Callable
from enum import IntEnum
from typing import Any, Protocol, runtime_checkable

import pysftp
import structlog

from sftp_session.exceptions import NotConnectedError

# Get logger for this module
logger = structlog.get_logger(__name__)


class SourceMode(IntEnum):
    """Source of the data handed to `SftpTransport.put`."""

    LOCAL_FILE = 1
    STRING = 2
    CALLBACK = 16


@runtime_checkable
class SftpTransport(Protocol):
    """Interface for the client that speaks SFTP to a remote host."""

    def connect(self, host: str) -> None: ...

    def login(self, username: str, password: str | None) -> None: ...

    def chdir(self, path: str) -> None: ...

    def mkdir(self, name: str) -> None: ...

    def delete(self, path: str, recursive: bool = False) -> None: ...

    def size(self, path: str) -> int:
        """Return the size of `path` in bytes.

        Raises:
            FileNotFoundError: When `path` does not exist.
        """
        ...

    def put(
        self, remote_path: str, data: Any, mode: SourceMode | int  # noqa: ANN401
    ) -> None: ...

    def get(self, remote_path: str, local_path: str | None = None) -> bytes | None: ...

    def rename(self, old_path: str, new_path: str) -> None: ...

    def chmod(self, mode: str | int, path: str, recursive: bool = False) -> None: ...

    def touch(self, path: str) -> None: ...

    def pwd(self) -> str: ...

    def nlist(self) -> list[str]: ...

    def stat(self, path: str) -> dict[str, Any]: ...

    def lstat(self, path: str) -> dict[str, Any]: ...


def _file_type(st_mode: int | None) -> str:
    if st_mode is None:
        return "unknown"
    if stat.S_ISDIR(st_mode):
        return "directory"
    if stat.S_ISLNK(st_mode):
        return "link"
    if stat.S_ISREG(st_mode):
        return "file"
    return "other"


def _attributes_to_dict(attributes: Any) -> dict[str, Any]:  # noqa: ANN401
    """Convert paramiko `SFTPAttributes` into a plain metadata mapping."""
    st_mode = getattr(attributes, "st_mode", None)
    return {
        "size": getattr(attributes, "st_size", None),
        "uid": getattr(attributes, "st_uid", None),
        "gid": getattr(attributes, "st_gid", None),
        "mode": st_mode,
        "permissions": stat.S_IMODE(st_mode) if st_mode is not None else None,
        "atime": getattr(attributes, "st_atime", None),
        "mtime": getattr(attributes, "st_mtime", None),
        "type": _file_type(st_mode),
    }


def _stream_from_callback(callback: Callable[[], bytes | str | None]) -> io.BytesIO:
    """Drain `callback` until it returns an empty chunk or None."""
    buffer = io.BytesIO()
    while True:
        chunk = callback()
        if not chunk:
            break
        buffer.write(chunk.encode("utf-8") if isinstance(chunk, str) else chunk)
    buffer.seek(0)
    return buffer


def _octal_mode(mode: str | int) -> int:
    """Normalise "0755" / "755" / 755 into the digits form pysftp expects."""
    return int(str(mode).strip().lstrip("0") or "0")


class PysftpTransport:
    """`SftpTransport` backed by a `pysftp.Connection`.

    `connect` only records the host; pysftp authenticates while opening the
    connection, so the connection itself is created by `login`.
    """

    def __init__(
        self,
        port: int = 22,
        known_hosts: str | None = None,
        private_key: str | None = None,
        private_key_pass: str | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            port: SSH port of the remote host.
            known_hosts: Path to a known_hosts file. When None host key
                checking is disabled.
            private_key: Optional path to a private key used for login.
            private_key_pass: Optional passphrase for `private_key`.
        """
        self.port = port
        self.known_hosts = known_hosts
        self.private_key = private_key
        self.private_key_pass = private_key_pass
        self._host: str | None = None
        self._connection: pysftp.Connection | None = None

    @property
    def connection(self) -> pysftp.Connection:
        if self._connection is None:
            raise NotConnectedError("transport")
        return self._connection

    def _cnopts(self) -> pysftp.CnOpts:
        if self.known_hosts:
            return pysftp.CnOpts(knownhosts=self.known_hosts)
        cnopts = pysftp.CnOpts()
        cnopts.hostkeys = None
        return cnopts

    def connect(self, host: str) -> None:
        if not host:
            msg = "SFTP host must be a non-empty string"
            raise ValueError(msg)
        self._host = host

    def login(self, username: str, password: str | None) -> None:
        if self._host is None:
            raise NotConnectedError("login")

        # Reconnecting replaces the previous connection
        self.close()
        logger.info(
            "Opening SFTP connection",
            host=self._host,
            port=self.port,
            username=username,
            host_key_checking=bool(self.known_hosts),
        )
        self._connection = pysftp.Connection(
            host=self._host,
            username=username,
            password=password,
            private_key=self.private_key,
            private_key_pass=self.private_key_pass,
            port=self.port,
            cnopts=self._cnopts(),
        )

    def close(self) -> None:
        """Close the underlying connection if one is open."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None
            logger.info("SFTP connection closed", host=self._host)

    def chdir(self, path: str) -> None:
        self.connection.chdir(path)

    def mkdir(self, name: str) -> None:
        self.connection.mkdir(name)

    def delete(self, path: str, recursive: bool = False) -> None:
        conn = self.connection
        if not conn.isdir(path):
            conn.remove(path)
        elif recursive:
            self._remove_tree(path)
        else:
            conn.rmdir(path)

    def _remove_tree(self, path: str) -> None:
        client = self.connection.sftp_client
        for entry in client.listdir_attr(path):
            child = posixpath.join(path, entry.filename)
            if entry.st_mode is not None and stat.S_ISDIR(entry.st_mode):
                self._remove_tree(child)
            else:
                client.remove(child)
        client.rmdir(path)

    def size(self, path: str) -> int:
        return int(self.connection.stat(path).st_size or 0)

    def put(
        self, remote_path: str, data: Any, mode: SourceMode | int  # noqa: ANN401
    ) -> None:
        try:
            mode = SourceMode(mode)
        except ValueError:
            msg = f"Unsupported source mode: {mode!r}"
            raise ValueError(msg) from None

        conn = self.connection
        if mode is SourceMode.LOCAL_FILE:
            conn.put(data, remote_path)
        elif mode is SourceMode.STRING:
            payload = data.encode("utf-8") if isinstance(data, str) else bytes(data)
            conn.putfo(io.BytesIO(payload), remote_path)
        elif mode is SourceMode.CALLBACK:
            conn.putfo(_stream_from_callback(data), remote_path)

    def get(self, remote_path: str, local_path: str | None = None) -> bytes | None:
        conn = self.connection
        if local_path is not None:
            conn.get(remote_path, local_path)
            return None
        buffer = io.BytesIO()
        conn.getfo(remote_path, buffer)
        return buffer.getvalue()

    def rename(self, old_path: str, new_path: str) -> None:
        self.connection.rename(old_path, new_path)

    def chmod(self, mode: str | int, path: str, recursive: bool = False) -> None:
        conn = self.connection
        digits = _octal_mode(mode)
        conn.chmod(path, mode=digits)
        if recursive and conn.isdir(path):

            def _apply(child: str) -> None:
                conn.chmod(child, mode=digits)

            conn.walktree(path, _apply, _apply, _apply, recurse=True)

    def touch(self, path: str) -> None:
        client = self.connection.sftp_client
        with client.open(path, "a"):
            pass
        client.utime(path, None)

    def pwd(self) -> str:
        return self.connection.pwd

    def nlist(self) -> list[str]:
        return list(self.connection.listdir())

    def stat(self, path: str) -> dict[str, Any]:
        return _attributes_to_dict(self.connection.stat(path))

    def lstat(self, path: str) -> dict[str, Any]:
        return _attributes_to_dict(self.connection.lstat(path))
