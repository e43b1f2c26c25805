"""PyTest configuration and shared test fixtures.

This module provides an in-memory SFTP transport, a recording error logger
and credential fixtures shared by the SFTP session tests.
"""

import posixpath
import stat
from collections.abc import Callable, Generator
from typing import Any

import pytest
import structlog

from sftp_session.session import SftpSession
from sftp_session.transport import SourceMode


class RecordingErrorLogger:
    """Error logger that keeps every reported error in memory."""

    def __init__(self) -> None:
        self.errors: list[tuple[str, str, str]] = []

    def log_error(self, method: str, message: str, trace: str) -> None:
        self.errors.append((method, message, trace))

    @property
    def traces(self) -> list[str]:
        return [trace for _, _, trace in self.errors]


class FakeTransport:
    """In-memory SFTP transport that faithfully stores files and directories.

    Every call is appended to `calls` as ``(method, *args)`` so tests can
    assert on ordering.
    """

    def __init__(self, home: str = "/home/user") -> None:
        self.home = home
        self.cwd = home
        self.files: dict[str, bytes] = {}
        self.dirs: set[str] = {"/", "/home", home}
        self.modes: dict[str, int] = {}
        self.calls: list[tuple[Any, ...]] = []
        self.host: str | None = None
        self.username: str | None = None
        self.password: str | None = None
        self.size_override: dict[str, int] = {}

    def _abs(self, path: str) -> str:
        return posixpath.normpath(posixpath.join(self.cwd, path))

    def connect(self, host: str) -> None:
        self.calls.append(("connect", host))
        self.host = host

    def login(self, username: str, password: str | None) -> None:
        self.calls.append(("login", username, password))
        self.username = username
        self.password = password
        self.cwd = self.home

    def chdir(self, path: str) -> None:
        self.calls.append(("chdir", path))
        target = self._abs(path)
        if target not in self.dirs:
            raise FileNotFoundError(2, "No such file", path)
        self.cwd = target

    def mkdir(self, name: str) -> None:
        self.calls.append(("mkdir", name))
        self.dirs.add(self._abs(name))

    def delete(self, path: str, recursive: bool = False) -> None:
        self.calls.append(("delete", path, recursive))
        target = self._abs(path)
        if target in self.files:
            del self.files[target]
            return
        if target not in self.dirs:
            raise FileNotFoundError(2, "No such file", path)
        children = [p for p in self.files if p.startswith(target + "/")]
        children += [d for d in self.dirs if d.startswith(target + "/")]
        if children and not recursive:
            raise OSError(39, "Directory not empty", path)
        for child in children:
            self.files.pop(child, None)
            self.dirs.discard(child)
        self.dirs.discard(target)

    def size(self, path: str) -> int:
        self.calls.append(("size", path))
        target = self._abs(path)
        if target in self.size_override:
            return self.size_override[target]
        if target not in self.files:
            raise FileNotFoundError(2, "No such file", path)
        return len(self.files[target])

    def put(
        self, remote_path: str, data: Any, mode: SourceMode | int  # noqa: ANN401
    ) -> None:
        mode = SourceMode(mode)
        self.calls.append(("put", remote_path, data, mode))
        if mode is SourceMode.LOCAL_FILE:
            with open(data, "rb") as fh:
                payload = fh.read()
        elif mode is SourceMode.STRING:
            payload = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        else:
            payload = b"".join(iter(data, b""))
        self.files[self._abs(remote_path)] = payload

    def get(self, remote_path: str, local_path: str | None = None) -> bytes | None:
        self.calls.append(("get", remote_path, local_path))
        target = self._abs(remote_path)
        if target not in self.files:
            raise FileNotFoundError(2, "No such file", remote_path)
        if local_path is not None:
            with open(local_path, "wb") as fh:
                fh.write(self.files[target])
            return None
        return self.files[target]

    def rename(self, old_path: str, new_path: str) -> None:
        self.calls.append(("rename", old_path, new_path))
        old, new = self._abs(old_path), self._abs(new_path)
        if old in self.files:
            self.files[new] = self.files.pop(old)
        elif old in self.dirs:
            self.dirs.discard(old)
            self.dirs.add(new)
        else:
            raise FileNotFoundError(2, "No such file", old_path)

    def chmod(self, mode: str | int, path: str, recursive: bool = False) -> None:
        self.calls.append(("chmod", mode, path, recursive))
        self.modes[self._abs(path)] = int(str(mode), 8)

    def touch(self, path: str) -> None:
        self.calls.append(("touch", path))
        self.files.setdefault(self._abs(path), b"")

    def pwd(self) -> str:
        self.calls.append(("pwd",))
        return self.cwd

    def nlist(self) -> list[str]:
        self.calls.append(("nlist",))
        prefix = self.cwd.rstrip("/") + "/"
        names = {
            p[len(prefix) :].split("/", 1)[0]
            for p in [*self.files, *self.dirs]
            if p.startswith(prefix) and p != self.cwd
        }
        return sorted(names)

    def _stat(self, path: str) -> dict[str, Any]:
        target = self._abs(path)
        if target in self.files:
            return {"size": len(self.files[target]), "type": "file",
                    "mode": stat.S_IFREG | self.modes.get(target, 0o644)}
        if target in self.dirs:
            return {"size": 4096, "type": "directory",
                    "mode": stat.S_IFDIR | self.modes.get(target, 0o755)}
        raise FileNotFoundError(2, "No such file", path)

    def stat(self, path: str) -> dict[str, Any]:
        self.calls.append(("stat", path))
        return self._stat(path)

    def lstat(self, path: str) -> dict[str, Any]:
        self.calls.append(("lstat", path))
        return self._stat(path)

    def names(self) -> list[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def credentials() -> dict[str, Any]:
    """Create a complete account credential set."""
    return {
        "id": 7,
        "uuid": "6f1c2a8e-4b5d-4c1e-9a7f-0d3e2b1c4a5f",
        "date": "2024-05-01 12:00:00",
        "is_encrypted": "no",
        "account_host": "sftp.example.com",
        "account_options": "",
        "account_username": "deploy",
        "account_password": "s3cret",
        "default_directory": "/home/user",
        "is_secure_connection": "yes",
    }


@pytest.fixture
def fake_transport() -> FakeTransport:
    """Create an empty in-memory transport."""
    return FakeTransport()


@pytest.fixture
def error_logger() -> RecordingErrorLogger:
    """Create an error logger that records reported errors."""
    return RecordingErrorLogger()


@pytest.fixture
def session(
    fake_transport: FakeTransport, error_logger: RecordingErrorLogger
) -> SftpSession:
    """Create an unconnected session over the in-memory transport."""
    return SftpSession(transport=fake_transport, error_logger=error_logger)


@pytest.fixture
def connected_session(
    session: SftpSession, credentials: dict[str, Any]
) -> SftpSession:
    """Create a session already connected with valid credentials."""
    return session.connect(credentials)


@pytest.fixture
def write_local_file(tmp_path: Any) -> Callable[[str, bytes], str]:  # noqa: ANN401
    """Return a helper that writes a local file and returns its path."""

    def _write(name: str, content: bytes) -> str:
        path = tmp_path / name
        path.write_bytes(content)
        return str(path)

    return _write


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    """Restore structlog defaults after each test."""
    yield
    structlog.reset_defaults()
