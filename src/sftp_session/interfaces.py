"""Public interfaces implemented by SFTP sessions.

The core connection and transfer operations and the extended convenience
operations are split into two focused protocols. `SftpSession` satisfies
both structurally.
"""

from collections.abc import Mapping
from typing import Any, Protocol, Self, runtime_checkable


@runtime_checkable
class SftpInterface(Protocol):
    """Core connection, directory and transfer operations."""

    def connect(self, credentials: Mapping[str, Any]) -> Self: ...

    def change_directory(self, path: str) -> Self: ...

    def create_directory(self, absolute_path: str) -> Self: ...

    def delete_directory(self, absolute_path: str, recursive: bool = False) -> Self: ...

    def get_file_size(self, absolute_path: str) -> int: ...

    def upload_file(self, remote_path: str, local_path: str) -> Self: ...

    def delete_file(self, absolute_path: str) -> Self: ...

    def download_file(self, remote_path: str, local_path: str) -> Self: ...

    def chmod(
        self, mode: str | int, absolute_path: str, recursive: bool = False
    ) -> Self: ...

    def get_pwd(self) -> str: ...


@runtime_checkable
class SftpExtendedOperationsInterface(Protocol):
    """Convenience operations built on the same transport handle."""

    def rename_file(self, old_path: str, new_path: str) -> Self: ...

    def rename_directory(self, old_path: str, new_path: str) -> Self: ...

    def touch(self, path: str) -> Self: ...

    def upload_string(self, remote_path: str, content: str) -> Self: ...

    def download_string(self, remote_path: str) -> str: ...

    def get_ls(self, path: str | None = None) -> list[str]: ...

    def get_stat(self, path: str) -> dict[str, Any]: ...

    def get_lstat(self, path: str) -> dict[str, Any]: ...

    def check_for_same_file_size(self, remote_file: str, local_file: str) -> Self: ...

    def to_boolean(self, value: Any = None) -> bool: ...  # noqa: ANN401
