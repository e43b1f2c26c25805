"""Merge-only key-value register for session metadata.

The register is seeded with the account credentials on a successful connect
and can be extended later by any caller. Entries are never removed.
"""

from collections.abc import Iterator, Mapping
from typing import Any


class SessionRegister(Mapping[str, Any]):
    """Read-only mapping that only grows through `merge`."""

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(initial or {})

    def merge(self, subset: Mapping[str, Any]) -> "SessionRegister":
        """Merge `subset` into the register, overriding existing keys.

        Args:
            subset: Mapping of attributes to add.

        Returns:
            The register itself, for chaining.
        """
        self._data.update(subset)
        return self

    def has(self, key: str) -> bool:
        return key in self._data

    def all(self) -> dict[str, Any]:
        """Return a shallow copy of every stored attribute."""
        return dict(self._data)

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"SessionRegister(keys={sorted(self._data)!r})"
