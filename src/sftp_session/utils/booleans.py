"""Boolean coercion for loosely typed configuration values.

Values such as account options or form fields often arrive as strings. The
accepted truth table is:

    True, 1, 1.0                          -> True
    "1", "true", "yes", "on" (any case)   -> True
    everything else (None, "", "0", ...)  -> False
"""

from typing import Any

TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})


def to_boolean(value: Any = None) -> bool:  # noqa: ANN401
    """Coerce `value` into a boolean using the module truth table.

    Args:
        value: The possible boolean value.

    Returns:
        True only for the recognised truthy inputs, False otherwise.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int | float):
        return value == 1
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="ignore")
    if isinstance(value, str):
        return value.strip().lower() in TRUE_STRINGS
    return False
