# (c) Copyright IBM Corp. 2025

from typing import Any


def is_truthy(value: Any) -> bool:
    """
    Check if a value is truthy, accepting various formats.

    @param value: The value to check
    @return: True if the value is considered truthy, False otherwise

    Accepts the following as True:
    - True (Python boolean)
    - "True", "true" (case-insensitive string)
    - "1" (string)
    - 1 (integer)
    """
    if value is None:
        return False

    if isinstance(value, bool):
        return value

    if isinstance(value, int):
        return value == 1

    if isinstance(value, str):
        value_lower = value.lower()
        return value_lower == "true" or value == "1"

    return False


def split_list(value: Any) -> list:
    """
    Split a comma separated configuration value into a list of trimmed,
    lowercased, non-empty items.  Lists are normalised the same way.
    """
    if value is None:
        return []

    if isinstance(value, str):
        value = value.split(",")

    try:
        return [str(item).strip().lower() for item in value if str(item).strip()]
    except TypeError:
        return []
