"""Helpers for mapping keys coming from decoded documents."""

from typing import Any, Mapping


def normalize_key(key: Any) -> str:
    """Return the string form of a mapping key.

    YAML 1.1 decoders turn keys such as `true`, `yes` or `on` into Python
    booleans and `1` into an int. Matrix field names and candidate values are
    strings, so such keys are converted to their JSON spelling.

    Examples:
        >>> normalize_key(True)
        'true'
        >>> normalize_key(3)
        '3'
    """
    if isinstance(key, bool):
        return "true" if key else "false"
    return str(key)


def normalize_mapping_keys(data: Mapping[Any, Any]) -> dict[str, Any]:
    """Return a shallow copy of `data` with every key normalized.

    Later keys win if two keys collapse to the same string (e.g. `True` and
    `"true"`).
    """
    return {normalize_key(key): value for key, value in data.items()}
