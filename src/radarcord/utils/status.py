"""HTTP status helpers."""

from __future__ import annotations


def is_ok(code: int) -> bool:
    """Check whether an HTTP status code is a 2xx success.

    Args:
        code: HTTP status code

    Returns:
        True if ``200 <= code < 300``

    Raises:
        TypeError: If code is not a number

    Examples:
        >>> is_ok(204)
        True
        >>> is_ok(404)
        False
    """
    if isinstance(code, bool) or not isinstance(code, (int, float)):  # pyright: ignore[reportUnnecessaryIsInstance]
        raise TypeError(f"Invalid type passed to is_ok, expected number, got {type(code).__name__} instead.")
    return 200 <= code < 300
