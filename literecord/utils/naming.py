"""Name-casing helpers used to derive table names from record class names."""

from __future__ import annotations

import re

_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def smallcase(name: str) -> str:
    """
    Convert a CamelCase type name to its snake_case table name.

    Examples
    --------
        >>> smallcase("User")
        'user'
        >>> smallcase("UserProfile")
        'user_profile'
        >>> smallcase("HTTPRequestLog")
        'http_request_log'
    """
    return _BOUNDARY.sub("_", name).lower()


def camelcase(name: str) -> str:
    """Inverse of `smallcase`: ``user_profile`` -> ``UserProfile``."""
    return "".join(part.capitalize() for part in name.split("_") if part)


__all__ = ["smallcase", "camelcase"]
