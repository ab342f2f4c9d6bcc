"""Identifier helpers for entries that have not been persisted yet."""

import uuid


def new_id(prefix: str) -> str:
    """
    Generate a short unique id with a collection prefix.

    Example:
        >>> new_id("exp")  # doctest: +SKIP
        'exp-3f9a1c2b'
    """
    return f"{prefix}-{uuid.uuid4().hex[:8]}"
