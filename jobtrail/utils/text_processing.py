"""
Text processing utilities shared by the parsing contexts.
"""

import re

# Unicode replacements: problematic char → ASCII (or canonical) equivalent
UNICODE_REPLACEMENTS = {
    # Spaces
    "\u00a0": " ",  # non-breaking space → space
    "\u202f": " ",  # narrow no-break space
    # Zero-width characters → remove
    "\u200b": "",  # zero-width space
    "\u200c": "",  # zero-width non-joiner
    "\u200d": "",  # zero-width joiner
    "\u2060": "",  # word joiner
    "\ufeff": "",  # BOM / zero-width no-break space
    # UTF-8 read as cp1252
    "â€¢": "•",  # bullet
    "â€“": "–",  # en dash
    "â€”": "—",  # em dash
}

# Bullet markers that may start an achievement or skill line
BULLET_PREFIX = re.compile(r"^(?:[-•·▪]|\*(?!\*)|â€¢)\s*")

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def normalize_unicode(text: str) -> str:
    """
    Replace unicode characters that break line-based parsing.

    Unlike NFKC normalization this keeps accented and typographic characters
    intact, so summary text survives a parse/serialize cycle verbatim.

    Args:
        text: Raw text possibly containing problematic unicode

    Returns:
        Text with invisible characters removed and mis-encoded bullets repaired
    """
    for char, replacement in UNICODE_REPLACEMENTS.items():
        text = text.replace(char, replacement)
    return text


def strip_bold(text: str) -> str:
    """Remove ``**`` bold markers, keeping the enclosed text."""
    return text.replace("**", "")


def strip_emphasis(text: str) -> str:
    """Remove every ``*`` emphasis marker and surrounding whitespace."""
    return text.replace("*", "").strip()


def strip_bullet(text: str) -> str:
    """
    Remove a leading bullet marker (``-``, ``•``, ``* `` or mis-encoded variants).

    Example:
        >>> strip_bullet("- Shipped X")
        'Shipped X'
        >>> strip_bullet("â€¢ Led Y")
        'Led Y'
    """
    return BULLET_PREFIX.sub("", text, count=1)


def is_bullet(text: str) -> bool:
    """Check whether a stripped line starts with a bullet marker followed by text."""
    return bool(re.match(r"^(?:[-•·▪]|\*(?!\*)|â€¢)\s+\S", text))


def camel_to_snake(name: str) -> str:
    """
    Convert a camelCase field name to snake_case.

    Example:
        >>> camel_to_snake("startYear")
        'start_year'
        >>> camel_to_snake("start_year")
        'start_year'
    """
    return _CAMEL_BOUNDARY.sub(r"_\1", name).lower()


def truncate_display(text: str, max_len: int) -> str:
    """
    Truncate text for display with ellipsis if needed.

    Example:
        >>> truncate_display("short", 10)
        'short'
        >>> truncate_display("this is a very long string", 10)
        'this is...'
    """
    return text if len(text) <= max_len else text[: max_len - 3] + "..."


def snake_to_camel(name: str) -> str:
    """
    Convert a snake_case attribute name to the camelCase used on the wire.

    Example:
        >>> snake_to_camel("start_year")
        'startYear'
    """
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def camelize_keys(value):
    """Recursively convert dict keys from snake_case to camelCase."""
    if isinstance(value, dict):
        return {snake_to_camel(key): camelize_keys(item) for key, item in value.items()}
    if isinstance(value, list):
        return [camelize_keys(item) for item in value]
    return value
