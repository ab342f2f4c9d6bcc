"""
Résumé content format detection.

Persisted résumé content is either the canonical JSON document or legacy
markdown-ish text. Detection is a pure function of the raw string; malformed
JSON simply demotes the content to free text.
"""

import json
from enum import Enum
from typing import Any, Optional

from jobtrail.contexts.normalization.logger import _log_debug

# Top-level keys that identify the canonical JSON résumé schema
CANONICAL_JSON_KEYS = ("personalInfo", "experiences", "education")


class ContentFormat(str, Enum):
    """Origin tag carried by a parsed résumé."""

    JSON = "json"
    FREEFORM_TEXT = "freeform-text"


def load_canonical_json(raw: Any) -> Optional[dict]:
    """
    Parse raw content as a canonical JSON résumé.

    Args:
        raw: Persisted résumé content

    Returns:
        Parsed dict when raw is a JSON object with personalInfo, experiences
        and education keys, otherwise None
    """
    if not isinstance(raw, str):
        return None

    trimmed = raw.strip()
    if not (trimmed.startswith("{") and trimmed.endswith("}")):
        return None

    try:
        data = json.loads(trimmed)
    except ValueError as e:
        _log_debug(f"Content looks like JSON but failed to parse ({e}); treating as text")
        return None

    if not isinstance(data, dict):
        return None

    missing = [key for key in CANONICAL_JSON_KEYS if key not in data]
    if missing:
        _log_debug(f"JSON content missing {missing}; treating as text")
        return None

    return data


def detect_format(raw: Any) -> ContentFormat:
    """
    Classify persisted résumé content.

    Example:
        >>> detect_format('{"personalInfo": {}, "experiences": [], "education": []}')
        <ContentFormat.JSON: 'json'>
        >>> detect_format('{"personalInfo": {}, "education": []}')
        <ContentFormat.FREEFORM_TEXT: 'freeform-text'>
    """
    if load_canonical_json(raw) is not None:
        return ContentFormat.JSON
    return ContentFormat.FREEFORM_TEXT
