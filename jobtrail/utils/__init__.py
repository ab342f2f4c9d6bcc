"""
Shared utilities for jobtrail.

Common functionality used across contexts:
- Logger setup
- Text processing
- Identifier generation
- LLM provider abstraction
"""

from jobtrail.utils.identifiers import new_id
from jobtrail.utils.text_processing import normalize_unicode, truncate_display

__all__ = ["new_id", "normalize_unicode", "truncate_display"]
