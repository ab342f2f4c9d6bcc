"""
ResumeDocument: parsed résumé content tagged with its origin format.

parse_resume() is the only entry point for turning persisted résumé content
into structured data, and serialize_resume() writes it back in the same
format. Call sites never re-detect the format from content.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

from jobtrail.contexts.normalization.cv_data_structure import CVContent
from jobtrail.contexts.normalization.field_extractors import parse_markdown_cv
from jobtrail.contexts.normalization.format_detector import ContentFormat, load_canonical_json
from jobtrail.contexts.normalization.json_adapter import (
    SkillBucketStrategy,
    json_to_cv,
    proportional_skill_buckets,
)
from jobtrail.contexts.normalization.logger import _log_debug
from jobtrail.contexts.normalization.section_patterns import KeywordConfig
from jobtrail.contexts.normalization.serializer import serialize_cv
from jobtrail.contexts.normalization.uncertainty import UncertaintyTracker


@dataclass
class ResumeDocument:
    """
    Structured résumé plus everything needed to write it back.

    Attributes:
        content: Structured résumé content
        origin: Format the content was parsed from
        uncertainties: Collection name → UncertaintyTracker ("personal",
            "experiences", "education")
        source: Originally parsed JSON document (JSON origin only)
        has_input: True when the raw content was non-blank
    """

    content: CVContent
    origin: ContentFormat
    uncertainties: Dict[str, UncertaintyTracker] = field(default_factory=dict)
    source: Optional[Dict[str, Any]] = None
    has_input: bool = False

    @property
    def extraction_failed(self) -> bool:
        """Non-blank input produced no entries and no summary."""
        return self.has_input and self.content.entry_count == 0 and not self.content.summary

    @property
    def uncertainty_count(self) -> int:
        return sum(len(tracker) for tracker in self.uncertainties.values())

    def tracker(self, collection: str) -> UncertaintyTracker:
        """Tracker for a collection, created empty on first use."""
        return self.uncertainties.setdefault(collection, UncertaintyTracker())

    def with_content(self, content: CVContent) -> "ResumeDocument":
        return replace(self, content=content)

    def edit_entry(self, collection: str, entry_index: int, **updates) -> "ResumeDocument":
        """
        Edit one entry of "experiences" or "education" and clear the
        uncertainty markers of the edited fields.

        Example:
            >>> doc = parse_resume("## Experience\\n### **Engineer**")
            >>> doc.tracker("experiences").has(0, "company")
            True
            >>> doc = doc.edit_entry("experiences", 0, company="Acme")
            >>> doc.tracker("experiences").has(0, "company")
            False
        """
        entries = self.tracker(collection).record_edit(
            getattr(self.content, collection), entry_index, updates
        )
        return self.with_content(replace(self.content, **{collection: entries}))

    def serialize(self, skill_buckets: SkillBucketStrategy = proportional_skill_buckets) -> str:
        return serialize_resume(self, skill_buckets=skill_buckets)


def parse_resume(raw: Any, config: Optional[KeywordConfig] = None) -> ResumeDocument:
    """
    Parse persisted résumé content of either format.

    Never raises: invalid JSON demotes to text parsing, and text that yields
    nothing gives an empty document with extraction_failed set.

    Args:
        raw: Persisted résumé content (JSON string or legacy text)
        config: Keyword configuration for the text parser

    Returns:
        ResumeDocument tagged with its origin
    """
    text = raw if isinstance(raw, str) else ""
    has_input = bool(text.strip())

    data = load_canonical_json(text)
    if data is not None:
        _log_debug("Detected canonical JSON résumé")
        return ResumeDocument(
            content=json_to_cv(data, config),
            origin=ContentFormat.JSON,
            source=data,
            has_input=has_input,
        )

    content, uncertainties = parse_markdown_cv(text, config)
    _log_debug(
        f"Parsed text résumé: {len(content.experiences)} experiences, "
        f"{len(content.education)} education, {len(content.skills)} skills"
    )
    return ResumeDocument(
        content=content,
        origin=ContentFormat.FREEFORM_TEXT,
        uncertainties=uncertainties,
        has_input=has_input,
    )


def serialize_resume(
    document: ResumeDocument, skill_buckets: SkillBucketStrategy = proportional_skill_buckets
) -> str:
    """Write a ResumeDocument back in the format it was parsed from."""
    return serialize_cv(
        document.content,
        document.origin,
        source=document.source,
        skill_buckets=skill_buckets,
    )
