"""
Normalization Context

Responsibilities:
- Detects the format of persisted résumé content (canonical JSON or legacy text)
- Splits legacy text résumés into sections and extracts structured fields
- Converts between the canonical JSON schema and the editor representation
- Serializes edited content back in its original format
- Tracks per-field uncertainty until a human edits the field

Owns: Résumé representation, text ↔ structured data conversion
Never: Touches the user profile or calls external services
"""

from jobtrail.contexts.normalization.cv_data_structure import (
    CVContent,
    Education,
    Experience,
    PersonalInfo,
    Project,
)
from jobtrail.contexts.normalization.format_detector import ContentFormat, detect_format
from jobtrail.contexts.normalization.json_adapter import (
    cv_to_json,
    json_to_cv,
    proportional_skill_buckets,
    source_skill_buckets,
)
from jobtrail.contexts.normalization.resume_document import (
    ResumeDocument,
    parse_resume,
    serialize_resume,
)
from jobtrail.contexts.normalization.serializer import serialize_cv
from jobtrail.contexts.normalization.uncertainty import Uncertainty, UncertaintyTracker

__all__ = [
    # Orchestration
    "parse_resume",
    "serialize_resume",
    "ResumeDocument",
    "detect_format",
    "ContentFormat",
    # Conversion
    "json_to_cv",
    "cv_to_json",
    "serialize_cv",
    "proportional_skill_buckets",
    "source_skill_buckets",
    # Data structure classes
    "CVContent",
    "PersonalInfo",
    "Experience",
    "Education",
    "Project",
    "Uncertainty",
    "UncertaintyTracker",
]
