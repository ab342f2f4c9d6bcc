"""
Intake Context

Responsibilities:
- Sends résumé sections to a structured extraction service (LLM)
- Adapts raw extraction payloads into typed profile entries with defaults
- Sanitizes structured job posting payloads

Owns: Extraction prompts, payload adaptation, JobPosting
Never: Merges into profiles or parses markdown résumés itself
"""

from jobtrail.contexts.intake.extraction import (
    MAX_CONTENT_LENGTH,
    SECTIONS,
    ExtractedPersonalInfo,
    LLMExtractionService,
    SectionExtraction,
    StructuredExtractionService,
    adapt_section_payload,
    build_section_prompt,
    extract_section,
)
from jobtrail.contexts.intake.job_data_structure import (
    PRESENCE_TYPES,
    SALARY_RATE_TYPES,
    JobPosting,
)

__all__ = [
    # Extraction
    "StructuredExtractionService",
    "LLMExtractionService",
    "SectionExtraction",
    "ExtractedPersonalInfo",
    "adapt_section_payload",
    "extract_section",
    "build_section_prompt",
    "SECTIONS",
    "MAX_CONTENT_LENGTH",
    # Job postings
    "JobPosting",
    "SALARY_RATE_TYPES",
    "PRESENCE_TYPES",
]
