"""
Structured extraction of résumé sections through an external service.

The service (an LLM in production) returns a raw JSON payload per section:

    {"entries": [...], "uncertainties": [{"entryIndex", "field", "reason"}]}

or, for the personal section, {"personal": {...}, "uncertainties": [...]}.
adapt_section_payload() turns that payload into typed profile entries with
safe defaults; extract_section() wraps the whole round trip and never raises.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

from jobtrail.contexts.intake.logger import _log_debug, _log_error, _log_warning
from jobtrail.contexts.normalization.uncertainty import UncertaintyTracker
from jobtrail.contexts.profile.profile_data_structure import (
    SKILL_CATEGORIES,
    SKILL_PROFICIENCIES,
    ProfileEducation,
    Skill,
    WorkExperience,
)
from jobtrail.utils.llm import LLMProvider, get_provider, parse_json_object_response
from jobtrail.utils.text_processing import truncate_display

SECTIONS = ("education", "experience", "skills", "personal")

# Longest section content accepted for extraction
MAX_CONTENT_LENGTH = 50_000
PAYLOAD_PREVIEW_LENGTH = 500

# Extraction section → profile collection receiving its entries
SECTION_COLLECTIONS = {
    "education": "education",
    "experience": "work_experience",
    "skills": "skills",
}

# =============================================================================
# PROMPT TEMPLATES
# =============================================================================

_SYSTEM_PROMPT = """\
You extract structured data from CV/resume text.
Return ONLY a JSON object in the requested format. Use null for values you cannot find.
Flag every value you had to guess or infer in the "uncertainties" array."""

_UNCERTAINTY_FORMAT = """\
  "uncertainties": [{"entryIndex": number, "field": "string", "reason": "string"}]"""

_SECTION_INSTRUCTIONS = {
    "education": """\
Extract ALL education entries. For each entry: degree, institution, field (of study),
startYear (number), endYear (number, null if still studying), current (boolean),
gpa (string or null), honors (string or null).

Format:
{
  "entries": [{"degree": "string", "institution": "string", "field": "string",
               "startYear": number, "endYear": number | null, "current": boolean,
               "gpa": "string or null", "honors": "string or null"}],
%(uncertainties)s
}""",
    "experience": """\
Extract ALL work experience entries. For each entry: title, company, location (or null),
startDate and endDate in dd-mm-yyyy format (use the 1st when only month/year is given,
01-01-yyyy when only the year is given; endDate null if current), current (boolean),
achievements (array of strings).

Format:
{
  "entries": [{"title": "string", "company": "string", "location": "string or null",
               "startDate": "dd-mm-yyyy", "endDate": "dd-mm-yyyy or null",
               "current": boolean, "achievements": ["string"]}],
%(uncertainties)s
}""",
    "skills": """\
Extract ALL skills. For each skill: name; category, one of "technical", "soft",
"language", "tool"; proficiency, one of "beginner", "intermediate", "advanced",
"expert", only when explicitly stated in the text, otherwise null.

Format:
{
  "entries": [{"name": "string", "category": "string", "proficiency": "string or null"}],
%(uncertainties)s
}""",
    "personal": """\
Extract the person's contact details: fullName, email, phone, address (city, country),
age (number; compute from date of birth if given), languages (array of
{"language", "proficiency"}), portfolio (website or LinkedIn URL).

Format:
{
  "personal": {"fullName": "string or null", "email": "string or null",
               "phone": "string or null", "address": "string or null",
               "age": number | null, "languages": [], "portfolio": "string or null"},
%(uncertainties)s
}""",
}

_USER_PROMPT_TEMPLATE = """\
%(instructions)s

---
TEXT TO PARSE:
%(content)s"""


def build_section_prompt(section: str, content: str) -> str:
    """
    Build the user prompt for one section.

    Raises:
        KeyError: If section is not one of SECTIONS
    """
    instructions = _SECTION_INSTRUCTIONS[section] % {"uncertainties": _UNCERTAINTY_FORMAT}
    return _USER_PROMPT_TEMPLATE % {"instructions": instructions, "content": content}


# =============================================================================
# SERVICES
# =============================================================================


class StructuredExtractionService(ABC):
    """Turns the raw text of one résumé section into a JSON payload."""

    @abstractmethod
    def extract(self, section: str, content: str) -> Dict[str, Any]:
        """
        Extract a raw payload from section text.

        Raises:
            ValueError: If the service response can't be read as a JSON object
        """
        pass


class LLMExtractionService(StructuredExtractionService):
    """
    Extraction service backed by an LLMProvider.

    The provider is created on first use from LLM_PROVIDER unless one is
    passed in.
    """

    def __init__(
        self,
        provider: Optional[LLMProvider] = None,
        provider_name: Optional[str] = None,
        model: Optional[str] = None,
    ):
        self._provider = provider
        self._provider_name = provider_name
        self._model = model

    @property
    def provider(self) -> LLMProvider:
        if self._provider is None:
            self._provider = get_provider(provider_name=self._provider_name, model=self._model)
        return self._provider

    def extract(self, section: str, content: str) -> Dict[str, Any]:
        response = self.provider.generate(
            system_prompt=_SYSTEM_PROMPT,
            user_prompt=build_section_prompt(section, content),
        )
        _log_debug(
            f"{response.model}: {response.input_tokens} in / {response.output_tokens} out tokens"
        )
        payload = parse_json_object_response(response.content)
        if payload is None:
            raise ValueError(f"No JSON object in {section} extraction response")
        return payload


# =============================================================================
# PAYLOAD ADAPTATION
# =============================================================================


@dataclass
class ExtractedPersonalInfo:
    """Contact details from a "personal" extraction payload."""

    full_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    age: Optional[int] = None
    languages: List[Dict[str, str]] = field(default_factory=list)
    portfolio: str = ""

    def languages_text(self) -> str:
        """
        Render languages as "French (native), English (professional)".

        This is the free-text form parse_languages_text() reads.
        """
        parts = []
        for item in self.languages:
            name = str(item.get("language") or "").strip()
            if not name:
                continue
            level = str(item.get("proficiency") or "").strip()
            parts.append(f"{name} ({level})" if level else name)
        return ", ".join(parts)


@dataclass
class SectionExtraction:
    """
    Typed result of extracting one section.

    Attributes:
        section: "education", "experience", "skills" or "personal"
        entries: Typed entries (ProfileEducation, WorkExperience or Skill)
        personal: Contact details (personal section only)
        uncertainties: Markers from the service, unmodified
        success: False when extraction could not run or failed
        error: Failure description
    """

    section: str
    entries: List[Any] = field(default_factory=list)
    personal: Optional[ExtractedPersonalInfo] = None
    uncertainties: UncertaintyTracker = field(default_factory=UncertaintyTracker)
    success: bool = True
    error: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        """True when a successful extraction produced nothing."""
        return self.success and not self.entries and self.personal is None

    @property
    def collection(self) -> Optional[str]:
        """Profile collection the entries belong to (None for personal)."""
        return SECTION_COLLECTIONS.get(self.section)

    @classmethod
    def failed(cls, section: str, error: str) -> "SectionExtraction":
        return cls(section=section, success=False, error=error)


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _year(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip()[:4])
    except (TypeError, ValueError):
        return None


def _education_entry(item: Dict[str, Any], year: int) -> ProfileEducation:
    return ProfileEducation(
        degree=_text(item.get("degree")),
        institution=_text(item.get("institution")),
        field=_text(item.get("field")),
        start_year=_year(item.get("startYear")) or year,
        end_year=_year(item.get("endYear")),
        current=bool(item.get("current")),
        gpa=_text(item.get("gpa")) or None,
        honors=_text(item.get("honors")) or None,
    )


def _experience_entry(item: Dict[str, Any], year: int) -> WorkExperience:
    achievements = item.get("achievements")
    return WorkExperience(
        title=_text(item.get("title")),
        company=_text(item.get("company")),
        location=_text(item.get("location")) or None,
        start_date=_text(item.get("startDate")) or f"01-01-{year}",
        end_date=_text(item.get("endDate")) or None,
        current=bool(item.get("current")),
        achievements=[_text(line) for line in achievements if _text(line)]
        if isinstance(achievements, list)
        else [],
    )


def _skill_entry(item: Dict[str, Any], year: int) -> Skill:
    category = item.get("category")
    proficiency = item.get("proficiency")
    return Skill(
        name=_text(item.get("name")),
        category=category if category in SKILL_CATEGORIES else "technical",
        proficiency=proficiency if proficiency in SKILL_PROFICIENCIES else None,
    )


_ENTRY_BUILDERS = {
    "education": _education_entry,
    "experience": _experience_entry,
    "skills": _skill_entry,
}


def adapt_section_payload(
    section: str, payload: Dict[str, Any], today: Optional[date] = None
) -> SectionExtraction:
    """
    Convert a raw extraction payload into typed entries.

    Defaults: an invalid skill category becomes "technical", an invalid
    proficiency becomes None, a missing education start year becomes the
    current year and a missing experience start date becomes 01-01 of the
    current year. Non-dict entries are skipped. Uncertainties are passed
    through unmodified.

    Args:
        section: "education", "experience", "skills" or "personal"
        payload: Raw payload from the service
        today: Date used for defaults (defaults to today)

    Returns:
        SectionExtraction (failed for an unknown section or non-dict payload)
    """
    if section not in SECTIONS:
        return SectionExtraction.failed(section, f"Invalid section type: {section}")
    if not isinstance(payload, dict):
        return SectionExtraction.failed(section, "Payload is not a JSON object")

    year = (today or date.today()).year
    uncertainties = UncertaintyTracker.from_payload(payload.get("uncertainties"))

    if section == "personal":
        personal = payload.get("personal")
        if not isinstance(personal, dict):
            return SectionExtraction(section=section, uncertainties=uncertainties)
        languages = personal.get("languages")
        return SectionExtraction(
            section=section,
            personal=ExtractedPersonalInfo(
                full_name=_text(personal.get("fullName")),
                email=_text(personal.get("email")),
                phone=_text(personal.get("phone")),
                address=_text(personal.get("address")),
                age=_year(personal.get("age")) if personal.get("age") is not None else None,
                languages=[item for item in languages if isinstance(item, dict)]
                if isinstance(languages, list)
                else [],
                portfolio=_text(personal.get("portfolio")),
            ),
            uncertainties=uncertainties,
        )

    raw_entries = payload.get("entries")
    builder = _ENTRY_BUILDERS[section]
    entries = [
        builder(item, year)
        for item in (raw_entries if isinstance(raw_entries, list) else [])
        if isinstance(item, dict)
    ]
    return SectionExtraction(section=section, entries=entries, uncertainties=uncertainties)


def extract_section(
    service: StructuredExtractionService,
    section: str,
    content: str,
    today: Optional[date] = None,
) -> SectionExtraction:
    """
    Run a section through an extraction service and adapt the payload.

    Never raises: invalid input and service failures give a failed
    SectionExtraction with an error message.

    Args:
        service: Extraction service to call
        section: "education", "experience", "skills" or "personal"
        content: Section text
        today: Date used for defaults

    Returns:
        SectionExtraction
    """
    if section not in SECTIONS:
        return SectionExtraction.failed(section, f"Invalid section type: {section}")
    if not content or not content.strip():
        return SectionExtraction.failed(section, "Missing section content")
    if len(content) > MAX_CONTENT_LENGTH:
        _log_warning(f"{section} content is {len(content):,} characters; not extracting")
        return SectionExtraction.failed(
            section, f"Content too long (max {MAX_CONTENT_LENGTH} characters)"
        )

    try:
        payload = service.extract(section, content)
    except Exception as e:
        _log_error(f"{section} extraction failed: {e}")
        return SectionExtraction.failed(section, str(e))
    _log_debug(f"{section} payload: {_payload_preview(payload)}")

    result = adapt_section_payload(section, payload, today=today)
    _log_debug(
        f"{section}: {len(result.entries)} entries, {len(result.uncertainties)} uncertain fields"
    )
    return result


def _payload_preview(payload: Dict[str, Any]) -> str:
    """Compact JSON rendering of a payload for debug output."""
    rendered = json.dumps(payload, ensure_ascii=False, sort_keys=True)
    return truncate_display(rendered, PAYLOAD_PREVIEW_LENGTH)
