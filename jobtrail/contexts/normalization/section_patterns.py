"""
Pattern tables for résumé section identification and field extraction.

Pattern classes follow the intake convention:
- Dataclasses with frozen=True for immutability
- Class-level constants for patterns
- Helper functions that use these patterns

Keyword lists are English/French and can be overridden from a YAML file
(SECTION_KEYWORDS_PATH) so other languages can be added without code changes.
"""

import os
import re
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property, lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

from jobtrail.contexts.normalization.exceptions import InvalidKeywordConfigError

load_dotenv()


class Section(str, Enum):
    """States of the section splitter."""

    NONE = "none"
    HEADER = "header"
    SUMMARY = "summary"
    EXPERIENCE = "experience"
    EDUCATION = "education"
    SKILLS = "skills"
    PROJECTS = "projects"
    LANGUAGES = "languages"
    CERTIFICATIONS = "certifications"
    OTHER = "other"


# =============================================================================
# SECTION KEYWORDS
# =============================================================================


@dataclass(frozen=True)
class SectionKeywordPatterns:
    """
    Heading keywords per section, matched at the start of the heading text.

    Order matters: the first section whose pattern matches wins, so
    "Professional Experience" is checked before "Professional Summary".
    """

    EXPERIENCE: tuple = (
        r"(?:professional |work |relevant )?experiences?",
        r"expériences?",
        r"experiences? professionnelles?",
        r"parcours professionnel",
        r"employment",
        r"work history",
    )

    EDUCATION: tuple = (
        r"education",
        r"études",
        r"etudes",
        r"formations?",
        r"academic",
    )

    SKILLS: tuple = (
        r"(?:technical |core |key )?skills?",
        r"compétences?",
        r"competences?",
        r"savoir-faire",
        r"(?:core )?competencies",
        r"proficiencies",
    )

    PROJECTS: tuple = (
        r"(?:personal |key |side )?projects?",
        r"projets?",
        r"réalisations?",
    )

    LANGUAGES: tuple = (
        r"languages?",
        r"langues?",
    )

    CERTIFICATIONS: tuple = (
        r"certifications?",
        r"licenses? (?:&|and) certifications?",
        r"diplômes?",
    )

    SUMMARY: tuple = (
        r"(?:professional |personal |career )?summary",
        r"profil",
        r"about",
        r"à propos",
    )


# Tokens marking an open-ended date range ("Jan 2020 - Present")
PRESENT_TOKENS = ("present", "current", "présent", "aujourd'hui", "en cours")

# Category-label leftovers dropped from skill tokens (case-insensitive prefix match)
SKILL_LABEL_DENYLIST = (
    "design",
    "technical",
    "additional",
    "languages",
    "tools",
    "web",
    "mobile",
    "methodologies",
)


# =============================================================================
# LINE PATTERNS
# =============================================================================


@dataclass(frozen=True)
class ResumeLinePatterns:
    """
    Regex patterns for classifying individual résumé lines.
    """

    # Level-1/2 heading: # Title, ## Title
    HEADING: re.Pattern = re.compile(r"^#{1,2}\s+(.+?)\s*:?\s*$")

    # Level-1 heading only (candidate name line)
    NAME_HEADING: re.Pattern = re.compile(r"^#\s+(.+?)\s*$")

    # Sub-header starting an experience/project entry: ### ...
    SUB_HEADER: re.Pattern = re.compile(r"^#{3,}(?:\s+(.*))?$")

    # Bold-only line: **Text** or **Text:**
    BOLD_ONLY: re.Pattern = re.compile(r"^\*\*([^*]+?):?\*\*\s*:?$")

    # First bold span anywhere in a line
    BOLD_SPAN: re.Pattern = re.compile(r"\*\*([^*]+)\*\*")

    # Whole line wrapped in single emphasis: *Text*
    SINGLE_EMPHASIS: re.Pattern = re.compile(r"^\*(?![*\s])(.+?)(?<![*\s])\*$")

    # Divider lines skipped everywhere
    DIVIDER: re.Pattern = re.compile(r"^(?:-{3,}|\*{3,}|_{3,})$")

    # Leading "Label:" on a skills line (e.g., "**Languages:** Python, Go")
    LABEL_PREFIX: re.Pattern = re.compile(r"^[^,:|]{1,40}:\s+")

    # 4-digit year, optionally a YYYY-YYYY range
    YEAR: re.Pattern = re.compile(r"\d{4}")
    YEAR_RANGE: re.Pattern = re.compile(r"\d{4}(?:\s*[-–]\s*\d{4})?")


@dataclass(frozen=True)
class ContactPatterns:
    """
    Regex patterns for the personal-info pre-pass over the first lines.
    """

    EMAIL: re.Pattern = re.compile(r"[\w.+-]+@[\w.-]+\.\w+")

    # Loose phone: optional +, a digit, then 9+ digits/spaces/parens/dashes
    PHONE: re.Pattern = re.compile(r"\+?\d[\d\s()\-]{9,}")

    # Location pin, including its UTF-8-as-cp1252 mis-encoding
    LOCATION_MARKER: re.Pattern = re.compile("\U0001f4cd|ðŸ“\x8d?")

    # Street address heuristic: "12 rue de la Paix, Paris"
    STREET_ADDRESS: re.Pattern = re.compile(r"\d+\s+\w+.*,")

    URL: re.Pattern = re.compile(r"https?://[^\s,;|]+", re.IGNORECASE)

    AGE: re.Pattern = re.compile(r"^(?:age|âge)\s*:\s*(\d{1,3})\b", re.IGNORECASE)


# Date token: dd-mm-yyyy, mm/yyyy, or an optional month word followed by a year
DATE_TOKEN = r"(?:\d{1,2}[-/.]\d{1,2}[-/.]\d{4}|\d{1,2}/\d{4}|(?:[^\W\d_]{3,}\.?\s+)?\d{4})"


# =============================================================================
# KEYWORD CONFIGURATION
# =============================================================================


def _default_sections() -> tuple:
    patterns = SectionKeywordPatterns()
    return (
        (Section.EXPERIENCE, patterns.EXPERIENCE),
        (Section.EDUCATION, patterns.EDUCATION),
        (Section.SKILLS, patterns.SKILLS),
        (Section.PROJECTS, patterns.PROJECTS),
        (Section.LANGUAGES, patterns.LANGUAGES),
        (Section.CERTIFICATIONS, patterns.CERTIFICATIONS),
        (Section.SUMMARY, patterns.SUMMARY),
    )


@dataclass(frozen=True)
class KeywordConfig:
    """
    Token lists driving the section splitter.

    Attributes:
        sections: Ordered (Section, keyword patterns) pairs
        present_tokens: Words that mark an open-ended date range
        skill_label_denylist: Prefixes of category labels dropped from skills
    """

    sections: tuple = field(default_factory=_default_sections)
    present_tokens: tuple = PRESENT_TOKENS
    skill_label_denylist: tuple = SKILL_LABEL_DENYLIST

    @cached_property
    def _section_regexes(self) -> tuple:
        return tuple(
            (section, re.compile("|".join(f"(?:{p})" for p in patterns), re.IGNORECASE))
            for section, patterns in self.sections
        )

    @cached_property
    def present_pattern(self) -> re.Pattern:
        """Pattern matching any present token."""
        alternation = "|".join(re.escape(token) for token in self.present_tokens)
        return re.compile(rf"(?:{alternation})", re.IGNORECASE)

    @cached_property
    def date_range_pattern(self) -> re.Pattern:
        """Pattern for ``<date> - <date|present>`` with named start/end groups."""
        alternation = "|".join(re.escape(token) for token in self.present_tokens)
        return re.compile(
            rf"(?P<start>{DATE_TOKEN})\s*[-–—]\s*(?P<end>{DATE_TOKEN}|{alternation})",
            re.IGNORECASE,
        )

    @cached_property
    def open_start_range_pattern(self) -> re.Pattern:
        """Pattern for an end-only period ``- <date|present>`` (use with fullmatch)."""
        alternation = "|".join(re.escape(token) for token in self.present_tokens)
        return re.compile(rf"[-–—]\s*(?P<end>{DATE_TOKEN}|{alternation})", re.IGNORECASE)

    @cached_property
    def date_token_pattern(self) -> re.Pattern:
        """Pattern for a single date token on its own."""
        return re.compile(DATE_TOKEN, re.IGNORECASE)

    @cached_property
    def denylist_pattern(self) -> re.Pattern:
        """Pattern matching skill tokens that are leftover category labels."""
        alternation = "|".join(re.escape(token) for token in self.skill_label_denylist)
        return re.compile(rf"^(?:{alternation})", re.IGNORECASE)

    def match_section(self, heading_text: str, whole: bool = False) -> Optional[Section]:
        """
        Match heading text against the section keyword sets.

        Args:
            heading_text: Heading text with markdown markers removed
            whole: If True the keyword must cover the entire text (plain lines)

        Returns:
            The first matching Section, or None
        """
        normalized = normalize_heading(heading_text)
        if not normalized:
            return None
        for section, regex in self._section_regexes:
            match = regex.fullmatch(normalized) if whole else regex.match(normalized)
            if match:
                return section
        return None

    def is_present(self, token: str) -> bool:
        """Check whether a date token denotes an ongoing period."""
        return bool(self.present_pattern.search(token or ""))


def normalize_heading(text: str) -> str:
    """
    Normalize heading text for keyword matching.

    Lowercases, removes emphasis markers and trailing colons, and collapses
    internal whitespace.
    """
    normalized = text.replace("*", "").strip().rstrip(":").strip().lower()
    return re.sub(r"\s+", " ", normalized)


def load_keyword_config(config_path: Optional[Path] = None) -> KeywordConfig:
    """
    Load keyword overrides from YAML and merge them over the defaults.

    The file may define any of::

        sections:
          experience: ["erfahrung", ...]
        present_tokens: ["heute", ...]
        skill_label_denylist: ["design", ...]

    Section lists replace the default list for that section only.

    Args:
        config_path: Path to the override file

    Returns:
        KeywordConfig with overrides applied

    Raises:
        InvalidKeywordConfigError: If the file has unknown keys or non-list values
    """
    data = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True) or {}
    if not isinstance(data, dict):
        raise InvalidKeywordConfigError("Keyword config must be a mapping", config_path=config_path)

    unknown = set(data) - {"sections", "present_tokens", "skill_label_denylist"}
    if unknown:
        raise InvalidKeywordConfigError(
            f"Unknown keyword config keys: {sorted(unknown)}", config_path=config_path
        )

    defaults = KeywordConfig()
    sections = dict(defaults.sections)
    for name, patterns in (data.get("sections") or {}).items():
        try:
            section = Section(name)
        except ValueError:
            raise InvalidKeywordConfigError(f"Unknown section: {name}", config_path=config_path)
        sections[section] = _as_token_tuple(patterns, f"sections.{name}", config_path)

    return KeywordConfig(
        sections=tuple(sections.items()),
        present_tokens=_as_token_tuple(
            data.get("present_tokens", defaults.present_tokens), "present_tokens", config_path
        ),
        skill_label_denylist=_as_token_tuple(
            data.get("skill_label_denylist", defaults.skill_label_denylist),
            "skill_label_denylist",
            config_path,
        ),
    )


def _as_token_tuple(value, key: str, config_path: Optional[Path]) -> tuple:
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise InvalidKeywordConfigError(
            f"'{key}' must be a list of strings", config_path=config_path
        )
    return tuple(value)


@lru_cache(maxsize=1)
def default_keyword_config() -> KeywordConfig:
    """
    Keyword config used when callers don't pass one.

    Reads SECTION_KEYWORDS_PATH once; falls back to built-in defaults.
    """
    override_path = os.getenv("SECTION_KEYWORDS_PATH")
    if override_path:
        return load_keyword_config(Path(override_path))
    return KeywordConfig()
