"""
Import orchestration: merging imported résumé data into a user profile.

import_into_profile() applies every merge rule at once:
- scalar fields are filled only when empty
- skills, experiences and education are add-merged with dedup
- free-text languages and portfolio fields are parsed into entries
- certifications are detected in the aggregated free text
"""

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional

from jobtrail.contexts.normalization.cv_data_structure import CVContent
from jobtrail.contexts.profile.certifications import collect_profile_text, detect_certifications
from jobtrail.contexts.profile.logger import _log_debug
from jobtrail.contexts.profile.merge import (
    MergeMode,
    added_counts,
    filled_fields,
    merge_collection,
    merge_profile_fields,
)
from jobtrail.contexts.profile.profile_data_structure import (
    Language,
    PortfolioLink,
    ProfileEducation,
    Skill,
    UserProfile,
    WorkExperience,
)
from jobtrail.contexts.profile.projections import education_to_profile, experience_to_work

# =============================================================================
# LANGUAGES
# =============================================================================

# Ordered (pattern, proficiency) rules; first match wins
LANGUAGE_PROFICIENCY_RULES = (
    (re.compile(r"natif|native|maternelle|mother", re.IGNORECASE), "native"),
    (re.compile(r"bilingu", re.IGNORECASE), "bilingual"),
    (re.compile(r"fluent|courant|c1|c2|advanced|avanc", re.IGNORECASE), "professional"),
    (re.compile(r"professional|professionnel|b2", re.IGNORECASE), "professional"),
    (re.compile(r"intermediate|interm|b1|conversational", re.IGNORECASE), "conversational"),
    (re.compile(r"basic|débutant|beginner|a1|a2|élémentaire", re.IGNORECASE), "basic"),
)

DEFAULT_LANGUAGE_PROFICIENCY = "professional"

_LANGUAGE_WITH_LEVEL = re.compile(r"^(.+?)\s*\((.+?)\)\s*$")


def language_proficiency(level: str) -> str:
    """
    Map a free-text language level onto a proficiency value.

    Example:
        >>> language_proficiency("langue maternelle")
        'native'
        >>> language_proficiency("B1")
        'conversational'
        >>> language_proficiency("")
        'professional'
    """
    for pattern, proficiency in LANGUAGE_PROFICIENCY_RULES:
        if level and pattern.search(level):
            return proficiency
    return DEFAULT_LANGUAGE_PROFICIENCY


def parse_languages_text(text: str, existing: Iterable[Language] = ()) -> List[Language]:
    """
    Parse "French (native), English (C1); Spanish" into Language entries.

    Args:
        text: Comma/semicolon separated languages with optional "(level)"
        existing: Languages already in the profile (skipped by name)

    Returns:
        New Language entries in text order
    """
    known = {entry.language.strip().lower() for entry in existing or ()}
    languages = []
    for part in re.split(r"[,;]", text or ""):
        part = part.strip()
        if not part:
            continue
        match = _LANGUAGE_WITH_LEVEL.match(part)
        name = match.group(1).strip() if match else part
        level = match.group(2).strip() if match else ""
        if not name or name.lower() in known:
            continue
        known.add(name.lower())

        proficiency = language_proficiency(level)
        languages.append(
            Language(
                language=name,
                proficiency=proficiency,
                acquisition="native" if proficiency == "native" else "education",
            )
        )
    return languages


# =============================================================================
# PORTFOLIO LINKS
# =============================================================================

# Ordered (host pattern, link type) rules; unmatched URLs are "portfolio"
LINK_TYPE_RULES = (
    (re.compile(r"linkedin\.com", re.IGNORECASE), "linkedin"),
    (re.compile(r"github\.com", re.IGNORECASE), "github"),
    (re.compile(r"dribbble\.com", re.IGNORECASE), "dribbble"),
    (re.compile(r"behance\.net", re.IGNORECASE), "behance"),
    (re.compile(r"twitter\.com|(?<![\w.])x\.com", re.IGNORECASE), "twitter"),
)

_URL = re.compile(r"https?://[^\s,;]+", re.IGNORECASE)
_TRAILING_PUNCTUATION = re.compile(r"[.,;)]+$")


def classify_link(url: str) -> str:
    """
    Determine the link type from its host.

    Example:
        >>> classify_link("https://github.com/jdoe")
        'github'
        >>> classify_link("https://jdoe.dev")
        'portfolio'
    """
    for pattern, link_type in LINK_TYPE_RULES:
        if pattern.search(url):
            return link_type
    return "portfolio"


def extract_portfolio_links(text: str, existing: Iterable[PortfolioLink] = ()) -> List[PortfolioLink]:
    """
    Extract portfolio links from free text.

    URLs are found by scheme; text without any URL but containing a dot is
    taken as a single bare link.

    Args:
        text: Free text (e.g. "https://github.com/jdoe, https://jdoe.dev")
        existing: Links already in the profile (skipped by URL)

    Returns:
        New PortfolioLink entries
    """
    text = (text or "").strip()
    urls = _URL.findall(text) or ([text] if "." in text else [])

    known = {link.url.strip().lower() for link in existing or ()}
    links = []
    for url in urls:
        url = _TRAILING_PUNCTUATION.sub("", url)
        if not url or url.lower() in known:
            continue
        known.add(url.lower())

        link_type = classify_link(url)
        links.append(PortfolioLink(type=link_type, url=url, label=link_type.capitalize()))
    return links


# =============================================================================
# IMPORT
# =============================================================================


@dataclass
class ProfileImport:
    """
    Data gathered from an imported résumé, ready to merge into a profile.

    Attributes:
        full_name, email, phone, address, summary: Scalar values
        skill_tags: Flat skill names (become technical skills)
        experiences: Work experience entries
        education: Education entries
        languages: Free text, e.g. "French (native), English (C1)"
        portfolio: Free text containing URLs
        experience_text: Free-text experience description scanned for
            certifications
    """

    full_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    summary: str = ""
    skill_tags: List[str] = field(default_factory=list)
    experiences: List[WorkExperience] = field(default_factory=list)
    education: List[ProfileEducation] = field(default_factory=list)
    languages: str = ""
    portfolio: str = ""
    experience_text: str = ""

    @classmethod
    def from_cv(cls, cv: CVContent) -> "ProfileImport":
        """Build an import from parsed résumé content."""
        info = cv.personal_info
        experience_text = "\n".join(
            line
            for entry in cv.experiences
            for line in (entry.title, entry.company, entry.description)
            if line
        )
        return cls(
            full_name=info.name,
            email=info.email,
            phone=info.phone,
            address=info.location,
            summary=cv.summary,
            skill_tags=list(cv.skills),
            experiences=[experience_to_work(entry) for entry in cv.experiences],
            education=[education_to_profile(entry) for entry in cv.education],
            languages=info.languages or "",
            portfolio=info.portfolio or "",
            experience_text=experience_text,
        )


@dataclass
class ImportResult:
    """
    Outcome of import_into_profile().

    Attributes:
        profile: New profile (the input profile is never mutated)
        added: Collection name → number of entries added
        filled_fields: Scalar fields that were empty and got filled
        skipped: Collection name → incomplete entries skipped
    """

    profile: UserProfile
    added: Dict[str, int] = field(default_factory=dict)
    filled_fields: List[str] = field(default_factory=list)
    skipped: Dict[str, int] = field(default_factory=dict)

    @property
    def changed(self) -> bool:
        return bool(self.filled_fields) or any(self.added.values())


def _complete_experience(entry: WorkExperience, year: int) -> Optional[WorkExperience]:
    title, company = entry.title.strip(), entry.company.strip()
    if not title or not company:
        return None
    return WorkExperience(
        id=entry.id,
        title=title,
        company=company,
        location=(entry.location or "").strip() or None,
        start_date=entry.start_date.strip() or f"01-01-{year}",
        end_date=None if entry.current else ((entry.end_date or "").strip() or None),
        current=entry.current,
        achievements=[line for line in entry.achievements if line.strip()],
    )


def _complete_education(entry: ProfileEducation, year: int) -> Optional[ProfileEducation]:
    degree, institution = entry.degree.strip(), entry.institution.strip()
    if not degree or not institution:
        return None
    return ProfileEducation(
        id=entry.id,
        degree=degree,
        institution=institution,
        field=entry.field.strip(),
        start_year=entry.start_year or year,
        end_year=None if entry.current else entry.end_year,
        current=bool(entry.current),
        gpa=entry.gpa,
        honors=entry.honors,
    )


def import_into_profile(
    profile: UserProfile, imported: ProfileImport, today: Optional[date] = None
) -> ImportResult:
    """
    Merge an import into a profile in add mode.

    Args:
        profile: Current profile (not mutated)
        imported: Data to merge
        today: Date used for missing start dates (defaults to today)

    Returns:
        ImportResult with the new profile and per-collection counts
    """
    year = (today or date.today()).year

    updated = merge_profile_fields(
        profile,
        {
            "full_name": imported.full_name,
            "email": imported.email,
            "phone": imported.phone,
            "address": imported.address,
            "professional_summary": imported.summary,
        },
    )

    skills = [Skill(name=tag.strip(), category="technical") for tag in imported.skill_tags if tag.strip()]
    updated = merge_collection(updated, "skills", skills, MergeMode.ADD)

    experiences = [_complete_experience(entry, year) for entry in imported.experiences]
    education = [_complete_education(entry, year) for entry in imported.education]
    skipped = {
        "work_experience": sum(entry is None for entry in experiences),
        "education": sum(entry is None for entry in education),
    }
    updated = merge_collection(
        updated, "work_experience", [e for e in experiences if e is not None], MergeMode.ADD
    )
    updated = merge_collection(
        updated, "education", [e for e in education if e is not None], MergeMode.ADD
    )

    languages = parse_languages_text(imported.languages, updated.languages)
    updated = merge_collection(updated, "languages", languages, MergeMode.ADD)

    links = extract_portfolio_links(imported.portfolio, updated.portfolio_links)
    updated = merge_collection(updated, "portfolio_links", links, MergeMode.ADD)

    scan_text = collect_profile_text(
        experience=imported.experience_text,
        skills=", ".join(imported.skill_tags),
        summary=imported.summary,
        languages=imported.languages,
    )
    certifications = detect_certifications(scan_text, updated.certifications)
    updated = merge_collection(updated, "certifications", certifications, MergeMode.ADD)

    result = ImportResult(
        profile=updated,
        added=added_counts(profile, updated),
        filled_fields=filled_fields(profile, updated),
        skipped={name: count for name, count in skipped.items() if count},
    )
    _log_debug(f"Import result: added={result.added} filled={result.filled_fields}")
    return result
