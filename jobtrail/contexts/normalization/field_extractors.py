"""
Field extraction for legacy text résumés.

Each section is handled by an ordered rule table of (predicate, action) pairs:
the first rule whose predicate accepts a line applies its action to the
section's draft. Extraction never raises; lines no rule accepts are ignored.

parse_markdown_cv() ties the pieces together: header pre-pass, section
splitting, per-section extraction, uncertainty flagging.
"""

import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from jobtrail.contexts.normalization.cv_data_structure import (
    CVContent,
    Education,
    Experience,
    PersonalInfo,
    Project,
)
from jobtrail.contexts.normalization.section_patterns import (
    ContactPatterns,
    KeywordConfig,
    ResumeLinePatterns,
    Section,
    default_keyword_config,
    normalize_heading,
)
from jobtrail.contexts.normalization.section_splitter import (
    HEADER_LINE_LIMIT,
    SectionBlock,
    split_sections,
)
from jobtrail.contexts.normalization.uncertainty import UncertaintyTracker
from jobtrail.utils.text_processing import (
    is_bullet,
    normalize_unicode,
    strip_bold,
    strip_bullet,
    strip_emphasis,
)

# Skill tokens must be shorter than this
MAX_SKILL_LENGTH = 50

# Fallback (plain first line) names are at most this many words
MAX_NAME_WORDS = 5

# A phone match needs this many digits ("2018 - 2022" has only 8)
MIN_PHONE_DIGITS = 9

_SKILL_SEPARATORS = re.compile(r"[,•|]")
_EMPHASIS_SPAN = re.compile(r"(?<!\*)\*(?!\*)([^*]+)(?<!\*)\*(?!\*)")
_DEGREE_TRAILING = re.compile(r"[\s,|:\-–—(]+$")

Rule = Tuple[Callable, Callable]


def _first_rule(rules, line: str, draft) -> None:
    for predicate, action in rules:
        if predicate(line, draft):
            action(line, draft)
            return


# =============================================================================
# EXPERIENCE
# =============================================================================


@dataclass
class _ExperienceDraft:
    """Mutable accumulator for the experience section."""

    config: KeywordConfig
    entries: List[Experience] = field(default_factory=list)
    current: Optional[dict] = None

    def flush(self) -> None:
        if self.current is None:
            return
        entry = self.current
        self.entries.append(
            Experience.from_achievements(
                entry["achievements"],
                company=entry["company"],
                title=entry["title"],
                start_date=entry["start_date"],
                end_date=entry["end_date"],
                current=entry["current"],
            )
        )
        self.current = None

    def start(self) -> dict:
        self.flush()
        self.current = {
            "title": "",
            "company": "",
            "start_date": "",
            "end_date": "",
            "current": False,
            "achievements": [],
            "plain_title": False,
        }
        return self.current

    def set_dates(self, start: str, end: str) -> None:
        self.current["start_date"] = start.strip()
        self.current["end_date"] = end.strip()
        self.current["current"] = self.config.is_present(end)


def _start_experience(line: str, draft: _ExperienceDraft) -> None:
    entry = draft.start()
    header = ResumeLinePatterns.SUB_HEADER.match(line).group(1) or ""

    for span in _EMPHASIS_SPAN.finditer(header):
        dates = draft.config.date_range_pattern.search(span.group(1))
        if dates:
            draft.set_dates(dates.group("start"), dates.group("end"))
            header = header.replace(span.group(0), " ")
            break

    bold = ResumeLinePatterns.BOLD_SPAN.search(header)
    if bold:
        entry["title"] = bold.group(1).strip()
    else:
        entry["title"] = _DEGREE_TRAILING.sub("", strip_emphasis(header))
        entry["plain_title"] = bool(entry["title"])


def _title_after_plain_header(line: str, draft: _ExperienceDraft) -> bool:
    return (
        draft.current is not None
        and draft.current["plain_title"]
        and bool(ResumeLinePatterns.BOLD_ONLY.match(line))
    )


def _swap_company_and_title(line: str, draft: _ExperienceDraft) -> None:
    # "### Company" followed by "**Job Title**"
    entry = draft.current
    if not entry["company"]:
        entry["company"] = entry["title"]
    entry["title"] = ResumeLinePatterns.BOLD_ONLY.match(line).group(1).strip()
    entry["plain_title"] = False


def _is_experience_subtitle(line: str, draft: _ExperienceDraft) -> bool:
    return draft.current is not None and bool(ResumeLinePatterns.SINGLE_EMPHASIS.match(line))


def _apply_experience_subtitle(line: str, draft: _ExperienceDraft) -> None:
    entry = draft.current
    text = strip_emphasis(line)
    dates = draft.config.date_range_pattern.search(text)
    open_start = draft.config.open_start_range_pattern.fullmatch(text)
    if dates and not entry["start_date"]:
        draft.set_dates(dates.group("start"), dates.group("end"))
    elif open_start and not entry["start_date"] and not entry["end_date"]:
        draft.set_dates("", open_start.group("end"))
    elif not entry["start_date"] and draft.config.date_token_pattern.fullmatch(text):
        entry["start_date"] = text
    elif not entry["company"]:
        entry["company"] = text


def _is_achievement(line: str, draft: _ExperienceDraft) -> bool:
    return draft.current is not None and is_bullet(line)


def _add_achievement(line: str, draft: _ExperienceDraft) -> None:
    achievement = strip_bold(strip_bullet(line)).strip()
    if achievement:
        draft.current["achievements"].append(achievement)


EXPERIENCE_RULES: Tuple[Rule, ...] = (
    (lambda line, draft: bool(ResumeLinePatterns.SUB_HEADER.match(line)), _start_experience),
    (_title_after_plain_header, _swap_company_and_title),
    (_is_experience_subtitle, _apply_experience_subtitle),
    (_is_achievement, _add_achievement),
)


def extract_experiences(lines: List[str], config: Optional[KeywordConfig] = None) -> List[Experience]:
    """
    Extract work experience entries from an experience section.

    Example:
        >>> lines = ["### **Product Manager**", "*Acme Corp*", "*Jan 2020 - Present*", "- Shipped X"]
        >>> exp = extract_experiences(lines)[0]
        >>> (exp.title, exp.company, exp.start_date, exp.current)
        ('Product Manager', 'Acme Corp', 'Jan 2020', True)
    """
    draft = _ExperienceDraft(config=config or default_keyword_config())
    for line in lines:
        _first_rule(EXPERIENCE_RULES, line, draft)
    draft.flush()
    return draft.entries


# =============================================================================
# EDUCATION
# =============================================================================


@dataclass
class _EducationDraft:
    """Mutable accumulator for the education section."""

    entries: List[Education] = field(default_factory=list)
    current: Optional[Education] = None
    # Current entry came from a "degree | institution | year" line
    columns: bool = False

    def flush(self) -> None:
        entry = self.current
        if entry is not None and (entry.institution or entry.degree or self._kept_by_columns(entry)):
            self.entries.append(entry)
        self.current = None
        self.columns = False

    def _kept_by_columns(self, entry: Education) -> bool:
        # Outside the pipe form, an entry with only a year is a stray year line
        return self.columns and bool(entry.year or entry.field)


def _starts_education(line: str, draft: _EducationDraft) -> bool:
    return line.startswith("**") or "|" in line or bool(ResumeLinePatterns.YEAR.search(line))


def _start_education(line: str, draft: _EducationDraft) -> None:
    draft.flush()
    entry = Education()

    if "|" in line:
        parts = [part.strip() for part in line.split("|")]
        entry.degree = strip_bold(parts[0]).strip()
        if len(parts) >= 2:
            entry.institution = strip_emphasis(parts[1])
        if len(parts) >= 3:
            entry.year = strip_emphasis(parts[2])
    else:
        years = ResumeLinePatterns.YEAR_RANGE.search(line)
        if years:
            entry.year = years.group(0)
            before = line[: years.start()]
            entry.degree = _DEGREE_TRAILING.sub("", strip_emphasis(before))
        else:
            entry.degree = strip_emphasis(line)

    draft.current = entry
    draft.columns = "|" in line


def _is_education_subtitle(line: str, draft: _EducationDraft) -> bool:
    return draft.current is not None and bool(ResumeLinePatterns.SINGLE_EMPHASIS.match(line))


def _apply_education_subtitle(line: str, draft: _EducationDraft) -> None:
    text = strip_emphasis(line)
    # In the pipe form the institution column is authoritative, even when empty
    if not draft.current.institution and not draft.columns:
        draft.current.institution = text
    elif not draft.current.field:
        draft.current.field = text


EDUCATION_RULES: Tuple[Rule, ...] = (
    (_starts_education, _start_education),
    (_is_education_subtitle, _apply_education_subtitle),
)


def extract_education(lines: List[str]) -> List[Education]:
    """
    Extract education entries from an education section.

    Example:
        >>> edu = extract_education(["**MSc Computer Science** | MIT | 2018-2020"])[0]
        >>> (edu.degree, edu.institution, edu.year)
        ('MSc Computer Science', 'MIT', '2018-2020')
    """
    draft = _EducationDraft()
    for line in lines:
        _first_rule(EDUCATION_RULES, line, draft)
    draft.flush()
    return draft.entries


# =============================================================================
# SKILLS, SUMMARY, PROJECTS, LANGUAGES
# =============================================================================


def _is_skill_label(line: str) -> bool:
    if line.startswith("#"):
        return True
    return line.startswith("**") and line.endswith("**") and "," not in line


def extract_skills(lines: List[str], config: Optional[KeywordConfig] = None) -> List[str]:
    """
    Extract skill tokens from a skills section.

    Tokens are de-duplicated case-insensitively (first spelling wins) and
    leftover category labels are dropped.

    Example:
        >>> extract_skills(["**Languages:** Python, Go", "- python | Docker"])
        ['Python', 'Go', 'Docker']
    """
    config = config or default_keyword_config()
    tokens: List[str] = []
    for line in lines:
        if _is_skill_label(line):
            continue
        cleaned = strip_bold(strip_bullet(line)).strip()
        cleaned = ResumeLinePatterns.LABEL_PREFIX.sub("", cleaned, count=1)
        for token in _SKILL_SEPARATORS.split(cleaned):
            token = token.strip()
            if 0 < len(token) < MAX_SKILL_LENGTH and not token.startswith("##"):
                tokens.append(token)
    return _dedup_skills(tokens, config)


def _dedup_skills(tokens: List[str], config: KeywordConfig) -> List[str]:
    seen = set()
    skills = []
    for token in tokens:
        key = token.lower()
        if key in seen or config.denylist_pattern.match(token):
            continue
        seen.add(key)
        skills.append(token)
    return skills


def extract_summary(lines: List[str]) -> str:
    """Join summary lines verbatim with bold markers removed."""
    kept = [strip_bold(line).strip() for line in lines if not line.startswith("#")]
    return "\n".join(line for line in kept if line).strip()


def extract_projects(lines: List[str]) -> List[Project]:
    """
    Extract projects: a ``###`` or bold-only line names a project, following
    lines form its description.
    """
    projects: List[Project] = []
    description: List[str] = []

    def flush():
        if projects:
            projects[-1].description = "\n".join(description)
        description.clear()

    for line in lines:
        sub_header = ResumeLinePatterns.SUB_HEADER.match(line)
        bold_only = ResumeLinePatterns.BOLD_ONLY.match(line)
        if sub_header or bold_only:
            flush()
            name = sub_header.group(1) if sub_header else bold_only.group(1)
            projects.append(Project(name=strip_emphasis(name or "")))
        elif projects:
            text = strip_bold(strip_bullet(line)).strip()
            if text:
                description.append(text)
    flush()
    return projects


def extract_languages(lines: List[str]) -> str:
    """Join language lines into a single comma-separated string."""
    cleaned = [strip_bold(strip_bullet(line)).strip() for line in lines]
    return ", ".join(line for line in cleaned if line)


# =============================================================================
# HEADER PRE-PASS
# =============================================================================


def extract_personal_info(
    lines: List[str], config: Optional[KeywordConfig] = None
) -> Tuple[PersonalInfo, bool]:
    """
    Scan the first lines of a résumé for contact details.

    Independent of the section state machine: every pattern is tried on each
    of the first HEADER_LINE_LIMIT lines and the first match wins.

    Args:
        lines: All résumé lines
        config: Keyword configuration (used to reject headings as names)

    Returns:
        (PersonalInfo, name_inferred) where name_inferred is True when the
        name came from a plain first line rather than a ``# `` heading
    """
    config = config or default_keyword_config()
    info = PersonalInfo()
    head = [line.strip() for line in lines[:HEADER_LINE_LIMIT]]

    in_header_block = True
    for line in head:
        if not line:
            continue
        if line.startswith("## "):
            in_header_block = False

        name_match = ResumeLinePatterns.NAME_HEADING.match(line)
        if name_match and not info.name:
            info.name = strip_emphasis(name_match.group(1))

        email = ContactPatterns.EMAIL.search(line)
        if email and not info.email:
            info.email = email.group(0)

        phone = ContactPatterns.PHONE.search(line)
        if phone and not info.phone and _digit_count(phone.group(0)) >= MIN_PHONE_DIGITS:
            info.phone = phone.group(0).strip()

        if not info.location and (
            ContactPatterns.LOCATION_MARKER.search(line)
            or (in_header_block and ContactPatterns.STREET_ADDRESS.search(line))
        ):
            info.location = ContactPatterns.LOCATION_MARKER.sub("", line).strip()

        url = ContactPatterns.URL.search(line)
        if url and not info.portfolio:
            info.portfolio = url.group(0)

        age = ContactPatterns.AGE.match(line)
        if age and not info.age:
            info.age = age.group(1)

    if info.name:
        return info, False

    first = next((line for line in head if line), "")
    if _looks_like_name(first, config):
        info.name = strip_emphasis(first)
        return info, True
    return info, False


def _digit_count(text: str) -> int:
    return sum(ch.isdigit() for ch in text)


def _looks_like_name(line: str, config: KeywordConfig) -> bool:
    if not line or line.startswith("#") or "@" in line:
        return False
    if not any(ch.isalpha() for ch in line):
        return False
    if any(ch.isdigit() for ch in line) or ContactPatterns.URL.search(line):
        return False
    if ContactPatterns.LOCATION_MARKER.search(line):
        return False
    if len(line.split()) > MAX_NAME_WORDS:
        return False
    return config.match_section(normalize_heading(line), whole=True) is None


# =============================================================================
# FULL TEXT PARSE
# =============================================================================


def _collect(blocks: List[SectionBlock], section: Section) -> List[List[str]]:
    return [block.lines for block in blocks if block.section == section]


def parse_markdown_cv(
    text: str, config: Optional[KeywordConfig] = None
) -> Tuple[CVContent, Dict[str, UncertaintyTracker]]:
    """
    Parse a legacy text résumé into CVContent.

    Never raises: sections that are absent or unparseable give empty values.

    Args:
        text: Markdown-ish résumé text
        config: Keyword configuration (defaults to default_keyword_config())

    Returns:
        (content, uncertainties) where uncertainties maps "personal",
        "experiences" and "education" to their UncertaintyTracker
    """
    config = config or default_keyword_config()
    text = normalize_unicode(text or "")
    lines = text.split("\n")

    personal_info, name_inferred = extract_personal_info(lines, config)
    blocks = split_sections(text, config)

    experiences = [
        entry
        for block in _collect(blocks, Section.EXPERIENCE)
        for entry in extract_experiences(block, config)
    ]
    education = [
        entry for block in _collect(blocks, Section.EDUCATION) for entry in extract_education(block)
    ]
    skills = _dedup_skills(
        [
            token
            for block in _collect(blocks, Section.SKILLS)
            for token in extract_skills(block, config)
        ],
        config,
    )
    summary = "\n".join(
        part for part in (extract_summary(block) for block in _collect(blocks, Section.SUMMARY)) if part
    )
    projects = [
        entry for block in _collect(blocks, Section.PROJECTS) for entry in extract_projects(block)
    ]
    languages = ", ".join(
        part
        for part in (extract_languages(block) for block in _collect(blocks, Section.LANGUAGES))
        if part
    )
    if languages and not personal_info.languages:
        personal_info.languages = languages

    content = CVContent(
        personal_info=personal_info,
        summary=summary,
        experiences=experiences,
        education=education,
        skills=skills,
        projects=projects or None,
    )
    return content, flag_text_uncertainties(content, name_inferred)


def flag_text_uncertainties(
    content: CVContent, name_inferred: bool = False
) -> Dict[str, UncertaintyTracker]:
    """Flag fields the text heuristics could not determine."""
    personal = UncertaintyTracker()
    if name_inferred:
        personal.flag(0, "name", "Name inferred from the first line")

    experiences = UncertaintyTracker()
    for index, entry in enumerate(content.experiences):
        if not entry.start_date:
            experiences.flag(index, "start_date", "No date range found")
        if not entry.company:
            experiences.flag(index, "company", "Company not found")

    education = UncertaintyTracker()
    for index, entry in enumerate(content.education):
        if not entry.year:
            education.flag(index, "year", "Year not found")

    return {"personal": personal, "experiences": experiences, "education": education}
