"""
CV Content Structure

Defines the canonical in-memory résumé representation (the CV-editor shape).
Every parser in the normalization context produces a CVContent and the
serializer consumes one.

Editing helpers are copy-on-write: they return a new CVContent and never
mutate the entry lists of the instance they are called on.
"""

import re
from dataclasses import asdict, dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from jobtrail.contexts.normalization.exceptions import UnknownCollectionError
from jobtrail.contexts.normalization.section_patterns import default_keyword_config
from jobtrail.utils.identifiers import new_id
from jobtrail.utils.serialization import from_camel_dict
from jobtrail.utils.text_processing import camelize_keys

_YEAR = re.compile(r"\b(\d{4})\b")


def split_achievements(description: str) -> List[str]:
    """
    Split a flattened description into achievement bullets.

    Blank lines are dropped and each line is stripped.
    """
    return [line.strip() for line in (description or "").split("\n") if line.strip()]


def join_achievements(achievements: List[str]) -> str:
    """Flatten achievement bullets into a newline-joined description."""
    return "\n".join(achievements or [])


def parse_year_range(text: str) -> Tuple[Optional[int], Optional[int], bool]:
    """
    Project a free-text education year onto (start_year, end_year, current).

    Examples:
        >>> parse_year_range("2018-2022")
        (2018, 2022, False)
        >>> parse_year_range("2020")
        (2020, None, False)
        >>> parse_year_range("2018 - Present")
        (2018, None, True)
    """
    text = text or ""
    years = [int(year) for year in _YEAR.findall(text)]
    current = default_keyword_config().is_present(text)
    start = years[0] if years else None
    end = years[1] if len(years) > 1 and not current else None
    return start, end, current


def format_year_range(
    start_year: Optional[int], end_year: Optional[int] = None, current: bool = False
) -> str:
    """
    Inverse of parse_year_range().

    Examples:
        >>> format_year_range(2018, 2022)
        '2018-2022'
        >>> format_year_range(2018, None, current=True)
        '2018 - Present'
    """
    if start_year is None:
        return str(end_year) if end_year else ""
    if current:
        return f"{start_year} - Present"
    if end_year and end_year != start_year:
        return f"{start_year}-{end_year}"
    return str(start_year)


@dataclass
class PersonalInfo:
    """Contact block at the top of a résumé."""

    name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    age: Optional[str] = None
    languages: Optional[str] = None
    portfolio: Optional[str] = None
    photo: Optional[str] = None


@dataclass
class Experience:
    """
    Work experience entry in the CV-editor shape.

    ``description`` holds newline-joined achievement bullets; ``achievements``
    is the structured view of the same data.
    """

    id: str = field(default_factory=lambda: new_id("exp"))
    company: str = ""
    title: str = ""
    start_date: str = ""
    end_date: str = ""
    current: bool = False
    description: str = ""

    @property
    def achievements(self) -> List[str]:
        return split_achievements(self.description)

    @classmethod
    def from_achievements(cls, achievements: List[str], **kwargs) -> "Experience":
        """Build an Experience from structured achievement bullets."""
        return cls(description=join_achievements(achievements), **kwargs)


@dataclass
class Education:
    """
    Education entry in the CV-editor shape.

    ``year`` is free text ("2018-2022"); start_year/end_year/is_current expose
    the numeric projection used by the profile-import shape.
    """

    id: str = field(default_factory=lambda: new_id("edu"))
    institution: str = ""
    degree: str = ""
    field: str = ""
    year: str = ""
    current: Optional[bool] = None
    gpa: Optional[str] = None
    honors: Optional[str] = None

    @property
    def start_year(self) -> Optional[int]:
        return parse_year_range(self.year)[0]

    @property
    def end_year(self) -> Optional[int]:
        return parse_year_range(self.year)[1]

    @property
    def is_current(self) -> bool:
        return bool(self.current) or parse_year_range(self.year)[2]

    @classmethod
    def from_years(
        cls,
        start_year: Optional[int],
        end_year: Optional[int] = None,
        current: bool = False,
        **kwargs,
    ) -> "Education":
        """Build an Education from the numeric year representation."""
        return cls(
            year=format_year_range(start_year, end_year, current),
            current=current or None,
            **kwargs,
        )


@dataclass
class Project:
    """Side project or notable piece of work."""

    id: str = field(default_factory=lambda: new_id("proj"))
    name: str = ""
    description: str = ""


# Entry collections that support add/update/remove by id
_ENTRY_TYPES = {
    "experiences": Experience,
    "education": Education,
    "projects": Project,
}


@dataclass
class CVContent:
    """
    Structured résumé content.

    Attributes:
        personal_info: Contact block
        summary: Professional summary paragraph(s)
        experiences: Work history, most recent first as authored
        education: Degrees and schools
        skills: Flat list of skill tokens
        projects: Optional projects list (None when the source had none)
    """

    personal_info: PersonalInfo = field(default_factory=PersonalInfo)
    summary: str = ""
    experiences: List[Experience] = field(default_factory=list)
    education: List[Education] = field(default_factory=list)
    skills: List[str] = field(default_factory=list)
    projects: Optional[List[Project]] = None

    @property
    def entry_count(self) -> int:
        """Number of structured entries (experiences + education + skills)."""
        return len(self.experiences) + len(self.education) + len(self.skills)

    def is_empty(self) -> bool:
        """True when nothing at all was extracted."""
        info = self.personal_info
        return not (
            self.entry_count
            or self.summary
            or self.projects
            or info.name
            or info.email
            or info.phone
            or info.location
        )

    # =========================================================================
    # COPY-ON-WRITE EDITING
    # =========================================================================

    def add_entry(self, collection: str, entry: Any = None) -> "CVContent":
        """
        Append an entry (a blank one by default) to a collection.

        Args:
            collection: "experiences", "education" or "projects"
            entry: Entry to append; a new blank entry if None

        Returns:
            New CVContent with the entry appended
        """
        entry_type = _entry_type(collection)
        entries = list(getattr(self, collection) or [])
        entries.append(entry if entry is not None else entry_type())
        return replace(self, **{collection: entries})

    def update_entry(self, collection: str, entry_id: str, **changes) -> "CVContent":
        """Return a copy with the entry matching entry_id updated."""
        _entry_type(collection)
        entries = [
            replace(entry, **changes) if entry.id == entry_id else entry
            for entry in getattr(self, collection) or []
        ]
        return replace(self, **{collection: entries})

    def remove_entry(self, collection: str, entry_id: str) -> "CVContent":
        """Return a copy without the entry matching entry_id."""
        _entry_type(collection)
        entries = [entry for entry in getattr(self, collection) or [] if entry.id != entry_id]
        return replace(self, **{collection: entries})

    def add_skill(self, skill: str) -> "CVContent":
        """Return a copy with a skill appended; blank skills are ignored."""
        skill = (skill or "").strip()
        if not skill:
            return self
        return replace(self, skills=[*self.skills, skill])

    def remove_skill(self, skill: str) -> "CVContent":
        """Return a copy with every occurrence of a skill removed."""
        return replace(self, skills=[s for s in self.skills if s != skill])

    def update_personal_info(self, **changes) -> "CVContent":
        """Return a copy with personal info fields changed."""
        return replace(self, personal_info=replace(self.personal_info, **changes))

    # =========================================================================
    # DICT CONVERSION (camelCase editor shape)
    # =========================================================================

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase dict shape used by the editor UI."""
        data = camelize_keys(asdict(self))
        if self.projects is None:
            data.pop("projects")
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CVContent":
        """Build CVContent from the camelCase editor dict shape."""
        projects = data.get("projects")
        return cls(
            personal_info=from_camel_dict(PersonalInfo, data.get("personalInfo") or {}),
            summary=data.get("summary") or "",
            experiences=[from_camel_dict(Experience, item) for item in data.get("experiences") or []],
            education=[from_camel_dict(Education, item) for item in data.get("education") or []],
            skills=[str(skill) for skill in data.get("skills") or []],
            projects=[from_camel_dict(Project, item) for item in projects] if projects else None,
        )


def _entry_type(collection: str):
    if collection not in _ENTRY_TYPES:
        raise UnknownCollectionError(collection, _ENTRY_TYPES)
    return _ENTRY_TYPES[collection]
