"""
User Profile Structure

The profile is the long-lived, structured record of a user's career that
résumé imports are merged into. Shapes mirror the profile-import wire format
(camelCase keys via from_dict/to_dict).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from jobtrail.utils.identifiers import new_id
from jobtrail.utils.serialization import from_camel_dict, to_camel_dict
from jobtrail.utils.text_processing import snake_to_camel

SKILL_CATEGORIES = ("technical", "soft", "language", "tool")
SKILL_PROFICIENCIES = ("beginner", "intermediate", "advanced", "expert")
LANGUAGE_PROFICIENCIES = ("basic", "conversational", "professional", "native", "bilingual")
LANGUAGE_ACQUISITIONS = ("native", "education", "immersion", "self_taught", "practice")
LINK_TYPES = ("portfolio", "linkedin", "github", "dribbble", "behance", "twitter", "other")


@dataclass
class Skill:
    id: str = field(default_factory=lambda: new_id("skill"))
    name: str = ""
    category: str = "technical"
    proficiency: Optional[str] = None


@dataclass
class Language:
    id: str = field(default_factory=lambda: new_id("lang"))
    language: str = ""
    proficiency: str = "professional"
    acquisition: str = "education"


@dataclass
class PortfolioLink:
    id: str = field(default_factory=lambda: new_id("link"))
    type: str = "portfolio"
    url: str = ""
    label: Optional[str] = None


@dataclass
class Certification:
    id: str = field(default_factory=lambda: new_id("cert"))
    name: str = ""
    issuer: str = ""
    date: str = ""
    expiry_date: Optional[str] = None
    credential_id: Optional[str] = None


@dataclass
class WorkExperience:
    """
    Work experience in the profile shape.

    Dates are free text; imports default to dd-mm-yyyy ("01-09-2020").
    """

    id: str = field(default_factory=lambda: new_id("exp"))
    title: str = ""
    company: str = ""
    location: Optional[str] = None
    start_date: str = ""
    end_date: Optional[str] = None
    current: bool = False
    achievements: List[str] = field(default_factory=list)


@dataclass
class ProfileEducation:
    """Education in the profile shape (numeric years)."""

    id: str = field(default_factory=lambda: new_id("edu"))
    degree: str = ""
    institution: str = ""
    field: str = ""
    start_year: Optional[int] = None
    end_year: Optional[int] = None
    current: bool = False
    gpa: Optional[str] = None
    honors: Optional[str] = None


# Profile collection name → entry type
COLLECTION_TYPES = {
    "skills": Skill,
    "work_experience": WorkExperience,
    "education": ProfileEducation,
    "languages": Language,
    "portfolio_links": PortfolioLink,
    "certifications": Certification,
}

# Scalar profile fields filled by imports
SCALAR_FIELDS = (
    "full_name",
    "email",
    "phone",
    "city",
    "country",
    "professional_summary",
)


@dataclass
class UserProfile:
    """
    Structured user profile.

    Attributes:
        full_name, email, phone, city, country, professional_summary,
        date_of_birth: Scalar personal fields ("" when unknown)
        education, work_experience, skills, certifications, languages,
        portfolio_links: Entry collections
        extra: Wire keys this package doesn't model (awards, affiliations,
            timestamps...), carried through from_dict/to_dict untouched
    """

    id: Optional[str] = None
    full_name: str = ""
    email: str = ""
    phone: str = ""
    city: str = ""
    country: str = ""
    professional_summary: str = ""
    date_of_birth: str = ""
    education: List[ProfileEducation] = field(default_factory=list)
    work_experience: List[WorkExperience] = field(default_factory=list)
    skills: List[Skill] = field(default_factory=list)
    certifications: List[Certification] = field(default_factory=list)
    languages: List[Language] = field(default_factory=list)
    portfolio_links: List[PortfolioLink] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    def collection(self, name: str) -> list:
        """Entries of a collection by snake_case name."""
        return getattr(self, name)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase wire shape."""
        data = dict(self.extra)
        data.update(to_camel_dict(self))
        data.pop("extra", None)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserProfile":
        """Build a profile from the camelCase wire shape."""
        scalars = from_camel_dict(_ProfileScalars, data)
        collections = {
            name: [from_camel_dict(entry_type, item) for item in data.get(snake_to_camel(name)) or []]
            for name, entry_type in COLLECTION_TYPES.items()
        }
        known = {snake_to_camel(name) for name in _ProfileScalars.__dataclass_fields__} | {
            snake_to_camel(name) for name in COLLECTION_TYPES
        }
        extra = {key: value for key, value in data.items() if key not in known}
        return cls(
            id=scalars.id,
            **{name: getattr(scalars, name) or "" for name in SCALAR_FIELDS + ("date_of_birth",)},
            **collections,
            extra=extra,
        )


@dataclass
class _ProfileScalars:
    id: Optional[str] = None
    full_name: str = ""
    email: str = ""
    phone: str = ""
    city: str = ""
    country: str = ""
    professional_summary: str = ""
    date_of_birth: str = ""
