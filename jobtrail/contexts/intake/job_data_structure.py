"""
Job posting data structure for the Intake context.

JobPosting carries the structured fields an extraction service pulls out of
a job description. It is plain data: salary figures are kept exactly as
extracted (no currency or rate conversion).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from jobtrail.utils.serialization import to_camel_dict

SALARY_RATE_TYPES = ("annual", "monthly", "hourly", "daily")
PRESENCE_TYPES = ("full_remote", "hybrid", "on_site")


def _string_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _number_or_none(value: Any):
    # bool is an int subclass but never a valid amount
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


@dataclass
class JobPosting:
    """
    Structured job posting.

    Attributes:
        title, company, location, city, country: Free text (None if unknown)
        salary_min, salary_max: Amounts as extracted, in salary_currency
        salary_rate_type: One of SALARY_RATE_TYPES
        hours_per_week: Weekly hours if stated
        presence_type: One of PRESENCE_TYPES
        contract_type: Free text ("CDI", "Freelance", "Full-time"...)
        required_skills, nice_to_have_skills: Skill names
        perks: snake_case perk identifiers
    """

    title: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    salary_currency: Optional[str] = None
    salary_rate_type: Optional[str] = None
    hours_per_week: Optional[float] = None
    presence_type: Optional[str] = None
    contract_type: Optional[str] = None
    required_skills: List[str] = field(default_factory=list)
    nice_to_have_skills: List[str] = field(default_factory=list)
    perks: List[str] = field(default_factory=list)

    @property
    def has_salary(self) -> bool:
        return self.salary_min is not None or self.salary_max is not None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "JobPosting":
        """
        Build a JobPosting from an extraction payload, dropping invalid values.

        Wrong-typed fields become None (or [] for lists); rate and presence
        types outside their allowed values become None.

        Example:
            >>> job = JobPosting.from_payload({"salaryMin": 30, "salaryMax": 40, "salaryRateType": "hourly"})
            >>> (job.salary_min, job.salary_max, job.salary_rate_type)
            (30, 40, 'hourly')
        """
        payload = payload if isinstance(payload, dict) else {}
        rate_type = payload.get("salaryRateType")
        presence = payload.get("presenceType")
        return cls(
            title=_string_or_none(payload.get("title")),
            company=_string_or_none(payload.get("company")),
            location=_string_or_none(payload.get("location")),
            city=_string_or_none(payload.get("city")),
            country=_string_or_none(payload.get("country")),
            salary_min=_number_or_none(payload.get("salaryMin")),
            salary_max=_number_or_none(payload.get("salaryMax")),
            salary_currency=_string_or_none(payload.get("salaryCurrency")),
            salary_rate_type=rate_type if rate_type in SALARY_RATE_TYPES else None,
            hours_per_week=_number_or_none(payload.get("hoursPerWeek")),
            presence_type=presence if presence in PRESENCE_TYPES else None,
            contract_type=_string_or_none(payload.get("contractType")),
            required_skills=_string_list(payload.get("requiredSkills")),
            nice_to_have_skills=_string_list(payload.get("niceToHaveSkills")),
            perks=_string_list(payload.get("perks")),
        )

    def to_payload(self) -> Dict[str, Any]:
        """Convert back to the camelCase payload shape (all keys present)."""
        return to_camel_dict(self, drop_none=False)
