"""
Canonical JSON résumé schema ↔ CVContent.

Canonical schema (stable interchange format, camelCase keys):

    {
      "personalInfo": {"name", "email", "phone", "address", "age", ...},
      "profile": {"text"},
      "skills": {"technical": [], "marketing": [], "soft": []},
      "experiences": [{"id", "company", "jobTitle", "period", "achievements"}],
      "projects": [{"id", "name", "description"}],
      "education": [{"id", "institution", "years", "degree", "specialization"}]
    }

The editor shape has a single flat skills list, so JSON → CVContent → JSON
reassigns skills to buckets through a SkillBucketStrategy. Keys this module
does not model are carried over from the source document on the way back.
"""

import math
from typing import Any, Callable, Dict, List, Optional

from jobtrail.contexts.normalization.cv_data_structure import (
    CVContent,
    Education,
    Experience,
    PersonalInfo,
    Project,
)
from jobtrail.contexts.normalization.section_patterns import KeywordConfig, default_keyword_config
from jobtrail.utils.identifiers import new_id

SKILL_BUCKETS = ("technical", "marketing", "soft")

# Share of skills placed in the "technical" bucket by proportional_skill_buckets()
TECHNICAL_SKILL_SHARE = 0.6

PERIOD_SEPARATOR = " - "
PRESENT_LABEL = "Present"

# Keys owned by this adapter at each level of the document. Anything else in
# the source document is passed through untouched on serialization.
OWNED_KEYS = {
    "root": {"personalInfo", "profile", "skills", "experiences", "projects", "education"},
    "personalInfo": {
        "name",
        "firstName",
        "lastName",
        "email",
        "phone",
        "address",
        "age",
        "languages",
        "portfolio",
        "photo",
    },
    "profile": {"text"},
    "skills": set(SKILL_BUCKETS),
    "experiences": {"id", "company", "jobTitle", "period", "achievements"},
    "projects": {"id", "name", "description"},
    "education": {"id", "institution", "years", "degree", "specialization", "gpa", "honors"},
}

SkillBucketStrategy = Callable[[List[str]], Dict[str, List[str]]]


# =============================================================================
# SKILL BUCKET STRATEGIES
# =============================================================================


def proportional_skill_buckets(skills: List[str]) -> Dict[str, List[str]]:
    """
    Split a flat skills list into canonical buckets by position.

    The first ceil(n * 0.6) skills become "technical", the rest "marketing";
    "soft" is always empty. This is lossy: a skill's original bucket is not
    remembered.

    Example:
        >>> proportional_skill_buckets(["a", "b", "c", "d", "e"])
        {'technical': ['a', 'b', 'c'], 'marketing': ['d', 'e'], 'soft': []}
    """
    cut = math.ceil(len(skills) * TECHNICAL_SKILL_SHARE)
    return {"technical": list(skills[:cut]), "marketing": list(skills[cut:]), "soft": []}


def source_skill_buckets(source: Optional[dict]) -> SkillBucketStrategy:
    """
    Build a strategy that keeps each skill in the bucket it came from.

    Skills not found in the source document go to "technical".

    Args:
        source: Original canonical JSON document (or None)

    Returns:
        SkillBucketStrategy
    """
    known = {}
    source_skills = (source or {}).get("skills")
    if isinstance(source_skills, dict):
        for bucket in SKILL_BUCKETS:
            for skill in _as_list(source_skills.get(bucket)):
                known.setdefault(str(skill).lower(), bucket)

    def strategy(skills: List[str]) -> Dict[str, List[str]]:
        buckets = {bucket: [] for bucket in SKILL_BUCKETS}
        for skill in skills:
            buckets[known.get(skill.lower(), "technical")].append(skill)
        return buckets

    return strategy


# =============================================================================
# JSON → CVContent
# =============================================================================


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _text_or_empty(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _entries(value: Any) -> List[dict]:
    # Collection items that are not objects are skipped
    return [item for item in _as_list(value) if isinstance(item, dict)]


def _entry_id(item: dict, prefix: str) -> str:
    value = item.get("id")
    return value if isinstance(value, str) and value else new_id(prefix)


def split_period(period: str, config: Optional[KeywordConfig] = None):
    """
    Split a ``"start - end"`` period into (start, end, current).

    Example:
        >>> split_period("Jan 2020 - Present")
        ('Jan 2020', 'Present', True)
    """
    config = config or default_keyword_config()
    start, _, end = _text(period).partition(PERIOD_SEPARATOR)
    end = end.strip()
    return start.strip(), end, bool(end) and config.is_present(end)


def format_period(start: str, end: str, current: bool) -> str:
    """
    Inverse of split_period().

    A current position without an explicit end token ends with "Present";
    a lone start date is emitted on its own.
    """
    end = end or (PRESENT_LABEL if current else "")
    if not end:
        return start or ""
    return f"{start}{PERIOD_SEPARATOR}{end}"


def _collect_skills(skills: Any) -> List[str]:
    if isinstance(skills, list):
        return [_text(skill) for skill in skills]
    if not isinstance(skills, dict):
        return []
    collected = []
    for bucket in SKILL_BUCKETS:
        collected.extend(_text(skill) for skill in _as_list(skills.get(bucket)))
    return collected


def json_to_cv(data: Dict[str, Any], config: Optional[KeywordConfig] = None) -> CVContent:
    """
    Convert a canonical JSON résumé into CVContent.

    Missing ids are generated; skills from every bucket are concatenated
    (technical, marketing, soft) without de-duplication. Badly shaped
    values read as empty: a non-object personalInfo as {}, a non-list
    collection as [], and non-object collection items are skipped.

    Args:
        data: Parsed canonical JSON document
        config: Keyword configuration used to recognise present tokens

    Returns:
        CVContent
    """
    info = _as_dict(data.get("personalInfo"))
    profile = data.get("profile")

    experiences = []
    for item in _entries(data.get("experiences")):
        start, end, current = split_period(item.get("period"), config)
        experiences.append(
            Experience.from_achievements(
                [_text(line).strip() for line in _as_list(item.get("achievements")) if _text(line).strip()],
                id=_entry_id(item, "exp"),
                company=_text(item.get("company")),
                title=_text(item.get("jobTitle")),
                start_date=start,
                end_date=end,
                current=current,
            )
        )

    education = [
        Education(
            id=_entry_id(item, "edu"),
            institution=_text(item.get("institution")),
            degree=_text(item.get("degree")),
            field=_text(item.get("specialization")),
            year=_text(item.get("years")),
            gpa=item.get("gpa"),
            honors=item.get("honors"),
        )
        for item in _entries(data.get("education"))
    ]

    projects = [
        Project(
            id=_entry_id(item, "proj"),
            name=_text(item.get("name")),
            description=_text(item.get("description")),
        )
        for item in _entries(data.get("projects"))
    ]

    age = info.get("age")
    return CVContent(
        personal_info=PersonalInfo(
            name=_text(info.get("name")),
            email=_text(info.get("email")),
            phone=_text(info.get("phone")),
            location=_text(info.get("address")),
            age=str(age) if age not in (None, "") else None,
            languages=_text_or_empty(info.get("languages")) or None,
            portfolio=_text_or_empty(info.get("portfolio")) or None,
            photo=_text_or_empty(info.get("photo")) or None,
        ),
        summary=_text(profile.get("text") if isinstance(profile, dict) else _text_or_empty(profile)),
        experiences=experiences,
        education=education,
        skills=_collect_skills(data.get("skills")),
        projects=projects or None,
    )


# =============================================================================
# CVContent → JSON
# =============================================================================


def _age_value(age: Optional[str]):
    if age is None or age == "":
        return None
    age = str(age).strip()
    return int(age) if age.isdigit() else age


def _personal_info_json(info: PersonalInfo, source_info: dict) -> Dict[str, Any]:
    emitted: Dict[str, Any] = {"name": info.name}
    if info.name and ("firstName" in source_info or "lastName" in source_info):
        first, _, last = info.name.partition(" ")
        emitted["firstName"] = first
        emitted["lastName"] = last.strip()
    else:
        # No name to split: keep whatever name parts the source had
        for key in ("firstName", "lastName"):
            if key in source_info:
                emitted[key] = source_info[key]

    emitted["email"] = info.email
    emitted["phone"] = info.phone
    emitted["address"] = info.location

    # Optional keys: emitted when set, or as null when the source carried them
    optional = {
        "age": _age_value(info.age),
        "languages": info.languages or None,
        "portfolio": info.portfolio or None,
        "photo": info.photo or None,
    }
    for key, value in optional.items():
        if value is not None or key in source_info:
            emitted[key] = value
    return emitted


def _education_json(entry: Education) -> Dict[str, Any]:
    emitted = {
        "id": entry.id,
        "institution": entry.institution,
        "years": entry.year,
        "degree": entry.degree,
        "specialization": entry.field,
    }
    if entry.gpa:
        emitted["gpa"] = entry.gpa
    if entry.honors:
        emitted["honors"] = entry.honors
    return emitted


def cv_to_json(
    cv: CVContent,
    source: Optional[Dict[str, Any]] = None,
    skill_buckets: SkillBucketStrategy = proportional_skill_buckets,
) -> Dict[str, Any]:
    """
    Convert CVContent back into the canonical JSON schema.

    Args:
        cv: Content to convert
        source: Originally parsed document; keys not modelled here survive
        skill_buckets: Strategy assigning the flat skills list to buckets

    Returns:
        Canonical JSON document as a dict
    """
    source = source if isinstance(source, dict) else {}
    source_info = source.get("personalInfo") if isinstance(source.get("personalInfo"), dict) else {}

    emitted = {
        "personalInfo": _personal_info_json(cv.personal_info, source_info),
        "profile": {"text": cv.summary},
        "skills": skill_buckets(list(cv.skills)),
        "experiences": [
            {
                "id": entry.id,
                "company": entry.company,
                "jobTitle": entry.title,
                "period": format_period(entry.start_date, entry.end_date, entry.current),
                "achievements": entry.achievements,
            }
            for entry in cv.experiences
        ],
        "projects": [
            {"id": entry.id, "name": entry.name, "description": entry.description}
            for entry in cv.projects or []
        ],
        "education": [_education_json(entry) for entry in cv.education],
    }
    return overlay_source_keys(emitted, source)


def overlay_source_keys(emitted: Dict[str, Any], source: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Re-attach keys of the source document that this adapter doesn't own.

    Source key order is kept; entries of list collections are matched by id.
    Owned keys always come from the emitted document, so clearing a field
    in the editor removes it from the output.
    """
    if not isinstance(source, dict):
        return emitted

    result = _overlay_level(emitted, source, OWNED_KEYS["root"])
    for key in ("personalInfo", "profile", "skills"):
        if isinstance(source.get(key), dict) and isinstance(result.get(key), dict):
            result[key] = _overlay_level(result[key], source[key], OWNED_KEYS[key])

    for key in ("experiences", "projects", "education"):
        source_entries = {
            item["id"]: item
            for item in _entries(source.get(key))
            if isinstance(item.get("id"), str) and item["id"]
        }
        result[key] = [
            _overlay_level(entry, source_entries[entry["id"]], OWNED_KEYS[key])
            if entry.get("id") in source_entries
            else entry
            for entry in result[key]
        ]
    return result


def _overlay_level(emitted: Dict[str, Any], source: Dict[str, Any], owned: set) -> Dict[str, Any]:
    merged = {}
    for key, value in source.items():
        if key in emitted:
            merged[key] = emitted[key]
        elif key not in owned:
            merged[key] = value
    for key, value in emitted.items():
        merged.setdefault(key, value)
    return merged
