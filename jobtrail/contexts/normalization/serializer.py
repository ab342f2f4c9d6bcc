"""
CVContent → persisted résumé string.

The output format follows the origin of the parsed content: canonical JSON
for JSON résumés, markdown for legacy text résumés. The markdown writer uses
exactly the layouts the text parser reads, so parsing its output gives back
the same entries.
"""

import json
from typing import Any, Dict, List, Optional

from jobtrail.contexts.normalization.cv_data_structure import CVContent, Education, Experience
from jobtrail.contexts.normalization.format_detector import ContentFormat
from jobtrail.contexts.normalization.json_adapter import (
    PRESENT_LABEL,
    SkillBucketStrategy,
    cv_to_json,
    proportional_skill_buckets,
)

LOCATION_GLYPH = "\U0001f4cd"


def serialize_cv(
    cv: CVContent,
    origin: ContentFormat,
    source: Optional[Dict[str, Any]] = None,
    skill_buckets: SkillBucketStrategy = proportional_skill_buckets,
) -> str:
    """
    Serialize CVContent in the format it was parsed from.

    Args:
        cv: Content to serialize
        origin: Origin tag of the parsed résumé
        source: Original JSON document (JSON origin only)
        skill_buckets: Skill bucket strategy (JSON origin only)

    Returns:
        Pretty-printed JSON (indent 2, non-ASCII kept) or markdown text
    """
    if ContentFormat(origin) == ContentFormat.JSON:
        document = cv_to_json(cv, source=source, skill_buckets=skill_buckets)
        return json.dumps(document, indent=2, ensure_ascii=False)
    return format_markdown_cv(cv)


# =============================================================================
# MARKDOWN WRITER
# =============================================================================


def _header_lines(cv: CVContent) -> List[str]:
    info = cv.personal_info
    lines = []
    if info.name:
        lines.append(f"# {info.name}")

    contact = " | ".join(part for part in (info.email, info.phone) if part)
    if contact:
        lines.append(contact)
    if info.location:
        lines.append(f"{LOCATION_GLYPH} {info.location}")
    if info.portfolio:
        lines.append(info.portfolio)
    if info.age:
        lines.append(f"Age: {info.age}")
    return lines


def _experience_lines(entry: Experience) -> List[str]:
    lines = [f"### **{entry.title}**" if entry.title else "###"]
    if entry.company:
        lines.append(f"*{entry.company}*")

    end = entry.end_date or (PRESENT_LABEL if entry.current else "")
    if entry.start_date and end:
        lines.append(f"*{entry.start_date} - {end}*")
    elif entry.start_date:
        lines.append(f"*{entry.start_date}*")
    elif end:
        lines.append(f"*- {end}*")

    lines.extend(f"- {achievement}" for achievement in entry.achievements)
    return lines


def _education_lines(entry: Education) -> List[str]:
    # Always the full column form so each value keeps its place on re-parse
    degree = f"**{entry.degree}**" if entry.degree else ""
    lines = [" | ".join([degree, entry.institution, entry.year]).strip()]
    if entry.field:
        lines.append(f"*{entry.field}*")
    return lines


def format_markdown_cv(cv: CVContent) -> str:
    """
    Render CVContent as legacy markdown text.

    Sections appear in fixed order: Personal Summary, Work Experience,
    Education, Skills, then Languages and Projects when present. Empty
    sections are omitted.

    Example:
        >>> from jobtrail.contexts.normalization.cv_data_structure import PersonalInfo
        >>> print(format_markdown_cv(CVContent(personal_info=PersonalInfo(name="Jane"), skills=["Go"])))
        # Jane
        <BLANKLINE>
        ## Skills
        Go
    """
    blocks: List[List[str]] = []

    header = _header_lines(cv)
    if header:
        blocks.append(header)

    if cv.summary:
        blocks.append(["## Personal Summary", cv.summary])

    if cv.experiences:
        lines = ["## Work Experience"]
        for index, entry in enumerate(cv.experiences):
            if index:
                lines.append("")
            lines.extend(_experience_lines(entry))
        blocks.append(lines)

    if cv.education:
        lines = ["## Education"]
        for entry in cv.education:
            lines.extend(_education_lines(entry))
        blocks.append(lines)

    if cv.skills:
        blocks.append(["## Skills", ", ".join(cv.skills)])

    if cv.personal_info.languages:
        blocks.append(["## Languages", cv.personal_info.languages])

    if cv.projects:
        lines = ["## Projects"]
        for project in cv.projects:
            lines.append(f"### {project.name}")
            if project.description:
                lines.append(project.description)
        blocks.append(lines)

    return "\n\n".join("\n".join(block) for block in blocks)
