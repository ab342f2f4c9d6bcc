"""
Projections between the CV-editor shape and the profile shape.

Experience ↔ WorkExperience is lossless as long as no achievement contains a
newline. Education ↔ ProfileEducation maps free-text years onto numbers:
"2018-2022" ↔ (2018, 2022), "2018 - Present" ↔ (2018, None, current).
"""

from typing import Optional

from jobtrail.contexts.normalization.cv_data_structure import (
    Education,
    Experience,
    format_year_range,
    parse_year_range,
)
from jobtrail.contexts.profile.profile_data_structure import ProfileEducation, WorkExperience


def experience_to_work(entry: Experience, location: Optional[str] = None) -> WorkExperience:
    return WorkExperience(
        id=entry.id,
        title=entry.title,
        company=entry.company,
        location=location,
        start_date=entry.start_date,
        end_date=None if entry.current else (entry.end_date or None),
        current=entry.current,
        achievements=entry.achievements,
    )


def work_to_experience(entry: WorkExperience) -> Experience:
    return Experience.from_achievements(
        entry.achievements,
        id=entry.id,
        company=entry.company,
        title=entry.title,
        start_date=entry.start_date,
        end_date=entry.end_date or "",
        current=entry.current,
    )


def education_to_profile(entry: Education) -> ProfileEducation:
    start_year, end_year, current = parse_year_range(entry.year)
    return ProfileEducation(
        id=entry.id,
        degree=entry.degree,
        institution=entry.institution,
        field=entry.field,
        start_year=start_year,
        end_year=end_year,
        current=current or bool(entry.current),
        gpa=entry.gpa,
        honors=entry.honors,
    )


def profile_to_education(entry: ProfileEducation) -> Education:
    return Education(
        id=entry.id,
        institution=entry.institution,
        degree=entry.degree,
        field=entry.field,
        year=format_year_range(entry.start_year, entry.end_year, entry.current),
        current=entry.current or None,
        gpa=entry.gpa,
        honors=entry.honors,
    )
