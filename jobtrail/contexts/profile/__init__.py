"""
Profile Context

Responsibilities:
- Models the user profile (personal fields plus entry collections)
- Merges imported entries in add or replace mode without duplicates
- Fills empty personal fields from imports, never overwriting
- Detects certifications in free profile text
- Projects résumé entries onto profile entries and back

Owns: Profile data model, merge rules
Never: Parses résumé text (delegates to the normalization context)
"""

from jobtrail.contexts.profile.certifications import (
    CERTIFICATION_PATTERNS,
    collect_profile_text,
    detect_certifications,
)
from jobtrail.contexts.profile.exceptions import ReplaceNotConfirmedError, UnknownCollectionError
from jobtrail.contexts.profile.importer import (
    ImportResult,
    ProfileImport,
    extract_portfolio_links,
    import_into_profile,
    parse_languages_text,
)
from jobtrail.contexts.profile.merge import (
    MergeMode,
    merge_collection,
    merge_entries,
    merge_profile_fields,
)
from jobtrail.contexts.profile.profile_data_structure import (
    Certification,
    Language,
    PortfolioLink,
    ProfileEducation,
    Skill,
    UserProfile,
    WorkExperience,
)

__all__ = [
    # Merge engine
    "MergeMode",
    "merge_entries",
    "merge_collection",
    "merge_profile_fields",
    # Import orchestration
    "ProfileImport",
    "ImportResult",
    "import_into_profile",
    "parse_languages_text",
    "extract_portfolio_links",
    # Certification detection
    "CERTIFICATION_PATTERNS",
    "detect_certifications",
    "collect_profile_text",
    # Exceptions
    "ReplaceNotConfirmedError",
    "UnknownCollectionError",
    # Data structure classes
    "UserProfile",
    "Skill",
    "Language",
    "PortfolioLink",
    "Certification",
    "WorkExperience",
    "ProfileEducation",
]
