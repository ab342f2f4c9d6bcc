"""
Certification detection in free profile text.

Scans aggregated résumé text for well-known certifications (language tests,
project management, security, cloud) using an ordered pattern table. Each
pattern contributes at most one certification per scan: its first match.
"""

import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Union

from jobtrail.contexts.profile.profile_data_structure import Certification


@dataclass(frozen=True)
class CertificationPattern:
    """
    One detectable certification.

    Attributes:
        pattern: Compiled case-insensitive regex
        build_name: Builds the certification name from the match
        issuer: Issuing organization
    """

    pattern: re.Pattern
    build_name: Callable[[re.Match], str]
    issuer: str


def _pattern(regex: str) -> re.Pattern:
    return re.compile(regex, re.IGNORECASE)


# Order matters only for output order; each pattern is scanned independently
CERTIFICATION_PATTERNS = (
    CertificationPattern(_pattern(r"TOEIC\s*(\d+)"), lambda m: f"TOEIC {m.group(1)}", "ETS"),
    CertificationPattern(
        _pattern(r"TOEFL\s*(?:iBT\s*)?(\d+)"), lambda m: f"TOEFL {m.group(1)}", "ETS"
    ),
    CertificationPattern(
        _pattern(r"DELF\s*(A1|A2|B1|B2|C1|C2)"),
        lambda m: f"DELF {m.group(1).upper()}",
        "France Education International",
    ),
    CertificationPattern(
        _pattern(r"DALF\s*(C1|C2)"),
        lambda m: f"DALF {m.group(1).upper()}",
        "France Education International",
    ),
    CertificationPattern(
        _pattern(r"IELTS\s*(\d+\.?\d*)"), lambda m: f"IELTS {m.group(1)}", "British Council"
    ),
    CertificationPattern(_pattern(r"\bPMP\b"), lambda m: "PMP", "PMI"),
    CertificationPattern(_pattern(r"\bCISSP\b"), lambda m: "CISSP", "ISC2"),
    CertificationPattern(
        _pattern(r"\bSCRUM\s*MASTER\b"), lambda m: "Scrum Master", "Scrum Alliance"
    ),
    CertificationPattern(
        _pattern(r"AWS\s+(?:Certified\s+)?([\w\s]+?)(?:\s*[-–,.]|\s*$)"),
        lambda m: f"AWS {m.group(1).strip()}",
        "Amazon Web Services",
    ),
    CertificationPattern(
        _pattern(r"Google\s+(?:Certified|Professional)\s+([\w\s]+?)(?:\s*[-–,.]|\s*$)"),
        lambda m: f"Google {m.group(1).strip()}",
        "Google",
    ),
)


def _existing_names(existing: Iterable[Union[Certification, str]]) -> set:
    names = set()
    for item in existing or ():
        name = item if isinstance(item, str) else item.name
        names.add(name.strip().lower())
    return names


def detect_certifications(
    text: str,
    existing: Iterable[Union[Certification, str]] = (),
    patterns=CERTIFICATION_PATTERNS,
) -> List[Certification]:
    """
    Detect certifications mentioned in free text.

    Args:
        text: Aggregated profile text
        existing: Certifications (or names) already in the profile
        patterns: Pattern table to scan with

    Returns:
        New Certification entries (empty date), in pattern order, excluding
        names already present (case-insensitive)

    Example:
        >>> [c.name for c in detect_certifications("TOEIC 980, later TOEIC 980 again")]
        ['TOEIC 980']
    """
    if not text or not text.strip():
        return []

    known = _existing_names(existing)
    detected = []
    for entry in patterns:
        match = entry.pattern.search(text)
        if not match:
            continue
        name = entry.build_name(match)
        if name.lower() in known:
            continue
        known.add(name.lower())
        detected.append(Certification(name=name, issuer=entry.issuer, date=""))
    return detected


def collect_profile_text(
    experience: str = "", skills: str = "", summary: str = "", languages: str = ""
) -> str:
    """Concatenate the free-text fields scanned for certifications."""
    return " ".join(part for part in (experience, skills, summary, languages) if part)
