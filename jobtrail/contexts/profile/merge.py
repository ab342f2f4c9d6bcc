"""
Profile merge engine.

Two merge modes for entry collections:
- add: incoming entries first, then existing ones; incoming entries whose
  dedup key already exists (in the profile or earlier in the import) are dropped
- replace: the collection becomes exactly the incoming entries; discarding a
  non-empty collection requires explicit confirmation

Scalar profile fields are only ever filled when empty.

All functions are copy-on-write: inputs are never mutated.
"""

from dataclasses import replace
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from jobtrail.contexts.profile.exceptions import ReplaceNotConfirmedError, UnknownCollectionError
from jobtrail.contexts.profile.logger import _log_debug
from jobtrail.contexts.profile.profile_data_structure import (
    COLLECTION_TYPES,
    SCALAR_FIELDS,
    UserProfile,
)


class MergeMode(str, Enum):
    ADD = "add"
    REPLACE = "replace"


def _attr(entry: Any, name: str) -> str:
    value = entry.get(name) if isinstance(entry, Mapping) else getattr(entry, name, "")
    return str(value or "").strip().lower()


# Collection name → raw dedup key. Keys are compared lower-cased and trimmed.
DEDUP_KEYS: Dict[str, Callable[[Any], str]] = {
    "skills": lambda entry: _attr(entry, "name"),
    "work_experience": lambda entry: f"{_attr(entry, 'title')}|{_attr(entry, 'company')}",
    "education": lambda entry: f"{_attr(entry, 'degree')}|{_attr(entry, 'institution')}",
    "languages": lambda entry: _attr(entry, "language"),
    "portfolio_links": lambda entry: _attr(entry, "url"),
    "certifications": lambda entry: _attr(entry, "name"),
}


def dedup_key_for(collection: str) -> Callable[[Any], str]:
    """
    Dedup key function for a profile collection.

    Raises:
        UnknownCollectionError: If the collection has no dedup key
    """
    if collection not in DEDUP_KEYS:
        raise UnknownCollectionError(collection, DEDUP_KEYS)
    return DEDUP_KEYS[collection]


def merge_entries(
    existing: Iterable[Any],
    incoming: Iterable[Any],
    mode: Union[MergeMode, str],
    key: Union[Callable[[Any], str], str],
    confirm_replace: bool = False,
) -> List[Any]:
    """
    Merge incoming entries into an existing collection.

    Args:
        existing: Current entries (not mutated)
        incoming: Imported entries
        mode: "add" or "replace"
        key: Dedup key function, or a profile collection name
        confirm_replace: Must be True to replace a non-empty collection

    Returns:
        New list of entries

    Raises:
        ReplaceNotConfirmedError: Replace of a non-empty collection without
            confirmation
        ValueError: Unknown mode

    Example:
        >>> merge_entries(["React", "Node.js"], ["react", "Python"], "add", key=str.lower)
        ['Python', 'React', 'Node.js']
    """
    existing = list(existing)
    incoming = list(incoming)
    mode = MergeMode(mode)
    collection = key if isinstance(key, str) else ""
    key_fn = dedup_key_for(key) if isinstance(key, str) else key

    if mode == MergeMode.REPLACE:
        if existing and not confirm_replace:
            raise ReplaceNotConfirmedError(len(existing), collection)
        return incoming

    seen = {_normalize_key(key_fn(entry)) for entry in existing}
    added = []
    for entry in incoming:
        entry_key = _normalize_key(key_fn(entry))
        if entry_key in seen:
            continue
        seen.add(entry_key)
        added.append(entry)

    skipped = len(incoming) - len(added)
    if skipped:
        _log_debug(f"Skipped {skipped} duplicate {collection or 'entries'}")
    return added + existing


def _normalize_key(value: Any) -> str:
    return str(value or "").strip().lower()


def merge_collection(
    profile: UserProfile,
    collection: str,
    incoming: Iterable[Any],
    mode: Union[MergeMode, str] = MergeMode.ADD,
    confirm_replace: bool = False,
) -> UserProfile:
    """
    Merge entries into a named profile collection.

    Args:
        profile: Current profile (not mutated)
        collection: snake_case collection name (e.g. "work_experience")
        incoming: Imported entries
        mode: "add" or "replace"
        confirm_replace: Must be True to replace a non-empty collection

    Returns:
        New UserProfile with the merged collection

    Raises:
        UnknownCollectionError: Unknown collection name
        ReplaceNotConfirmedError: Unconfirmed replace of a non-empty collection
    """
    if collection not in COLLECTION_TYPES:
        raise UnknownCollectionError(collection, COLLECTION_TYPES)
    merged = merge_entries(
        profile.collection(collection),
        incoming,
        mode,
        key=collection,
        confirm_replace=confirm_replace,
    )
    return replace(profile, **{collection: merged})


def split_address(address: str) -> Dict[str, str]:
    """
    Split "City, Country" on the first comma.

    Example:
        >>> split_address("Lyon, France")
        {'city': 'Lyon', 'country': 'France'}
        >>> split_address("Lyon")
        {'city': 'Lyon'}
    """
    city, _, country = (address or "").partition(",")
    parts = {"city": city.strip()}
    if country.strip():
        parts["country"] = country.strip()
    return parts


def merge_profile_fields(profile: UserProfile, incoming: Mapping[str, Any]) -> UserProfile:
    """
    Fill empty scalar fields from incoming values.

    Non-empty existing values are never changed. An incoming "address" is
    split into city/country when those are not given directly.

    Args:
        profile: Current profile (not mutated)
        incoming: snake_case field name → value (blank values ignored)

    Returns:
        New UserProfile (the same values if nothing was empty)
    """
    values = {
        name: str(value).strip()
        for name, value in incoming.items()
        if name in SCALAR_FIELDS and value is not None and str(value).strip()
    }
    address = incoming.get("address")
    if address and str(address).strip():
        for name, value in split_address(str(address)).items():
            values.setdefault(name, value)

    updates = {name: value for name, value in values.items() if not getattr(profile, name)}
    return replace(profile, **updates) if updates else profile


def filled_fields(before: UserProfile, after: UserProfile) -> List[str]:
    """Names of scalar fields that changed between two profiles."""
    return [name for name in SCALAR_FIELDS if getattr(before, name) != getattr(after, name)]


def added_counts(
    before: UserProfile, after: UserProfile, collections: Optional[Iterable[str]] = None
) -> Dict[str, int]:
    """Per-collection count of entries gained between two profiles."""
    return {
        name: len(after.collection(name)) - len(before.collection(name))
        for name in collections or COLLECTION_TYPES
    }
