"""
Per-field uncertainty markers for imported résumé entries.

Parsers and extraction services flag fields they could not determine with
confidence. A marker lives until the user edits that exact (entry, field)
pair; it is never re-added automatically and is never serialized into the
persisted résumé.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence

from jobtrail.utils.text_processing import camel_to_snake, snake_to_camel


@dataclass(frozen=True)
class Uncertainty:
    """
    Low-confidence marker for one field of one entry.

    Attributes:
        entry_index: Position of the entry in its collection (not its id)
        field: snake_case field name
        reason: Human-readable explanation shown next to the field
    """

    entry_index: int
    field: str
    reason: str = ""

    @property
    def key(self) -> tuple:
        return (self.entry_index, self.field)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "entryIndex": self.entry_index,
            "field": snake_to_camel(self.field),
            "reason": self.reason,
        }


class UncertaintyTracker:
    """
    Ordered set of uncertainty markers for one collection.

    Field names are normalized to snake_case, so ``startYear`` and
    ``start_year`` refer to the same marker.

    Example:
        >>> tracker = UncertaintyTracker()
        >>> tracker.flag(0, "startYear", "Year not found")
        >>> tracker.has(0, "start_year")
        True
        >>> tracker.resolve(0, "start_year")
        >>> len(tracker)
        0
    """

    def __init__(self, markers: Optional[Iterable[Uncertainty]] = None):
        self._markers: List[Uncertainty] = []
        self._resolved: set = set()
        for marker in markers or ():
            self.flag(marker.entry_index, marker.field, marker.reason)

    def __len__(self) -> int:
        return len(self._markers)

    def __iter__(self) -> Iterator[Uncertainty]:
        return iter(list(self._markers))

    def __repr__(self) -> str:
        return f"UncertaintyTracker({self._markers!r})"

    @property
    def markers(self) -> List[Uncertainty]:
        return list(self._markers)

    def flag(self, entry_index: int, field: str, reason: str = "") -> None:
        """
        Add a marker unless one exists for the pair or the pair was already edited.
        """
        key = (entry_index, camel_to_snake(field))
        if key in self._resolved or self.has(*key):
            return
        self._markers.append(Uncertainty(entry_index, key[1], reason))

    def has(self, entry_index: int, field: str) -> bool:
        key = (entry_index, camel_to_snake(field))
        return any(marker.key == key for marker in self._markers)

    def for_entry(self, entry_index: int) -> List[Uncertainty]:
        """All markers of one entry, in flag order."""
        return [marker for marker in self._markers if marker.entry_index == entry_index]

    def resolve(self, entry_index: int, field: str) -> None:
        """
        Clear the marker for an edited (entry, field) pair.

        The pair is remembered so later flag() calls don't bring it back.
        Resolving a pair without a marker is a no-op apart from that.
        """
        key = (entry_index, camel_to_snake(field))
        self._resolved.add(key)
        self._markers = [marker for marker in self._markers if marker.key != key]

    def record_edit(
        self, entries: Sequence[Any], entry_index: int, updates: Dict[str, Any]
    ) -> List[Any]:
        """
        Apply a user edit to one entry and clear the edited fields' markers.

        Entries may be dataclasses (updated via dataclasses.replace) or dicts.
        Field names in updates may be camelCase or snake_case; dataclass
        entries receive the snake_case names.

        Args:
            entries: Current collection (not mutated)
            entry_index: Position of the edited entry
            updates: Field name → new value

        Returns:
            New list with the edited entry replaced

        Raises:
            IndexError: If entry_index is out of range
        """
        updated = list(entries)
        entry = updated[entry_index]
        if isinstance(entry, dict):
            updated[entry_index] = {**entry, **updates}
        else:
            updated[entry_index] = replace(
                entry, **{camel_to_snake(name): value for name, value in updates.items()}
            )

        for name in updates:
            self.resolve(entry_index, name)
        return updated

    def remove_entry(self, entry_index: int) -> None:
        """
        Forget markers of a removed entry and shift later entries down by one.
        """
        shifted = []
        for marker in self._markers:
            if marker.entry_index == entry_index:
                continue
            if marker.entry_index > entry_index:
                marker = replace(marker, entry_index=marker.entry_index - 1)
            shifted.append(marker)
        self._markers = shifted
        self._resolved = {
            (index - 1 if index > entry_index else index, name)
            for index, name in self._resolved
            if index != entry_index
        }

    # Wire shape for the review UI (camelCase keys)

    def to_payload(self) -> List[Dict[str, Any]]:
        return [marker.to_payload() for marker in self._markers]

    @classmethod
    def from_payload(cls, payload: Optional[Iterable[Dict[str, Any]]]) -> "UncertaintyTracker":
        """
        Build a tracker from ``[{entryIndex, field, reason}, ...]``.

        Malformed items (non-dict, missing or non-integer entryIndex, missing
        field) are skipped.
        """
        tracker = cls()
        for item in payload or ():
            if not isinstance(item, dict):
                continue
            index = item.get("entryIndex", item.get("entry_index"))
            field = item.get("field")
            if not isinstance(index, int) or isinstance(index, bool) or not field:
                continue
            tracker.flag(index, str(field), str(item.get("reason") or ""))
        return tracker
