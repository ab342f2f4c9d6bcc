"""Custom exceptions for the profile context."""

from jobtrail.contexts.normalization.exceptions import UnknownCollectionError


class ReplaceNotConfirmedError(ValueError):
    """
    Exception raised when a replace-mode merge would discard existing entries
    without explicit confirmation.

    Nothing is changed when this is raised; retry with confirm_replace=True.

    Attributes:
        collection: Collection being replaced (if known)
        existing_count: Number of entries that would be discarded
    """

    def __init__(self, existing_count: int, collection: str = ""):
        self.collection = collection
        self.existing_count = existing_count

        target = f"'{collection}'" if collection else "collection"
        super().__init__(
            f"Replacing {target} would discard {existing_count} existing "
            f"entr{'y' if existing_count == 1 else 'ies'}; confirmation required"
        )


__all__ = ["ReplaceNotConfirmedError", "UnknownCollectionError"]
