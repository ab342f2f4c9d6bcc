"""Custom exceptions for the normalization context."""

from pathlib import Path
from typing import Optional


class InvalidKeywordConfigError(ValueError):
    """
    Exception raised when a section keyword override file is malformed.

    Parsing itself never raises; this only guards the configuration that
    drives it.

    Attributes:
        message: Error description
        config_path: Path to the offending YAML file
    """

    def __init__(self, message: str, config_path: Optional[Path] = None):
        self.message = message
        self.config_path = config_path

        parts = [message]
        if config_path:
            parts.append(f"Config file: {config_path}")

        super().__init__("\n".join(parts))


class UnknownCollectionError(KeyError):
    """
    Exception raised when an operation names a collection that doesn't exist.

    Attributes:
        collection: The requested collection name
        valid: Collection names accepted by the operation
    """

    def __init__(self, collection: str, valid):
        self.collection = collection
        self.valid = sorted(valid)
        super().__init__(f"Unknown collection: {collection}. Must be one of {self.valid}")

    def __str__(self) -> str:
        return self.args[0]
