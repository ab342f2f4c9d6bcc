"""
Profile context logger.

Provides logging interface for the profile context with automatic [profile]
prefix. All profile modules should import from this module, not from
utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from jobtrail.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[profile]"


def setup_profile_logger(log_dir: Path, mode: str = "add") -> Path:
    """
    Setup logger for profile context.

    Args:
        log_dir: Directory for this session
        mode: Merge mode for provenance ("add" or "replace")

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="profile",
        log_dir=log_dir,
        extra_provenance={"Merge mode": mode},
        level_colors={"SUCCESS": "<green>"},
    )


# Wrapper functions with automatic [profile] prefix


def _log_info(message: str) -> None:
    """Log info message with [profile] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [profile] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [profile] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [profile] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [profile] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level profile-specific logging helpers


def log_merge_result(result) -> None:
    """
    Log what an import added to the profile.

    Args:
        result: ImportResult from import_into_profile()
    """
    added = {name: count for name, count in result.added.items() if count}
    if not added and not result.filled_fields:
        _log_info("Import added nothing new (everything already in profile)")
        return

    if result.filled_fields:
        _log_info(f"Filled empty fields: {', '.join(result.filled_fields)}")
    for name, count in added.items():
        _log_success(f"Added {count} {name.replace('_', ' ')}")
