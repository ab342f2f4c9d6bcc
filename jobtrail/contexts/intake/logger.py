"""
Intake context logger.

Provides logging interface for the intake context with automatic [intake]
prefix. All intake modules should import from this module, not from
utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from jobtrail.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[intake]"


def setup_intake_logger(log_dir: Path, section: str = "all") -> Path:
    """
    Setup logger for intake context.

    Args:
        log_dir: Directory for this session
        section: Section being extracted, recorded in provenance

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="intake",
        log_dir=log_dir,
        extra_provenance={"Section": section},
        level_colors={"SUCCESS": "<green>"},
    )


def _log_info(message: str) -> None:
    """Log info message with [intake] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [intake] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [intake] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [intake] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [intake] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_extraction_result(result) -> None:
    """
    Log a SectionExtraction summary.

    Args:
        result: SectionExtraction from extract_section()
    """
    if not result.success:
        _log_error(f"{result.section}: {result.error}")
        return
    if result.is_empty:
        _log_warning(f"{result.section}: nothing extracted")
        return
    count = len(result.entries) if result.personal is None else 1
    _log_success(f"{result.section}: {count} extracted, {len(result.uncertainties)} uncertain")
