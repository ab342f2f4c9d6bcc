"""
Normalization context logger.

Provides logging interface for the normalization context with automatic
[normalize] prefix. All normalization modules should import from this module,
not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from jobtrail.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[normalize]"


def setup_normalization_logger(log_dir: Path, phase: str = "parse") -> Path:
    """
    Setup logger for normalization context.

    Args:
        log_dir: Directory for this session
        phase: Phase name for provenance ("parse", "convert", "roundtrip")

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="normalize",
        log_dir=log_dir,
        extra_provenance={"Phase": phase},
    )


# Wrapper functions with automatic [normalize] prefix


def _log_info(message: str) -> None:
    """Log info message with [normalize] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [normalize] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [normalize] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [normalize] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [normalize] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level normalization-specific logging helpers


def log_parse_result(document) -> None:
    """
    Log a one-line summary of a parsed ResumeDocument.

    Args:
        document: ResumeDocument from parse_resume()
    """
    content = document.content
    summary = (
        f"Parsed {document.origin.value} résumé: "
        f"{len(content.experiences)} experiences, "
        f"{len(content.education)} education, "
        f"{len(content.skills)} skills"
    )
    if document.extraction_failed:
        _log_warning(f"{summary} (nothing extracted from non-empty input)")
    else:
        _log_info(summary)

    flagged = sum(len(tracker) for tracker in document.uncertainties.values())
    if flagged:
        _log_debug(f"  {flagged} uncertain field(s) flagged for review")
