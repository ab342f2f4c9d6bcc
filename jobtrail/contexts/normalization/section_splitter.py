"""
Line-oriented section splitter for legacy text résumés.

The splitter is an explicit state machine: transition() is a pure function of
(state, line) returning the next state and the emitted content lines. Field
extraction happens downstream on the grouped SectionBlocks, so this module only
decides which section each line belongs to.

State rules:
- Start in HEADER; after HEADER_LINE_LIMIT lines without a section heading the
  state falls to NONE and unclaimed lines are dropped.
- A heading whose text matches a section keyword switches state. The heading
  line itself is consumed.
- An unrecognised ``#``/``##`` heading outside HEADER switches to OTHER.
- Blank lines and dividers are skipped without changing state.
"""

import re
from dataclasses import dataclass, field, replace
from typing import Iterable, List, Optional, Tuple

from jobtrail.contexts.normalization.section_patterns import (
    KeywordConfig,
    ResumeLinePatterns,
    Section,
    default_keyword_config,
)

HEADER_LINE_LIMIT = 10

# Plain (non-markdown) heading candidates must be this short
MAX_PLAIN_HEADING_WORDS = 4

_LABEL_HEADING = re.compile(r"^[^:|,@]{1,40}:$")


@dataclass(frozen=True)
class SplitterState:
    """
    Immutable splitter state.

    Attributes:
        section: Current section
        line_number: Number of lines consumed so far
        block: Incremented on every section switch, so two separate
            "Experience" sections produce two blocks
    """

    section: Section = Section.HEADER
    line_number: int = 0
    block: int = 0


@dataclass(frozen=True)
class Emission:
    """A content line attributed to a section."""

    section: Section
    text: str
    block: int
    line_number: int


@dataclass
class SectionBlock:
    """Consecutive content lines of one section occurrence."""

    section: Section
    lines: List[str] = field(default_factory=list)


def _is_plain_heading_candidate(line: str) -> bool:
    """ALL-CAPS lines and ``Label:`` lines of a few words."""
    if len(line.split()) > MAX_PLAIN_HEADING_WORDS or any(ch.isdigit() for ch in line):
        return False
    has_letters = any(ch.isalpha() for ch in line)
    if has_letters and line == line.upper() and "@" not in line:
        return True
    return bool(_LABEL_HEADING.match(line))


def classify_heading(
    line: str, current: Section, config: Optional[KeywordConfig] = None
) -> Optional[Section]:
    """
    Decide whether a stripped line is a section heading.

    Args:
        line: Stripped, non-blank line
        current: Section the splitter is currently in
        config: Keyword configuration (defaults to default_keyword_config())

    Returns:
        The section the line switches to, or None if it is content
    """
    config = config or default_keyword_config()

    hash_match = ResumeLinePatterns.HEADING.match(line)
    if hash_match:
        section = config.match_section(hash_match.group(1))
        if section:
            return section
        # "# Jane Doe" inside the header block is content, not a section
        return None if current == Section.HEADER else Section.OTHER

    bold_match = ResumeLinePatterns.BOLD_ONLY.match(line)
    if bold_match:
        # Bold lines inside a skills list are category labels
        if current == Section.SKILLS:
            return None
        return config.match_section(bold_match.group(1), whole=True)

    if _is_plain_heading_candidate(line):
        if current == Section.SKILLS and line.endswith(":"):
            return None
        return config.match_section(line, whole=True)

    return None


def transition(
    state: SplitterState, line: str, config: Optional[KeywordConfig] = None
) -> Tuple[SplitterState, Tuple[Emission, ...]]:
    """
    Advance the splitter by one raw line.

    Args:
        state: Current state
        line: Raw line (may carry surrounding whitespace)
        config: Keyword configuration

    Returns:
        (next state, emissions) where emissions has zero or one element
    """
    line_number = state.line_number + 1
    section = state.section
    if section == Section.HEADER and line_number > HEADER_LINE_LIMIT:
        section = Section.NONE
    state = replace(state, section=section, line_number=line_number)

    stripped = line.strip()
    if not stripped or ResumeLinePatterns.DIVIDER.match(stripped):
        return state, ()

    target = classify_heading(stripped, state.section, config)
    if target is not None:
        return replace(state, section=target, block=state.block + 1), ()

    if state.section == Section.NONE:
        return state, ()

    return state, (Emission(state.section, stripped, state.block, line_number),)


def run_splitter(
    lines: Iterable[str], config: Optional[KeywordConfig] = None
) -> List[Emission]:
    """Feed every line through transition() and collect the emissions."""
    state = SplitterState()
    emissions: List[Emission] = []
    for line in lines:
        state, emitted = transition(state, line, config)
        emissions.extend(emitted)
    return emissions


def split_sections(text: str, config: Optional[KeywordConfig] = None) -> List[SectionBlock]:
    """
    Split résumé text into section blocks, in document order.

    Example:
        >>> blocks = split_sections("## Skills\\nPython, Go")
        >>> [(b.section.value, b.lines) for b in blocks]
        [('skills', ['Python, Go'])]
    """
    blocks: List[SectionBlock] = []
    current_block = None
    for emission in run_splitter((text or "").split("\n"), config):
        if current_block != emission.block or not blocks:
            blocks.append(SectionBlock(emission.section))
            current_block = emission.block
        blocks[-1].lines.append(emission.text)
    return blocks
