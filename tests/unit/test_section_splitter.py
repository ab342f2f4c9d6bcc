"""
Unit tests for the section splitter state machine.
"""

import pytest

from jobtrail.contexts.normalization.section_patterns import KeywordConfig, Section
from jobtrail.contexts.normalization.section_splitter import (
    HEADER_LINE_LIMIT,
    SplitterState,
    classify_heading,
    run_splitter,
    split_sections,
    transition,
)

CONFIG = KeywordConfig()


@pytest.mark.unit
class TestTransition:
    """Single-line transitions."""

    def test_keyword_heading_switches_section(self):
        state, emitted = transition(SplitterState(), "## Experience", CONFIG)
        assert state.section == Section.EXPERIENCE
        assert state.block == 1
        assert emitted == ()

    def test_name_heading_stays_in_header(self):
        state, emitted = transition(SplitterState(), "# Jane Doe", CONFIG)
        assert state.section == Section.HEADER
        assert [e.text for e in emitted] == ["# Jane Doe"]

    def test_unknown_heading_outside_header_goes_to_other(self):
        state, emitted = transition(SplitterState(section=Section.EXPERIENCE), "## Hobbies", CONFIG)
        assert state.section == Section.OTHER
        assert emitted == ()

    def test_blank_and_divider_lines_keep_state(self):
        start = SplitterState(section=Section.SKILLS, line_number=3, block=2)
        for line in ("", "   ", "---", "***"):
            state, emitted = transition(start, line, CONFIG)
            assert state.section == Section.SKILLS
            assert state.block == 2
            assert emitted == ()

    def test_line_number_advances(self):
        state, _ = transition(SplitterState(line_number=4), "text", CONFIG)
        assert state.line_number == 5

    def test_header_falls_to_none_after_limit(self):
        """Unclaimed lines after the header window are dropped."""
        state = SplitterState()
        for _ in range(HEADER_LINE_LIMIT):
            state, emitted = transition(state, "Jane", CONFIG)
            assert len(emitted) == 1
        state, emitted = transition(state, "stray line", CONFIG)
        assert state.section == Section.NONE
        assert emitted == ()

    def test_transition_does_not_mutate_state(self):
        start = SplitterState()
        transition(start, "## Skills", CONFIG)
        assert start == SplitterState()


@pytest.mark.unit
class TestClassifyHeading:
    """Heading candidates and keyword matching."""

    def test_bold_heading_outside_skills(self):
        assert classify_heading("**Languages**", Section.SUMMARY, CONFIG) == Section.LANGUAGES

    def test_bold_label_inside_skills_is_content(self):
        assert classify_heading("**Languages:**", Section.SKILLS, CONFIG) is None

    def test_all_caps_french_heading(self):
        assert (
            classify_heading("EXPERIENCE PROFESSIONNELLE", Section.HEADER, CONFIG)
            == Section.EXPERIENCE
        )

    def test_label_heading(self):
        assert classify_heading("Skills:", Section.HEADER, CONFIG) == Section.SKILLS

    def test_label_inside_skills_is_content(self):
        assert classify_heading("Tools:", Section.SKILLS, CONFIG) is None

    def test_sentence_with_keyword_is_content(self):
        assert classify_heading("Experience with Python and Go", Section.SUMMARY, CONFIG) is None

    def test_bold_text_must_match_whole_keyword(self):
        assert classify_heading("**Senior Engineer**", Section.EXPERIENCE, CONFIG) is None

    def test_hash_heading_matches_by_prefix(self):
        assert classify_heading("## Work Experience", Section.HEADER, CONFIG) == Section.EXPERIENCE
        assert classify_heading("## Compétences clés", Section.HEADER, CONFIG) == Section.SKILLS

    def test_sub_header_is_not_a_section(self):
        assert classify_heading("### **Product Manager**", Section.EXPERIENCE, CONFIG) is None


@pytest.mark.unit
class TestSplitSections:
    """Grouping emissions into blocks."""

    def test_blocks_in_document_order(self):
        text = "## Experience\nDid things\n## Skills\nPython\n## Experience\nMore things"
        blocks = split_sections(text, CONFIG)
        assert [(b.section, b.lines) for b in blocks] == [
            (Section.EXPERIENCE, ["Did things"]),
            (Section.SKILLS, ["Python"]),
            (Section.EXPERIENCE, ["More things"]),
        ]

    def test_header_lines_are_kept(self):
        blocks = split_sections("# Jane Doe\njane@example.com\n\n## Summary\nHello there", CONFIG)
        assert blocks[0].section == Section.HEADER
        assert blocks[0].lines == ["# Jane Doe", "jane@example.com"]
        assert blocks[1].section == Section.SUMMARY

    def test_empty_text(self):
        assert split_sections("", CONFIG) == []
        assert run_splitter([], CONFIG) == []

    def test_emissions_are_stripped(self):
        emissions = run_splitter(["## Skills", "   Python, Go   "], CONFIG)
        assert [e.text for e in emissions] == ["Python, Go"]
        assert emissions[0].line_number == 2
