"""
Unit tests for per-section field extraction on legacy text résumés.
"""

import pytest

from jobtrail.contexts.normalization.field_extractors import (
    extract_education,
    extract_experiences,
    extract_languages,
    extract_personal_info,
    extract_projects,
    extract_skills,
    extract_summary,
    parse_markdown_cv,
)
from jobtrail.contexts.normalization.section_patterns import KeywordConfig

CONFIG = KeywordConfig()
PIN = "\U0001f4cd"


@pytest.mark.unit
class TestExperienceExtraction:
    """Experience rule table."""

    def test_title_company_dates_and_bullets(self):
        text = (
            "## Experience\n### **Product Manager**\n*Acme Corp*\n"
            "*Jan 2020 - Present*\n- Shipped X\n- Led Y"
        )
        content, _ = parse_markdown_cv(text, CONFIG)

        assert len(content.experiences) == 1
        exp = content.experiences[0]
        assert exp.title == "Product Manager"
        assert exp.company == "Acme Corp"
        assert exp.start_date == "Jan 2020"
        assert exp.end_date == "Present"
        assert exp.current is True
        assert exp.description == "Shipped X\nLed Y"

    def test_company_header_followed_by_bold_title(self):
        lines = ["### Acme Corp", "**Senior Engineer**", "*2019 - 2021*"]
        exp = extract_experiences(lines, CONFIG)[0]
        assert (exp.company, exp.title) == ("Acme Corp", "Senior Engineer")
        assert (exp.start_date, exp.end_date, exp.current) == ("2019", "2021", False)

    def test_dates_inside_sub_header(self):
        exp = extract_experiences(["### **Data Analyst** *03/2018 - 12/2019*"], CONFIG)[0]
        assert exp.title == "Data Analyst"
        assert (exp.start_date, exp.end_date) == ("03/2018", "12/2019")

    def test_french_present_token(self):
        exp = extract_experiences(["### **Chef de projet**", "*Sept 2021 - aujourd'hui*"], CONFIG)[0]
        assert exp.start_date == "Sept 2021"
        assert exp.current is True

    def test_lone_date_becomes_start_date(self):
        exp = extract_experiences(["### **Consultant**", "*2017*", "*Initech*"], CONFIG)[0]
        assert exp.start_date == "2017"
        assert exp.company == "Initech"

    def test_end_only_period(self):
        exp = extract_experiences(["### **PM**", "*Acme*", "*- Dec 2021*"], CONFIG)[0]
        assert (exp.company, exp.start_date, exp.end_date, exp.current) == ("Acme", "", "Dec 2021", False)

    def test_only_first_emphasis_line_is_company(self):
        exp = extract_experiences(["### **Consultant**", "*Initech*", "*Remote*"], CONFIG)[0]
        assert exp.company == "Initech"

    def test_bullet_variants_and_bold_markers(self):
        lines = ["### **Engineer**", "• Built **fast** things", "* Fixed bugs", "â€¢ Wrote docs"]
        exp = extract_experiences(lines, CONFIG)[0]
        assert exp.achievements == ["Built fast things", "Fixed bugs", "Wrote docs"]

    def test_multiple_entries_flush_in_order(self):
        lines = ["### **A role**", "- one", "### **B role**", "- two", "- three"]
        entries = extract_experiences(lines, CONFIG)
        assert [e.title for e in entries] == ["A role", "B role"]
        assert [len(e.achievements) for e in entries] == [1, 2]

    def test_bullets_before_any_entry_are_ignored(self):
        assert extract_experiences(["- orphan bullet"], CONFIG) == []


@pytest.mark.unit
class TestEducationExtraction:
    """Education rule table."""

    def test_pipe_form_with_field(self):
        edu = extract_education(["**MSc Computer Science** | MIT | 2018-2020", "*Machine Learning*"])
        assert len(edu) == 1
        assert (edu[0].degree, edu[0].institution, edu[0].year) == ("MSc Computer Science", "MIT", "2018-2020")
        assert edu[0].field == "Machine Learning"

    def test_year_form_with_institution_line(self):
        edu = extract_education(["Master of Science, 2015 - 2017", "*Université de Lyon*"])[0]
        assert edu.degree == "Master of Science"
        assert edu.year == "2015 - 2017"
        assert edu.institution == "Université de Lyon"

    def test_bold_degree_without_year(self):
        edu = extract_education(["**Baccalauréat S**", "*Lycée Victor Hugo*"])[0]
        assert edu.degree == "Baccalauréat S"
        assert edu.year == ""

    def test_stray_year_line_dropped(self):
        assert extract_education(["2019"]) == []

    def test_institution_only_pipe_line(self):
        content, _ = parse_markdown_cv("# Jane\n\n## Education\n | MIT | \n\n## Skills\nGo", CONFIG)
        assert [(e.degree, e.institution, e.year) for e in content.education] == [("", "MIT", "")]

    def test_pipe_form_keeps_field_out_of_institution(self):
        edu = extract_education(["**BSc** |  |", "*Mathematics*"])[0]
        assert (edu.degree, edu.institution, edu.field) == ("BSc", "", "Mathematics")

    def test_year_only_pipe_line_kept(self):
        edu = extract_education(["|  | 2019"])
        assert [(e.institution, e.year) for e in edu] == [("", "2019")]


@pytest.mark.unit
class TestSkillExtraction:
    """Skill tokens, labels and de-duplication."""

    def test_label_prefix_and_case_insensitive_dedup(self):
        assert extract_skills(["**Languages:** Python, Go", "- python | Docker"], CONFIG) == [
            "Python",
            "Go",
            "Docker",
        ]

    def test_category_labels_dropped(self):
        lines = ["**Frameworks**", "Technical Skills, Django", "Tools:", "React • Vue"]
        assert extract_skills(lines, CONFIG) == ["Django", "React", "Vue"]

    def test_overlong_tokens_dropped(self):
        assert extract_skills(["Python, " + "x" * 50], CONFIG) == ["Python"]

    def test_custom_denylist(self):
        config = KeywordConfig(skill_label_denylist=("soft",))
        assert extract_skills(["Soft skills, Design thinking"], config) == ["Design thinking"]


@pytest.mark.unit
class TestOtherSections:
    """Summary, projects and languages."""

    def test_summary_strips_bold(self):
        assert extract_summary(["**Product** person.", "# ignored", "Second line."]) == (
            "Product person.\nSecond line."
        )

    def test_projects(self):
        projects = extract_projects(["### Job tracker", "- Side project", "**CLI tool**", "Written in Go"])
        assert [(p.name, p.description) for p in projects] == [
            ("Job tracker", "Side project"),
            ("CLI tool", "Written in Go"),
        ]

    def test_languages_joined(self):
        assert extract_languages(["- French (native)", "- English (C1)"]) == "French (native), English (C1)"


@pytest.mark.unit
class TestPersonalInfo:
    """Header pre-pass."""

    def test_contact_block(self):
        lines = [
            "# Jane Doe",
            "jane@example.com | +33 6 12 34 56 78",
            f"{PIN} Paris, France",
            "https://jane.dev",
            "Age: 31",
            "",
            "## Summary",
        ]
        info, inferred = extract_personal_info(lines, CONFIG)
        assert info.name == "Jane Doe"
        assert info.email == "jane@example.com"
        assert info.phone == "+33 6 12 34 56 78"
        assert info.location == "Paris, France"
        assert info.portfolio == "https://jane.dev"
        assert info.age == "31"
        assert inferred is False

    def test_year_range_is_not_a_phone(self):
        info, _ = extract_personal_info(["# Jane", "## Education", "BSc | Uni | 2018 - 2022"], CONFIG)
        assert info.phone == ""

    def test_street_address_only_in_header_block(self):
        info, _ = extract_personal_info(["# Jane", "12 Rue de Rivoli, Paris"], CONFIG)
        assert info.location == "12 Rue de Rivoli, Paris"

        info, _ = extract_personal_info(["# Jane", "## Experience", "12 Rue de Rivoli, Paris"], CONFIG)
        assert info.location == ""

    def test_plain_first_line_name_is_flagged(self):
        content, uncertainties = parse_markdown_cv("Jane Doe\njane@example.com\n\n## Skills\nPython", CONFIG)
        assert content.personal_info.name == "Jane Doe"
        assert uncertainties["personal"].has(0, "name")

    def test_section_heading_is_not_a_name(self):
        info, inferred = extract_personal_info(["SKILLS", "Python"], CONFIG)
        assert info.name == ""
        assert inferred is False


@pytest.mark.unit
class TestTextUncertainties:
    """Fields the text heuristics flag for review."""

    def test_missing_company_and_dates_flagged(self):
        _, uncertainties = parse_markdown_cv("## Experience\n### **Engineer**\n- Did things", CONFIG)
        tracker = uncertainties["experiences"]
        assert tracker.has(0, "company")
        assert tracker.has(0, "start_date")

    def test_missing_education_year_flagged(self):
        _, uncertainties = parse_markdown_cv("## Education\n**BSc Physics** | Uni Lyon", CONFIG)
        assert uncertainties["education"].has(0, "year")

    def test_complete_entries_not_flagged(self):
        text = "## Experience\n### **Engineer**\n*Acme*\n*2019 - 2021*"
        _, uncertainties = parse_markdown_cv(text, CONFIG)
        assert len(uncertainties["experiences"]) == 0

    def test_parse_never_raises_on_garbage(self):
        content, _ = parse_markdown_cv("***\n|||\n### \n**\n- ", CONFIG)
        assert content.experiences == []
