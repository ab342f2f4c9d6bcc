"""
Unit tests for the canonical JSON adapter and the JSON/markdown serializer.
"""

import json

import pytest

from jobtrail.contexts.normalization.cv_data_structure import (
    CVContent,
    Education,
    Experience,
    PersonalInfo,
    Project,
)
from jobtrail.contexts.normalization.format_detector import ContentFormat
from jobtrail.contexts.normalization.json_adapter import (
    cv_to_json,
    format_period,
    json_to_cv,
    overlay_source_keys,
    proportional_skill_buckets,
    source_skill_buckets,
    split_period,
)
from jobtrail.contexts.normalization.serializer import format_markdown_cv, serialize_cv


def _document():
    return {
        "personalInfo": {
            "name": "Jane Doe",
            "email": "jane@example.com",
            "phone": "+33 6 12 34 56 78",
            "address": "Paris, France",
            "age": 31,
        },
        "profile": {"text": "Product person."},
        "skills": {"technical": ["Python", "SQL"], "marketing": ["SEO"], "soft": ["Empathy"]},
        "experiences": [
            {
                "id": "exp-1",
                "company": "Acme",
                "jobTitle": "PM",
                "period": "Jan 2020 - Present",
                "achievements": ["Shipped X", "  Led Y  ", ""],
            }
        ],
        "projects": [],
        "education": [
            {
                "id": "edu-1",
                "institution": "MIT",
                "years": "2018-2020",
                "degree": "MSc",
                "specialization": "CS",
            }
        ],
    }


@pytest.mark.unit
class TestPeriods:
    """Period text ↔ (start, end, current)."""

    def test_split_open_period(self):
        assert split_period("Jan 2020 - Present") == ("Jan 2020", "Present", True)

    def test_split_closed_period(self):
        assert split_period("2018 - 2020") == ("2018", "2020", False)

    def test_split_lone_start(self):
        assert split_period("2019") == ("2019", "", False)

    def test_split_missing(self):
        assert split_period(None) == ("", "", False)

    def test_format_current_without_end(self):
        assert format_period("Jan 2020", "", True) == "Jan 2020 - Present"

    def test_format_lone_start_and_empty(self):
        assert format_period("2019", "", False) == "2019"
        assert format_period("", "", False) == ""


@pytest.mark.unit
class TestJsonToCv:
    """Canonical JSON → CVContent."""

    def test_fields_mapped(self):
        cv = json_to_cv(_document())

        assert cv.personal_info.name == "Jane Doe"
        assert cv.personal_info.location == "Paris, France"
        assert cv.personal_info.age == "31"
        assert cv.summary == "Product person."

        exp = cv.experiences[0]
        assert (exp.id, exp.company, exp.title) == ("exp-1", "Acme", "PM")
        assert (exp.start_date, exp.current) == ("Jan 2020", True)
        assert exp.description == "Shipped X\nLed Y"

        edu = cv.education[0]
        assert (edu.institution, edu.degree, edu.field, edu.year) == ("MIT", "MSc", "CS", "2018-2020")

    def test_skill_buckets_concatenated_in_order(self):
        assert json_to_cv(_document()).skills == ["Python", "SQL", "SEO", "Empathy"]

    def test_duplicate_skills_kept(self):
        data = _document()
        data["skills"] = {"technical": ["Python"], "marketing": ["Python"], "soft": []}
        assert json_to_cv(data).skills == ["Python", "Python"]

    def test_missing_ids_generated(self):
        data = _document()
        del data["experiences"][0]["id"]
        data["projects"] = [{"name": "Tracker", "description": "Side project"}]
        cv = json_to_cv(data)
        assert cv.experiences[0].id.startswith("exp-")
        assert cv.projects[0].id.startswith("proj-")

    def test_empty_projects_become_none(self):
        assert json_to_cv(_document()).projects is None


@pytest.mark.unit
class TestCvToJson:
    """CVContent → canonical JSON."""

    def test_period_and_achievements(self):
        out = cv_to_json(json_to_cv(_document()))
        exp = out["experiences"][0]
        assert exp["period"] == "Jan 2020 - Present"
        assert exp["achievements"] == ["Shipped X", "Led Y"]
        assert exp["jobTitle"] == "PM"

    def test_age_emitted_as_number(self):
        out = cv_to_json(json_to_cv(_document()))
        assert out["personalInfo"]["age"] == 31
        assert out["personalInfo"]["address"] == "Paris, France"

    def test_projects_always_emitted(self):
        assert cv_to_json(CVContent())["projects"] == []

    def test_first_and_last_name_rederived_when_source_had_them(self):
        source = _document()
        source["personalInfo"].update({"firstName": "Old", "lastName": "Name"})
        cv = json_to_cv(source).update_personal_info(name="Jane Marie Doe")
        info = cv_to_json(cv, source=source)["personalInfo"]
        assert (info["firstName"], info["lastName"]) == ("Jane", "Marie Doe")

    def test_first_and_last_name_kept_when_name_empty(self):
        source = _document()
        source["personalInfo"].update({"name": "", "firstName": "Jane", "lastName": "Doe"})
        info = cv_to_json(json_to_cv(source), source=source)["personalInfo"]
        assert (info["firstName"], info["lastName"]) == ("Jane", "Doe")

    def test_first_and_last_name_absent_without_source(self):
        info = cv_to_json(json_to_cv(_document()))["personalInfo"]
        assert "firstName" not in info

    def test_education_gpa_and_honors(self):
        cv = CVContent(education=[Education(id="e", degree="BSc", gpa="3.9", honors="Summa cum laude")])
        edu = cv_to_json(cv)["education"][0]
        assert (edu["gpa"], edu["honors"]) == ("3.9", "Summa cum laude")


@pytest.mark.unit
class TestBadlyShapedDocuments:
    """Wrongly typed values read as empty instead of raising."""

    @pytest.mark.parametrize(
        "overrides",
        [
            {"personalInfo": "Jane"},
            {"experiences": "abc"},
            {"experiences": ["oops"]},
            {"education": [1]},
            {"projects": 5},
            {"profile": ["text"]},
            {"skills": {"technical": "Python", "marketing": None, "soft": 3}},
        ],
    )
    def test_load_and_save_never_raise(self, overrides):
        source = {**_document(), **overrides}
        out = cv_to_json(json_to_cv(source), source=source)
        assert set(out) >= {"personalInfo", "profile", "skills", "experiences", "projects", "education"}

    def test_non_object_personal_info_is_empty(self):
        cv = json_to_cv({**_document(), "personalInfo": "Jane"})
        assert cv.personal_info.name == ""
        assert cv.personal_info.email == ""

    def test_non_list_collection_is_empty(self):
        assert json_to_cv({**_document(), "experiences": "abc"}).experiences == []

    def test_non_object_items_skipped(self):
        source = _document()
        source["experiences"] = ["oops", 7] + source["experiences"]
        source["education"] = [1, None]
        cv = json_to_cv(source)
        assert [exp.title for exp in cv.experiences] == ["PM"]
        assert cv.education == []

    def test_non_string_personal_fields_dropped(self):
        source = _document()
        source["personalInfo"]["languages"] = ["French", "English"]
        assert json_to_cv(source).personal_info.languages is None

    def test_non_string_ids_replaced(self):
        source = _document()
        source["experiences"][0]["id"] = ["exp-1"]
        cv = json_to_cv(source)
        assert cv.experiences[0].id.startswith("exp-")
        assert cv_to_json(cv, source=source)["experiences"][0]["id"] == cv.experiences[0].id


@pytest.mark.unit
class TestSkillBuckets:
    """Skill bucket strategies."""

    def test_proportional_split(self):
        assert proportional_skill_buckets(["a", "b", "c", "d", "e"]) == {
            "technical": ["a", "b", "c"],
            "marketing": ["d", "e"],
            "soft": [],
        }

    def test_proportional_split_rounds_up(self):
        assert proportional_skill_buckets(["a"]) == {"technical": ["a"], "marketing": [], "soft": []}
        assert proportional_skill_buckets([]) == {"technical": [], "marketing": [], "soft": []}

    def test_source_buckets_keep_original_bucket(self):
        strategy = source_skill_buckets(_document())
        assert strategy(["Empathy", "seo", "Rust"]) == {
            "technical": ["Rust"],
            "marketing": ["seo"],
            "soft": ["Empathy"],
        }


@pytest.mark.unit
class TestSourceOverlay:
    """Unknown keys of the source document survive a save."""

    def test_unknown_keys_at_every_level(self):
        source = _document()
        source["version"] = 3
        source["personalInfo"]["nationality"] = "French"
        source["profile"]["availability"] = "immediate"
        source["experiences"][0]["industry"] = "SaaS"

        out = cv_to_json(json_to_cv(source), source=source)
        assert out["version"] == 3
        assert out["personalInfo"]["nationality"] == "French"
        assert out["profile"]["availability"] == "immediate"
        assert out["experiences"][0]["industry"] == "SaaS"

    def test_new_entries_have_no_source_keys(self):
        source = _document()
        source["experiences"][0]["industry"] = "SaaS"
        cv = json_to_cv(source).add_entry("experiences", Experience(id="exp-new", title="CTO"))
        out = cv_to_json(cv, source=source)
        assert "industry" not in out["experiences"][1]

    def test_overlay_without_source(self):
        emitted = {"personalInfo": {"name": "Jane"}}
        assert overlay_source_keys(emitted, None) is emitted


@pytest.mark.unit
class TestSerializer:
    """Origin-preserving serialization."""

    def test_json_origin_pretty_printed(self):
        cv = CVContent(personal_info=PersonalInfo(name="Zoë"))
        text = serialize_cv(cv, ContentFormat.JSON)
        assert text.startswith('{\n  "personalInfo"')
        assert "Zoë" in text
        assert json.loads(text)["personalInfo"]["name"] == "Zoë"

    def test_text_origin_layout(self):
        cv = CVContent(
            personal_info=PersonalInfo(name="Jane Doe", email="jane@example.com", phone="0612345678"),
            summary="Product person.",
            experiences=[
                Experience(
                    title="PM",
                    company="Acme",
                    start_date="2020",
                    end_date="",
                    current=True,
                    description="Shipped X",
                )
            ],
            education=[Education(degree="MSc", institution="MIT", year="2018-2020", field="CS")],
            skills=["Python", "SQL"],
            projects=[Project(name="Tracker", description="Side project")],
        )
        assert format_markdown_cv(cv) == (
            "# Jane Doe\n"
            "jane@example.com | 0612345678\n"
            "\n"
            "## Personal Summary\n"
            "Product person.\n"
            "\n"
            "## Work Experience\n"
            "### **PM**\n"
            "*Acme*\n"
            "*2020 - Present*\n"
            "- Shipped X\n"
            "\n"
            "## Education\n"
            "**MSc** | MIT | 2018-2020\n"
            "*CS*\n"
            "\n"
            "## Skills\n"
            "Python, SQL\n"
            "\n"
            "## Projects\n"
            "### Tracker\n"
            "Side project"
        )

    def test_empty_content_serializes_to_empty_text(self):
        assert serialize_cv(CVContent(), ContentFormat.FREEFORM_TEXT) == ""
