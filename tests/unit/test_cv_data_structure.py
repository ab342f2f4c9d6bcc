"""
Unit tests for the CVContent data structure and its editing helpers.
"""

import pytest

from jobtrail.contexts.normalization.cv_data_structure import (
    CVContent,
    Education,
    Experience,
    PersonalInfo,
    Project,
    format_year_range,
    parse_year_range,
)
from jobtrail.contexts.normalization.exceptions import UnknownCollectionError


def _content():
    return CVContent(
        personal_info=PersonalInfo(name="Jane Doe", email="jane@example.com"),
        experiences=[
            Experience(id="exp-1", title="PM", description="Shipped X\n\n  Led Y "),
            Experience(id="exp-2", title="Analyst"),
        ],
        education=[Education(id="edu-1", degree="MSc", year="2018-2020")],
        skills=["Python", "SQL"],
    )


@pytest.mark.unit
class TestYearRange:
    """Free-text year ↔ numeric projection."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("2018-2022", (2018, 2022, False)),
            ("2020", (2020, None, False)),
            ("2018 - Present", (2018, None, True)),
            ("Sept 2019 - en cours", (2019, None, True)),
            ("", (None, None, False)),
        ],
    )
    def test_parse(self, text, expected):
        assert parse_year_range(text) == expected

    def test_format(self):
        assert format_year_range(2018, 2022) == "2018-2022"
        assert format_year_range(2018, 2018) == "2018"
        assert format_year_range(2018, None, current=True) == "2018 - Present"
        assert format_year_range(None, 2020) == "2020"
        assert format_year_range(None) == ""

    def test_education_projection(self):
        edu = Education.from_years(2015, 2017, institution="MIT")
        assert edu.year == "2015-2017"
        assert (edu.start_year, edu.end_year, edu.is_current) == (2015, 2017, False)
        assert edu.current is None

        ongoing = Education.from_years(2021, current=True)
        assert ongoing.year == "2021 - Present"
        assert ongoing.is_current is True


@pytest.mark.unit
class TestEntries:
    """Entry dataclasses."""

    def test_achievements_view(self):
        assert _content().experiences[0].achievements == ["Shipped X", "Led Y"]

    def test_from_achievements(self):
        exp = Experience.from_achievements(["A", "B"], title="PM")
        assert exp.description == "A\nB"
        assert exp.id.startswith("exp-")

    def test_generated_ids_are_unique(self):
        assert Project().id != Project().id


@pytest.mark.unit
class TestCopyOnWriteEditing:
    """Editing helpers never touch the original instance."""

    def test_add_blank_entry(self):
        original = _content()
        edited = original.add_entry("experiences")
        assert len(edited.experiences) == 3
        assert len(original.experiences) == 2
        assert edited.experiences[2].title == ""

    def test_add_project_to_missing_collection(self):
        edited = _content().add_entry("projects", Project(id="proj-1", name="Tracker"))
        assert [p.name for p in edited.projects] == ["Tracker"]

    def test_update_entry(self):
        original = _content()
        edited = original.update_entry("experiences", "exp-2", company="Globex")
        assert edited.experiences[1].company == "Globex"
        assert original.experiences[1].company == ""
        assert edited.experiences[0] is original.experiences[0]

    def test_update_unknown_id_is_noop(self):
        edited = _content().update_entry("education", "edu-404", degree="PhD")
        assert [e.degree for e in edited.education] == ["MSc"]

    def test_remove_entry(self):
        original = _content()
        edited = original.remove_entry("experiences", "exp-1")
        assert [e.id for e in edited.experiences] == ["exp-2"]
        assert len(original.experiences) == 2

    def test_unknown_collection(self):
        with pytest.raises(UnknownCollectionError) as exc_info:
            _content().add_entry("hobbies")
        assert exc_info.value.collection == "hobbies"
        assert "experiences" in str(exc_info.value)

    def test_unknown_collection_is_a_key_error(self):
        with pytest.raises(KeyError):
            _content().remove_entry("skills", "x")

    def test_skills(self):
        original = _content()
        assert original.add_skill("  ") is original
        assert original.add_skill(" Go ").skills == ["Python", "SQL", "Go"]
        assert original.remove_skill("SQL").skills == ["Python"]
        assert original.skills == ["Python", "SQL"]

    def test_update_personal_info(self):
        original = _content()
        edited = original.update_personal_info(phone="0612345678")
        assert edited.personal_info.phone == "0612345678"
        assert edited.personal_info.name == "Jane Doe"
        assert original.personal_info.phone == ""


@pytest.mark.unit
class TestDictConversion:
    """camelCase editor dict shape."""

    def test_to_dict_keys(self):
        data = _content().to_dict()
        assert data["personalInfo"]["name"] == "Jane Doe"
        assert data["experiences"][0]["startDate"] == ""
        assert "projects" not in data

    def test_from_dict_roundtrip(self):
        original = _content().add_entry("projects", Project(id="proj-1", name="Tracker"))
        assert CVContent.from_dict(original.to_dict()) == original

    def test_emptiness(self):
        assert CVContent().is_empty()
        assert not CVContent(summary="Hi").is_empty()
        assert _content().entry_count == 5
