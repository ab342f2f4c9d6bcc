"""
Unit tests for the profile merge engine.
"""

import pytest

from jobtrail.contexts.profile.exceptions import ReplaceNotConfirmedError, UnknownCollectionError
from jobtrail.contexts.profile.merge import (
    MergeMode,
    added_counts,
    filled_fields,
    merge_collection,
    merge_entries,
    merge_profile_fields,
    split_address,
)
from jobtrail.contexts.profile.profile_data_structure import Skill, UserProfile, WorkExperience


def _profile(**kwargs):
    defaults = {
        "full_name": "Jane Doe",
        "skills": [Skill(id="skill-1", name="React"), Skill(id="skill-2", name="Node.js")],
    }
    defaults.update(kwargs)
    return UserProfile(**defaults)


@pytest.mark.unit
class TestMergeEntries:
    """Add and replace semantics on plain collections."""

    def test_add_mode_dedups_case_insensitively_and_prepends(self):
        merged = merge_entries(["React", "Node.js"], ["react", "Python"], "add", key=str.lower)
        assert merged == ["Python", "React", "Node.js"]

    def test_add_mode_dedups_within_incoming(self):
        merged = merge_entries([], ["Go", " go ", "GO"], MergeMode.ADD, key=str.strip)
        assert merged == ["Go"]

    def test_add_mode_is_idempotent(self):
        once = merge_entries(["React"], ["Python"], "add", key=str.lower)
        twice = merge_entries(once, ["Python"], "add", key=str.lower)
        assert twice == once

    def test_add_with_nothing_new_keeps_existing(self):
        assert merge_entries(["React"], [], "add", key=str.lower) == ["React"]

    def test_replace_empty_collection_without_confirmation(self):
        assert merge_entries([], ["Python"], "replace", key=str.lower) == ["Python"]

    def test_replace_requires_confirmation(self):
        with pytest.raises(ReplaceNotConfirmedError) as exc_info:
            merge_entries(["React", "Vue"], ["Python"], "replace", key="skills")
        assert exc_info.value.existing_count == 2
        assert exc_info.value.collection == "skills"
        assert "confirmation required" in str(exc_info.value)

    def test_replace_confirmed(self):
        merged = merge_entries(["React"], ["Python", "python"], "replace", key=str.lower, confirm_replace=True)
        assert merged == ["Python", "python"]

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            merge_entries([], [], "upsert", key=str.lower)

    def test_inputs_not_mutated(self):
        existing, incoming = ["React"], ["Python"]
        merge_entries(existing, incoming, "add", key=str.lower)
        assert existing == ["React"]
        assert incoming == ["Python"]

    def test_collection_name_as_key(self):
        existing = [WorkExperience(title="PM", company="Acme")]
        incoming = [
            WorkExperience(title="pm ", company="ACME"),
            WorkExperience(title="PM", company="Globex"),
        ]
        merged = merge_entries(existing, incoming, "add", key="work_experience")
        assert [(e.title, e.company) for e in merged] == [("PM", "Globex"), ("PM", "Acme")]

    def test_dict_entries(self):
        merged = merge_entries([{"name": "React"}], [{"name": "REACT"}, {"name": "Go"}], "add", key="skills")
        assert merged == [{"name": "Go"}, {"name": "React"}]


@pytest.mark.unit
class TestMergeCollection:
    """Merging into a named profile collection."""

    def test_skills_example(self):
        profile = _profile()
        merged = merge_collection(profile, "skills", [Skill(name="react"), Skill(name="Python")])
        assert [s.name for s in merged.skills] == ["Python", "React", "Node.js"]
        assert [s.name for s in profile.skills] == ["React", "Node.js"]

    def test_replace_refused_leaves_profile_unchanged(self):
        profile = _profile()
        with pytest.raises(ReplaceNotConfirmedError):
            merge_collection(profile, "skills", [Skill(name="Python")], MergeMode.REPLACE)
        assert len(profile.skills) == 2

    def test_replace_confirmed(self):
        merged = merge_collection(
            _profile(), "skills", [Skill(name="Python")], "replace", confirm_replace=True
        )
        assert [s.name for s in merged.skills] == ["Python"]

    def test_unknown_collection(self):
        with pytest.raises(UnknownCollectionError):
            merge_collection(_profile(), "hobbies", [])
        with pytest.raises(KeyError):
            merge_entries([], [], "add", key="hobbies")

    def test_added_counts(self):
        before = _profile()
        after = merge_collection(before, "skills", [Skill(name="Python")])
        assert added_counts(before, after, ["skills", "languages"]) == {"skills": 1, "languages": 0}


@pytest.mark.unit
class TestScalarFields:
    """Fill-only scalar merge."""

    def test_only_empty_fields_filled(self):
        profile = _profile(email="")
        merged = merge_profile_fields(
            profile, {"full_name": "Someone Else", "email": "jane@example.com", "phone": "  "}
        )
        assert merged.full_name == "Jane Doe"
        assert merged.email == "jane@example.com"
        assert merged.phone == ""
        assert filled_fields(profile, merged) == ["email"]

    def test_address_split_on_first_comma(self):
        merged = merge_profile_fields(UserProfile(), {"address": "Lyon, Rhône, France"})
        assert (merged.city, merged.country) == ("Lyon", "Rhône, France")

    def test_explicit_city_wins_over_address(self):
        merged = merge_profile_fields(UserProfile(), {"city": "Paris", "address": "Lyon, France"})
        assert (merged.city, merged.country) == ("Paris", "France")

    def test_existing_city_kept(self):
        merged = merge_profile_fields(UserProfile(city="Paris"), {"address": "Lyon, France"})
        assert (merged.city, merged.country) == ("Paris", "France")

    def test_unchanged_profile_returned_as_is(self):
        profile = _profile()
        assert merge_profile_fields(profile, {"full_name": "Other"}) is profile

    def test_unknown_fields_ignored(self):
        merged = merge_profile_fields(UserProfile(), {"nickname": "JD"})
        assert merged == UserProfile()

    def test_split_address(self):
        assert split_address("Lyon") == {"city": "Lyon"}
        assert split_address(" Lyon , France ") == {"city": "Lyon", "country": "France"}
