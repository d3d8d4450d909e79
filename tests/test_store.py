"""Tests for loading, saving and editing the family."""

import json
from unittest.mock import patch

import pytest

from agebond import state, store
from agebond.errors import FamilyStoreError


def _saved(family_file) -> list[dict]:
    return json.loads(family_file.read_text())["family"]


class TestLoadFamily:
    """Tests for reading the family file."""

    def test_loads_fixture(self):
        assert len(state.people) == 6
        assert state.people["p-alex"].relationship == "self"
        assert state.people["p-morgan"].events[0].title == "Wedding"

    def test_preserves_file_order(self):
        assert list(state.people)[:2] == ["p-alex", "p-morgan"]

    def test_migrates_old_records(self, monkeypatch, tmp_path):
        """Records without relationship or gender get defaults."""
        family_file = tmp_path / "old.json"
        family_file.write_text(
            json.dumps(
                [
                    {"id": "you", "name": "Me", "dob": "1990-01-01"},
                    {"id": "p2", "name": "Them", "dob": "1960-01-01"},
                ]
            )
        )
        monkeypatch.setattr(state, "FAMILY_FILE", family_file)
        store.load_family()

        assert state.people["you"].relationship == "self"
        assert state.people["p2"].relationship == "other"
        assert state.people["p2"].gender == "Male"
        assert state.people["p2"].events == []

    def test_accepts_event_name_key(self, monkeypatch, tmp_path):
        family_file = tmp_path / "family.json"
        family_file.write_text(
            json.dumps(
                {
                    "family": [
                        {
                            "id": "p1",
                            "name": "Me",
                            "relationship": "self",
                            "events": [{"id": "e1", "name": "Moved", "date": "2010-01-01"}],
                        }
                    ]
                }
            )
        )
        monkeypatch.setattr(state, "FAMILY_FILE", family_file)
        store.load_family()
        assert state.people["p1"].events[0].title == "Moved"

    def test_missing_file_gives_empty_family(self, monkeypatch, tmp_path):
        monkeypatch.setattr(state, "FAMILY_FILE", tmp_path / "absent.json")
        store.load_family()
        assert state.people == {}

    def test_unconfigured_file_gives_empty_family(self, monkeypatch):
        monkeypatch.setattr(state, "FAMILY_FILE", None)
        store.load_family()
        assert state.people == {}


class TestSaveFamily:
    """Tests for writing the family file."""

    def test_round_trips_through_file(self, family_file):
        store.save_family()
        store.load_family()
        assert len(state.people) == 6
        assert state.people["p-jamie"].dob == "1996-02-29"

    def test_creates_parent_directories(self, monkeypatch, tmp_path):
        target = tmp_path / "nested" / "dir" / "family.json"
        monkeypatch.setattr(state, "FAMILY_FILE", target)
        store.save_family()
        assert len(_saved(target)) == 6

    def test_no_file_configured_is_noop(self, monkeypatch, family_file):
        before = family_file.read_text()
        monkeypatch.setattr(state, "FAMILY_FILE", None)
        store.add_member("Quinn", "2001-01-01")
        assert family_file.read_text() == before


class TestAddMember:
    """Tests for adding family members."""

    def test_adds_and_persists(self, family_file):
        person = store.add_member("Quinn", "2001-02-03", "cousin", "Female")
        assert state.people[person.id] is person
        saved = {p["id"]: p for p in _saved(family_file)}
        assert saved[person.id]["name"] == "Quinn"
        assert saved[person.id]["relationship"] == "cousin"

    def test_defaults(self):
        person = store.add_member("Quinn", None)
        assert person.relationship == "other"
        assert person.gender == "Male"
        assert person.events == []

    def test_strips_name(self):
        assert store.add_member("  Quinn ", None).name == "Quinn"

    def test_rejects_empty_name(self):
        with pytest.raises(FamilyStoreError, match="A name is required."):
            store.add_member("  ", "2001-01-01")

    def test_rejects_invalid_date(self):
        with pytest.raises(FamilyStoreError, match="Invalid date of birth"):
            store.add_member("Quinn", "2001-02-30")

    def test_normalizes_birth_date(self, family_file):
        person = store.add_member("Quinn", " 2001-2-3 ")
        assert person.dob == "2001-02-03"
        saved = {p["id"]: p for p in _saved(family_file)}
        assert saved[person.id]["dob"] == "2001-02-03"

    def test_rejects_unknown_relationship(self):
        with pytest.raises(FamilyStoreError, match="Unknown relationship"):
            store.add_member("Quinn", None, "pet")

    def test_rejects_unknown_gender(self):
        with pytest.raises(FamilyStoreError, match="Unknown gender"):
            store.add_member("Quinn", None, "other", "X")

    def test_rejects_second_self(self):
        with pytest.raises(FamilyStoreError, match='Only one person can have the "self"'):
            store.add_member("Other Me", "1990-01-01", "self")
        assert len(state.people) == 6

    def test_allows_self_when_none_exists(self):
        store.remove_member("p-alex")
        assert not store.has_main_person()
        store.add_member("New Me", "1990-01-01", "self")
        assert store.has_main_person()


class TestEditMembers:
    """Tests for removing members and editing their details."""

    def test_remove_member(self, family_file):
        removed = store.remove_member("p-sam")
        assert removed.name == "Sam"
        assert store.get_member("p-sam") is None
        assert "p-sam" not in {p["id"] for p in _saved(family_file)}

    def test_remove_unknown_member(self):
        with pytest.raises(FamilyStoreError, match="No person with id"):
            store.remove_member("ghost")

    def test_update_relationship(self):
        person = store.update_member_relationship("p-sam", "cousin")
        assert person.relationship == "cousin"

    def test_main_person_can_keep_self(self):
        person = store.update_member_relationship("p-alex", "self")
        assert person.relationship == "self"

    def test_cannot_make_second_self(self):
        with pytest.raises(FamilyStoreError, match='Only one person can have the "self"'):
            store.update_member_relationship("p-sam", "self")

    def test_update_gender(self, family_file):
        store.update_member_gender("p-sam", "Female")
        saved = {p["id"]: p for p in _saved(family_file)}
        assert saved["p-sam"]["gender"] == "Female"

    def test_update_gender_rejects_unknown(self):
        with pytest.raises(FamilyStoreError, match="Unknown gender"):
            store.update_member_gender("p-sam", "Robot")


class TestEvents:
    """Tests for adding and removing events."""

    def test_add_event(self, family_file):
        event = store.add_event("p-riley", "First day of school", "2025-09-03")
        assert state.people["p-riley"].events == [event]
        saved = {p["id"]: p for p in _saved(family_file)}
        assert saved["p-riley"]["events"][0]["title"] == "First day of school"

    def test_add_event_requires_title(self):
        with pytest.raises(FamilyStoreError, match="An event title is required."):
            store.add_event("p-riley", "", "2025-09-03")

    def test_add_event_rejects_bad_date(self):
        with pytest.raises(FamilyStoreError, match="Invalid event date"):
            store.add_event("p-riley", "Party", "2025-9-31")

    def test_add_event_normalizes_date(self):
        event = store.add_event("p-riley", "Party", "2025-9-3")
        assert event.date == "2025-09-03"

    def test_add_event_unknown_person(self):
        with pytest.raises(FamilyStoreError, match="No person with id"):
            store.add_event("ghost", "Party", "2025-09-03")

    def test_remove_event(self):
        removed = store.remove_event("p-morgan", "e-morgan-wedding")
        assert removed.title == "Wedding"
        assert [e.id for e in state.people["p-morgan"].events] == ["e-morgan-first-job"]

    def test_remove_unknown_event(self):
        with pytest.raises(FamilyStoreError, match="Morgan has no event with id"):
            store.remove_event("p-morgan", "ghost")


class TestSaveFailures:
    """An edit that cannot be saved is undone in memory."""

    @pytest.fixture
    def disk_full(self):
        with patch("agebond.store.save_family", side_effect=OSError("disk full")):
            yield

    def test_add_member(self, disk_full):
        with pytest.raises(FamilyStoreError, match="Could not save the family file: disk full"):
            store.add_member("Quinn", "2001-02-03")
        assert len(state.people) == 6
        assert "Quinn" not in {p.name for p in state.people.values()}

    def test_remove_member_keeps_order(self, disk_full):
        before = list(state.people)
        with pytest.raises(FamilyStoreError, match="Could not save"):
            store.remove_member("p-morgan")
        assert list(state.people) == before

    def test_add_event(self, disk_full):
        with pytest.raises(FamilyStoreError, match="Could not save"):
            store.add_event("p-riley", "Party", "2025-09-03")
        assert state.people["p-riley"].events == []

    def test_remove_event(self, disk_full):
        with pytest.raises(FamilyStoreError, match="Could not save"):
            store.remove_event("p-morgan", "e-morgan-wedding")
        assert [e.id for e in state.people["p-morgan"].events] == [
            "e-morgan-wedding",
            "e-morgan-first-job",
        ]

    def test_update_relationship(self, disk_full):
        with pytest.raises(FamilyStoreError, match="Could not save"):
            store.update_member_relationship("p-sam", "cousin")
        assert state.people["p-sam"].relationship == "friend"

    def test_update_gender(self, disk_full):
        with pytest.raises(FamilyStoreError, match="Could not save"):
            store.update_member_gender("p-sam", "Female")
        assert state.people["p-sam"].gender == "Male"

    def test_unwritable_file(self, monkeypatch, tmp_path):
        """A real write failure leaves memory and disk unchanged."""
        blocked = tmp_path / "blocked"
        blocked.write_text("not a directory")
        monkeypatch.setattr(state, "FAMILY_FILE", blocked / "family.json")
        with pytest.raises(FamilyStoreError, match="Could not save"):
            store.update_member_gender("p-sam", "Female")
        assert state.people["p-sam"].gender == "Male"
