"""Family store: loading, saving and editing the people in state.people."""

import json
import logging
import uuid
from collections.abc import Callable

from . import state
from .constants import (
    DEFAULT_GENDER,
    DEFAULT_RELATIONSHIP,
    GENDER_OPTIONS,
    RELATIONSHIP_TYPES,
    SELF,
)
from .dates import parse_calendar_date, to_iso
from .errors import FamilyStoreError, InvalidDateFormat
from .models import Event, Person

logger = logging.getLogger(__name__)


def _migrate_record(record: dict) -> dict:
    """Fill in fields missing from records written by older versions."""
    migrated = dict(record)
    if not migrated.get("relationship"):
        migrated["relationship"] = SELF if migrated.get("id") == "you" else DEFAULT_RELATIONSHIP
    if not migrated.get("gender"):
        migrated["gender"] = DEFAULT_GENDER
    migrated.setdefault("events", [])
    return migrated


def load_family() -> None:
    """Load the configured family file into state.people.

    A missing or unconfigured file leaves the family empty.
    """
    state.people.clear()

    if state.FAMILY_FILE is None:
        logger.info("No family file configured, keeping family in memory only")
        return
    if not state.FAMILY_FILE.exists():
        logger.info(f"Family file {state.FAMILY_FILE} not found, it will be created on first save")
        return

    with open(state.FAMILY_FILE, encoding="utf-8") as f:
        data = json.load(f)

    records = data.get("family", []) if isinstance(data, dict) else data
    for record in records:
        person = Person.from_dict(_migrate_record(record))
        state.people[person.id] = person

    logger.info(f"Loaded {len(state.people)} people from {state.FAMILY_FILE}")


def save_family() -> None:
    """Write state.people to the family file, if one is configured."""
    if state.FAMILY_FILE is None:
        return

    state.FAMILY_FILE.parent.mkdir(parents=True, exist_ok=True)
    payload = {"family": [person.to_dict() for person in state.people.values()]}
    with open(state.FAMILY_FILE, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)
    logger.debug(f"Saved {len(state.people)} people to {state.FAMILY_FILE}")


def _normalize_date(value: str | None, label: str) -> str | None:
    """Validate a date and return it as zero-padded YYYY-MM-DD."""
    if value is None:
        return None
    try:
        return to_iso(parse_calendar_date(value))
    except InvalidDateFormat as e:
        raise FamilyStoreError(f"Invalid {label}: {e}") from e


def _validate_relationship(relationship: str) -> None:
    if relationship not in RELATIONSHIP_TYPES:
        raise FamilyStoreError(
            f"Unknown relationship {relationship!r}. Choose one of: {', '.join(RELATIONSHIP_TYPES)}"
        )


def _validate_gender(gender: str) -> None:
    if gender not in GENDER_OPTIONS:
        raise FamilyStoreError(
            f"Unknown gender {gender!r}. Choose one of: {', '.join(GENDER_OPTIONS)}"
        )


def _ensure_single_self(member_id: str | None = None) -> None:
    """Reject a second 'self' person (member_id may already hold it)."""
    for person in state.people.values():
        if person.relationship == SELF and person.id != member_id:
            raise FamilyStoreError(
                'Only one person can have the "self" relationship. '
                "Please update the existing person instead."
            )


def _require_member(member_id: str) -> Person:
    person = state.people.get(member_id)
    if person is None:
        raise FamilyStoreError(f"No person with id {member_id!r}")
    return person


def _persist(undo: Callable[[], None]) -> None:
    """Save the family, undoing the in-memory edit if the file cannot be written."""
    try:
        save_family()
    except OSError as e:
        undo()
        logger.warning(f"Could not save {state.FAMILY_FILE}: {e}")
        raise FamilyStoreError(f"Could not save the family file: {e}") from e


def get_member(member_id: str) -> Person | None:
    return state.people.get(member_id)


def has_main_person() -> bool:
    return any(person.relationship == SELF for person in state.people.values())


def add_member(
    name: str,
    dob: str | None,
    relationship: str = DEFAULT_RELATIONSHIP,
    gender: str = DEFAULT_GENDER,
) -> Person:
    """Add a family member and persist the family."""
    name = (name or "").strip()
    if not name:
        raise FamilyStoreError("A name is required.")
    dob = _normalize_date(dob, "date of birth")
    _validate_relationship(relationship)
    _validate_gender(gender)
    if relationship == SELF:
        _ensure_single_self()

    person = Person(
        id=str(uuid.uuid4()),
        name=name,
        dob=dob,
        relationship=relationship,
        gender=gender,
    )
    state.people[person.id] = person
    _persist(lambda: state.people.pop(person.id))
    logger.info(f"Added {person.name} ({person.relationship})")
    return person


def remove_member(member_id: str) -> Person:
    """Remove a family member together with their events."""
    person = _require_member(member_id)
    snapshot = dict(state.people)
    del state.people[member_id]

    def undo():
        state.people.clear()
        state.people.update(snapshot)

    _persist(undo)
    logger.info(f"Removed {person.name}")
    return person


def add_event(member_id: str, title: str, date: str | None) -> Event:
    person = _require_member(member_id)
    title = (title or "").strip()
    if not title:
        raise FamilyStoreError("An event title is required.")

    event = Event(id=str(uuid.uuid4()), title=title, date=_normalize_date(date, "event date"))
    person.events.append(event)
    _persist(lambda: person.events.remove(event))
    return event


def remove_event(member_id: str, event_id: str) -> Event:
    person = _require_member(member_id)
    for index, event in enumerate(person.events):
        if event.id == event_id:
            del person.events[index]
            _persist(lambda: person.events.insert(index, event))
            return event
    raise FamilyStoreError(f"{person.name} has no event with id {event_id!r}")


def update_member_relationship(member_id: str, relationship: str) -> Person:
    person = _require_member(member_id)
    _validate_relationship(relationship)
    if relationship == SELF:
        _ensure_single_self(member_id)
    previous = person.relationship
    person.relationship = relationship
    _persist(lambda: setattr(person, "relationship", previous))
    return person


def update_member_gender(member_id: str, gender: str) -> Person:
    person = _require_member(member_id)
    _validate_gender(gender)
    previous = person.gender
    person.gender = gender
    _persist(lambda: setattr(person, "gender", previous))
    return person
