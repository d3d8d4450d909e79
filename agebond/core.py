"""Core logic functions for querying the loaded family."""

from datetime import date

from rapidfuzz import fuzz, process

from . import state
from .constants import SELF
from .dates import age_at, format_display_date, parse_calendar_date
from .errors import InvalidDateFormat, MissingDateField
from .models import FlattenedEvent, Person
from .relationships import (
    format_relationship_for_display,
    get_main_person,
    group_by_relationship,
)
from .templates import list_templates, run_template


def _people() -> list[Person]:
    return list(state.people.values())


def _all_events() -> list[FlattenedEvent]:
    """Every person's events, flattened with the owner's id and name."""
    events: list[FlattenedEvent] = []
    for person in state.people.values():
        events.extend(person.flattened_events())
    return events


def _current_age(person: Person) -> int | None:
    if not person.dob:
        return None
    try:
        return age_at(parse_calendar_date(person.dob), state.today())
    except InvalidDateFormat:
        return None


def _person_view(person: Person) -> dict:
    result = person.to_dict()
    result["relationship_label"] = format_relationship_for_display(person)
    result["current_age"] = _current_age(person)
    return result


def _get_person(person_id: str) -> dict | None:
    person = state.people.get(person_id)
    return _person_view(person) if person else None


def _get_main_person() -> dict:
    """The person tagged 'self'. Raises MainPersonError unless there is exactly one."""
    return _person_view(get_main_person(_people()))


def _list_people(relationship: str | None = None) -> list[dict]:
    results = []
    for person in state.people.values():
        if relationship and person.relationship != relationship:
            continue
        summary = person.to_summary()
        summary["current_age"] = _current_age(person)
        results.append(summary)
    return results


def _search_people(name: str, max_results: int = 10, threshold: float = 60) -> list[dict]:
    """Fuzzy search for family members by name."""
    choices = {person.id: person.name for person in state.people.values()}
    if not name or not choices:
        return []

    matches = process.extract(
        name,
        choices,
        scorer=fuzz.WRatio,
        limit=max_results,
        score_cutoff=threshold,
    )

    results = []
    for _match, score, person_id in matches:
        summary = state.people[person_id].to_summary()
        summary["match_score"] = round(score, 1)
        results.append(summary)
    return results


def _get_events(person_id: str) -> list[dict]:
    """A person's events in date order, with their age at each one."""
    person = state.people.get(person_id)
    if not person:
        return []

    birth = None
    if person.dob:
        try:
            birth = parse_calendar_date(person.dob)
        except InvalidDateFormat:
            birth = None

    dated = []
    for event in person.events:
        result = event.to_dict()
        result["age_at_event"] = None
        on = None
        if event.date:
            try:
                on = parse_calendar_date(event.date)
            except InvalidDateFormat:
                on = None
        if birth and on:
            result["age_at_event"] = age_at(birth, on)
        dated.append((on, result))

    # Undated or unreadable events go last
    dated.sort(key=lambda pair: (pair[0] is None, pair[0] or date.min))
    return [result for _on, result in dated]


def _get_age(person_id: str, on_date: str | None = None) -> dict | None:
    """A person's completed age on a date (default: today).

    Raises:
        MissingDateField: If the person has no birth date.
        InvalidDateFormat: If a date does not parse.
    """
    person = state.people.get(person_id)
    if not person:
        return None
    if not person.dob:
        raise MissingDateField(f"{person.name} does not have a birth date set.")

    reference = parse_calendar_date(on_date) if on_date else state.today()
    age = age_at(parse_calendar_date(person.dob), reference)
    return {
        "id": person.id,
        "name": person.name,
        "dob": person.dob,
        "date": reference.isoformat(),
        "age": age,
        "description": f"{person.name} is {age} on {format_display_date(reference)}.",
    }


def _get_family_summary() -> dict:
    people = _people()
    main = next((p for p in people if p.relationship == SELF), None)
    dated = [(p, _current_age(p)) for p in people]
    dated = [(p, a) for p, a in dated if a is not None]
    oldest = max(dated, key=lambda pa: pa[1], default=None)
    youngest = min(dated, key=lambda pa: pa[1], default=None)

    return {
        "total_people": len(people),
        "total_events": sum(len(p.events) for p in people),
        "main_person": main.name if main else None,
        "relationships": group_by_relationship(people),
        "today": state.today().isoformat(),
        "oldest": {"name": oldest[0].name, "age": oldest[1]} if oldest else None,
        "youngest": {"name": youngest[0].name, "age": youngest[1]} if youngest else None,
    }


def _list_templates(category: str | None = None) -> list[dict]:
    return list_templates(category)


def _calculate(template_id: str, params: dict) -> dict:
    """Run a query template against the loaded family with today's date."""
    result = run_template(template_id, params, _people(), _all_events(), state.today())
    return result.to_dict()
