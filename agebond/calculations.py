"""Relational age solvers.

Each solver takes the template params (person/event ids, or an age), the full
list of people, the flattened events of every person and the reference date
used as "now". Failures are returned as data, never raised: the @solver
wrapper turns any CalculationError into a failed CalculationResult.

Every solver checks, in order: required params, that every id resolves, that
every resolved record has a date, and that every date parses.
"""

import functools
import logging
from datetime import date

from . import state
from .dates import add_years, age_at, format_display_date, parse_calendar_date
from .errors import (
    CalculationError,
    InfeasibleResult,
    InvalidParameter,
    MissingDateField,
    MissingParameter,
    RecordNotFound,
)
from .models import CalculationResult, FlattenedEvent, Person

logger = logging.getLogger(__name__)


def solver(func):
    """Wrap a solver so CalculationErrors come back as failed results."""

    @functools.wraps(func)
    def wrapper(
        params: dict | None,
        people: list[Person],
        events: list[FlattenedEvent] | None = None,
        today: date | None = None,
    ) -> CalculationResult:
        try:
            return func(params or {}, people, events or [], today or state.today())
        except CalculationError as e:
            logger.warning(f"{func.__name__} failed ({e.kind}): {e}")
            return CalculationResult.failure(e)

    return wrapper


def _require(params: dict, *names: str, message: str) -> list:
    if any(params.get(name) in (None, "") for name in names):
        raise MissingParameter(message)
    return [params[name] for name in names]


def _get_person(person_id, people: list[Person]) -> Person | None:
    return next((p for p in people if p.id == person_id), None)


def _get_event(event_id, events: list[FlattenedEvent]) -> FlattenedEvent | None:
    return next((e for e in events if e.id == event_id), None)


def _check_found(records: list, message: str) -> None:
    if any(record is None for record in records):
        raise RecordNotFound(message)


def _check_dated(values: list, message: str) -> None:
    if not all(values):
        raise MissingDateField(message)


def _parse_age(value) -> int:
    if isinstance(value, bool):
        raise InvalidParameter(f"Age must be a whole number, got {value!r}.")
    if isinstance(value, int):
        age = value
    else:
        try:
            age = int(str(value).strip())
        except ValueError as e:
            raise InvalidParameter(f"Age must be a whole number, got {value!r}.") from e
    if age < 0:
        raise InvalidParameter("Age cannot be negative.")
    return age


@solver
def person_a_is_age_of_person_b_at_event(params, people, events, today):
    """When will person A be the age person B was at event B?"""
    person_a, person_b, event_b = _require(
        params,
        "personA",
        "personB",
        "eventB",
        message="Missing information. Please select all required fields.",
    )
    a = _get_person(person_a, people)
    b = _get_person(person_b, people)
    event = _get_event(event_b, events)
    _check_found([a, b, event], "Could not find one of the selected people or events.")
    _check_dated([a.dob, b.dob, event.date], "Missing birth date or event date information.")

    birth_a = parse_calendar_date(a.dob)
    birth_b = parse_calendar_date(b.dob)
    event_date = parse_calendar_date(event.date)

    age = age_at(birth_b, event_date)
    target = add_years(birth_a, age)

    return CalculationResult(
        date=target,
        age=age,
        description=(
            f'{a.name} will be {age}, the age {b.name} was at the event "{event.name}", '
            f"on {format_display_date(target)}."
        ),
    )


def _when_a_reaches_current_age_of_b(params, people, today) -> tuple[Person, Person, int, date]:
    person_a, person_b = _require(
        params, "personA", "personB", message="Missing information. Please select both people."
    )
    a = _get_person(person_a, people)
    b = _get_person(person_b, people)
    _check_found([a, b], "Could not find one of the selected people.")
    _check_dated([a.dob, b.dob], "One or more selected people do not have a birth date set.")

    birth_a = parse_calendar_date(a.dob)
    birth_b = parse_calendar_date(b.dob)

    age = age_at(birth_b, today)
    return a, b, age, add_years(birth_a, age)


@solver
def person_was_age_person_is_now(params, people, events, today):
    """When was (or will) person A be the age person B is now?"""
    a, b, age, target = _when_a_reaches_current_age_of_b(params, people, today)
    return CalculationResult(
        date=target,
        age=age,
        description=(
            f"{a.name} was (or will be) {age}, the age {b.name} is now, "
            f"on {format_display_date(target)}."
        ),
    )


@solver
def how_old_person_was_at_event(params, people, events, today):
    """How old was person A at event B?"""
    person_a, event_b = _require(
        params,
        "personA",
        "eventB",
        message="Missing information. Please select a person and an event.",
    )
    a = _get_person(person_a, people)
    event = _get_event(event_b, events)
    _check_found([a, event], "Could not find the selected person or event.")
    _check_dated([a.dob, event.date], "Missing birth date or event date information.")

    birth = parse_calendar_date(a.dob)
    event_date = parse_calendar_date(event.date)
    age = age_at(birth, event_date)

    return CalculationResult(
        date=event_date,
        age=age,
        description=f'{a.name} was {age} years old at the event "{event.name}".',
    )


@solver
def when_person_is_age(params, people, events, today):
    """When does person A turn the given age?"""
    person_a, age_value = _require(
        params,
        "personA",
        "age",
        message="Missing information. Please select a person and provide an age.",
    )
    age = _parse_age(age_value)
    a = _get_person(person_a, people)
    _check_found([a], "Could not find the selected person.")
    _check_dated([a.dob], "Selected person does not have a birth date set.")

    target = add_years(parse_calendar_date(a.dob), age)

    return CalculationResult(
        date=target,
        age=age,
        description=f"{a.name} will turn {age} on {format_display_date(target)}.",
    )


@solver
def when_child_is_age_parent_is_now(params, people, events, today):
    """When will the child (A) be the age the parent (B) is now?"""
    a, b, age, target = _when_a_reaches_current_age_of_b(params, people, today)
    return CalculationResult(
        date=target,
        age=age,
        description=(
            f"{a.name} will be the age {b.name} is now ({age}) "
            f"on {format_display_date(target)}."
        ),
    )


@solver
def when_combined_age_equals_person_age(params, people, events, today):
    """When will the ages of A and B add up to the age of C?

    Ages are treated as continuous, so (D - birth_a) + (D - birth_b) = D - birth_c
    gives D = birth_a + birth_b - birth_c, solved on day ordinals. The whole-year
    ages reported at D can miss the identity by one near a birthday; `exact` in
    the details says whether they satisfy it.
    """
    person_a, person_b, person_c = _require(
        params,
        "personA",
        "personB",
        "personC",
        message="Missing information. Please select all three people.",
    )
    a = _get_person(person_a, people)
    b = _get_person(person_b, people)
    c = _get_person(person_c, people)
    _check_found([a, b, c], "Could not find one of the selected people.")
    _check_dated(
        [a.dob, b.dob, c.dob], "One or more selected people do not have a birth date set."
    )

    birth_a = parse_calendar_date(a.dob)
    birth_b = parse_calendar_date(b.dob)
    birth_c = parse_calendar_date(c.dob)

    births = [birth_a.toordinal(), birth_b.toordinal(), birth_c.toordinal()]
    target_ordinal = births[0] + births[1] - births[2]
    if target_ordinal < max(births):
        raise InfeasibleResult("This combination of ages is not possible in the future.")
    try:
        target = date.fromordinal(target_ordinal)
    except ValueError as e:
        raise InfeasibleResult(
            "This combination of ages falls outside the supported calendar."
        ) from e

    age_a = age_at(birth_a, target)
    age_b = age_at(birth_b, target)
    age_c = age_at(birth_c, target)
    exact = age_a + age_b == age_c

    description = (
        f"On {format_display_date(target)}, {a.name} ({age_a}) and {b.name} ({age_b}) "
        f"will have a combined age of {age_a + age_b}, which is the age {c.name} "
        f"will be ({age_c})."
    )
    if not exact:
        description += " Whole-year ages are approximate this close to a birthday."

    return CalculationResult(
        date=target,
        description=description,
        details={
            "age_a": age_a,
            "age_b": age_b,
            "age_c": age_c,
            "combined_age": age_a + age_b,
            "exact": exact,
        },
    )
