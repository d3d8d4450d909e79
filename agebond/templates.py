"""Query templates: fixed question shapes dispatched to the age solvers.

Both the MCP `calculate` tool and the natural-language resolver go through
run_template(). Params must be keyed exactly by the template's declared
param names and hold person/event ids.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date

from .calculations import (
    how_old_person_was_at_event,
    person_a_is_age_of_person_b_at_event,
    person_was_age_person_is_now,
    when_child_is_age_parent_is_now,
    when_combined_age_equals_person_age,
    when_person_is_age,
)
from .dates import to_iso
from .errors import MissingParameter, RecordNotFound
from .models import CalculationResult, FlattenedEvent, Person
from .telemetry import get_tracer, set_result_attributes

logger = logging.getLogger(__name__)

MILESTONE_AGE = 18
MILESTONE_EVENT_ID = "__milestone__"


@dataclass(frozen=True)
class QueryTemplate:
    id: str
    category: str
    description: str
    params: tuple[str, ...]
    calculate: Callable[..., CalculationResult]

    def to_summary(self) -> dict:
        return {
            "id": self.id,
            "category": self.category,
            "description": self.description,
            "params": list(self.params),
        }


def _when_person_a_turns_18(params, people, events=None, today=None) -> CalculationResult:
    return when_person_is_age({**params, "age": MILESTONE_AGE}, people, events, today)


def _how_old_person_b_when_person_a_turns_18(
    params, people, events=None, today=None
) -> CalculationResult:
    """Find when A turns 18, then B's age on that day as a synthetic event."""
    if params.get("personA") in (None, "") or params.get("personB") in (None, ""):
        return CalculationResult.failure(
            MissingParameter("Missing information. Please select both people.")
        )

    turning = _when_person_a_turns_18(params, people, events, today)
    if not turning.ok or turning.date is None:
        return turning

    person_a = next(p for p in people if p.id == params["personA"])
    milestone = FlattenedEvent(
        id=MILESTONE_EVENT_ID,
        name=f"{person_a.name} turns {MILESTONE_AGE}",
        date=to_iso(turning.date),
        person_id=person_a.id,
        person_name=person_a.name,
        person_relationship=person_a.relationship,
    )
    return how_old_person_was_at_event(
        {"personA": params.get("personB"), "eventB": milestone.id},
        people,
        [*(events or []), milestone],
        today,
    )


QUERY_TEMPLATES = [
    QueryTemplate(
        id="personA_is_age_personB_was_at_eventB",
        category="Direct Age Comparisons",
        description="When will [Person A] be the age [Person B] was at [Event B]?",
        params=("personA", "personB", "eventB"),
        calculate=person_a_is_age_of_person_b_at_event,
    ),
    QueryTemplate(
        id="personA_was_age_personB_is_now",
        category="Direct Age Comparisons",
        description="When was [Person A] the age [Person B] is now?",
        params=("personA", "personB"),
        calculate=person_was_age_person_is_now,
    ),
    QueryTemplate(
        id="personA_age_at_eventB",
        category="Direct Age Comparisons",
        description="How old was [Person A] at [Event B]?",
        params=("personA", "eventB"),
        calculate=how_old_person_was_at_event,
    ),
    QueryTemplate(
        id="child_is_age_parent_is_now",
        category="Future Projections",
        description="When will [Person A] be the age [Person B] is now?",
        params=("personA", "personB"),
        calculate=when_child_is_age_parent_is_now,
    ),
    QueryTemplate(
        id="when_personA_turns_18",
        category="Future Projections",
        description="When will [Person A] turn 18?",
        params=("personA",),
        calculate=_when_person_a_turns_18,
    ),
    QueryTemplate(
        id="how_old_personB_when_personA_turns_18",
        category="Future Projections",
        description="How old will [Person B] be when [Person A] turns 18?",
        params=("personA", "personB"),
        calculate=_how_old_person_b_when_person_a_turns_18,
    ),
    QueryTemplate(
        id="combined_AB_equals_C",
        category="Combined Age Dynamics",
        description="When will [Person A]'s and [Person B]'s combined ages equal [Person C]'s age?",
        params=("personA", "personB", "personC"),
        calculate=when_combined_age_equals_person_age,
    ),
]

_TEMPLATES_BY_ID = {template.id: template for template in QUERY_TEMPLATES}


def get_template(template_id: str) -> QueryTemplate | None:
    return _TEMPLATES_BY_ID.get(template_id)


def list_templates(category: str | None = None) -> list[dict]:
    """Template summaries (without the solver), optionally for one category."""
    return [
        template.to_summary()
        for template in QUERY_TEMPLATES
        if category is None or template.category == category
    ]


def run_template(
    template_id: str,
    params: dict | None,
    people: list[Person],
    events: list[FlattenedEvent],
    today: date | None = None,
) -> CalculationResult:
    """Dispatch a template by id.

    Keys outside the template's declared params are ignored; an unknown
    template id comes back as a RecordNotFound result.
    """
    template = get_template(template_id)
    if template is None:
        return CalculationResult.failure(RecordNotFound(f"Unknown query template: {template_id}"))

    params = params or {}
    dropped = sorted(set(params) - set(template.params))
    if dropped:
        logger.debug(f"Ignoring params {dropped} not declared by {template_id}")
    accepted = {name: params.get(name) for name in template.params}

    with get_tracer().start_as_current_span(f"template.{template.id}") as span:
        result = template.calculate(accepted, people, events, today)
        set_result_attributes(span, template.id, result)
    return result
