"""Natural-language age questions answered with an LLM.

Questions shaped like one of the query templates are turned into a template
id plus person/event ids by the LLM and then calculated exactly. Anything
else, or a template attempt that fails, gets an open answer written by the
LLM from a description of the family.
"""

import json
import logging
import os
import re
from datetime import date
from typing import Any

import litellm
from dotenv import load_dotenv

from . import state
from .core import _all_events, _people
from .dates import age_at, format_display_date, parse_calendar_date
from .errors import AgebondError, InvalidDateFormat, QueryError
from .models import FlattenedEvent, Person
from .relationships import (
    get_gendered_relationship,
    get_main_person,
    person_reference,
    relationship_context,
)
from .telemetry import get_tracer
from .templates import QUERY_TEMPLATES, get_template, run_template

# Load .env file if present
load_dotenv()

logger = logging.getLogger(__name__)

# Configuration
DEFAULT_MODEL = "claude-sonnet-4-20250514"
DEFAULT_MAX_TOKENS = 2048

# Phrasings that map well onto a query template
TEMPLATE_PATTERNS = [
    re.compile(pattern, re.IGNORECASE)
    for pattern in [
        r"combined age.*equal",
        r"\b(when|at what)\b.*combined.*age.*equal",
        r"how old.*was.*when.*event",
        r"how old.*was.*at.*event",
        r"age.*was.*at.*event",
        r"same age as",
        r"the age.*was.*when",
        r"the age.*is now",
        r"when will.*be.*age.*was",
        r"when will.*be.*age.*is now",
        r"when.*turns? 18",
        r"how old.*when.*turns? 18",
    ]
]

CODE_FENCE_PATTERN = re.compile(r"^```(\w*)?\s*\n?(.*?)\n?\s*```$", re.DOTALL)

PARSER_SYSTEM_PROMPT = """You are an expert system that converts a natural language question about \
family age relationships into a structured JSON object.
Your goal is to identify the correct query template and fill in the parameters based on the \
user's question and the provided family data.

IMPORTANT: This system works from the perspective of the main person (relationship: 'self'). When \
the user uses pronouns like "I", "me", "my", they refer to this main person.

1. Analyze the user's question: understand the intent and perspective.
2. Match to a template: choose the best 'queryTemplateId' from the provided list.
3. Identify entities: find the people and events mentioned in the question. Consider \
relationship context (e.g. "my mom", "my sister").
4. Map to IDs: match the identified names to their IDs from the family data. For "I" or "me", \
use the person with relationship 'self'.
5. Populate parameters: the keys of 'params' must match the 'params' list of the chosen template.
6. Return JSON: output only the final JSON object, nothing else.

The JSON output must strictly follow this structure:
{
  "queryTemplateId": "string",
  "params": {
    "personA": "string | null",
    "personB": "string | null",
    "personC": "string | null",
    "eventB": "string | null"
  }
}"""

OPEN_SYSTEM_PROMPT = """You are an expert family age calculator. You help users understand age \
relationships within their family.

IMPORTANT CONTEXT:
- You are answering from the perspective of {main_name} (the main person)
- Use "you" when referring to the main person
- Use relationship terms naturally (e.g. "your mom", "your brother")
- Today's date is {today}

RESPONSE GUIDELINES:
- Be conversational and concise
- Provide specific dates when relevant, in the form "On [Date], [person] will be [age]"
- Include current ages in parentheses for context
- Account for leap years when calculating exact ages
- If a question is unclear, ask for clarification"""


def should_use_template(question: str) -> bool:
    """Whether a question looks like one of the fixed query templates."""
    return any(pattern.search(question) for pattern in TEMPLATE_PATTERNS)


def _extract_text_response(response: Any) -> str:
    """Extract text content from a LiteLLM response."""
    if hasattr(response, "choices") and response.choices:
        message = response.choices[0].message
        if hasattr(message, "content") and message.content:
            return message.content
    return ""


def _strip_code_fence(text: str) -> str:
    match = CODE_FENCE_PATTERN.match(text)
    if match and match.group(2):
        return match.group(2).strip()
    return text


def _complete(system: str, prompt: str, **kwargs) -> str:
    """Send one system + user exchange to the configured model.

    Raises:
        QueryError: If the request fails or returns no text. Also raised when
            AGEBOND_QUERY_MAX_TOKENS is not a whole number.
    """
    model = os.getenv("AGEBOND_QUERY_MODEL", DEFAULT_MODEL)
    raw_max_tokens = os.getenv("AGEBOND_QUERY_MAX_TOKENS", str(DEFAULT_MAX_TOKENS))
    try:
        max_tokens = int(raw_max_tokens)
    except ValueError as e:
        raise QueryError(
            f"AGEBOND_QUERY_MAX_TOKENS must be a whole number, got {raw_max_tokens!r}"
        ) from e

    with get_tracer().start_as_current_span("llm.completion") as span:
        span.set_attribute("llm.model_name", model)
        try:
            response = litellm.completion(
                model=model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=max_tokens,
                **kwargs,
            )
        except Exception as e:
            logger.warning(f"LLM request failed: {e}")
            raise QueryError(f"Error communicating with LLM: {e}") from e

    text = _extract_text_response(response)
    if not text:
        raise QueryError("No response from LLM")
    return text


def _parse_question(question: str, people: list[Person], events: list[FlattenedEvent]) -> dict:
    """Ask the LLM which template a question matches and with which ids.

    Returns:
        {"queryTemplateId": str, "params": dict}

    Raises:
        MainPersonError: If the family has no single 'self' person.
        QueryError: If the LLM fails or returns unusable JSON.
    """
    main_person = get_main_person(people)
    people_data = [
        {
            "id": p.id,
            "name": p.name,
            "dob": p.dob,
            "relationship": p.relationship,
            "gender": p.gender,
            "genderedRelationship": get_gendered_relationship(p.relationship, p.gender),
        }
        for p in people
    ]

    prompt = f"""## Context
{relationship_context(people)}

## Query Templates
{json.dumps([t.to_summary() for t in QUERY_TEMPLATES], indent=2)}

## Family Data
- People: {json.dumps(people_data, indent=2)}
- Events: {json.dumps([e.to_dict() for e in events], indent=2)}

## Main Person
The main person is: {main_person.name}

## User's Question
"{question}"

## JSON Output
"""

    text = _complete(PARSER_SYSTEM_PROMPT, prompt, response_format={"type": "json_object"})
    try:
        data = json.loads(_strip_code_fence(text.strip()))
    except json.JSONDecodeError as e:
        raise QueryError(
            "I had trouble understanding that question. Please try rephrasing it "
            "or use one of the query templates."
        ) from e

    if (
        not isinstance(data, dict)
        or not data.get("queryTemplateId")
        or not isinstance(data.get("params"), dict)
    ):
        raise QueryError("Invalid JSON structure returned from LLM.")
    return data


def _describe_person(person: Person, main_person: Person, today: date) -> str:
    """One line of family context, e.g. '- Ann (your mother Ann) - Age 54, Born June 15, 1970'."""
    try:
        birth = parse_calendar_date(person.dob)
    except InvalidDateFormat:
        birth = None

    label = person_reference(person, main_person)
    if birth is None:
        line = f"- {person.name} ({label}) - Birth date unknown"
    else:
        line = (
            f"- {person.name} ({label}) - Age {age_at(birth, today)}, "
            f"Born {format_display_date(birth)}"
        )

    events = []
    for event in person.events:
        try:
            event_date = parse_calendar_date(event.date)
        except InvalidDateFormat:
            continue
        age_note = f" (age {age_at(birth, event_date)})" if birth else ""
        events.append(f"{event.title} on {format_display_date(event_date)}{age_note}")
    if events:
        line += f"\n  Events: {', '.join(events)}"
    return line


def _open_answer(question: str, people: list[Person], today: date) -> str:
    """Answer a question directly from a description of the family.

    Raises:
        MainPersonError: If the family has no single 'self' person.
        QueryError: If the LLM fails.
    """
    main_person = get_main_person(people)
    family_lines = [_describe_person(p, main_person, today) for p in people]

    prompt = f"""## Family Information
Current Date: {format_display_date(today)}

{chr(10).join(family_lines)}

## User's Question
"{question}"

## Your Response
Answer the user's question naturally and conversationally. Provide specific calculations and \
dates when relevant."""

    system = OPEN_SYSTEM_PROMPT.format(main_name=main_person.name, today=today.isoformat())
    return _complete(system, prompt)


def _ask(question: str) -> dict:
    """Answer a natural language question about ages in the family.

    Tries a query template first when the question looks like one, and falls
    back to an open LLM answer otherwise or when the template route fails.

    Returns:
        {"type": "template", "template_id", "result", "calculation"},
        {"type": "open", "result"} or {"type": "error", "error"}
    """
    people = _people()
    events = _all_events()
    today = state.today()

    with get_tracer().start_as_current_span("ask"):
        if should_use_template(question):
            try:
                parsed = _parse_question(question, people, events)
                template = get_template(parsed["queryTemplateId"])
                if template is None:
                    logger.info(f"LLM chose unknown template {parsed['queryTemplateId']!r}")
                else:
                    result = run_template(template.id, parsed["params"], people, events, today)
                    if result.ok:
                        return {
                            "type": "template",
                            "template_id": template.id,
                            "result": result.description,
                            "calculation": result.to_dict(),
                        }
                    logger.info(f"Template {template.id} failed: {result.error}")
            except AgebondError as e:
                logger.info(f"Template approach failed, falling back to open answer: {e}")

        try:
            return {"type": "open", "result": _open_answer(question, people, today)}
        except AgebondError as e:
            return {"type": "error", "error": str(e)}
