"""Relationship labels and main-person helpers.

Everything here works from the perspective of the main person, the single
family member tagged 'self'.
"""

import re
from collections import defaultdict

from .constants import GENDERED_RELATIONSHIPS, PRONOUNS, RELATIONSHIP_SYNONYMS, SELF
from .errors import MainPersonError
from .models import Person

POSSESSIVE_PATTERN = re.compile(r"\b(my|our)\s+(\w+)\b")


def get_gendered_relationship(relationship: str, gender: str | None) -> str:
    """E.g. ('parent', 'Female') -> 'mother'. Unknown combinations pass through."""
    return GENDERED_RELATIONSHIPS.get(relationship, {}).get(gender or "", relationship)


def get_pronoun(gender: str | None, kind: str = "subject") -> str:
    return PRONOUNS.get(gender or "", {}).get(kind, "they")


def format_relationship_for_display(person: Person) -> str:
    if person.relationship == SELF:
        return "You"
    if not person.relationship:
        return "Unknown"
    label = get_gendered_relationship(person.relationship, person.gender)
    return label[0].upper() + label[1:].replace("-", " ")


def get_main_person(people: list[Person]) -> Person:
    """Return the person tagged 'self'.

    Raises:
        MainPersonError: Unless exactly one person is tagged 'self'.
    """
    selves = [person for person in people if person.relationship == SELF]
    if not selves:
        raise MainPersonError("Please add yourself to your family first.")
    if len(selves) > 1:
        names = ", ".join(person.name for person in selves)
        raise MainPersonError(f"More than one person is marked as yourself: {names}.")
    return selves[0]


def find_person_by_relationship(people: list[Person], relationship: str) -> Person | None:
    return next((person for person in people if person.relationship == relationship), None)


def person_reference(person: Person, main_person: Person | None) -> str:
    """How the main person would refer to someone: 'you', 'your mother Ann', or a name."""
    if main_person is not None and person.id == main_person.id:
        return "you"
    if person.relationship and person.relationship not in (SELF, "other"):
        label = get_gendered_relationship(person.relationship, person.gender)
        return f"your {label} {person.name}"
    return person.name


def relationship_context(people: list[Person]) -> str:
    """One-line description of the family for LLM prompts.

    Raises:
        MainPersonError: If the main person cannot be determined.
    """
    main_person = get_main_person(people)
    others = [
        f"{person.name} is your "
        f"{get_gendered_relationship(person.relationship, person.gender) or 'family member'}"
        for person in people
        if person.id != main_person.id
    ]
    if not others:
        return f"You are {main_person.name}."
    return f"You are {main_person.name}. {', '.join(others)}."


def group_by_relationship(people: list[Person]) -> dict[str, list[str]]:
    """Names of everyone except the main person, grouped by relationship tag."""
    groups: dict[str, list[str]] = defaultdict(list)
    for person in people:
        if person.relationship and person.relationship != SELF:
            groups[person.relationship].append(person.name)
    return dict(groups)


def extract_relationship_mentions(text: str) -> list[dict]:
    """Find relationship words in free text.

    Possessive phrases ('my mom') come first and are marked personal when
    the possessive is 'my'; bare synonyms ('sister') follow.
    """
    mentions = []
    lower_text = text.lower()

    for match in POSSESSIVE_PATTERN.finditer(lower_text):
        possessive, term = match.groups()
        for relationship, synonyms in RELATIONSHIP_SYNONYMS.items():
            if term in synonyms:
                mentions.append(
                    {
                        "type": relationship,
                        "original_text": match.group(0),
                        "is_personal": possessive == "my",
                    }
                )
                break

    for relationship, synonyms in RELATIONSHIP_SYNONYMS.items():
        for synonym in synonyms:
            if re.search(rf"\b{re.escape(synonym)}\b", lower_text):
                mentions.append(
                    {"type": relationship, "original_text": synonym, "is_personal": False}
                )

    return mentions
