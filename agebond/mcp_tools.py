"""MCP tool definitions for the AgeBond family age server."""

from . import store
from .core import (
    _calculate,
    _get_age,
    _get_events,
    _get_family_summary,
    _get_main_person,
    _get_person,
    _list_people,
    _list_templates,
    _search_people,
)
from .errors import AgebondError
from .query import _ask


def register_tools(mcp):
    """Register all MCP tools with the server."""

    # ============== CONTEXT TOOLS (2) ==============

    @mcp.tool()
    def get_main_person() -> dict:
        """
        Get the main person (the user, relationship 'self').

        Questions phrased with "I", "me" or "my" are about this person.
        Use this first to establish context.

        Returns:
            Full person record with relationship label and current age,
            or an error if the family has no single 'self' person
        """
        try:
            return _get_main_person()
        except AgebondError as e:
            return {"error": str(e)}

    @mcp.tool()
    def get_family_summary() -> dict:
        """
        Get an overview of the family: size, main person, relationships,
        oldest and youngest members, and the date used as "today".
        """
        return _get_family_summary()

    # ============== LOOKUP TOOLS (5) ==============

    @mcp.tool()
    def list_people(relationship: str | None = None) -> list[dict]:
        """
        List family members with their current ages.

        Args:
            relationship: Optional relationship tag filter (e.g. "parent", "sibling")
        """
        return _list_people(relationship)

    @mcp.tool()
    def get_person(person_id: str) -> dict | None:
        """
        Get a family member by id, including events and current age.

        Args:
            person_id: The person's id
        """
        return _get_person(person_id)

    @mcp.tool()
    def search_people(name: str, max_results: int = 10) -> list[dict]:
        """
        Fuzzy search for family members by name.

        Args:
            name: Full or partial name (typos tolerated)
            max_results: Maximum results to return (default 10)
        """
        return _search_people(name, max_results)

    @mcp.tool()
    def get_events(person_id: str) -> list[dict]:
        """
        Get a person's life events in date order with their age at each one.

        Args:
            person_id: The person's id
        """
        return _get_events(person_id)

    @mcp.tool()
    def get_age(person_id: str, on_date: str | None = None) -> dict | None:
        """
        Get a person's age in completed years on a date.

        Args:
            person_id: The person's id
            on_date: Date as YYYY-MM-DD (default: today)
        """
        try:
            return _get_age(person_id, on_date)
        except AgebondError as e:
            return {"error": str(e)}

    # ============== CALCULATION TOOLS (3) ==============

    @mcp.tool()
    def list_templates(category: str | None = None) -> list[dict]:
        """
        List the query templates and the params each one needs.

        Categories: "Direct Age Comparisons", "Future Projections",
        "Combined Age Dynamics".
        """
        return _list_templates(category)

    @mcp.tool()
    def calculate(template_id: str, params: dict) -> dict:
        """
        Run a query template with person/event ids.

        Args:
            template_id: Template id from list_templates()
            params: Map of the template's param names to ids, e.g.
                {"personA": "<id>", "personB": "<id>"}

        Returns:
            {"description", "date", "age"} on success, or {"error", "error_type"}

        Examples:
            calculate("personA_age_at_eventB", {"personA": "p1", "eventB": "e7"})
            calculate("combined_AB_equals_C", {"personA": "p1", "personB": "p2", "personC": "p3"})
        """
        return _calculate(template_id, params)

    @mcp.tool()
    def ask(question: str) -> dict:
        """
        Answer a natural language question about ages in the family.

        Template-shaped questions ("When will my son be the age I am now?")
        are calculated exactly; others get an LLM-written answer.

        Args:
            question: The question, from the main person's perspective
        """
        return _ask(question)

    # ============== FAMILY EDITING TOOLS (6) ==============

    @mcp.tool()
    def add_person(
        name: str,
        dob: str,
        relationship: str = "other",
        gender: str = "Male",
    ) -> dict:
        """
        Add a family member.

        Args:
            name: Display name
            dob: Date of birth as YYYY-MM-DD
            relationship: Relationship to the main person ("self" for the user)
            gender: "Male" or "Female"
        """
        try:
            return store.add_member(name, dob, relationship, gender).to_dict()
        except AgebondError as e:
            return {"error": str(e)}

    @mcp.tool()
    def remove_person(person_id: str) -> dict:
        """Remove a family member and all of their events."""
        try:
            return store.remove_member(person_id).to_summary()
        except AgebondError as e:
            return {"error": str(e)}

    @mcp.tool()
    def add_event(person_id: str, title: str, date: str) -> dict:
        """
        Add a life event to a family member.

        Args:
            person_id: The person's id
            title: Event title (e.g. "Graduation")
            date: Event date as YYYY-MM-DD
        """
        try:
            return store.add_event(person_id, title, date).to_dict()
        except AgebondError as e:
            return {"error": str(e)}

    @mcp.tool()
    def remove_event(person_id: str, event_id: str) -> dict:
        """Remove one of a family member's events."""
        try:
            return store.remove_event(person_id, event_id).to_dict()
        except AgebondError as e:
            return {"error": str(e)}

    @mcp.tool()
    def set_relationship(person_id: str, relationship: str) -> dict:
        """Change how a family member is related to the main person."""
        try:
            return store.update_member_relationship(person_id, relationship).to_summary()
        except AgebondError as e:
            return {"error": str(e)}

    @mcp.tool()
    def set_gender(person_id: str, gender: str) -> dict:
        """Change a family member's gender ("Male" or "Female")."""
        try:
            return store.update_member_gender(person_id, gender).to_dict()
        except AgebondError as e:
            return {"error": str(e)}
