"""MCP resource definitions for the AgeBond family age server."""

from .core import _get_family_summary, _get_person, _list_people, _list_templates


def register_resources(mcp):
    """Register all MCP resources with the server."""

    @mcp.resource("agebond://person/{id}")
    def resource_person(id: str) -> str:
        """Get a family member by id."""
        person = _get_person(id)
        if person:
            return str(person)
        return f"Person {id} not found"

    @mcp.resource("agebond://family")
    def resource_family() -> str:
        """Get everyone in the family with their current age."""
        lines = []
        for p in _list_people():
            age = p["current_age"] if p["current_age"] is not None else "unknown age"
            lines.append(f"{p['id']}: {p['name']} ({p['relationship']}, {age})")
        return "\n".join(lines)

    @mcp.resource("agebond://templates")
    def resource_templates() -> str:
        """Get the query templates with their params."""
        return "\n".join(
            f"{t['id']}: {t['description']} [{', '.join(t['params'])}]"
            for t in _list_templates()
        )

    @mcp.resource("agebond://summary")
    def resource_summary() -> str:
        """Get the family summary."""
        return str(_get_family_summary())
