"""AgeBond Server - FastMCP server for age relationships within a family.

Answers questions such as "when will my son be the age I am now?" or "when
will my sisters' combined ages equal our mother's?" from a family of people
with birth dates and life events.

Usage:
    agebond-server --family-file /path/to/family.json
    AGEBOND_FAMILY_FILE=/path/to/family.json python -m agebond
"""

from fastmcp import FastMCP

from .mcp_resources import register_resources
from .mcp_tools import register_tools
from .state import configure
from .store import load_family
from .telemetry import initialize_tracing

# The tracer provider has to exist before any span is opened (no-op unless PHOENIX_ENABLED)
initialize_tracing()

mcp = FastMCP("AgeBond Family Age Server")
register_tools(mcp)
register_resources(mcp)

_initialized = False


def initialize():
    """Read configuration and load the family file. Later calls do nothing."""
    global _initialized
    if _initialized:
        return
    configure()
    load_family()
    _initialized = True


__all__ = ["mcp", "initialize"]
