"""Global mutable state for the loaded family and server configuration."""

from __future__ import annotations

import os
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from .dates import parse_calendar_date
from .errors import InvalidDateFormat

if TYPE_CHECKING:
    from .models import Person

# Configuration (set by configure() at startup)
FAMILY_FILE: Path | None = None
REFERENCE_DATE: date | None = None

# Family members keyed by id, in insertion order (populated by store.load_family)
people: dict[str, Person] = {}


def _resolve_family_path() -> Path | None:
    """Get the family file path from the AGEBOND_FAMILY_FILE env var.

    The file does not have to exist yet; it is created on the first save.
    Returns None when the variable is unset, which keeps the family in memory.

    Raises:
        FileNotFoundError: If the path exists but is not a regular file.
    """
    env_path = os.getenv("AGEBOND_FAMILY_FILE")
    if not env_path:
        return None
    path = Path(env_path).expanduser().resolve()
    if path.exists() and not path.is_file():
        raise FileNotFoundError(f"Family file path is not a file: {path}")
    return path


def _resolve_reference_date() -> date | None:
    """Get the pinned "today" from AGEBOND_TODAY, if set."""
    value = os.getenv("AGEBOND_TODAY")
    if not value:
        return None
    try:
        return parse_calendar_date(value)
    except InvalidDateFormat as e:
        raise ValueError(f"AGEBOND_TODAY must be a YYYY-MM-DD date, got {value!r}") from e


def configure() -> None:
    """Initialize configuration from environment. Called at startup.

    Loads .env file if present, then reads AGEBOND_FAMILY_FILE and AGEBOND_TODAY.
    Note: load_dotenv() does NOT override existing env vars by default.
    """
    global FAMILY_FILE, REFERENCE_DATE
    load_dotenv()
    FAMILY_FILE = _resolve_family_path()
    REFERENCE_DATE = _resolve_reference_date()


def today() -> date:
    """The reference date used as "now" by the MCP tools and query handler."""
    return REFERENCE_DATE or date.today()
