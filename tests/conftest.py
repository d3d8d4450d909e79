"""Shared fixtures for AgeBond server tests."""

import os
import shutil
import tempfile
from pathlib import Path

import pytest

# Set AgeBond env vars BEFORE importing any agebond modules
# The family file is a scratch copy because every store edit is saved to disk
# Set explicit test values so .env doesn't override them (load_dotenv won't override existing)
_FIXTURE_FAMILY = Path(__file__).parent / "fixtures" / "family.json"
_FAMILY_FILE = Path(tempfile.mkdtemp(prefix="agebond-tests-")) / "family.json"
shutil.copy(_FIXTURE_FAMILY, _FAMILY_FILE)
os.environ["AGEBOND_FAMILY_FILE"] = str(_FAMILY_FILE)
os.environ["AGEBOND_TODAY"] = "2024-06-15"
os.environ["PHOENIX_ENABLED"] = "false"

# Now import and initialize agebond (safe because env vars are set)
from agebond import initialize  # noqa: E402

initialize()

from agebond import store  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_family():
    """Restore the fixture family before every test."""
    shutil.copy(_FIXTURE_FAMILY, _FAMILY_FILE)
    store.load_family()


@pytest.fixture
def family_file():
    """Path of the scratch family file the store saves to."""
    return _FAMILY_FILE


@pytest.fixture
def main_person_id():
    """The id of the person tagged 'self' in the fixture family."""
    return "p-alex"
