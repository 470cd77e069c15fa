"""Shared fixtures."""

import json

import pytest

from arbiter.catalog import load_catalog
from arbiter.config import DEFAULT_CATALOG_PATH
from arbiter.schemas import RuleCatalog
from tests.helpers import RecordingAsker


@pytest.fixture
def catalog() -> RuleCatalog:
    """The packaged rule catalog."""
    return load_catalog()


@pytest.fixture
def catalog_data() -> dict:
    """The packaged rule catalog as a mutable JSON document."""
    return json.loads(DEFAULT_CATALOG_PATH.read_text(encoding="utf-8"))


@pytest.fixture
def recorder() -> RecordingAsker:
    return RecordingAsker()
