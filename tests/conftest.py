"""Shared test fixtures."""

from datetime import datetime

import pytest

from tests.helpers import CREATED_AT


@pytest.fixture
def created_at() -> datetime:
    return CREATED_AT
