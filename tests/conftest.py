"""Shared fixtures for the statuspage-updates tests."""

import pytest

from tests.helpers import Recorder


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()
