"""
Pytest configuration and fixtures
"""

import pytest

from uc_intg_apod.config import Config
from fakes import FakeApi


@pytest.fixture
def config(tmp_path):
    """Configuration backed by a not-yet-written file"""
    return Config(str(tmp_path / "config.json"))


@pytest.fixture
def fake_api():
    """Integration API with empty entity collections"""
    return FakeApi()
