"""
Pytest configuration and fixtures.
"""

import pytest

from smartmatch.config import Config
from smartmatch.matcher import TextMatcher


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run every test in a temporary directory so log files stay out of the repo."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def matcher():
    """Fresh matcher with its own caches."""
    return TextMatcher(Config())


@pytest.fixture
def restaurants():
    """Sample restaurant records as decoded from the backend."""
    return [
        {
            "id": "r1",
            "name": "Chez Karim",
            "description": "Tagine et couscous maison",
            "city": "Alger",
        },
        {
            "id": "r2",
            "name": "Burger House",
            "description": "Smash burgers and fries",
            "city": "Oran",
        },
        {
            "id": "r3",
            "name": "Sushi Bar",
            "description": "Maki et sashimi",
            "city": None,
        },
        {
            "id": "r4",
            "name": "La Crêperie",
            "description": "Crêpes sucrées et salées",
            "city": "Annaba",
        },
    ]
