"""
Pytest configuration and shared fixtures for the loan math tests.
"""

import pytest
from click.testing import CliRunner

from loan_math_web.app import create_app
from loan_math_web.input_store import MemoryInputStore


@pytest.fixture
def store():
    return MemoryInputStore()


@pytest.fixture
def app(store):
    """Create a web app backed by an in-memory input store."""
    return create_app({"TESTING": True, "DANGER_THRESHOLD": None}, store=store)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def runner():
    return CliRunner()
