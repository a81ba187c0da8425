"""
Pytest configuration and fixtures.

This file provides pytest-specific configuration and fixtures.
For standard test utilities, see tests/__init__.py
"""

import pytest

from tests import create_test_engine, setup_test_database, teardown_test_database


@pytest.fixture
def db_engine():
    """Fresh schema on the test database for one test."""
    engine = create_test_engine()
    setup_test_database(engine)
    yield engine
    teardown_test_database(engine)
    engine.dispose()
