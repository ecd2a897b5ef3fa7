"""Pytest configuration for integration tests.

Everything in this directory touches the real filesystem and is
automatically marked as an integration test.
"""

import pytest


def pytest_collection_modifyitems(items):
    """Auto-mark all tests in tests/integration/ as integration tests."""
    for item in items:
        if "/integration/" in str(item.fspath) or "\\integration\\" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest.fixture
def save_file(tmp_path):
    return tmp_path / "garden" / "garden.json"
