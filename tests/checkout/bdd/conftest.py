"""Shared BDD fixtures for checkout."""

import pytest


@pytest.fixture()
def products():
    return {}


@pytest.fixture()
def outcomes():
    """Order id or raised error per owner, in checkout order."""
    return {}
