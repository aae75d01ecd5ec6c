"""Shared fixtures for identity app tests."""

import pytest

from server.apps.identity.models import Principal


@pytest.fixture
def principal(db):
    """Create test principal.

    Returns:
        Principal instance for testing.
    """
    return Principal.objects.create_principal(
        username='testuser',
        secret='testpass123',
    )


@pytest.fixture
def other_principal(db):
    """Create second test principal.

    Returns:
        Second Principal instance.
    """
    return Principal.objects.create_principal(
        username='otheruser',
        secret='testpass123',
    )
