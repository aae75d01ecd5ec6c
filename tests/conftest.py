"""Shared fixtures for all tests."""

import pytest


@pytest.fixture(autouse=True)
def _fast_password_hasher(settings):
    """Use a fast hasher so principal creation stays cheap in tests."""
    settings.PASSWORD_HASHERS = [
        'django.contrib.auth.hashers.MD5PasswordHasher',
    ]
