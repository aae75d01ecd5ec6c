"""Shared fixtures for API tests."""

import boto3
import pytest
from moto import mock_aws

from server.apps.api import views
from server.apps.files.infrastructure.storage import NamespaceStorage


@pytest.fixture
def mock_s3():
    """Mock S3 service.

    Yields:
        boto3 S3 client talking to the mocked service.
    """
    with mock_aws():
        yield boto3.client('s3', region_name='us-east-1')


@pytest.fixture
def api_storage(mock_s3, monkeypatch):
    """Make the views use namespace storage against mocked S3.

    Args:
        mock_s3: Mock S3 fixture.
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        NamespaceStorage instance used by the views.
    """
    storage = NamespaceStorage(
        access_key='testing',
        secret_key='testing',
        region_name='us-east-1',
    )
    monkeypatch.setattr(views, 'get_namespace_storage', lambda: storage)
    return storage


@pytest.fixture
def register_user(client, api_storage):
    """Register a user through the API.

    Returns:
        Function taking (username, password) and returning the response.
    """
    def _register(username: str, password: str):
        return client.post(
            '/api/register/',
            data={'username': username, 'password': password},
            content_type='application/json',
        )
    return _register
