"""Shared fixtures for files app tests."""

import boto3
import pytest
from moto import mock_aws

from server.apps.files.infrastructure.storage import NamespaceStorage
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
    """Create second test principal for isolation tests.

    Returns:
        Second Principal instance.
    """
    return Principal.objects.create_principal(
        username='otheruser',
        secret='testpass123',
    )


@pytest.fixture
def mock_s3():
    """Mock S3 service.

    Yields:
        boto3 S3 client talking to the mocked service.
    """
    with mock_aws():
        yield boto3.client('s3', region_name='us-east-1')


@pytest.fixture
def namespace_storage(mock_s3):
    """Create namespace storage against mocked S3.

    Args:
        mock_s3: Mock S3 fixture.

    Returns:
        NamespaceStorage instance.
    """
    return NamespaceStorage(
        access_key='testing',
        secret_key='testing',
        region_name='us-east-1',
    )


@pytest.fixture
def put_object(mock_s3):
    """Store an object directly in a namespace bucket.

    Args:
        mock_s3: Mock S3 fixture.

    Returns:
        Function taking (namespace_id, key, body).
    """
    def _put(namespace_id: str, key: str, body: bytes = b'content') -> None:
        mock_s3.put_object(Bucket=namespace_id, Key=key, Body=body)
    return _put
