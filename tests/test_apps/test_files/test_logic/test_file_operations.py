"""Tests for listing business logic."""

import uuid

import pytest

from server.apps.files.logic.file_operations import (
    get_principal_view,
    list_objects,
)
from server.apps.files.logic.namespace_operations import provision_namespace
from server.apps.identity.exceptions import PrincipalNotFoundError


@pytest.mark.django_db
def test_list_objects_without_namespace(principal, namespace_storage):
    """Test a principal with no namespace yet sees nothing."""
    assert list(list_objects(principal.principal_id, namespace_storage)) == []


@pytest.mark.django_db
def test_list_objects_empty_namespace(principal, namespace_storage):
    """Test a provisioned namespace without uploads lists nothing."""
    provision_namespace(principal.principal_id, namespace_storage)

    assert list(list_objects(principal.principal_id, namespace_storage)) == []


@pytest.mark.django_db
def test_list_objects_no_cross_tenant_leakage(
    principal,
    other_principal,
    namespace_storage,
    put_object,
):
    """Test each principal sees only its own namespace."""
    provision_namespace(principal.principal_id, namespace_storage)
    provision_namespace(other_principal.principal_id, namespace_storage)
    put_object(principal.namespace_id, 'a.txt')
    put_object(principal.namespace_id, 'docs/b.txt')

    own = list(list_objects(principal.principal_id, namespace_storage))
    other = list(list_objects(other_principal.principal_id, namespace_storage))

    assert sorted(record.key for record in own) == ['a.txt', 'docs/b.txt']
    assert all(
        record.namespace_id == str(principal.principal_id)
        for record in own
    )
    assert other == []


@pytest.mark.django_db
def test_list_objects_accepts_string_id(
    principal,
    namespace_storage,
    put_object,
):
    """Test the string form of the ID resolves to the same namespace."""
    provision_namespace(principal.principal_id, namespace_storage)
    put_object(principal.namespace_id, 'a.txt')

    records = list(list_objects(str(principal.principal_id), namespace_storage))

    assert [record.key for record in records] == ['a.txt']


def test_list_objects_ignores_non_principal_names(namespace_storage, mock_s3):
    """Test a bucket name that is not a principal ID is never listed."""
    mock_s3.create_bucket(Bucket='shared-bucket')
    mock_s3.put_object(Bucket='shared-bucket', Key='secret.txt', Body=b'x')

    listing = list_objects('shared-bucket', namespace_storage)

    assert listing.namespace_id is None
    assert list(listing) == []


@pytest.mark.django_db
def test_list_objects_is_lazy_and_restartable(
    principal,
    namespace_storage,
    put_object,
):
    """Test each iteration re-reads the namespace."""
    provision_namespace(principal.principal_id, namespace_storage)
    listing = list_objects(principal.principal_id, namespace_storage)

    assert list(listing) == []

    put_object(principal.namespace_id, 'late.txt')

    assert [record.key for record in listing] == ['late.txt']
    assert [record.key for record in listing] == ['late.txt']


@pytest.mark.django_db
def test_get_principal_view(principal):
    """Test principal metadata is read through the identity service."""
    assert get_principal_view(principal.principal_id) == principal


@pytest.mark.django_db
def test_get_principal_view_not_found():
    """Test unknown principal IDs are reported."""
    with pytest.raises(PrincipalNotFoundError):
        get_principal_view(uuid.uuid4())
