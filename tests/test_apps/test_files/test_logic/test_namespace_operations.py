"""Tests for namespace provisioning business logic."""

import uuid

import pytest

from server.apps.files.exceptions import (
    BackendUnavailableError,
    NamespaceBackendError,
    ProvisioningFailedError,
)
from server.apps.files.logic.namespace_operations import (
    pending_namespaces,
    provision_namespace,
)
from server.apps.files.models import Namespace
from server.apps.identity.exceptions import PrincipalNotFoundError


def _failing(error: Exception):
    def _create_namespace(namespace_id: str, region: str | None = None) -> bool:
        raise error
    return _create_namespace


@pytest.mark.django_db
def test_provision_creates_bucket(principal, namespace_storage, mock_s3):
    """Test provisioning creates a ready namespace named by principal ID."""
    namespace, created = provision_namespace(
        principal.principal_id,
        namespace_storage,
    )

    assert created is True
    assert namespace.is_ready
    assert namespace.namespace_id == str(principal.principal_id)
    assert namespace.region == 'us-east-1'
    assert namespace.attempts == 1
    buckets = [bucket['Name'] for bucket in mock_s3.list_buckets()['Buckets']]
    assert buckets == [str(principal.principal_id)]


@pytest.mark.django_db
def test_provision_twice_is_noop(principal, namespace_storage, mock_s3):
    """Test second provisioning reports already provisioned."""
    provision_namespace(principal.principal_id, namespace_storage)

    namespace, created = provision_namespace(
        principal.principal_id,
        namespace_storage,
    )

    assert created is False
    assert namespace.is_ready
    assert namespace.attempts == 1
    assert Namespace.objects.count() == 1
    assert len(mock_s3.list_buckets()['Buckets']) == 1


@pytest.mark.django_db
def test_provision_uses_configured_region(
    principal,
    namespace_storage,
    settings,
    monkeypatch,
):
    """Test the region comes from settings, not from the caller."""
    settings.NAMESPACE_REGION = 'eu-central-1'
    calls = []

    def _create_namespace(namespace_id: str, region: str | None = None) -> bool:
        calls.append((namespace_id, region))
        return True

    monkeypatch.setattr(namespace_storage, 'create_namespace', _create_namespace)

    namespace, _ = provision_namespace(principal.principal_id, namespace_storage)

    assert namespace.region == 'eu-central-1'
    assert calls == [(namespace.namespace_id, 'eu-central-1')]


@pytest.mark.django_db
def test_provision_failure_marks_failed(
    principal,
    namespace_storage,
    monkeypatch,
):
    """Test a refused bucket leaves a failed namespace and the principal."""
    cause = NamespaceBackendError(str(principal.principal_id), 'AccessDenied', 'no')
    monkeypatch.setattr(namespace_storage, 'create_namespace', _failing(cause))

    with pytest.raises(ProvisioningFailedError) as exc_info:
        provision_namespace(principal.principal_id, namespace_storage)

    assert exc_info.value.cause is cause
    assert exc_info.value.principal_id == principal.principal_id
    namespace = Namespace.objects.get(principal=principal)
    assert namespace.status == Namespace.Status.FAILED
    assert 'AccessDenied' in namespace.last_error
    assert namespace.attempts == 1


@pytest.mark.django_db
def test_provision_unavailable_backend_marks_failed(
    principal,
    namespace_storage,
    monkeypatch,
):
    """Test transient backend failures are reported as provisioning failures."""
    cause = BackendUnavailableError('down')
    monkeypatch.setattr(namespace_storage, 'create_namespace', _failing(cause))

    with pytest.raises(ProvisioningFailedError):
        provision_namespace(principal.principal_id, namespace_storage)

    assert Namespace.objects.get(principal=principal).status == 'failed'


@pytest.mark.django_db
def test_provision_retry_after_failure(
    principal,
    namespace_storage,
    monkeypatch,
    mock_s3,
):
    """Test a failed namespace can be provisioned again."""
    cause = BackendUnavailableError('down')
    monkeypatch.setattr(namespace_storage, 'create_namespace', _failing(cause))
    with pytest.raises(ProvisioningFailedError):
        provision_namespace(principal.principal_id, namespace_storage)
    monkeypatch.undo()

    namespace, created = provision_namespace(
        principal.principal_id,
        namespace_storage,
    )

    assert created is True
    assert namespace.is_ready
    assert namespace.last_error == ''
    assert namespace.attempts == 2
    assert len(mock_s3.list_buckets()['Buckets']) == 1


@pytest.mark.django_db
def test_provision_unknown_principal(namespace_storage):
    """Test provisioning needs an existing principal."""
    with pytest.raises(PrincipalNotFoundError):
        provision_namespace(uuid.uuid4(), namespace_storage)

    assert Namespace.objects.count() == 0


@pytest.mark.django_db
def test_pending_namespaces(principal, other_principal, namespace_storage):
    """Test only principals without a ready namespace are pending."""
    provision_namespace(principal.principal_id, namespace_storage)

    pending = list(pending_namespaces())

    assert pending == [other_principal]


@pytest.mark.django_db
def test_pending_namespaces_includes_failed(principal, namespace_storage):
    """Test failed namespaces are pending."""
    Namespace.objects.create(
        principal=principal,
        region='us-east-1',
        status=Namespace.Status.FAILED,
    )

    assert list(pending_namespaces()) == [principal]
