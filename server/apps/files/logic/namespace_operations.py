"""Business logic for namespace provisioning."""

import logging
from typing import TYPE_CHECKING
from uuid import UUID

from django.conf import settings
from django.db import DatabaseError
from django.db.models import QuerySet

from server.apps.files.exceptions import (
    BackendUnavailableError,
    NamespaceBackendError,
    ProvisioningFailedError,
)
from server.apps.files.models import Namespace
from server.apps.identity.logic.principal_operations import get_principal
from server.apps.identity.models import Principal

if TYPE_CHECKING:
    from server.apps.files.infrastructure.storage import NamespaceStorage

logger = logging.getLogger(__name__)


def get_namespace_region() -> str:
    """Get the region every namespace is created in.

    Returns:
        Region from settings or ``us-east-1``.
    """
    return getattr(settings, 'NAMESPACE_REGION', 'us-east-1')


def provision_namespace(
    principal_id: UUID | str,
    storage: 'NamespaceStorage',
) -> tuple[Namespace, bool]:
    """Create the storage namespace owned by a principal.

    Safe to call again for the same principal: a ready namespace is
    returned untouched, a pending or failed one is retried, and the
    backend treats an existing bucket as success.

    Args:
        principal_id: Owner of the namespace.
        storage: Namespace storage backend.

    Returns:
        Tuple of (Namespace, created). ``created`` is False when the
        namespace was already provisioned.

    Raises:
        PrincipalNotFoundError: If the principal does not exist.
        ProvisioningFailedError: If the backend could not create the
            bucket, or the namespace row could not be written. A bucket
            created before a failed write is removed again.
    """
    principal = get_principal(principal_id)
    try:
        namespace, _ = Namespace.objects.get_or_create(
            principal=principal,
            defaults={'region': get_namespace_region()},
        )
    except DatabaseError as error:
        logger.exception(
            'Failed to record namespace: %s',
            principal.namespace_id,
        )
        raise ProvisioningFailedError(principal.principal_id, error) from error

    if namespace.is_ready:
        logger.info('Namespace already provisioned: %s', namespace.namespace_id)
        return namespace, False

    try:
        bucket_created = storage.create_namespace(
            namespace.namespace_id,
            namespace.region,
        )
    except (NamespaceBackendError, BackendUnavailableError) as error:
        _record_failure(namespace, error)
        logger.exception(
            'Namespace provisioning failed: %s',
            namespace.namespace_id,
            extra={
                'principal_id': namespace.namespace_id,
                'namespace_id': namespace.namespace_id,
                'attempts': namespace.attempts,
            },
        )
        raise ProvisioningFailedError(principal.principal_id, error) from error

    try:
        namespace.mark_ready()
    except DatabaseError as error:
        # Storage must not hold a bucket the row does not record
        logger.exception(
            'Failed to record namespace, rolling back: %s',
            namespace.namespace_id,
        )
        if bucket_created:
            storage.rollback_namespace(namespace.namespace_id)
        raise ProvisioningFailedError(principal.principal_id, error) from error

    logger.info(
        'Namespace provisioned: %s (%s)',
        namespace.namespace_id,
        namespace.region,
    )
    return namespace, True


def pending_namespaces() -> QuerySet[Principal]:
    """Principals whose namespace is missing, pending or failed.

    Returns:
        QuerySet of Principal objects, oldest first.
    """
    return Principal.objects.exclude(
        namespace__status=Namespace.Status.READY,
    ).order_by('created_at')


def _record_failure(namespace: Namespace, error: Exception) -> None:
    try:
        namespace.mark_failed(error)
    except DatabaseError:
        logger.exception(
            'Failed to record namespace failure: %s',
            namespace.namespace_id,
        )
