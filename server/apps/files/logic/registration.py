"""Registration flow: create a principal, then its namespace."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from django.conf import settings
from django.db import DatabaseError, transaction

from server.apps.files.exceptions import ProvisioningFailedError
from server.apps.files.logic.namespace_operations import provision_namespace
from server.apps.files.models import Namespace
from server.apps.identity.logic.principal_operations import register_principal
from server.apps.identity.models import Principal

if TYPE_CHECKING:
    from server.apps.files.infrastructure.storage import NamespaceStorage

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Registration:
    """Outcome of a registration.

    ``provisioning_error`` is set when the principal was created but its
    namespace was not.
    """

    principal: Principal
    namespace: Namespace | None
    provisioning_error: ProvisioningFailedError | None = None

    @property
    def is_provisioned(self) -> bool:
        """Whether the principal's namespace is usable."""
        return self.namespace is not None and self.namespace.is_ready


def is_strict_provisioning() -> bool:
    """Check whether registration must roll back on provisioning failure.

    Returns:
        Setting value, False by default.
    """
    return getattr(settings, 'NAMESPACE_STRICT_PROVISIONING', False)


def register(
    username: str,
    secret: str,
    storage: 'NamespaceStorage',
    *,
    strict: bool | None = None,
) -> Registration:
    """Register a principal and provision its namespace.

    By default a provisioning failure is logged and returned, and the
    principal is kept; ``provision_namespaces`` can retry it later. In
    strict mode both steps share one transaction and the failure rolls
    the principal back.

    Args:
        username: Requested username (3-30 characters).
        secret: Raw secret (non-empty).
        storage: Namespace storage backend.
        strict: Override for ``NAMESPACE_STRICT_PROVISIONING``.

    Returns:
        Registration with the created principal.

    Raises:
        ValidationError: If username or secret is invalid.
        DuplicateUsernameError: If the username is already taken.
        ProvisioningFailedError: Only in strict mode.
    """
    if strict is None:
        strict = is_strict_provisioning()

    if strict:
        with transaction.atomic():
            principal = register_principal(username, secret)
            namespace, _ = provision_namespace(principal.principal_id, storage)
        return Registration(principal=principal, namespace=namespace)

    principal = register_principal(username, secret)
    try:
        namespace, _ = provision_namespace(principal.principal_id, storage)
    except ProvisioningFailedError as error:
        logger.warning(
            'Principal %s registered without namespace: %s',
            principal.username,
            error.cause,
            extra={'principal_id': str(principal.principal_id)},
        )
        return Registration(
            principal=principal,
            namespace=_recorded_namespace(principal),
            provisioning_error=error,
        )

    return Registration(principal=principal, namespace=namespace)


def _recorded_namespace(principal: Principal) -> Namespace | None:
    try:
        return Namespace.objects.filter(principal=principal).first()
    except DatabaseError:
        logger.exception(
            'Could not read namespace of %s after failed provisioning',
            principal.username,
        )
        return None
