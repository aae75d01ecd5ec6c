"""Business logic for listing the files a principal can see."""

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING, final
from uuid import UUID

from server.apps.files.infrastructure.storage import ObjectRecord
from server.apps.identity.logic.principal_operations import get_principal
from server.apps.identity.models import Principal

if TYPE_CHECKING:
    from server.apps.files.infrastructure.storage import NamespaceStorage

logger = logging.getLogger(__name__)


@final
class NamespaceListing:
    """Lazy, restartable listing of one namespace.

    Nothing is fetched until iteration starts, and every new iteration
    issues a fresh listing against the backend.
    """

    def __init__(
        self,
        namespace_id: str | None,
        storage: 'NamespaceStorage',
    ) -> None:
        """Initialize the listing.

        Args:
            namespace_id: Namespace to list, or None for a listing
                that is always empty.
            storage: Namespace storage backend.
        """
        self.namespace_id = namespace_id
        self._storage = storage

    def __iter__(self) -> Iterator[ObjectRecord]:
        """Iterate over the namespace's objects in backend order."""
        if self.namespace_id is None:
            return iter(())
        return self._storage.list_namespace_objects(self.namespace_id)


def _namespace_for(principal_id: UUID | str) -> str | None:
    """Resolve the namespace a principal ID addresses.

    Only a UUID can name a namespace, which keeps other buckets on the
    same backend unreachable through this path.

    Args:
        principal_id: Principal ID as issued at registration.

    Returns:
        Canonical namespace ID, or None if the value is not a UUID.
    """
    if isinstance(principal_id, UUID):
        return str(principal_id)
    try:
        return str(UUID(str(principal_id)))
    except ValueError:
        logger.debug('Not a principal ID, empty listing: %r', principal_id)
        return None


def list_objects(
    principal_id: UUID | str,
    storage: 'NamespaceStorage',
) -> NamespaceListing:
    """List the objects stored in the principal's own namespace.

    The principal ID is the only input; there is no way to name another
    namespace. A namespace that has no objects or does not exist yet
    lists as empty.

    Args:
        principal_id: Principal whose files to list.
        storage: Namespace storage backend.

    Returns:
        NamespaceListing of ObjectRecord, every record carrying
        ``namespace_id == str(principal_id)``.
    """
    return NamespaceListing(_namespace_for(principal_id), storage)


def get_principal_view(principal_id: UUID | str) -> Principal:
    """Read principal metadata.

    Args:
        principal_id: Principal to read.

    Returns:
        Principal instance.

    Raises:
        PrincipalNotFoundError: If the principal does not exist.
    """
    return get_principal(principal_id)
