"""Exceptions for files app."""

from uuid import UUID


class BackendUnavailableError(Exception):
    """Raised on a transient failure of the directory or storage backend."""


class NamespaceBackendError(Exception):
    """Raised when the storage backend refuses a namespace operation."""

    def __init__(self, namespace_id: str, code: str, message: str) -> None:
        """Initialize NamespaceBackendError.

        Args:
            namespace_id: Namespace the operation targeted.
            code: Error code reported by the backend.
            message: Error message reported by the backend.
        """
        self.namespace_id = namespace_id
        self.code = code
        super().__init__(f'{code}: {message} (namespace: {namespace_id})')


class ProvisioningFailedError(Exception):
    """Raised when a principal's namespace could not be created.

    The principal itself is kept; the namespace stays in the failed
    state until provisioning is retried.
    """

    def __init__(self, principal_id: UUID | str, cause: Exception) -> None:
        """Initialize ProvisioningFailedError.

        Args:
            principal_id: Owner of the namespace.
            cause: Backend error that stopped the provisioning.
        """
        self.principal_id = principal_id
        self.cause = cause
        super().__init__(
            f'Namespace provisioning failed for {principal_id}: {cause}',
        )
