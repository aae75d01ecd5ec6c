"""Namespace storage backend for S3-compatible storage."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Final, final

from botocore.exceptions import BotoCoreError, ClientError
from django.core.files.storage import storages
from storages.backends.s3 import S3Storage

from server.apps.files.exceptions import (
    BackendUnavailableError,
    NamespaceBackendError,
)

logger = logging.getLogger(__name__)

# Name of the namespace storage in settings.STORAGES
NAMESPACE_STORAGE_ALIAS: Final = 'namespaces'

# S3 rejects an explicit LocationConstraint for its default region
_DEFAULT_REGION: Final = 'us-east-1'

_BUCKET_OWNED_CODE: Final = 'BucketAlreadyOwnedByYou'
_NO_SUCH_BUCKET_CODE: Final = 'NoSuchBucket'
_TRANSIENT_CODES: Final = frozenset((
    'InternalError',
    'ServiceUnavailable',
    'SlowDown',
    'RequestTimeout',
))


@dataclass(frozen=True, slots=True)
class ObjectRecord:
    """Metadata of one stored object, as listed by the backend."""

    namespace_id: str
    key: str
    size: int
    last_modified: datetime
    etag: str


def _error_code(error: ClientError) -> str:
    return str(error.response.get('Error', {}).get('Code', ''))


def _error_message(error: ClientError) -> str:
    return str(error.response.get('Error', {}).get('Message', ''))


@final
class NamespaceStorage(S3Storage):
    """S3 storage backend managing one bucket per principal.

    Extends django-storages S3Storage with:
    - Idempotent bucket creation for new namespaces
    - Namespace-scoped object listing
    - Mapping of backend errors onto the files app exceptions
    """

    def create_namespace(
        self,
        namespace_id: str,
        region: str | None = None,
    ) -> bool:
        """Create the bucket for a namespace.

        A bucket that already exists and is owned by us is not an
        error, so the call is safe to repeat.

        Args:
            namespace_id: Bucket name (the owner's principal ID).
            region: Region to create the bucket in, defaults to the
                configured region.

        Returns:
            True if the bucket was created, False if it already existed.

        Raises:
            NamespaceBackendError: If the backend refuses the bucket.
            BackendUnavailableError: If the backend cannot be reached.
        """
        region = region or self.region_name or _DEFAULT_REGION
        params: dict[str, Any] = {'Bucket': namespace_id}
        if region != _DEFAULT_REGION:
            params['CreateBucketConfiguration'] = {
                'LocationConstraint': region,
            }

        try:
            logger.info('Creating namespace bucket: %s (%s)', namespace_id, region)
            self.connection.create_bucket(**params)
        except ClientError as error:
            code = _error_code(error)
            if code == _BUCKET_OWNED_CODE:
                logger.info('Namespace bucket already exists: %s', namespace_id)
                return False
            logger.exception('Failed to create namespace bucket: %s', namespace_id)
            if code in _TRANSIENT_CODES:
                raise BackendUnavailableError(
                    f'Storage backend unavailable: {code}',
                ) from error
            raise NamespaceBackendError(
                namespace_id,
                code,
                _error_message(error),
            ) from error
        except BotoCoreError as error:
            logger.exception('Storage backend unreachable: %s', namespace_id)
            raise BackendUnavailableError(
                f'Storage backend unavailable: {error}',
            ) from error
        else:
            logger.info('Created namespace bucket: %s', namespace_id)
            return True

    def list_namespace_objects(self, namespace_id: str) -> Iterator[ObjectRecord]:
        """Yield the objects stored in a namespace, in backend order.

        Pages are fetched lazily while iterating. A namespace whose
        bucket does not exist yields nothing.

        Args:
            namespace_id: Bucket name (the owner's principal ID).

        Yields:
            ObjectRecord for every object in the bucket.

        Raises:
            BackendUnavailableError: If the listing fails for any other
                reason.
        """
        bucket = self.connection.Bucket(namespace_id)
        try:
            for summary in bucket.objects.all():
                yield ObjectRecord(
                    namespace_id=namespace_id,
                    key=summary.key,
                    size=summary.size,
                    last_modified=summary.last_modified,
                    etag=summary.e_tag.strip('"'),
                )
        except ClientError as error:
            if _error_code(error) == _NO_SUCH_BUCKET_CODE:
                logger.debug('Namespace bucket not found: %s', namespace_id)
                return
            logger.exception('Failed to list namespace: %s', namespace_id)
            raise BackendUnavailableError(
                f'Storage backend unavailable: {_error_code(error)}',
            ) from error
        except BotoCoreError as error:
            logger.exception('Storage backend unreachable: %s', namespace_id)
            raise BackendUnavailableError(
                f'Storage backend unavailable: {error}',
            ) from error

    def rollback_namespace(self, namespace_id: str) -> None:
        """Delete a freshly created bucket after a failed DB update.

        This is a best-effort operation - if deletion fails, the error
        is logged but not raised. The bucket is recreated idempotently
        on the next provisioning attempt.

        Args:
            namespace_id: Bucket name to delete.
        """
        try:
            logger.warning('Rolling back namespace bucket: %s', namespace_id)
            self.connection.Bucket(namespace_id).delete()
            logger.info('Rolled back namespace bucket: %s', namespace_id)
        except (BotoCoreError, ClientError):
            logger.exception(
                'Failed to roll back namespace, orphaned bucket: %s',
                namespace_id,
            )


def get_namespace_storage() -> NamespaceStorage:
    """Get the process-wide namespace storage.

    Django's storage handler builds the instance once per process from
    ``settings.STORAGES``; callers pass it into the logic functions.

    Returns:
        NamespaceStorage instance with S3 configuration.
    """
    return storages[NAMESPACE_STORAGE_ALIAS]  # type: ignore[return-value]
