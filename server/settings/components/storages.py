"""Django storage configuration for S3-compatible namespace backends.

This module configures django-storages to work with:
- MinIO for local development
- Cloudflare R2 or AWS S3 for production

Every principal owns one bucket, created in ``NAMESPACE_REGION``.
"""

from typing import Any, Final

from botocore.config import Config

from server.settings.components import config

# Fixed address space for every namespace, never a per-call parameter
NAMESPACE_REGION: Final[str] = config('NAMESPACE_REGION', default='us-east-1')

# Roll the principal back when its namespace cannot be created
NAMESPACE_STRICT_PROVISIONING: Final[bool] = config(
    'NAMESPACE_STRICT_PROVISIONING',
    cast=bool,
    default=False,
)

_BACKEND_MAX_ATTEMPTS: Final[int] = config(
    'NAMESPACE_BACKEND_MAX_ATTEMPTS',
    cast=int,
    default=3,
)
_BACKEND_TIMEOUT: Final[int] = config(
    'NAMESPACE_BACKEND_TIMEOUT',
    cast=int,
    default=10,
)

STORAGES: Final[dict[str, dict[str, Any]]] = {
    'namespaces': {
        'BACKEND': 'server.apps.files.infrastructure.storage.NamespaceStorage',
        'OPTIONS': {
            'access_key': config('AWS_ACCESS_KEY_ID', default='minioadmin'),
            'secret_key': config('AWS_SECRET_ACCESS_KEY', default='minioadmin'),
            'endpoint_url': config(
                'AWS_S3_ENDPOINT_URL',
                default=None,
            ),
            'region_name': NAMESPACE_REGION,
            # Bounded retry with backoff for transient backend failures
            'client_config': Config(
                s3={'addressing_style': 'path'},  # MinIO has no virtual hosts
                connect_timeout=_BACKEND_TIMEOUT,
                read_timeout=_BACKEND_TIMEOUT,
                retries={
                    'max_attempts': _BACKEND_MAX_ATTEMPTS,
                    'mode': 'standard',
                },
            ),
        },
    },
    'staticfiles': {
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}
