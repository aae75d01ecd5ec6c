"""Business logic for principal registration and authentication."""

import logging
from uuid import UUID

from django.contrib.auth import authenticate
from django.core.exceptions import ValidationError
from django.db import IntegrityError, OperationalError, transaction

from server.apps.files.exceptions import BackendUnavailableError
from server.apps.identity.exceptions import (
    DuplicateUsernameError,
    InvalidCredentialsError,
    PrincipalNotFoundError,
)
from server.apps.identity.models import Principal

logger = logging.getLogger(__name__)


def register_principal(username: str, secret: str) -> Principal:
    """Create a new principal with a freshly generated identifier.

    There is no existence check before the insert: the unique constraint
    on ``username`` decides, so concurrent registrations of the same
    name cannot both succeed.

    Args:
        username: Requested username (3-30 characters).
        secret: Raw secret (non-empty).

    Returns:
        Created Principal instance.

    Raises:
        ValidationError: If username or secret is invalid.
        DuplicateUsernameError: If the username is already taken.
        BackendUnavailableError: If the directory cannot be reached.
    """
    try:
        with transaction.atomic():
            principal = Principal.objects.create_principal(username, secret)
    except IntegrityError as error:
        logger.info('Registration rejected, username taken: %s', username)
        raise DuplicateUsernameError(username) from error
    except OperationalError as error:
        logger.exception('Directory unavailable during registration')
        raise BackendUnavailableError('Credential directory unavailable') from error

    logger.info(
        'Principal registered: %s (ID: %s)',
        principal.username,
        principal.principal_id,
    )
    return principal


def authenticate_principal(username: str, secret: str) -> Principal:
    """Return the principal matching both username and secret.

    The username is normalized the way it was on registration. The model
    backend hashes the secret even for unknown usernames, so neither
    timing nor the error tells the caller which part was wrong.

    Args:
        username: Username to authenticate.
        secret: Raw secret.

    Returns:
        Matching Principal instance.

    Raises:
        InvalidCredentialsError: If no principal matches both fields.
        BackendUnavailableError: If the directory cannot be reached.
    """
    try:
        principal = authenticate(
            request=None,
            username=Principal.normalize_username(username),
            password=secret,
        )
    except OperationalError as error:
        logger.exception('Directory unavailable during authentication')
        raise BackendUnavailableError('Credential directory unavailable') from error

    if principal is None:
        logger.warning('Authentication failed for user: %s', username)
        raise InvalidCredentialsError()

    logger.info('Principal authenticated: %s', username)
    return principal


def get_principal(principal_id: UUID | str) -> Principal:
    """Get a principal by identifier.

    Args:
        principal_id: Identifier issued at registration.

    Returns:
        Principal instance.

    Raises:
        PrincipalNotFoundError: If no principal has this identifier.
        BackendUnavailableError: If the directory cannot be reached.
    """
    try:
        return Principal.objects.get(pk=principal_id)
    except (Principal.DoesNotExist, ValidationError, ValueError) as error:
        raise PrincipalNotFoundError(principal_id) from error
    except OperationalError as error:
        logger.exception('Directory unavailable, principal: %s', principal_id)
        raise BackendUnavailableError('Credential directory unavailable') from error
