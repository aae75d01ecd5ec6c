"""JSON views exposing the identity and namespace operations.

Responses never contain the secret or its hash.
"""

import json
import logging
from collections.abc import Callable
from functools import wraps
from http import HTTPStatus
from typing import Any, Final
from uuid import UUID

from django.core.exceptions import ValidationError
from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from server.apps.files.exceptions import BackendUnavailableError
from server.apps.files.infrastructure.storage import (
    ObjectRecord,
    get_namespace_storage,
)
from server.apps.files.logic.file_operations import (
    get_principal_view,
    list_objects,
)
from server.apps.files.logic.registration import register
from server.apps.identity.exceptions import (
    DuplicateUsernameError,
    InvalidCredentialsError,
    PrincipalNotFoundError,
)
from server.apps.identity.logic.principal_operations import (
    authenticate_principal,
)
from server.apps.identity.models import Principal

logger = logging.getLogger(__name__)

_View = Callable[..., JsonResponse]

# Business errors surfaced verbatim, with their HTTP status
_ERROR_STATUSES: Final[dict[type[Exception], HTTPStatus]] = {
    DuplicateUsernameError: HTTPStatus.CONFLICT,
    InvalidCredentialsError: HTTPStatus.UNAUTHORIZED,
    PrincipalNotFoundError: HTTPStatus.NOT_FOUND,
}


def _error(message: str, status: HTTPStatus) -> JsonResponse:
    return JsonResponse({'error': message}, status=status)


def json_errors(view: _View) -> _View:
    """Turn operation errors into JSON error responses.

    Args:
        view: View function to wrap.

    Returns:
        Wrapped view function.
    """
    @wraps(view)
    def wrapper(request: HttpRequest, *args: Any, **kwargs: Any) -> JsonResponse:
        try:
            return view(request, *args, **kwargs)
        except (
            DuplicateUsernameError,
            InvalidCredentialsError,
            PrincipalNotFoundError,
        ) as exc:
            return _error(str(exc), _ERROR_STATUSES[type(exc)])
        except ValidationError as exc:
            if hasattr(exc, 'error_dict'):
                fields = exc.message_dict
            else:
                fields = {'__all__': exc.messages}
            return JsonResponse(
                {'error': 'Invalid input', 'fields': fields},
                status=HTTPStatus.BAD_REQUEST,
            )
        except BackendUnavailableError:
            logger.exception('Backend unavailable: %s', request.path)
            return _error(
                'Service temporarily unavailable',
                HTTPStatus.SERVICE_UNAVAILABLE,
            )
    return wrapper


def _read_credentials(request: HttpRequest) -> tuple[str, str]:
    """Read username and password from a JSON body.

    Args:
        request: HTTP request.

    Returns:
        Tuple of (username, password).

    Raises:
        ValidationError: If the body is not a JSON object with string
            fields.
    """
    try:
        payload = json.loads(request.body or b'{}')
    except ValueError as error:
        raise ValidationError({'body': 'Malformed JSON'}) from error
    if not isinstance(payload, dict):
        raise ValidationError({'body': 'Expected a JSON object'})

    username = payload.get('username', '')
    password = payload.get('password', '')
    if not isinstance(username, str) or not isinstance(password, str):
        raise ValidationError({'body': 'Credentials must be strings'})
    return username, password


def _principal_payload(principal: Principal) -> dict[str, str]:
    return {
        'principal_id': str(principal.principal_id),
        'username': principal.username,
    }


def _record_payload(record: ObjectRecord) -> dict[str, Any]:
    return {
        'key': record.key,
        'size': record.size,
        'last_modified': record.last_modified.isoformat(),
        'etag': record.etag,
    }


@csrf_exempt
@require_POST
@json_errors
def register_view(request: HttpRequest) -> JsonResponse:
    """Register a principal and provision its namespace."""
    username, password = _read_credentials(request)
    registration = register(username, password, get_namespace_storage())

    payload = _principal_payload(registration.principal)
    if registration.namespace is None:
        payload['namespace_status'] = 'missing'
    else:
        payload['namespace_status'] = registration.namespace.status
    return JsonResponse(payload, status=HTTPStatus.CREATED)


@csrf_exempt
@require_POST
@json_errors
def authenticate_view(request: HttpRequest) -> JsonResponse:
    """Authenticate with username and password."""
    username, password = _read_credentials(request)
    principal = authenticate_principal(username, password)
    return JsonResponse(_principal_payload(principal))


@require_GET
@json_errors
def user_view(request: HttpRequest, principal_id: UUID) -> JsonResponse:
    """Show a principal."""
    return JsonResponse(_principal_payload(get_principal_view(principal_id)))


@require_GET
@json_errors
def uploads_view(request: HttpRequest, principal_id: UUID) -> JsonResponse:
    """List the uploads in a principal's namespace."""
    listing = list_objects(principal_id, get_namespace_storage())
    return JsonResponse({
        'uploads': [_record_payload(record) for record in listing],
    })
