"""API error rendering.

Every non-2xx response produced by the API shares one shape::

    {"type": "validation_error",
     "errors": [{"code": "required", "detail": "...", "attr": "items"}]}

``api_exception_handler`` is wired in ``REST_FRAMEWORK["EXCEPTION_HANDLER"]``
and covers DRF and pydantic exceptions raised inside views.
``error_response`` renders the ``ServiceError`` carried by a failed
``ServiceResult``.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional, Union

import structlog
from django.http import Http404
from pydantic import ValidationError as PydanticValidationError
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.settings import api_settings
from rest_framework.views import exception_handler

from modules.core.results import ErrorKind, ServiceError

logger = structlog.get_logger(__name__)

STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.RECONCILIATION: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def api_exception_handler(exc: Exception, context: Dict[str, Any]) -> Optional[Response]:
    """Render DRF / pydantic exceptions in the standard error shape.

    Validation failures are answered with 422.  Anything DRF does not
    recognise is left alone (``None``) so it propagates as a 500.
    """
    if isinstance(exc, PydanticValidationError):
        errors = [
            {
                "code": err["type"],
                "detail": err["msg"],
                "attr": ".".join(str(part) for part in err["loc"]) or None,
            }
            for err in exc.errors()
        ]
        return _render("validation_error", errors, status.HTTP_422_UNPROCESSABLE_ENTITY)

    if isinstance(exc, Http404):
        exc = exceptions.NotFound()

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, exceptions.ValidationError):
        response.status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
        error_type = "validation_error"
    elif response.status_code >= 500:
        error_type = "server_error"
    else:
        error_type = "client_error"

    response.data = {"type": error_type, "errors": list(_flatten(exc.detail))}
    logger.info(
        "api.request_rejected",
        status_code=response.status_code,
        error_type=error_type,
    )
    return response


def error_response(error: ServiceError) -> Response:
    """Translate a service-layer error into an HTTP response.

    Input validation never reaches the service (serializers and DTOs reject
    it first), so service errors are always client errors.
    """
    return _render(
        "client_error",
        [{"code": error.code, "detail": error.detail, "attr": error.attr}],
        STATUS_BY_KIND[error.kind],
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _render(error_type: str, errors: List[Dict[str, Any]], status_code: int) -> Response:
    return Response({"type": error_type, "errors": errors}, status=status_code)


def _join(attr: Optional[str], key: Union[str, int]) -> str:
    return f"{attr}.{key}" if attr else str(key)


def _flatten(detail: Any, attr: Optional[str] = None) -> Iterator[Dict[str, Any]]:
    """Walk a DRF error ``detail`` tree, yielding one entry per message.

    Nested serializer errors become dotted paths (``items.1.quantity``);
    ``non_field_errors`` keys attach to their parent path.
    """
    if isinstance(detail, dict):
        for key, value in detail.items():
            child = attr if key == api_settings.NON_FIELD_ERRORS_KEY else _join(attr, key)
            yield from _flatten(value, child)
    elif isinstance(detail, list):
        for index, value in enumerate(detail):
            if isinstance(value, (dict, list)):
                yield from _flatten(value, _join(attr, index))
            else:
                yield from _flatten(value, attr)
    else:
        yield {
            "code": getattr(detail, "code", "error"),
            "detail": str(detail),
            "attr": attr,
        }
