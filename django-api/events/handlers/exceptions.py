"""Map domain errors to HTTP responses."""

import structlog
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from events.domain.errors import DomainError, ErrorKind

logger = structlog.get_logger(__name__)

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def domain_exception_handler(exc: Exception, context: dict) -> Response | None:
    """DRF exception handler that renders DomainError as ``{code, message}``."""
    if not isinstance(exc, DomainError):
        return exception_handler(exc, context)

    response = Response(
        {"code": exc.code.value, "message": exc.message},
        status=STATUS_BY_KIND[exc.kind],
    )
    if exc.kind is ErrorKind.UNAVAILABLE:
        logger.warning("request_unavailable", code=exc.code.value)
        response["Retry-After"] = "1"
    return response
