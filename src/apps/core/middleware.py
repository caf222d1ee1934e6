"""
Request-level middleware for the JSON API.

ApiRequestLogMiddleware writes one line per /api request with its status and
duration. JsonExceptionMiddleware is the catch-all: any exception a view lets
escape is logged with its stack trace and answered with a generic JSON error
carrying the exception's status, so a failing request never takes the
process down.
"""

import logging
import time
from http import HTTPStatus

from django.core.exceptions import PermissionDenied, SuspiciousOperation
from django.http import Http404, JsonResponse

logger = logging.getLogger("apps.requests")
error_logger = logging.getLogger("apps.errors")


class ApiRequestLogMiddleware:
    """Log ``METHOD path status in Nms`` for API requests."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if not request.path.startswith("/api"):
            return self.get_response(request)

        start = time.monotonic()
        response = self.get_response(request)
        duration_ms = int((time.monotonic() - start) * 1000)
        logger.info("%s %s %s in %dms", request.method, request.path, response.status_code, duration_ms)
        return response


def _status_for(exception: Exception) -> int:
    if isinstance(exception, Http404):
        return 404
    if isinstance(exception, PermissionDenied):
        return 403
    if isinstance(exception, SuspiciousOperation):
        return 400
    status = getattr(exception, "status_code", None) or getattr(exception, "status", None)
    if isinstance(status, int) and 400 <= status <= 599:
        try:
            return HTTPStatus(status).value
        except ValueError:
            # Non-standard code: answer with its class.
            return 400 if status < 500 else 500
    return 500


class JsonExceptionMiddleware:
    """Turn unhandled view exceptions into ``{"message": ...}`` responses."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception: Exception) -> JsonResponse:
        status = _status_for(exception)
        if status >= 500:
            error_logger.error(
                "Unhandled error (%d) on %s %s",
                status,
                request.method,
                request.path,
                exc_info=exception,
            )
        else:
            error_logger.info("Request error (%d) on %s %s: %s", status, request.method, request.path, exception)
        return JsonResponse({"message": HTTPStatus(status).phrase}, status=status)
