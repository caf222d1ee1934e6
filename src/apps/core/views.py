"""Liveness and readiness probes."""

import logging

from asgiref.sync import sync_to_async
from django.conf import settings
from django.db import DatabaseError, connection
from django.http import HttpRequest, JsonResponse
from django.views import View

logger = logging.getLogger(__name__)


def ping_database() -> bool:
    """True when a durable database is configured and answers a trivial query."""
    if not getattr(settings, "DURABLE_STORAGE_ENABLED", False):
        return False
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except DatabaseError as exc:
        logger.warning("Database ping failed: %s", exc)
        return False
    return True


class LiveView(View):
    """The process is up."""

    async def get(self, request: HttpRequest) -> JsonResponse:
        return JsonResponse({"ok": True})


class ReadyView(View):
    """The durable store is reachable."""

    async def get(self, request: HttpRequest) -> JsonResponse:
        ok = await sync_to_async(ping_database)()
        return JsonResponse({"ok": ok}, status=200 if ok else 503)
