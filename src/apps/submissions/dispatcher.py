"""Fire-and-forget delivery of submission notifications.

The request handler hands a notifier and the stored entity to the dispatcher
and responds straight away. Delivery runs on a small thread pool; its result
is only ever observed through the logs.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait

from django.conf import settings

from .services import NotificationOutcome, Notifier

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Runs notifiers in the background. Failures are logged, never retried."""

    def __init__(self, max_workers: int = 2):
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="notify")
        self._lock = threading.Lock()
        self._pending: set[Future] = set()

    def dispatch(self, notifier: Notifier, entity) -> Future:
        """Schedule ``notifier(entity)`` and return without waiting for it."""
        future = self._executor.submit(self._deliver, notifier, entity)
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._forget)
        return future

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)

    def _deliver(self, notifier: Notifier, entity) -> NotificationOutcome:
        name = getattr(notifier, "__name__", repr(notifier))
        try:
            return notifier(entity)
        except Exception as exc:
            logger.warning("Notification %s failed for %s: %s", name, getattr(entity, "pk", entity), exc)
            return NotificationOutcome.FAILED

    def wait(self, timeout: float | None = None) -> None:
        """Block until every notification scheduled so far has finished."""
        with self._lock:
            pending = list(self._pending)
        if pending:
            wait(pending, timeout=timeout)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)


_dispatcher: NotificationDispatcher | None = None
_dispatcher_lock = threading.Lock()


def get_dispatcher() -> NotificationDispatcher:
    """Return the process-wide dispatcher."""
    global _dispatcher
    with _dispatcher_lock:
        if _dispatcher is None:
            _dispatcher = NotificationDispatcher(max_workers=getattr(settings, "NOTIFICATION_WORKERS", 2))
        return _dispatcher
