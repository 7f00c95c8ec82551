"""Page queue and the loop that drains it."""

from .page_queue import PageQueue, QueueClosedError
from .audit_loop import AuditQueueLoop

__all__ = [
    'PageQueue',
    'QueueClosedError',
    'AuditQueueLoop'
]
