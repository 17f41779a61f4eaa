# services/notifications.py
"""
Notification service collaborator.

The reminder scheduler talks to the delivery service only through the
NotificationService protocol: add a request, remove pending requests by
identifier, list what is pending. InMemoryNotificationCenter is the local
implementation used by the API process and the tests; a platform push
service can be dropped in behind the same four coroutines.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Protocol

from .timestamps import to_wall_clock

logger = logging.getLogger(__name__)


@dataclass
class NotificationRequest:
     """A notification to deliver at ``fire_at``."""
     identifier: str
     title: str
     body: str
     fire_at: datetime
     user_info: dict = field(default_factory=dict)


class NotificationService(Protocol):
     async def add(self, request: NotificationRequest) -> None:
          ...

     async def remove_pending(self, identifiers: Iterable[str]) -> None:
          ...

     async def pending_requests(self) -> List[NotificationRequest]:
          ...

     async def remove_all(self) -> None:
          ...


class InMemoryNotificationCenter:
     """
     Pending notifications kept in a dict keyed by identifier.

     Adding a request with an identifier that is already pending replaces
     it, like the OS notification centers do.
     """

     def __init__(self):
          self._pending: Dict[str, NotificationRequest] = {}
          self._lock = asyncio.Lock()
          self.delivered: List[NotificationRequest] = []

     async def add(self, request: NotificationRequest) -> None:
          async with self._lock:
               self._pending[request.identifier] = request

     async def remove_pending(self, identifiers: Iterable[str]) -> None:
          async with self._lock:
               for identifier in identifiers:
                    self._pending.pop(identifier, None)

     async def pending_requests(self) -> List[NotificationRequest]:
          async with self._lock:
               return sorted(self._pending.values(), key=lambda r: (r.fire_at, r.identifier))

     async def remove_all(self) -> None:
          async with self._lock:
               self._pending.clear()

     async def deliver_due(self, now: Optional[datetime] = None) -> List[NotificationRequest]:
          """
          Move every request whose time has come to ``delivered``.

          Returns:
               The requests delivered by this call, oldest first
          """
          now = to_wall_clock(now or datetime.now())
          async with self._lock:
               due = sorted(
                    (r for r in self._pending.values() if r.fire_at <= now),
                    key=lambda r: (r.fire_at, r.identifier),
               )
               for request in due:
                    del self._pending[request.identifier]
                    logger.info("Delivered notification %s: %s", request.identifier, request.title)
               self.delivered.extend(due)
          return due
