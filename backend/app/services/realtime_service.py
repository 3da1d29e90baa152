"""Push delivery of committed changes to connected clients.

Services stage :class:`RealtimeEvent` objects on the SQLAlchemy session while
they work. The ``after_commit`` hook hands them to the hub; any transaction that
ends without committing drops them. Subscribers therefore only ever hear about
rows that are durably stored. Every payload carries the row id so clients can
de-duplicate, and clients refetch the list endpoints after a reconnect.
"""

import asyncio
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Set

from sqlalchemy import event
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

PENDING_KEY = "realtime_pending_events"


class RealtimeEventType(str, Enum):
    CONNECTED = "connected"
    NOTIFICATION_CREATED = "notification.created"
    CHAT_MESSAGE = "chat.message"
    PONG = "pong"


@dataclass
class RealtimeEvent:
    event_type: RealtimeEventType
    user_ids: List[int]
    data: Dict[str, Any]

    def to_message(self) -> Dict[str, Any]:
        return {
            "type": self.event_type.value,
            "data": self.data,
            "sent_at": datetime.utcnow().isoformat(),
        }


@dataclass(eq=False)
class Subscription:
    user_id: int
    loop: asyncio.AbstractEventLoop
    queue: asyncio.Queue = field(default_factory=asyncio.Queue)

    def deliver(self, message: Dict[str, Any]) -> None:
        self.loop.call_soon_threadsafe(self.queue.put_nowait, message)


class RealtimeHub:
    """Fans committed events out to per-user subscriber queues.

    ``publish`` is called from request worker threads, so each delivery is
    handed to the subscriber's own event loop.
    """

    def __init__(self):
        self._subscriptions: Dict[int, Set[Subscription]] = {}
        self._lock = threading.Lock()

    def subscribe(self, user_id: int, loop: Optional[asyncio.AbstractEventLoop] = None) -> Subscription:
        subscription = Subscription(user_id=user_id, loop=loop or asyncio.get_running_loop())
        with self._lock:
            self._subscriptions.setdefault(user_id, set()).add(subscription)
        logger.info("realtime subscriber connected: user %s", user_id)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            subs = self._subscriptions.get(subscription.user_id)
            if subs is None:
                return
            subs.discard(subscription)
            if not subs:
                del self._subscriptions[subscription.user_id]
        logger.info("realtime subscriber disconnected: user %s", subscription.user_id)

    def connection_count(self, user_id: Optional[int] = None) -> int:
        with self._lock:
            if user_id is not None:
                return len(self._subscriptions.get(user_id, ()))
            return sum(len(subs) for subs in self._subscriptions.values())

    def publish(self, realtime_event: RealtimeEvent) -> int:
        message = realtime_event.to_message()
        with self._lock:
            targets = [
                sub
                for user_id in set(realtime_event.user_ids)
                for sub in self._subscriptions.get(user_id, ())
            ]
        delivered = 0
        for sub in targets:
            try:
                sub.deliver(message)
                delivered += 1
            except RuntimeError as exc:
                # The subscriber's loop is gone; the socket handler never cleaned up.
                logger.warning("dropping realtime subscriber for user %s: %s", sub.user_id, exc)
                self.unsubscribe(sub)
        return delivered


hub = RealtimeHub()


def stage(db: Session, event_type: RealtimeEventType, user_ids: Iterable[int], data: Dict[str, Any]) -> None:
    db.info.setdefault(PENDING_KEY, []).append(
        RealtimeEvent(event_type=event_type, user_ids=list(user_ids), data=data)
    )


def pending_events(db: Session) -> List[RealtimeEvent]:
    return list(db.info.get(PENDING_KEY, []))


@event.listens_for(Session, "after_commit")
def _publish_staged(session: Session):
    for staged in session.info.pop(PENDING_KEY, []):
        hub.publish(staged)


@event.listens_for(Session, "after_transaction_end")
def _discard_staged(session: Session, transaction):
    if transaction.parent is None:
        session.info.pop(PENDING_KEY, None)
