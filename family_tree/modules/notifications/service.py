"""Per-user transient messages with TTL, replacing client-side toast banners."""
import itertools
import threading
import time
import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from family_tree.config.settings import settings
from family_tree.modules.notifications.schemas import Notification, NotificationLevel

logger = logging.getLogger(__name__)


class NotificationCenter:
    def __init__(self, ttl_seconds: float, max_per_user: int = 50, clock=time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.max_per_user = max_per_user
        self._clock = clock
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        # user_id -> list of (expiry, Notification), oldest first
        self._messages: Dict[str, List[tuple]] = {}

    def push(self, user_id: str, message: str, level: NotificationLevel = NotificationLevel.success,
             ttl_seconds: Optional[float] = None) -> Notification:
        """Store a message for user_id; expired messages of every user are dropped first"""
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        now = datetime.now(timezone.utc)
        with self._lock:
            self._prune_all()
            notification = Notification(
                id=next(self._ids),
                level=level,
                message=message,
                created_at=now,
                expires_at=now + timedelta(seconds=ttl),
                ttl_seconds=ttl,
            )
            entries = self._messages.setdefault(user_id, [])
            entries.append((self._clock() + ttl, notification))
            if len(entries) > self.max_per_user:
                del entries[:len(entries) - self.max_per_user]
        logger.debug(f"Notification {notification.id} for user {user_id}: {message}")
        return notification

    def list(self, user_id: str) -> List[Notification]:
        with self._lock:
            self._prune(user_id)
            return [notification for _, notification in self._messages.get(user_id, [])]

    def dismiss(self, user_id: str, notification_id: int) -> bool:
        with self._lock:
            entries = self._messages.get(user_id, [])
            remaining = [entry for entry in entries if entry[1].id != notification_id]
            if remaining:
                self._messages[user_id] = remaining
            else:
                self._messages.pop(user_id, None)
            return len(remaining) != len(entries)

    def size(self) -> int:
        """Number of live messages across all users"""
        with self._lock:
            self._prune_all()
            return sum(len(entries) for entries in self._messages.values())

    def clear(self):
        with self._lock:
            self._messages.clear()

    def _prune(self, user_id: str):
        now = self._clock()
        entries = self._messages.get(user_id)
        if entries is None:
            return
        live = [entry for entry in entries if entry[0] > now]
        if live:
            self._messages[user_id] = live
        else:
            del self._messages[user_id]

    def _prune_all(self):
        for user_id in list(self._messages):
            self._prune(user_id)


notification_center = NotificationCenter(
    ttl_seconds=settings.notification_ttl_seconds,
    max_per_user=settings.notification_max_per_user,
)


def get_notification_center() -> NotificationCenter:
    return notification_center
