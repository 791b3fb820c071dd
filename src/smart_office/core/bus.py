"""
Notification bus for room occupancy changes.

Each Room owns one NotificationBus. The bus is a simple, synchronous
dispatcher: subscribers are called in registration order, and a failing
subscriber never stops delivery to the rest.
"""

from dataclasses import dataclass, field
from datetime import datetime, UTC
from typing import List
import logging
import threading

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    """Get current UTC time (for default factory)."""
    return datetime.now(UTC)


@dataclass(frozen=True)
class OccupancyEvent:
    """
    An occupancy update for a single room.

    Attributes:
        room_id: Room the update applies to
        occupied: Whether the room counts as occupied after the update
        occupant_count: Number of people reported by the sensor
        timestamp: When the update was applied
    """

    room_id: int
    occupied: bool
    occupant_count: int
    timestamp: datetime = field(default_factory=_utc_now)


class OccupancyObserver:
    """
    Base class for anything that reacts to occupancy changes.

    Observers are called on every occupancy update, not only on transitions,
    so handling must be idempotent.
    """

    def interested_in(self, event: OccupancyEvent) -> bool:
        """
        Decide whether this observer wants the event.

        Evaluated by the bus before dispatch. Default: every event.
        """
        return True

    def on_occupancy_changed(self, room_id: int, occupied: bool, occupant_count: int) -> None:
        raise NotImplementedError


class NotificationBus:
    """
    Per-room fan-out of occupancy events.

    Handlers are wrapped in try/except to prevent one bad subscriber from
    breaking the room or the other subscribers.
    """

    def __init__(self, room_id: int) -> None:
        """Initialize an empty bus for a room."""
        self.room_id = room_id
        self._subscribers: List[OccupancyObserver] = []
        self._lock = threading.Lock()

    @property
    def subscribers(self) -> List[OccupancyObserver]:
        """Current subscribers in registration order."""
        with self._lock:
            return list(self._subscribers)

    def subscribe(self, observer: OccupancyObserver) -> None:
        """
        Subscribe an observer.

        Subscribing an observer that is already present is a no-op.

        Args:
            observer: The observer to add
        """
        with self._lock:
            if any(s is observer for s in self._subscribers):
                return
            self._subscribers.append(observer)
        logger.debug(f"Room {self.room_id}: subscribed {type(observer).__name__}")

    def unsubscribe(self, observer: OccupancyObserver) -> None:
        """
        Unsubscribe an observer.

        Unsubscribing an observer that is not present is a no-op.

        Args:
            observer: The observer to remove
        """
        with self._lock:
            remaining = [s for s in self._subscribers if s is not observer]
            if len(remaining) == len(self._subscribers):
                return
            self._subscribers = remaining
        logger.debug(f"Room {self.room_id}: unsubscribed {type(observer).__name__}")

    def clear(self) -> None:
        """Drop every subscriber."""
        with self._lock:
            self._subscribers = []

    def publish(self, event: OccupancyEvent) -> int:
        """
        Deliver an event to every interested subscriber.

        Subscribers are called synchronously in registration order. Exceptions
        from a subscriber, including from its interest check, are logged and
        swallowed.

        Args:
            event: The event to deliver

        Returns:
            Number of subscribers that handled the event without error
        """
        logger.debug(
            f"Publishing room {event.room_id}: occupied={event.occupied}, "
            f"count={event.occupant_count}"
        )

        delivered = 0
        for observer in self.subscribers:
            name = type(observer).__name__
            try:
                if not observer.interested_in(event):
                    continue
                observer.on_occupancy_changed(event.room_id, event.occupied, event.occupant_count)
                delivered += 1
            except Exception as e:
                logger.error(
                    f"Error in subscriber {name} for room {event.room_id}: {e}",
                    exc_info=True,
                )

        return delivered
