"""
Room model and lifecycle state machine.

A Room combines two independent axes of state:

    Occupancy: UNOCCUPIED <-> OCCUPIED   (occupant_count >= OCCUPANCY_THRESHOLD)
    Booking:   FREE       <-> BOOKED

While a room is BOOKED and UNOCCUPIED an auto-release timer is armed. When it
fires with the room still booked and unoccupied, the booking is released.
Becoming occupied or clearing the booking disarms the timer.

Every read-decide-mutate sequence runs under the room's lock, including the
timer callback. Each arming carries a generation number; a callback whose
generation no longer matches is stale and does nothing.
"""

import logging
import threading
from collections import deque
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Any, Deque, Dict, Optional, Union

from smart_office.core.bus import NotificationBus, OccupancyEvent, OccupancyObserver
from smart_office.core.errors import ValidationRejection
from smart_office.core.scheduler import ScheduledTask, Scheduler

logger = logging.getLogger(__name__)

OCCUPANCY_THRESHOLD = 2
AUTO_RELEASE_DELAY = timedelta(minutes=5)
DEFAULT_CAPACITY = 10


class OccupancyStatus(Enum):
    """Outcome of an occupancy update, for caller messaging."""

    OCCUPIED = "occupied"
    UNOCCUPIED = "unoccupied"
    BELOW_THRESHOLD = "below_threshold"  # someone is present, but fewer than the threshold

    @classmethod
    def for_count(cls, occupant_count: int) -> "OccupancyStatus":
        if occupant_count >= OCCUPANCY_THRESHOLD:
            return cls.OCCUPIED
        if occupant_count == 0:
            return cls.UNOCCUPIED
        return cls.BELOW_THRESHOLD

    def describe(self, room_id: int, occupant_count: int) -> str:
        if self is OccupancyStatus.OCCUPIED:
            return (
                f"Room {room_id} is now occupied by {occupant_count} persons. "
                f"AC and lights turned on."
            )
        if self is OccupancyStatus.UNOCCUPIED:
            return f"Room {room_id} is now unoccupied. AC and lights turned off."
        return f"Room {room_id} occupancy insufficient to mark as occupied."


def parse_start_time(value: Union[str, time]) -> time:
    """
    Parse a booking start time.

    Args:
        value: A time, or a string in HH:MM (or HH:MM:SS) format

    Returns:
        Parsed time value

    Raises:
        ValidationRejection: If the string is not a valid time
    """
    if isinstance(value, time):
        return value
    try:
        return time.fromisoformat(str(value).strip())
    except ValueError:
        raise ValidationRejection(
            f"Invalid time format '{value}'. Please use HH:MM format (e.g., 09:00)."
        ) from None


@dataclass(frozen=True)
class Booking:
    """
    A single booking of a room.

    Attributes:
        start_time: Wall-clock start of the booking
        duration_minutes: Length of the booking
    """

    start_time: time
    duration_minutes: int

    @property
    def end_time(self) -> time:
        """Wall-clock end; wraps past midnight."""
        anchor = datetime.combine(date(2000, 1, 1), self.start_time)
        return (anchor + timedelta(minutes=self.duration_minutes)).time()

    def __str__(self) -> str:
        return (
            f"{self.start_time.strftime('%H:%M')}-{self.end_time.strftime('%H:%M')}, "
            f"{self.duration_minutes} min"
        )


@dataclass(frozen=True)
class RoomConfig:
    """
    Per-room configuration.

    Attributes:
        default_capacity: Max capacity a new room starts with
        auto_release_delay: How long a booked room may stay unoccupied
    """

    default_capacity: int = DEFAULT_CAPACITY
    auto_release_delay: timedelta = AUTO_RELEASE_DELAY

    @classmethod
    def from_dict(cls, config: Optional[Dict[str, Any]]) -> "RoomConfig":
        """
        Build a RoomConfig from a module config dict.

        Reads "default_capacity" and "auto_release_minutes"; other keys are ignored.

        Raises:
            ValidationRejection: If a value is not a positive number
        """
        if not config:
            return cls()

        capacity = config.get("default_capacity", DEFAULT_CAPACITY)
        minutes = config.get("auto_release_minutes", AUTO_RELEASE_DELAY.total_seconds() / 60)

        if not isinstance(capacity, int) or isinstance(capacity, bool) or capacity <= 0:
            raise ValidationRejection(f"default_capacity must be a positive integer, got {capacity!r}")
        if not isinstance(minutes, (int, float)) or isinstance(minutes, bool) or minutes <= 0:
            raise ValidationRejection(f"auto_release_minutes must be positive, got {minutes!r}")

        return cls(default_capacity=capacity, auto_release_delay=timedelta(minutes=minutes))


@dataclass(frozen=True)
class RoomStatus:
    """Point-in-time snapshot of a room."""

    room_id: int
    occupant_count: int
    max_capacity: int
    occupied: bool
    booked: bool
    booking: Optional[Booking] = None

    def describe(self) -> str:
        text = (
            f"Room {self.room_id}: Occupants: {self.occupant_count}/{self.max_capacity}, "
            f"Occupied: {'Yes' if self.occupied else 'No'}, "
            f"Booked: {'Yes' if self.booked else 'No'}"
        )
        if self.booking is not None:
            text += f" ({self.booking})"
        return text


class Room:
    """
    A bookable room with sensed occupancy and auto-release.

    Notifications are queued under the state lock and delivered afterwards
    under a separate dispatch lock, so subscribers never run while the state
    lock is held but still see each room's events in transition order.
    """

    def __init__(
        self,
        room_id: int,
        scheduler: Scheduler,
        config: Optional[RoomConfig] = None,
    ) -> None:
        if room_id <= 0:
            raise ValidationRejection(f"Room id must be positive, got {room_id}")

        self._config = config or RoomConfig()
        self._id = room_id
        self._scheduler = scheduler
        self._bus = NotificationBus(room_id)

        self._lock = threading.RLock()
        self._dispatch_lock = threading.RLock()
        self._outbox: Deque[OccupancyEvent] = deque()

        self._max_capacity = self._config.default_capacity
        self._occupant_count = 0
        self._occupied = False
        self._booking: Optional[Booking] = None
        self._pending_release: Optional[ScheduledTask] = None
        self._release_generation = 0
        self._closed = False

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def id(self) -> int:
        return self._id

    @property
    def bus(self) -> NotificationBus:
        return self._bus

    @property
    def max_capacity(self) -> int:
        return self._max_capacity

    @property
    def occupant_count(self) -> int:
        return self._occupant_count

    @property
    def occupied(self) -> bool:
        return self._occupied

    @property
    def booked(self) -> bool:
        return self._booking is not None

    @property
    def booking(self) -> Optional[Booking]:
        with self._lock:
            return self._booking

    @property
    def has_pending_release(self) -> bool:
        with self._lock:
            return self._pending_release is not None

    def snapshot(self) -> RoomStatus:
        """Consistent snapshot of all room fields."""
        with self._lock:
            return RoomStatus(
                room_id=self._id,
                occupant_count=self._occupant_count,
                max_capacity=self._max_capacity,
                occupied=self._occupied,
                booked=self._booking is not None,
                booking=self._booking,
            )

    # =========================================================================
    # Subscribers
    # =========================================================================

    def subscribe(self, observer: OccupancyObserver) -> None:
        self._bus.subscribe(observer)

    def unsubscribe(self, observer: OccupancyObserver) -> None:
        self._bus.unsubscribe(observer)

    # =========================================================================
    # Operations
    # =========================================================================

    def set_max_capacity(self, capacity: int) -> None:
        """
        Change the room's max capacity.

        Raises:
            ValidationRejection: If capacity is not positive
        """
        if capacity <= 0:
            raise ValidationRejection(
                "Invalid capacity. Please enter a valid positive number."
            )
        with self._lock:
            self._max_capacity = capacity
        logger.info(f"Room {self._id}: max capacity set to {capacity}")

    def book(self, start_time: time, duration_minutes: int) -> bool:
        """
        Book the room.

        Only one booking may exist per room; the requested window is not
        compared against the existing one.

        Args:
            start_time: Booking start
            duration_minutes: Booking length, must be positive

        Returns:
            True if booked, False if the room already has a booking

        Raises:
            ValidationRejection: If duration_minutes is not positive
        """
        if duration_minutes <= 0:
            raise ValidationRejection("Invalid duration. Duration must be positive.")
        return self.reserve(Booking(start_time, duration_minutes))

    def reserve(self, booking: Booking) -> bool:
        """
        Store this exact Booking instance as the room's booking.

        A caller holding the instance can later cancel it with
        cancel(expected=booking) without touching a later, equal booking.

        Returns:
            True if booked, False if the room already has a booking
        """
        if booking.duration_minutes <= 0:
            raise ValidationRejection("Invalid duration. Duration must be positive.")

        with self._lock:
            if self._booking is not None:
                logger.info(f"Room {self._id}: booking rejected, already booked ({self._booking})")
                return False

            self._booking = booking
            if not self._occupied:
                self._arm_release()

        logger.info(f"Room {self._id}: booked {booking}")
        return True

    def cancel(self, expected: Optional[Booking] = None) -> bool:
        """
        Cancel the current booking and disarm any pending auto-release.

        Args:
            expected: If given, only cancel when the current booking is this
                same instance (an equal but separately made booking is kept)

        Returns:
            True if a booking was cancelled, False if the room was not booked
            (or holds a different booking than expected)
        """
        with self._lock:
            if self._booking is None:
                logger.info(f"Room {self._id}: cancel rejected, not booked")
                return False
            if expected is not None and self._booking is not expected:
                logger.info(f"Room {self._id}: cancel rejected, booking is now {self._booking}")
                return False

            booking = self._booking
            self._booking = None
            self._disarm_release()

        logger.info(f"Room {self._id}: booking {booking} cancelled")
        return True

    def update_occupancy(self, occupant_count: int) -> OccupancyStatus:
        """
        Apply a sensor reading.

        Recomputes occupancy, arms or disarms the auto-release timer, then
        notifies subscribers with the new (occupied, occupant_count). Subscribers
        are notified on every update, including ones that change nothing.

        Args:
            occupant_count: Number of people present, must be >= 0

        Returns:
            OccupancyStatus describing the reading

        Raises:
            ValidationRejection: If occupant_count is negative
        """
        if occupant_count < 0:
            raise ValidationRejection("Invalid occupant count. Count cannot be negative.")

        with self._lock:
            was_occupied = self._occupied
            self._occupant_count = occupant_count
            self._occupied = occupant_count >= OCCUPANCY_THRESHOLD

            if self._occupied:
                self._disarm_release()
            elif self._booking is not None:
                # Leaving occupancy restarts the countdown; a continued vacancy keeps it.
                if was_occupied or self._pending_release is None:
                    self._arm_release()

            if was_occupied != self._occupied:
                logger.info(
                    f"Room {self._id}: {'VACANT' if was_occupied else 'OCCUPIED'} -> "
                    f"{'OCCUPIED' if self._occupied else 'VACANT'} ({occupant_count} present)"
                )

            self._outbox.append(
                OccupancyEvent(
                    room_id=self._id,
                    occupied=self._occupied,
                    occupant_count=occupant_count,
                    timestamp=self._scheduler.now(),
                )
            )

        self._flush_notifications()
        return OccupancyStatus.for_count(occupant_count)

    def close(self) -> None:
        """Disarm the timer and drop all subscribers. The room is being discarded."""
        with self._lock:
            self._closed = True
            self._disarm_release()
            self._outbox.clear()
        self._bus.clear()
        logger.debug(f"Room {self._id}: closed")

    # =========================================================================
    # Auto-release timer (callers hold self._lock)
    # =========================================================================

    def _arm_release(self) -> None:
        self._disarm_release()
        if self._closed:
            return

        self._release_generation += 1
        generation = self._release_generation
        self._pending_release = self._scheduler.schedule(
            self._config.auto_release_delay,
            lambda: self._on_release_timer(generation),
            name=f"AutoRelease-Room{self._id}",
        )
        logger.debug(
            f"Room {self._id}: auto-release armed "
            f"(generation {generation}, due {self._pending_release.due.isoformat()})"
        )

    def _disarm_release(self) -> None:
        if self._pending_release is None:
            return
        self._pending_release.cancel()
        self._pending_release = None
        # Invalidate a callback that already started and is waiting on the lock.
        self._release_generation += 1
        logger.debug(f"Room {self._id}: auto-release disarmed")

    def _on_release_timer(self, generation: int) -> None:
        with self._lock:
            if generation != self._release_generation or self._pending_release is None:
                logger.debug(f"Room {self._id}: stale auto-release (generation {generation}) ignored")
                return

            self._pending_release = None
            if self._booking is None or self._occupied:
                logger.error(
                    f"Room {self._id}: auto-release fired with booked={self._booking is not None}, "
                    f"occupied={self._occupied}; ignoring"
                )
                return

            booking = self._booking
            self._booking = None

        logger.info(
            f"Room {self._id}: booking {booking} released after "
            f"{self._config.auto_release_delay} unoccupied"
        )

    # =========================================================================
    # Notification delivery
    # =========================================================================

    def _flush_notifications(self) -> None:
        with self._dispatch_lock:
            while True:
                with self._lock:
                    if not self._outbox:
                        return
                    event = self._outbox.popleft()
                self._bus.publish(event)

    def __repr__(self) -> str:
        return f"Room({self.snapshot().describe()})"
