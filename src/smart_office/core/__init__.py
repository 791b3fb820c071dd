"""
Core components of the smart office.

This package contains:
- bus: per-room NotificationBus and the observer base class
- room: Room state machine, bookings and snapshots
- manager: RoomManager, the room registry
- scheduler: cancellable deferred actions (wall clock and mock clock)
- errors: error taxonomy
"""

from smart_office.core.bus import NotificationBus, OccupancyEvent, OccupancyObserver
from smart_office.core.errors import (
    NotConfiguredError,
    SmartOfficeError,
    StateConflict,
    ValidationRejection,
)
from smart_office.core.manager import RoomManager
from smart_office.core.room import (
    AUTO_RELEASE_DELAY,
    OCCUPANCY_THRESHOLD,
    Booking,
    OccupancyStatus,
    Room,
    RoomConfig,
    RoomStatus,
)
from smart_office.core.scheduler import (
    ManualScheduler,
    ScheduledTask,
    Scheduler,
    ThreadingScheduler,
)

__all__ = [
    "AUTO_RELEASE_DELAY",
    "OCCUPANCY_THRESHOLD",
    "Booking",
    "ManualScheduler",
    "NotConfiguredError",
    "NotificationBus",
    "OccupancyEvent",
    "OccupancyObserver",
    "OccupancyStatus",
    "Room",
    "RoomConfig",
    "RoomManager",
    "RoomStatus",
    "ScheduledTask",
    "Scheduler",
    "SmartOfficeError",
    "StateConflict",
    "ThreadingScheduler",
    "ValidationRejection",
]
