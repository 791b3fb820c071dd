"""
smart-office: occupancy-driven meeting room management.

This library provides:
- Rooms with bookings, sensed occupancy and automatic release of unused bookings
- Per-room notification of occupancy changes to environmental controls
- A room registry configured at startup
- Command objects with undo for the operator console
"""

from smart_office.core.bus import NotificationBus, OccupancyEvent, OccupancyObserver
from smart_office.core.manager import RoomManager
from smart_office.core.room import Booking, OccupancyStatus, Room, RoomStatus
from smart_office.core.scheduler import ManualScheduler, ThreadingScheduler

__version__ = "0.1.0"

__all__ = [
    "Booking",
    "ManualScheduler",
    "NotificationBus",
    "OccupancyEvent",
    "OccupancyObserver",
    "OccupancyStatus",
    "Room",
    "RoomManager",
    "RoomStatus",
    "ThreadingScheduler",
]
