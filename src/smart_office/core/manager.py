"""
RoomManager: the facility's room registry.

The RoomManager owns every Room instance. Callers address rooms by id and go
through the manager for each operation; they do not keep Room references
across calls.
"""

from typing import Any, Dict, List, Optional
import logging
import threading

from smart_office.core.bus import OccupancyObserver
from smart_office.core.errors import NotConfiguredError, ValidationRejection
from smart_office.core.room import Room, RoomConfig, RoomStatus
from smart_office.core.scheduler import Scheduler, ThreadingScheduler

logger = logging.getLogger(__name__)


class RoomManager:
    """
    Manages the set of rooms in the facility.

    Responsibilities:
    - Create the room set (1..N) and replace it on reconfiguration
    - Look up rooms by id
    - Administrative updates (max capacity)
    - Subscribe the facility-wide observers (AC, lighting) to every new room

    Does NOT implement booking or occupancy logic; that lives in Room.
    """

    CURRENT_CONFIG_VERSION = 1

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        scheduler: Optional[Scheduler] = None,
        observers: Optional[List[OccupancyObserver]] = None,
    ) -> None:
        """
        Initialize an unconfigured room manager.

        Args:
            config: Module config dict (see default_config()); missing keys use defaults
            scheduler: Source of auto-release timers (default: ThreadingScheduler)
            observers: Observers subscribed to every room on each configure()
        """
        self._room_config = RoomConfig.from_dict(config)
        self._scheduler = scheduler or ThreadingScheduler()
        self._observers: List[OccupancyObserver] = list(observers or [])
        self._rooms: Dict[int, Room] = {}
        self._configured = False
        self._lock = threading.Lock()

    @property
    def room_config(self) -> RoomConfig:
        return self._room_config

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    def is_configured(self) -> bool:
        return self._configured

    def room_count(self) -> int:
        return len(self._rooms)

    def room_ids(self) -> List[int]:
        return sorted(self._rooms)

    def configure(self, count: int) -> List[int]:
        """
        Replace the whole room set with `count` fresh rooms numbered 1..count.

        All prior bookings, occupancy, timers and subscriptions are discarded.

        Args:
            count: Number of rooms, must be positive

        Returns:
            The new room ids

        Raises:
            ValidationRejection: If count is not positive
        """
        if count <= 0:
            raise ValidationRejection("Room count must be positive")

        rooms: Dict[int, Room] = {}
        for room_id in range(1, count + 1):
            room = Room(room_id, self._scheduler, self._room_config)
            for observer in self._observers:
                room.subscribe(observer)
            rooms[room_id] = room

        with self._lock:
            discarded = list(self._rooms.values())
            self._rooms = rooms
            self._configured = True

        for room in discarded:
            room.close()

        logger.info(
            f"Office configured with {count} meeting rooms: "
            f"{', '.join(f'Room {i}' for i in rooms)}."
        )
        return list(rooms)

    def get_room(self, room_id: int) -> Room:
        """
        Get a room by id.

        Raises:
            NotConfiguredError: If configure() has not been called
            ValidationRejection: If the room does not exist
        """
        if not self._configured:
            raise NotConfiguredError("Office not configured. Please configure rooms first.")

        room = self._rooms.get(room_id)
        if room is None:
            raise ValidationRejection(f"Room {room_id} does not exist.")
        return room

    def find_room(self, room_id: int) -> Optional[Room]:
        """
        Get a room by id.

        Returns:
            The Room or None if not found
        """
        return self._rooms.get(room_id)

    def all_rooms(self) -> List[Room]:
        """All rooms, ordered by id."""
        rooms = self._rooms
        return [rooms[room_id] for room_id in sorted(rooms)]

    def set_capacity(self, room_id: int, capacity: int) -> None:
        """
        Set a room's max capacity.

        Raises:
            NotConfiguredError: If configure() has not been called
            ValidationRejection: If capacity is not positive or the room does not exist
        """
        if not self._configured:
            raise NotConfiguredError("Office not configured. Please configure rooms first.")
        if capacity <= 0:
            raise ValidationRejection("Invalid capacity. Please enter a valid positive number.")

        self.get_room(room_id).set_max_capacity(capacity)

    def status(self, room_id: Optional[int] = None) -> List[RoomStatus]:
        """
        Snapshot one room, or every room when room_id is None.

        Raises:
            NotConfiguredError: If configure() has not been called
            ValidationRejection: If room_id is given and does not exist
        """
        if room_id is not None:
            return [self.get_room(room_id).snapshot()]

        if not self._configured:
            raise NotConfiguredError("Office not configured. Please configure rooms first.")
        return [room.snapshot() for room in self.all_rooms()]

    def subscribe(self, room_id: int, observer: OccupancyObserver) -> None:
        """Subscribe an extra observer to a single room."""
        self.get_room(room_id).subscribe(observer)

    def unsubscribe(self, room_id: int, observer: OccupancyObserver) -> None:
        """Unsubscribe an observer from a single room."""
        self.get_room(room_id).unsubscribe(observer)

    def default_config(self) -> Dict[str, Any]:
        """Default module configuration."""
        return {
            "version": self.CURRENT_CONFIG_VERSION,
            "default_capacity": 10,
            "auto_release_minutes": 5,
        }

    def config_schema(self) -> Dict[str, Any]:
        """JSON-schema-like definition for UI configuration."""
        return {
            "type": "object",
            "properties": {
                "version": {
                    "type": "integer",
                    "title": "Config Version",
                    "readOnly": True,
                },
                "default_capacity": {
                    "type": "integer",
                    "title": "Default Max Capacity",
                    "description": "Max capacity assigned to each room when the office is configured",
                    "minimum": 1,
                    "default": 10,
                },
                "auto_release_minutes": {
                    "type": "number",
                    "title": "Auto-Release Delay (minutes)",
                    "description": "How long a booked room may stay unoccupied before its booking is released",
                    "exclusiveMinimum": 0,
                    "default": 5,
                },
            },
            "required": ["version"],
        }
