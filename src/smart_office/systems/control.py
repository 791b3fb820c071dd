"""
Environmental control systems driven by room occupancy.

Each system subscribes to every room's NotificationBus and switches its
equipment on while the room is occupied and off otherwise.
"""

import logging
import threading
from typing import Dict, Iterable, Optional, Set

from smart_office.core.bus import OccupancyEvent, OccupancyObserver

from .adapter import ControlAdapter, LoggingControlAdapter

logger = logging.getLogger(__name__)


class ControlSystem(OccupancyObserver):
    """
    Occupancy observer that switches one kind of equipment per room.

    Tracks the last known on/off state per room and only calls the adapter
    when the desired state differs, so repeated notifications are harmless.
    If the adapter reports failure the state is left unchanged and the next
    notification retries.
    """

    domain = "generic"
    name = "Control System"

    def __init__(
        self,
        adapter: Optional[ControlAdapter] = None,
        rooms: Optional[Iterable[int]] = None,
    ) -> None:
        """
        Args:
            adapter: Where service calls go (default: LoggingControlAdapter)
            rooms: Room ids this system serves (None = all rooms)
        """
        self._adapter = adapter or LoggingControlAdapter()
        self._rooms: Optional[Set[int]] = set(rooms) if rooms is not None else None
        self._state: Dict[int, bool] = {}
        self._lock = threading.Lock()

    def interested_in(self, event: OccupancyEvent) -> bool:
        return self._rooms is None or event.room_id in self._rooms

    def is_on(self, room_id: int) -> bool:
        with self._lock:
            return self._state.get(room_id, False)

    def on_occupancy_changed(self, room_id: int, occupied: bool, occupant_count: int) -> None:
        with self._lock:
            if self._state.get(room_id, False) == occupied:
                logger.debug(f"[{self.name}] Room {room_id} already {'on' if occupied else 'off'}")
                return

            service = "turn_on" if occupied else "turn_off"
            if not self._adapter.call_service(self.domain, service, room_id):
                logger.warning(f"[{self.name}] {service} failed for Room {room_id}")
                return
            self._state[room_id] = occupied

        logger.info(f"[{self.name}] {'on' if occupied else 'off'} for Room {room_id}")


class AirConditioningSystem(ControlSystem):
    """Turns AC on for occupied rooms and off for unoccupied ones."""

    domain = "climate"
    name = "Air Conditioning System"


class LightingSystem(ControlSystem):
    """Turns lights on for occupied rooms and off for unoccupied ones."""

    domain = "light"
    name = "Lighting System"
