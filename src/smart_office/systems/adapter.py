"""
Control adapter interface for environmental systems.

The adapter sits between the control systems (AC, lighting) and whatever
actually switches equipment in the building. The host provides a concrete
implementation; this package ships a logging one and a recording mock.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Tuple

logger = logging.getLogger(__name__)


class ControlAdapter(ABC):
    """
    Abstract interface for switching room equipment.

    Intentionally minimal: one call that asks the building to perform a
    service (e.g. "turn_on") in a domain (e.g. "climate") for a room.
    """

    @abstractmethod
    def call_service(self, domain: str, service: str, room_id: int) -> bool:
        """
        Execute a control action.

        Args:
            domain: Equipment domain (e.g., "climate", "light")
            service: Service name (e.g., "turn_on", "turn_off")
            room_id: Target room

        Returns:
            True if the action succeeded, False otherwise
        """
        pass


class LoggingControlAdapter(ControlAdapter):
    """Adapter that only logs the requested actions."""

    def call_service(self, domain: str, service: str, room_id: int) -> bool:
        logger.info(f"[{domain}] {service} for Room {room_id}")
        return True


class MockControlAdapter(ControlAdapter):
    """
    Mock adapter for testing.

    Records every call; can be told to report failure.
    """

    def __init__(self, succeed: bool = True) -> None:
        self.succeed = succeed
        self._calls: List[Tuple[str, str, int]] = []

    def get_service_calls(self) -> List[Tuple[str, str, int]]:
        """Get recorded service calls."""
        return self._calls.copy()

    def clear_service_calls(self) -> None:
        """Clear recorded service calls."""
        self._calls.clear()

    def call_service(self, domain: str, service: str, room_id: int) -> bool:
        self._calls.append((domain, service, room_id))
        return self.succeed
