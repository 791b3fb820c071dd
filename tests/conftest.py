"""Pytest configuration and shared fixtures for smart-office tests."""

import logging
from typing import List, Tuple

import pytest

from smart_office import ManualScheduler, OccupancyObserver, RoomManager

# Configure logging for tests
logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s [%(levelname)8s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)


class RecordingObserver(OccupancyObserver):
    """Observer that records every notification it receives."""

    def __init__(self) -> None:
        self.calls: List[Tuple[int, bool, int]] = []

    def on_occupancy_changed(self, room_id: int, occupied: bool, occupant_count: int) -> None:
        self.calls.append((room_id, occupied, occupant_count))


class FailingObserver(OccupancyObserver):
    """Observer that always raises."""

    def __init__(self) -> None:
        self.attempts = 0

    def on_occupancy_changed(self, room_id: int, occupied: bool, occupant_count: int) -> None:
        self.attempts += 1
        raise RuntimeError("subscriber exploded")


def assert_release_invariant(room) -> None:
    """A pending release exists exactly when the room is booked and unoccupied."""
    with room._lock:
        pending = room._pending_release is not None
        booked = room._booking is not None
        occupied = room._occupied
    if pending:
        assert booked and not occupied, f"dangling release timer on room {room.id}"
    if booked and not occupied:
        assert pending, f"booked, unoccupied room {room.id} has no release timer"


@pytest.fixture
def scheduler():
    """Mock-clock scheduler."""
    return ManualScheduler()


@pytest.fixture
def recorder():
    """A RecordingObserver."""
    return RecordingObserver()


@pytest.fixture
def manager(scheduler, recorder):
    """RoomManager on the mock clock with a recorder subscribed to every room."""
    return RoomManager(scheduler=scheduler, observers=[recorder])


@pytest.fixture
def configured(manager):
    """RoomManager with three rooms configured."""
    manager.configure(3)
    return manager
