"""
Tests for operator commands and the CommandInvoker.

These tests verify:
- The external call contract of every command (success and rejection kinds)
- The end-to-end book / occupy / auto-release scenario
- Undo of each undoable command
"""

from datetime import time, timedelta

import pytest

from smart_office import Booking, OccupancyStatus
from smart_office.commands import (
    BookRoomCommand,
    CancelBookingCommand,
    Command,
    CommandInvoker,
    CommandResult,
    ConfigureRoomsCommand,
    GetStatusCommand,
    ResultKind,
    SetCapacityCommand,
    SetOccupancyCommand,
)


@pytest.fixture
def invoker():
    return CommandInvoker()


class TestConfigureRooms:
    """Test suite for ConfigureRoomsCommand."""

    def test_success(self, manager):
        result = ConfigureRoomsCommand(manager, 3).execute()
        assert result.ok
        assert result.data == [1, 2, 3]
        assert result.message == "Office configured with 3 meeting rooms: Room 1, Room 2, Room 3."

    @pytest.mark.parametrize("count", [0, -1])
    def test_non_positive(self, manager, count):
        result = ConfigureRoomsCommand(manager, count).execute()
        assert result.kind is ResultKind.VALIDATION
        assert manager.is_configured() is False


class TestSetCapacity:
    """Test suite for SetCapacityCommand."""

    def test_success(self, configured):
        result = SetCapacityCommand(configured, 1, 20).execute()
        assert result.ok
        assert result.message == "Room 1 maximum capacity set to 20."
        assert configured.get_room(1).max_capacity == 20

    def test_not_configured(self, manager):
        result = SetCapacityCommand(manager, 1, 20).execute()
        assert result.kind is ResultKind.VALIDATION
        assert "not configured" in result.message

    def test_unknown_room(self, configured):
        result = SetCapacityCommand(configured, 5, 20).execute()
        assert result.kind is ResultKind.VALIDATION
        assert result.message == "Room 5 does not exist."

    def test_invalid_capacity(self, configured):
        result = SetCapacityCommand(configured, 1, 0).execute()
        assert result.kind is ResultKind.VALIDATION


class TestBookRoom:
    """Test suite for BookRoomCommand."""

    def test_success(self, configured):
        result = BookRoomCommand(configured, 1, "09:00", 60).execute()
        assert result.ok
        assert result.message == "Room 1 booked from 09:00 for 60 minutes."
        assert result.data == Booking(time(9, 0), 60)

    def test_accepts_time_object(self, configured):
        assert BookRoomCommand(configured, 2, time(14, 30), 15).execute().ok
        assert configured.get_room(2).booking.start_time == time(14, 30)

    def test_already_booked_is_conflict(self, configured):
        BookRoomCommand(configured, 1, "09:00", 60).execute()
        result = BookRoomCommand(configured, 1, "11:00", 60).execute()
        assert result.kind is ResultKind.CONFLICT
        assert configured.get_room(1).booking == Booking(time(9, 0), 60)

    def test_unknown_room(self, configured):
        result = BookRoomCommand(configured, 4, "09:00", 60).execute()
        assert result.kind is ResultKind.VALIDATION

    def test_bad_time(self, configured):
        result = BookRoomCommand(configured, 1, "nine", 60).execute()
        assert result.kind is ResultKind.VALIDATION
        assert configured.get_room(1).booked is False

    @pytest.mark.parametrize("duration", [0, -30])
    def test_bad_duration(self, configured, duration):
        result = BookRoomCommand(configured, 1, "09:00", duration).execute()
        assert result.kind is ResultKind.VALIDATION

    def test_not_configured(self, manager):
        result = BookRoomCommand(manager, 1, "09:00", 60).execute()
        assert result.kind is ResultKind.VALIDATION


class TestCancelBooking:
    """Test suite for CancelBookingCommand."""

    def test_success(self, configured):
        BookRoomCommand(configured, 1, "09:00", 60).execute()
        result = CancelBookingCommand(configured, 1).execute()
        assert result.ok
        assert result.data == Booking(time(9, 0), 60)
        assert configured.get_room(1).booked is False
        assert configured.get_room(1).has_pending_release is False

    def test_not_booked_is_conflict(self, configured):
        result = CancelBookingCommand(configured, 1).execute()
        assert result.kind is ResultKind.CONFLICT
        assert result.message == "Room 1 is not booked. Cannot cancel booking."

    def test_unknown_room(self, configured):
        assert CancelBookingCommand(configured, 9).execute().kind is ResultKind.VALIDATION


class TestSetOccupancy:
    """Test suite for SetOccupancyCommand."""

    def test_occupied(self, configured, recorder):
        result = SetOccupancyCommand(configured, 2, 4).execute()
        assert result.ok
        assert result.data is OccupancyStatus.OCCUPIED
        assert recorder.calls == [(2, True, 4)]

    def test_insufficient(self, configured):
        result = SetOccupancyCommand(configured, 1, 1).execute()
        assert result.ok
        assert result.data is OccupancyStatus.BELOW_THRESHOLD
        assert result.message == "Room 1 occupancy insufficient to mark as occupied."

    def test_negative(self, configured, recorder):
        result = SetOccupancyCommand(configured, 1, -2).execute()
        assert result.kind is ResultKind.VALIDATION
        assert recorder.calls == []

    def test_unknown_room(self, configured):
        assert SetOccupancyCommand(configured, 0, 2).execute().kind is ResultKind.VALIDATION


class TestGetStatus:
    """Test suite for GetStatusCommand."""

    def test_single(self, configured):
        BookRoomCommand(configured, 3, "13:00", 45).execute()
        result = GetStatusCommand(configured, 3).execute()
        assert result.ok
        assert result.message == (
            "Room 3: Occupants: 0/10, Occupied: No, Booked: Yes (13:00-13:45, 45 min)"
        )

    def test_all(self, configured):
        result = GetStatusCommand(configured).execute()
        assert [s.room_id for s in result.data] == [1, 2, 3]
        assert len(result.message.splitlines()) == 3

    def test_unknown_room(self, configured):
        assert GetStatusCommand(configured, 8).execute().kind is ResultKind.VALIDATION


class TestScenario:
    """End-to-end: configure, book, occupy, vacate, auto-release."""

    def test_auto_release_scenario(self, manager, scheduler, recorder, invoker):
        assert invoker.execute(ConfigureRoomsCommand(manager, 3)).data == [1, 2, 3]
        assert invoker.execute(BookRoomCommand(manager, 1, "09:00", 60)).ok

        result = invoker.execute(SetOccupancyCommand(manager, 1, 2))
        assert result.data is OccupancyStatus.OCCUPIED
        assert recorder.calls[-1] == (1, True, 2)

        result = invoker.execute(SetOccupancyCommand(manager, 1, 0))
        assert result.data is OccupancyStatus.UNOCCUPIED
        assert manager.get_room(1).has_pending_release is True

        scheduler.advance(timedelta(minutes=5))

        assert manager.get_room(1).booking is None
        (status,) = invoker.execute(GetStatusCommand(manager, 1)).data
        assert status.booked is False
        assert recorder.calls == [(1, True, 2), (1, False, 0)]


class TestInvoker:
    """Test suite for CommandInvoker history and undo."""

    def test_only_successful_undoable_commands_recorded(self, configured, invoker):
        invoker.execute(BookRoomCommand(configured, 1, "09:00", 60))
        invoker.execute(BookRoomCommand(configured, 1, "10:00", 60))  # conflict
        invoker.execute(GetStatusCommand(configured))  # not undoable
        invoker.execute(ConfigureRoomsCommand(configured, 0))  # rejected

        assert [type(c) for c in invoker.history] == [BookRoomCommand]

    def test_undo_empty(self, invoker):
        result = invoker.undo_last()
        assert result.kind is ResultKind.VALIDATION
        assert result.message == "No command to undo."

    def test_undo_book(self, configured, invoker):
        invoker.execute(BookRoomCommand(configured, 1, "09:00", 60))
        result = invoker.undo_last()
        assert result.ok
        assert configured.get_room(1).booked is False
        assert configured.get_room(1).has_pending_release is False
        assert invoker.history == []

    def test_undo_book_after_auto_release_and_rebook(self, configured, scheduler, invoker):
        """Undo only removes the booking this command created."""
        invoker.execute(BookRoomCommand(configured, 1, "09:00", 60))
        scheduler.advance(timedelta(minutes=5))
        configured.get_room(1).book(time(15, 0), 30)

        result = invoker.undo_last()

        assert result.kind is ResultKind.CONFLICT
        assert configured.get_room(1).booking == Booking(time(15, 0), 30)

    def test_undo_book_keeps_identical_rebooking(self, configured, scheduler, invoker):
        """Someone else's booking for the same slot survives the undo."""
        invoker.execute(BookRoomCommand(configured, 1, "09:00", 60))
        scheduler.advance(timedelta(minutes=5))
        assert configured.get_room(1).booked is False
        configured.get_room(1).book(time(9, 0), 60)

        result = invoker.undo_last()

        assert result.kind is ResultKind.CONFLICT
        room = configured.get_room(1)
        assert room.booked is True
        assert room.booking == Booking(time(9, 0), 60)
        assert room.has_pending_release is True

    def test_undo_cancel(self, configured, invoker):
        invoker.execute(BookRoomCommand(configured, 2, "09:00", 60))
        invoker.execute(CancelBookingCommand(configured, 2))

        result = invoker.undo_last()

        assert result.ok
        room = configured.get_room(2)
        assert room.booking == Booking(time(9, 0), 60)
        assert room.has_pending_release is True

    def test_undo_cancel_when_rebooked(self, configured, invoker):
        invoker.execute(BookRoomCommand(configured, 2, "09:00", 60))
        invoker.execute(CancelBookingCommand(configured, 2))
        configured.get_room(2).book(time(12, 0), 60)

        result = invoker.undo_last()

        assert result.kind is ResultKind.CONFLICT
        assert configured.get_room(2).booking == Booking(time(12, 0), 60)

    def test_undo_occupancy(self, configured, recorder, invoker):
        invoker.execute(SetOccupancyCommand(configured, 1, 3))
        invoker.execute(SetOccupancyCommand(configured, 1, 0))

        result = invoker.undo_last()

        assert result.ok
        assert result.message == "Occupancy for Room 1 restored to 3 (undo)."
        assert configured.get_room(1).occupant_count == 3
        assert recorder.calls[-1] == (1, True, 3)

    def test_undo_capacity(self, configured, invoker):
        invoker.execute(SetCapacityCommand(configured, 1, 30))
        invoker.undo_last()
        assert configured.get_room(1).max_capacity == 10

    def test_undo_order(self, configured, invoker):
        invoker.execute(BookRoomCommand(configured, 1, "09:00", 60))
        invoker.execute(SetOccupancyCommand(configured, 1, 2))

        invoker.undo_last()
        assert configured.get_room(1).occupant_count == 0
        assert configured.get_room(1).booked is True

        invoker.undo_last()
        assert configured.get_room(1).booked is False

    def test_unexpected_error_is_contained(self, configured, invoker):
        class Broken(Command):
            @property
            def description(self):
                return "broken"

            def _execute(self):
                raise RuntimeError("boom")

        result = invoker.execute(Broken(configured))

        assert result.kind is ResultKind.ERROR
        assert "boom" in result.message
        assert invoker.history == []

    def test_not_undoable_by_default(self, configured):
        result = GetStatusCommand(configured).undo()
        assert result.kind is ResultKind.VALIDATION

    def test_history_is_bounded(self, configured, invoker):
        """Only the most recent HISTORY_SIZE commands are kept."""
        commands = [
            SetCapacityCommand(configured, 1, n)
            for n in range(1, CommandInvoker.HISTORY_SIZE + 6)
        ]
        for command in commands:
            invoker.execute(command)

        assert len(invoker.history) == CommandInvoker.HISTORY_SIZE
        assert invoker.history[0] is commands[5]
        assert invoker.history[-1] is commands[-1]

    def test_clear_history(self, configured, invoker):
        invoker.execute(SetCapacityCommand(configured, 1, 4))
        invoker.clear_history()
        assert invoker.history == []

    def test_result_helpers(self):
        assert CommandResult.success("done").ok
        assert CommandResult.conflict("busy").kind is ResultKind.CONFLICT
        assert not CommandResult.rejected("bad").ok
