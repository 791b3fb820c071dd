"""
Commands for room configuration, booking and occupancy.
"""

from datetime import time
from typing import Optional, Union

from smart_office.core.errors import StateConflict, ValidationRejection
from smart_office.core.manager import RoomManager
from smart_office.core.room import Booking, parse_start_time

from .base import Command, CommandResult


class ConfigureRoomsCommand(Command):
    """Create the room set. Replaces any existing rooms; not undoable."""

    def __init__(self, manager: RoomManager, count: int) -> None:
        super().__init__(manager)
        self.count = count

    @property
    def description(self) -> str:
        return f"Configure office with {self.count} meeting rooms"

    def _execute(self) -> CommandResult:
        room_ids = self._manager.configure(self.count)
        names = ", ".join(f"Room {i}" for i in room_ids)
        return CommandResult.success(
            f"Office configured with {len(room_ids)} meeting rooms: {names}.",
            data=room_ids,
        )


class SetCapacityCommand(Command):
    """Set a room's maximum capacity."""

    undoable = True

    def __init__(self, manager: RoomManager, room_id: int, capacity: int) -> None:
        super().__init__(manager)
        self.room_id = room_id
        self.capacity = capacity
        self._previous_capacity: Optional[int] = None

    @property
    def description(self) -> str:
        return f"Set Room {self.room_id} maximum capacity to {self.capacity}"

    def _execute(self) -> CommandResult:
        previous = self._manager.get_room(self.room_id).max_capacity
        self._manager.set_capacity(self.room_id, self.capacity)
        self._previous_capacity = previous
        return CommandResult.success(
            f"Room {self.room_id} maximum capacity set to {self.capacity}."
        )

    def _undo(self) -> CommandResult:
        if self._previous_capacity is None:
            raise StateConflict(f"No previous capacity to restore for Room {self.room_id}.")
        self._manager.set_capacity(self.room_id, self._previous_capacity)
        return CommandResult.success(
            f"Room {self.room_id} maximum capacity restored to {self._previous_capacity} (undo)."
        )


class BookRoomCommand(Command):
    """Book a room from a start time for a number of minutes."""

    undoable = True

    def __init__(
        self,
        manager: RoomManager,
        room_id: int,
        start_time: Union[str, time],
        duration_minutes: int,
    ) -> None:
        super().__init__(manager)
        self.room_id = room_id
        self.start_time = start_time
        self.duration_minutes = duration_minutes
        self._booking: Optional[Booking] = None

    @property
    def description(self) -> str:
        return (
            f"Book Room {self.room_id} from {self.start_time} "
            f"for {self.duration_minutes} minutes"
        )

    def _execute(self) -> CommandResult:
        room = self._manager.get_room(self.room_id)
        start = parse_start_time(self.start_time)
        if self.duration_minutes <= 0:
            raise ValidationRejection("Invalid duration. Duration must be positive.")

        booking = Booking(start, self.duration_minutes)
        if not room.reserve(booking):
            raise StateConflict(
                f"Room {self.room_id} is already booked during this time. Cannot book."
            )

        self._booking = booking
        return CommandResult.success(
            f"Room {self.room_id} booked from {start.strftime('%H:%M')} "
            f"for {self.duration_minutes} minutes.",
            data=self._booking,
        )

    def _undo(self) -> CommandResult:
        room = self._manager.get_room(self.room_id)
        if self._booking is None or not room.cancel(expected=self._booking):
            raise StateConflict(f"No booking to undo for Room {self.room_id}.")
        return CommandResult.success(f"Booking for Room {self.room_id} cancelled (undo).")


class CancelBookingCommand(Command):
    """Cancel a room's booking."""

    undoable = True

    def __init__(self, manager: RoomManager, room_id: int) -> None:
        super().__init__(manager)
        self.room_id = room_id
        self._previous_booking: Optional[Booking] = None

    @property
    def description(self) -> str:
        return f"Cancel booking for Room {self.room_id}"

    def _execute(self) -> CommandResult:
        room = self._manager.get_room(self.room_id)
        booking = room.booking
        if booking is None or not room.cancel(expected=booking):
            raise StateConflict(f"Room {self.room_id} is not booked. Cannot cancel booking.")

        self._previous_booking = booking
        return CommandResult.success(
            f"Booking for Room {self.room_id} cancelled successfully.",
            data=booking,
        )

    def _undo(self) -> CommandResult:
        if self._previous_booking is None:
            raise StateConflict(f"No previous booking to restore for Room {self.room_id}.")

        room = self._manager.get_room(self.room_id)
        booking = self._previous_booking
        if not room.reserve(booking):
            raise StateConflict(
                f"Could not restore booking for Room {self.room_id} - "
                f"time slot may be unavailable."
            )
        return CommandResult.success(
            f"Booking for Room {self.room_id} restored (undo cancellation)."
        )


class SetOccupancyCommand(Command):
    """Apply an occupant count reading to a room."""

    undoable = True

    def __init__(self, manager: RoomManager, room_id: int, occupant_count: int) -> None:
        super().__init__(manager)
        self.room_id = room_id
        self.occupant_count = occupant_count
        self._previous_count: Optional[int] = None

    @property
    def description(self) -> str:
        return f"Set Room {self.room_id} occupancy to {self.occupant_count} persons"

    def _execute(self) -> CommandResult:
        room = self._manager.get_room(self.room_id)
        if self.occupant_count < 0:
            raise ValidationRejection("Invalid occupant count. Count cannot be negative.")

        previous = room.occupant_count
        status = room.update_occupancy(self.occupant_count)
        self._previous_count = previous
        return CommandResult.success(
            status.describe(self.room_id, self.occupant_count),
            data=status,
        )

    def _undo(self) -> CommandResult:
        if self._previous_count is None:
            raise StateConflict(f"No occupancy change to undo for Room {self.room_id}.")

        self._manager.get_room(self.room_id).update_occupancy(self._previous_count)
        return CommandResult.success(
            f"Occupancy for Room {self.room_id} restored to {self._previous_count} (undo)."
        )


class GetStatusCommand(Command):
    """Report the status of one room, or of every room."""

    def __init__(self, manager: RoomManager, room_id: Optional[int] = None) -> None:
        super().__init__(manager)
        self.room_id = room_id

    @property
    def description(self) -> str:
        if self.room_id is None:
            return "Show status of all rooms"
        return f"Show status of Room {self.room_id}"

    def _execute(self) -> CommandResult:
        statuses = self._manager.status(self.room_id)
        return CommandResult.success(
            "\n".join(status.describe() for status in statuses),
            data=statuses,
        )
