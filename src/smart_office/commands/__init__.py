"""
Operator commands for smart-office.

Each command wraps one RoomManager operation and reports a CommandResult:
- ConfigureRoomsCommand, SetCapacityCommand: facility administration
- BookRoomCommand, CancelBookingCommand: booking lifecycle
- SetOccupancyCommand: sensor input
- GetStatusCommand: room snapshots

CommandInvoker executes commands and supports undo of the last one.
"""

from .base import Command, CommandResult, ResultKind
from .invoker import CommandInvoker
from .rooms import (
    BookRoomCommand,
    CancelBookingCommand,
    ConfigureRoomsCommand,
    GetStatusCommand,
    SetCapacityCommand,
    SetOccupancyCommand,
)

__all__ = [
    "BookRoomCommand",
    "CancelBookingCommand",
    "Command",
    "CommandInvoker",
    "CommandResult",
    "ConfigureRoomsCommand",
    "GetStatusCommand",
    "ResultKind",
    "SetCapacityCommand",
    "SetOccupancyCommand",
]
