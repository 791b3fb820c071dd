"""
Base classes for operator commands.

A command wraps one operation on the RoomManager. It stores only a room id,
resolves the room on every call, and reports the outcome as a CommandResult
instead of raising.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from smart_office.core.errors import StateConflict, ValidationRejection
from smart_office.core.manager import RoomManager


class ResultKind(Enum):
    """How a command ended."""

    OK = "ok"
    VALIDATION = "validation"  # malformed input: bad count, unknown room
    CONFLICT = "conflict"  # valid request, impossible in the current state
    ERROR = "error"  # unexpected failure inside the command


@dataclass(frozen=True)
class CommandResult:
    """
    Outcome of executing or undoing a command.

    Attributes:
        kind: OK, VALIDATION, CONFLICT or ERROR
        message: Human-readable message for the console
        data: Optional payload (room ids, statuses, occupancy status)
    """

    kind: ResultKind
    message: str
    data: Any = None

    @property
    def ok(self) -> bool:
        return self.kind is ResultKind.OK

    @classmethod
    def success(cls, message: str, data: Any = None) -> "CommandResult":
        return cls(ResultKind.OK, message, data)

    @classmethod
    def rejected(cls, message: str) -> "CommandResult":
        return cls(ResultKind.VALIDATION, message)

    @classmethod
    def conflict(cls, message: str) -> "CommandResult":
        return cls(ResultKind.CONFLICT, message)


class Command(ABC):
    """
    Base class for commands.

    Subclasses implement _execute() and, when undoable, _undo(). Both may raise
    ValidationRejection or StateConflict; execute() and undo() turn those into
    results.
    """

    undoable = False

    def __init__(self, manager: RoomManager) -> None:
        self._manager = manager

    @property
    @abstractmethod
    def description(self) -> str:
        """One-line description for history listings."""
        pass

    @abstractmethod
    def _execute(self) -> CommandResult:
        pass

    def _undo(self) -> CommandResult:
        return CommandResult.rejected("Undo not supported for this command")

    def execute(self) -> CommandResult:
        """Run the command."""
        return self._guarded(self._execute)

    def undo(self) -> CommandResult:
        """Best-effort reversal of a successful execute()."""
        return self._guarded(self._undo)

    @staticmethod
    def _guarded(action: Callable[[], CommandResult]) -> CommandResult:
        try:
            return action()
        except StateConflict as e:
            return CommandResult.conflict(str(e))
        except ValidationRejection as e:
            return CommandResult.rejected(str(e))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.description!r})"
