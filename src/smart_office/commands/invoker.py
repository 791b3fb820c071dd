"""
CommandInvoker: runs commands and keeps an undo history.
"""

import logging
from collections import deque
from typing import Deque, List

from .base import Command, CommandResult, ResultKind

logger = logging.getLogger(__name__)


class CommandInvoker:
    """
    Executes commands and records the successful, undoable ones.

    Failures inside a command never escape: unexpected exceptions are logged
    and reported as an ERROR result.
    """

    HISTORY_SIZE = 100

    def __init__(self) -> None:
        self._history: Deque[Command] = deque(maxlen=self.HISTORY_SIZE)

    @property
    def history(self) -> List[Command]:
        """Undoable commands in execution order (oldest first)."""
        return list(self._history)

    def execute(self, command: Command) -> CommandResult:
        """
        Execute a command and remember it for undo if it succeeded.

        Args:
            command: The command to run

        Returns:
            The command's result
        """
        try:
            result = command.execute()
        except Exception as e:
            logger.error(f"Error executing {command!r}: {e}", exc_info=True)
            return CommandResult(ResultKind.ERROR, f"Error executing command: {e}")

        logger.debug(f"{command.description}: {result.kind.value}")
        if result.ok and command.undoable:
            self._history.append(command)
        return result

    def undo_last(self) -> CommandResult:
        """
        Undo the most recent successful command.

        The command is removed from history whether or not its undo succeeds.
        """
        if not self._history:
            return CommandResult.rejected("No command to undo.")

        command = self._history.pop()
        try:
            return command.undo()
        except Exception as e:
            logger.error(f"Error undoing {command!r}: {e}", exc_info=True)
            return CommandResult(ResultKind.ERROR, f"Error undoing command: {e}")

    def clear_history(self) -> None:
        self._history.clear()
