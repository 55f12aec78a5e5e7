"""Command History: undo/redo stack layered over the core's reversible commands.

Invariants:
    - A failed execute() leaves both stacks untouched (the command was never applied)
    - Executing a new command clears the redo stack
    - undo/redo apply commands strictly LIFO, which is what Command.undo() assumes

Design Decisions:
    - Lives outside core/: the core exposes reversible commands but never depends on history
"""

import logging
from typing import Any

from contact_tracer.core.commands import Command
from contact_tracer.core.contact_tracer import ContactTracer
from contact_tracer.core.errors import NothingToRedoError, NothingToUndoError

logger = logging.getLogger(__name__)


class CommandHistory:
    """Executes commands against one tracer and remembers them for undo/redo."""

    def __init__(self, tracer: ContactTracer, max_depth: int = 100):
        self.tracer = tracer
        self.max_depth = max_depth
        self._undo_stack: list[Command] = []
        self._redo_stack: list[Command] = []

    @property
    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    def execute(self, command: Command) -> Any:
        result = command.execute(self.tracer)
        self._undo_stack.append(command)
        if len(self._undo_stack) > self.max_depth:
            self._undo_stack.pop(0)
        self._redo_stack.clear()
        logger.info(
            f"Executed {command.name}",
            extra={"command": command.name, "history_depth": len(self._undo_stack)},
        )
        return result

    def undo(self) -> Command:
        if not self._undo_stack:
            raise NothingToUndoError()
        command = self._undo_stack.pop()
        command.undo(self.tracer)
        self._redo_stack.append(command)
        logger.info(f"Undid {command.name}", extra={"command": command.name})
        return command

    def redo(self) -> Command:
        if not self._redo_stack:
            raise NothingToRedoError()
        command = self._redo_stack.pop()
        command.execute(self.tracer)
        self._undo_stack.append(command)
        logger.info(f"Redid {command.name}", extra={"command": command.name})
        return command

    def clear(self) -> None:
        self._undo_stack.clear()
        self._redo_stack.clear()
