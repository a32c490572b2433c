from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from tlog.core.models import Command
from tlog.core.result import CommandNotFoundError

logger = logging.getLogger(__name__)

CommandAction = Callable[[list[str]], None]


class CommandRegistry:
    """
    Name -> behaviour table for the command palette.

    Commands are registered once at startup and looked up many times
    afterwards. Registering an id again replaces the earlier command.
    The registry only dispatches; actions run synchronously on the
    caller's thread and their exceptions propagate unchanged.
    """

    def __init__(self) -> None:
        self._commands: dict[str, Command] = {}
        self._actions: dict[str, CommandAction] = {}

    def register(self, command: Command, action: CommandAction) -> None:
        if command.id in self._commands:
            logger.debug("Replacing command %s", command.id)
        self._commands[command.id] = command
        self._actions[command.id] = action

    def list_commands(self) -> list[Command]:
        return list(self._commands.values())

    def get(self, command_id: str) -> Command:
        try:
            return self._commands[command_id]
        except KeyError:
            raise CommandNotFoundError(
                f"command not found: {command_id}", context={"id": command_id}
            ) from None

    def execute(self, command_id: str, args: Sequence[str] = ()) -> None:
        action = self._actions.get(command_id)
        if action is None:
            raise CommandNotFoundError(
                f"command not found: {command_id}", context={"id": command_id}
            )
        logger.debug("Executing command %s with %d args", command_id, len(args))
        action(list(args))

    def __contains__(self, command_id: object) -> bool:
        return command_id in self._commands

    def __len__(self) -> int:
        return len(self._commands)


__all__ = ["CommandAction", "CommandRegistry"]
