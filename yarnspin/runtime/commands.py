"""
Command registry - named handlers for ``<<command arg ...>>`` lines.

A registry is built by the host before any dialog runs and handed to
each runner. It is not modified while dialogs are running.

Usage:
    registry = CommandRegistry()
    registry.register("shake", lambda args, host: host.shake_camera())

    @registry.command("give_item")
    def give_item(item: str, count: int = 1, *, host):
        host.inventory.add(item, count)
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Iterable, Optional, Sequence

from pydantic import ValidationError, validate_call

from yarnspin.core.errors import CommandArgumentError, UnregisteredCommandError

logger = logging.getLogger(__name__)

# handler(args, host) - args are the raw strings from the script
CommandHandler = Callable[[list[str], Any], None]


class CommandRegistry:
    """Maps command names to handlers."""

    def __init__(self):
        self._handlers: dict[str, CommandHandler] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    def register(self, name: str, handler: CommandHandler) -> CommandRegistry:
        """
        Register a raw handler.

        Args:
            name: Command name as written in scripts
            handler: Callback receiving (args, host)

        Returns:
            The registry, so registrations can be chained
        """
        if name in self._handlers:
            logger.warning(f"Replacing handler for command '{name}'")
        self._handlers[name] = handler
        return self

    def command(self, name: Optional[str] = None) -> Callable[[Callable], Callable]:
        """
        Decorator registering a typed function as a command.

        Script arguments are converted to the function's annotated types.
        A keyword-only parameter named ``host`` receives the host channel.
        """
        def decorator(func: Callable) -> Callable:
            command_name = name or func.__name__
            parameters = inspect.signature(func).parameters
            host_param = parameters.get("host")
            if host_param is not None and host_param.kind is not inspect.Parameter.KEYWORD_ONLY:
                raise TypeError(f"Command '{command_name}': declare 'host' as keyword-only")

            validated = validate_call(func)

            def handler(args: list[str], host: Any) -> None:
                try:
                    if host_param is not None:
                        validated(*args, host=host)
                    else:
                        validated(*args)
                except ValidationError as e:
                    raise CommandArgumentError(command_name, str(e)) from e

            self.register(command_name, handler)
            return func

        return decorator

    def unregister(self, name: str) -> None:
        self._handlers.pop(name, None)

    def get(self, name: str) -> Optional[CommandHandler]:
        return self._handlers.get(name)

    def names(self) -> list[str]:
        return sorted(self._handlers)

    def missing(self, names: Iterable[str]) -> set[str]:
        """Names from ``names`` that have no handler."""
        return {name for name in names if name not in self._handlers}

    def invoke(self, name: str, args: Sequence[str], host: Any = None) -> None:
        """
        Run a command.

        Raises:
            UnregisteredCommandError: no handler for ``name``
        """
        handler = self._handlers.get(name)
        if handler is None:
            raise UnregisteredCommandError(name)
        handler(list(args), host)
