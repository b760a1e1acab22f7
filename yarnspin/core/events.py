"""
Typed event bus for observing dialog runners.

Runners return their dialog output directly to the caller. The bus is
for everything else that wants to watch a conversation: audio cues,
quest trackers, debug overlays. Event types are Enum members so
subscribers never match on strings.

Usage:
    bus = EventBus()
    bus.subscribe(RunnerEvent.NODE_ENTERED, on_node_entered)

    runner = DialogRunner(dialog, "Start", event_bus=bus)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable
from weakref import WeakMethod, ref

logger = logging.getLogger(__name__)


class RunnerEvent(Enum):
    """Events published by a DialogRunner."""
    NODE_ENTERED = auto()       # Cursor moved to the start of a node
    VARIABLE_SET = auto()       # A set line wrote to the state context
    COMMAND_EXECUTED = auto()   # A command handler ran
    OPTIONS_PRESENTED = auto()  # The runner is waiting on a decision
    CHOICE_SELECTED = auto()    # make_decision accepted a choice
    DIALOG_ENDED = auto()       # The cursor ran off the end of a node


@dataclass
class Event:
    """
    Event data container.

    Attributes:
        type: The event type (Enum member)
        data: Event payload passed as keyword arguments to publish()
        consumed: Set by a handler to stop lower-priority handlers
    """
    type: Enum
    data: dict[str, Any] = field(default_factory=dict)
    consumed: bool = False

    def consume(self) -> None:
        self.consumed = True

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.data[key]


EventHandler = Callable[[Event], None]


@dataclass(eq=False)
class _Subscription:
    priority: int
    handler: Any  # callable, or a weak reference to one
    one_shot: bool

    def resolve(self) -> EventHandler | None:
        if isinstance(self.handler, (ref, WeakMethod)):
            return self.handler()
        return self.handler


class EventBus:
    """
    Publish/subscribe hub.

    Handlers run highest priority first. Events published from inside a
    handler are queued and delivered after the current dispatch finishes,
    so observers always see events in the order they happened.
    """

    def __init__(self):
        self._subscriptions: dict[Enum, list[_Subscription]] = {}
        self._queue: list[Event] = []
        self._dispatching = False

    def subscribe(
        self,
        event_type: Enum,
        handler: EventHandler,
        priority: int = 0,
        one_shot: bool = False,
        weak: bool = True,
    ) -> None:
        """
        Subscribe to an event type.

        Args:
            event_type: The event type to listen for
            handler: Callback receiving the Event
            priority: Higher runs first (default 0)
            one_shot: Drop the handler after its first call
            weak: Hold the handler weakly so it disappears with its owner
        """
        if weak:
            target = WeakMethod(handler) if hasattr(handler, '__self__') else ref(handler)
        else:
            target = handler

        subscriptions = self._subscriptions.setdefault(event_type, [])
        position = len(subscriptions)
        for i, existing in enumerate(subscriptions):
            if priority > existing.priority:
                position = i
                break
        subscriptions.insert(position, _Subscription(priority, target, one_shot))

    def unsubscribe(self, event_type: Enum, handler: EventHandler) -> None:
        subscriptions = self._subscriptions.get(event_type)
        if not subscriptions:
            return
        self._subscriptions[event_type] = [
            sub for sub in subscriptions if sub.resolve() != handler
        ]

    def has_subscribers(self, event_type: Enum) -> bool:
        return any(sub.resolve() is not None for sub in self._subscriptions.get(event_type, []))

    def publish(self, event_type: Enum, **data: Any) -> Event:
        """
        Publish an event.

        Returns:
            The Event object (check .consumed to see if it was handled)
        """
        event = Event(type=event_type, data=data)
        if self._dispatching:
            self._queue.append(event)
        else:
            self._dispatch(event)
        return event

    def clear(self, event_type: Enum | None = None) -> None:
        if event_type is None:
            self._subscriptions.clear()
        else:
            self._subscriptions.pop(event_type, None)

    def _dispatch(self, event: Event) -> None:
        self._dispatching = True
        try:
            subscriptions = self._subscriptions.get(event.type, [])
            finished: list[_Subscription] = []

            for sub in list(subscriptions):
                handler = sub.resolve()
                if handler is None:
                    finished.append(sub)
                    continue

                try:
                    handler(event)
                except Exception:
                    # Observers must never break a running dialog
                    logger.exception(f"Error in event handler for {event.type}")

                if sub.one_shot:
                    finished.append(sub)
                if event.consumed:
                    break

            for sub in finished:
                if sub in subscriptions:
                    subscriptions.remove(sub)
        finally:
            self._dispatching = False

        while self._queue:
            self._dispatch(self._queue.pop(0))
