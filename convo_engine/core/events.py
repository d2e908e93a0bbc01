"""
Typed event bus for decoupled communication.

Uses Enums for event types so the presentation layer subscribes to
named dialogue events instead of magic strings.

Usage:
    # Subscribe
    event_bus.subscribe(DialogueEvent.LINE_SHOWN, on_line_shown)

    # Mirror every dialogue event, e.g. into a transcript
    event_bus.subscribe_all(transcript.append)

    # Publish
    event_bus.publish(DialogueEvent.LINE_SHOWN, speaker="Ann", text="Hi")
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Iterable

logger = logging.getLogger(__name__)


class DialogueEvent(Enum):
    """Events published by the interpreter and the dialogue system."""
    # Interpreter
    LINE_SHOWN = auto()
    CHOICES_SHOWN = auto()
    CHOICE_SELECTED = auto()
    CHOICE_REJECTED = auto()
    CONVERSATION_ENTERED = auto()
    CONVERSATION_ENDED = auto()
    VARIABLES_CHANGED = auto()

    # Reveal
    TEXT_ADVANCED = auto()
    TEXT_COMPLETED = auto()


@dataclass
class Event:
    """
    Event data container.

    Attributes:
        type: The event type (Enum member)
        data: Dictionary of event-specific data
        consumed: Whether the event has been handled
    """
    type: Enum
    data: dict[str, Any] = field(default_factory=dict)
    consumed: bool = False

    def consume(self) -> None:
        """Mark event as consumed (stops propagation)."""
        self.consumed = True

    def get(self, key: str, default: Any = None) -> Any:
        """Get event data by key."""
        return self.data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        """Get event data by key (dict-style)."""
        return self.data[key]


# Type alias for event handlers
EventHandler = Callable[[Event], None]


class EventBus:
    """
    Publish/subscribe hub between the interpreter and the host.

    Handlers run synchronously in priority order (highest first). A
    handler may consume an event to hide it from lower-priority ones.
    Events published from inside a handler are queued and dispatched
    after the current one finishes, so handlers always see events in
    the order the interpreter produced them.
    """

    def __init__(self):
        # Event type -> [(priority, handler)], highest priority first
        self._handlers: dict[Enum, list[tuple[int, EventHandler]]] = {}
        self._event_queue: deque[Event] = deque()
        self._is_publishing = False

    def subscribe(self, event_type: Enum, handler: EventHandler, priority: int = 0) -> None:
        """
        Subscribe to an event type.

        Args:
            event_type: The event type to listen for
            handler: Callback function(event: Event)
            priority: Higher priority handlers are called first (default 0)
        """
        handlers = self._handlers.setdefault(event_type, [])

        # Equal priorities keep subscription order
        insert_idx = len(handlers)
        for i, (p, _) in enumerate(handlers):
            if priority > p:
                insert_idx = i
                break

        handlers.insert(insert_idx, (priority, handler))

    def subscribe_all(
        self,
        handler: EventHandler,
        event_types: Iterable[Enum] = DialogueEvent,
        priority: int = 0,
    ) -> None:
        """Subscribe one handler to several event types, every DialogueEvent by default."""
        for event_type in event_types:
            self.subscribe(event_type, handler, priority)

    def unsubscribe(self, event_type: Enum, handler: EventHandler) -> None:
        """Remove a handler from an event type. Unknown handlers are ignored."""
        if event_type not in self._handlers:
            return

        self._handlers[event_type] = [
            (p, h) for p, h in self._handlers[event_type]
            if h != handler
        ]

    def publish(self, event_type: Enum, **data: Any) -> Event:
        """
        Publish an event.

        Args:
            event_type: The event type
            **data: Event data as keyword arguments

        Returns:
            The Event object (check .consumed to see if it was handled)
        """
        event = Event(type=event_type, data=data)

        if self._is_publishing:
            self._event_queue.append(event)
            return event

        self._is_publishing = True
        try:
            self._dispatch(event)
            while self._event_queue:
                self._dispatch(self._event_queue.popleft())
        finally:
            self._is_publishing = False
            self._event_queue.clear()

        return event

    def clear(self, event_type: Enum | None = None) -> None:
        """Clear handlers for one event type, or all of them."""
        if event_type is None:
            self._handlers.clear()
        else:
            self._handlers.pop(event_type, None)

    def handler_count(self, event_type: Enum) -> int:
        return len(self._handlers.get(event_type, []))

    def _dispatch(self, event: Event) -> None:
        # Snapshot so handlers may unsubscribe while being called
        for _, handler in list(self._handlers.get(event.type, [])):
            try:
                handler(event)
            except Exception:
                # Log but don't crash the conversation
                logger.exception(f"Error in event handler for {event.type}")

            if event.consumed:
                break
