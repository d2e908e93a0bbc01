"""
Dialogue system - connects host input and frame time to the interpreter.

Translates semantic Actions into interpreter operations, ticks the
typewriter every frame, and keeps a DialogueContext that a renderer can
draw from without touching the interpreter directly.
"""

from __future__ import annotations

from typing import Optional

from convo_engine.core.actions import Action, choice_index
from convo_engine.core.events import DialogueEvent, EventBus
from convo_engine.core.system import System
from convo_framework.components.dialogue import (
    DialogueContext,
    DisplayEvent,
    InterpreterState,
    LineEvent,
)
from convo_framework.dialogue.interpreter import DialogueInterpreter


class DialogueSystem(System):
    """
    Drives one interpreter from host input.

    Responsibilities:
    - Map CONFIRM/SKIP/CHOICE_n/MENU_UP/MENU_DOWN onto the interpreter
    - Tick the typewriter and publish TEXT_ADVANCED/TEXT_COMPLETED
    - Mirror interpreter state into a DialogueContext

    Usage:
        system = DialogueSystem(DialogueInterpreter(graph), event_bus)
        system.start()

        # Every frame
        system.update(dt)

        # On input
        system.handle_action(Action.CONFIRM)
    """

    def __init__(
        self,
        interpreter: DialogueInterpreter,
        event_bus: Optional[EventBus] = None,
        context: Optional[DialogueContext] = None,
    ):
        self.interpreter = interpreter
        self.event_bus = event_bus if event_bus is not None else interpreter.event_bus
        self.context = context or DialogueContext()
        self.max_choice_keys = interpreter.config.max_choice_keys
        self._completion_published = False

    # Dialogue flow

    def start(self) -> DisplayEvent:
        """Show the first node of the starting conversation."""
        event = self.interpreter.advance()
        self._sync()
        return event

    def handle_action(self, action: Action) -> bool:
        """
        Handle one semantic input action.

        Returns:
            True if the action was consumed
        """
        if self.interpreter.is_ended:
            return False

        typewriter = self.interpreter.typewriter
        state = self.interpreter.state

        if action == Action.SKIP:
            if typewriter.is_revealing:
                self.skip_typing()
                return True
            return False

        if action == Action.CONFIRM:
            # Confirm finishes the reveal before it moves anything
            if typewriter.is_revealing:
                self.skip_typing()
                return True
            if state == InterpreterState.AT_CHOICE:
                return self.select_choice(self.context.selected_choice)
            self.interpreter.advance()
            self._sync()
            return True

        if action in (Action.MENU_UP, Action.MENU_DOWN):
            if state != InterpreterState.AT_CHOICE:
                return False
            if action == Action.MENU_UP:
                self.context.select_prev_choice()
            else:
                self.context.select_next_choice()
            return True

        index = choice_index(action)
        if index is not None and index < self.max_choice_keys:
            return self.select_choice(index)

        return False

    def select_choice(self, index: int) -> bool:
        """Select a displayed choice. Returns False if it was ignored."""
        if self.interpreter.select_choice(index) is None:
            return False
        self._sync()
        return True

    def skip_typing(self) -> str:
        """Reveal the whole current text at once."""
        text = self.interpreter.skip_typing()
        self.context.displayed_text = text
        self._publish_completion()
        return text

    # System update

    def process(self, dt: float) -> None:
        """Advance the typewriter by frame time."""
        typewriter = self.interpreter.typewriter
        if self.interpreter.is_ended or typewriter.is_complete:
            return

        shown_before = len(typewriter.displayed_text)
        displayed = typewriter.tick(dt)
        self.context.displayed_text = displayed

        if len(displayed) > shown_before:
            self._publish(
                DialogueEvent.TEXT_ADVANCED,
                char_index=len(displayed),
                text=displayed,
            )

        if typewriter.is_complete:
            self._publish_completion()

    # Internals

    def _sync(self) -> None:
        """Copy interpreter state into the context."""
        interpreter = self.interpreter
        event = interpreter.current_event
        typewriter = interpreter.typewriter

        self.context.state = interpreter.state
        self.context.conversation_id = interpreter.conversation_id
        self.context.speaker_name = event.speaker if isinstance(event, LineEvent) else ""
        self.context.full_text = typewriter.full_text
        self.context.displayed_text = typewriter.displayed_text
        self.context.choices = list(interpreter.choices)
        self.context.selected_choice = 0
        self._completion_published = False

        # Empty text has nothing to reveal, so it is complete on arrival
        if not interpreter.is_ended and typewriter.is_complete:
            self._publish_completion()

    def _publish_completion(self) -> None:
        if self._completion_published:
            return
        self._completion_published = True
        self._publish(DialogueEvent.TEXT_COMPLETED, text=self.interpreter.typewriter.full_text)

    def _publish(self, event_type: DialogueEvent, **data) -> None:
        if self.event_bus is not None:
            self.event_bus.publish(event_type, **data)
