"""
Dialogue interpreter - steps through a conversation graph.

The interpreter is a small state machine:

- AT_LINE: a line is on screen; `advance()` moves to the next node
- AT_CHOICE: choices are on screen; `select_choice(i)` follows one
- ENDED: the conversation ran out, or a jump hit a missing conversation

Every operation returns the display event the presentation layer should
show, and publishes it on the event bus when one is attached.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from convo_engine.core.config import EngineConfig
from convo_engine.core.events import DialogueEvent, EventBus
from convo_framework.components.dialogue import (
    ChoicesEvent,
    ChoiceView,
    DialogueNode,
    DisplayEvent,
    EndedEvent,
    InterpreterState,
    LineEvent,
)
from convo_framework.components.variables import VariableStore
from convo_framework.dialogue.expressions import apply_mutations, evaluate_condition
from convo_framework.dialogue.parser import ConversationGraph
from convo_framework.dialogue.typewriter import Typewriter

logger = logging.getLogger(__name__)


class DialogueInterpreter:
    """
    Runs conversations from a parsed graph against a variable store.

    The interpreter works on its own copy of the graph, so several
    interpreters can share one parsed script without sharing node
    execution state.

    Usage:
        interpreter = DialogueInterpreter(parse_script(text), "start")
        event = interpreter.advance()        # LineEvent
        event = interpreter.advance()        # ChoicesEvent
        event = interpreter.select_choice(1)
    """

    def __init__(
        self,
        graph: ConversationGraph,
        starting_conversation: Optional[str] = None,
        variables: Optional[VariableStore] = None,
        event_bus: Optional[EventBus] = None,
        config: Optional[EngineConfig] = None,
    ):
        self.config = config or EngineConfig()
        self.event_bus = event_bus

        self._graph = graph.copy()
        self._variables = variables if variables is not None else VariableStore()
        self._typewriter = Typewriter(self.config.chars_per_second)

        # Position
        self._conversation_id = starting_conversation or self.config.starting_conversation
        self._index = 0
        self._state = InterpreterState.AT_LINE
        self._positioned = False

        # What is on screen
        self._choices: tuple[ChoiceView, ...] = ()
        self._current_event: Optional[DisplayEvent] = None

    # Read-only state

    @property
    def state(self) -> InterpreterState:
        return self._state

    @property
    def conversation_id(self) -> Optional[str]:
        return self._conversation_id

    @property
    def line_index(self) -> int:
        return self._index

    @property
    def choices(self) -> tuple[ChoiceView, ...]:
        """Choices on screen, empty unless AT_CHOICE."""
        return self._choices

    @property
    def current_event(self) -> Optional[DisplayEvent]:
        """Last display event, None before the first advance()."""
        return self._current_event

    @property
    def current_node(self) -> Optional[DialogueNode]:
        """Node the interpreter has settled on, if any."""
        if self._state == InterpreterState.ENDED or not self._positioned:
            return None
        nodes = self._graph.get(self._conversation_id)
        if nodes is None or self._index >= len(nodes):
            return None
        return nodes[self._index]

    @property
    def variables(self) -> VariableStore:
        return self._variables

    @property
    def typewriter(self) -> Typewriter:
        return self._typewriter

    @property
    def is_ended(self) -> bool:
        return self._state == InterpreterState.ENDED

    # Flow

    def advance(self) -> DisplayEvent:
        """
        Move to the next node that passes its condition.

        The first call shows the first passing node of the starting
        conversation. While choices are open this is a no-op returning
        the choices again; once ended it keeps returning the end event.
        """
        if self._state != InterpreterState.AT_LINE:
            return self._current_event

        entering = not self._positioned
        if self._positioned:
            self._index += 1
        return self._settle(entering=entering)

    def select_choice(self, index: int) -> Optional[DisplayEvent]:
        """
        Follow a displayed choice.

        Args:
            index: Zero-based position in the displayed choice list

        Returns:
            The next display event, or None if the selection was ignored
            (no choices open, index out of range, or choice locked)
        """
        if self._state != InterpreterState.AT_CHOICE:
            return self._reject(index, "no choices open")
        if not 0 <= index < len(self._choices):
            return self._reject(index, "out of range")
        if self._choices[index].locked:
            return self._reject(index, "locked")

        choice = self.current_node.choices[index]
        self._apply(choice.variable_changes)

        self._publish(
            DialogueEvent.CHOICE_SELECTED,
            index=index,
            text=choice.choice_text,
            target=choice.target_conversation_id,
        )

        if choice.target_conversation_id is not None:
            self._conversation_id = choice.target_conversation_id
        self._index = 0
        self._state = InterpreterState.AT_LINE
        self._choices = ()
        return self._settle(entering=True)

    def skip_typing(self) -> str:
        """Finish the current reveal and return the full text of the current event."""
        return self._typewriter.skip()

    # Variable access for the host

    def get_int(self, name: str, default: int = 0) -> int:
        return self._variables.get_int(name, default)

    def set_int(self, name: str, value: int) -> None:
        self._variables.set_int(name, value)

    def get_bool(self, name: str, default: bool = False) -> bool:
        return self._variables.get_bool(name, default)

    def set_bool(self, name: str, value: bool) -> None:
        self._variables.set_bool(name, value)

    # Internals

    def _settle(self, entering: bool) -> DisplayEvent:
        """Skip nodes whose condition fails, then show the first one that passes."""
        nodes = self._graph.get(self._conversation_id)
        if nodes is None:
            logger.warning(f"Conversation not found: {self._conversation_id!r}")
            return self._end("missing")

        if entering:
            self._publish(DialogueEvent.CONVERSATION_ENTERED, conversation_id=self._conversation_id)

        # Conditions are re-evaluated on every visit, never cached
        while self._index < len(nodes) and not evaluate_condition(
            nodes[self._index].required_condition, self._variables
        ):
            self._index += 1

        if self._index >= len(nodes):
            return self._end("finished")

        self._positioned = True
        node = nodes[self._index]

        if not node.has_executed:
            node.has_executed = True
            self._apply(node.variable_changes)

        if node.is_choice_node:
            self._state = InterpreterState.AT_CHOICE
            self._choices = tuple(
                ChoiceView(
                    text=choice.choice_text,
                    unlocked=evaluate_condition(choice.required_condition, self._variables),
                )
                for choice in node.choices
            )
            event = ChoicesEvent(self._choices)
            self._publish(
                DialogueEvent.CHOICES_SHOWN,
                choices=self._choices,
                conversation_id=self._conversation_id,
                index=self._index,
            )
        else:
            self._state = InterpreterState.AT_LINE
            self._choices = ()
            event = LineEvent(speaker=node.speaker, text=node.text)
            self._publish(
                DialogueEvent.LINE_SHOWN,
                speaker=node.speaker,
                text=node.text,
                conversation_id=self._conversation_id,
                index=self._index,
            )

        return self._show(event)

    def _end(self, reason: str) -> DisplayEvent:
        self._state = InterpreterState.ENDED
        self._choices = ()
        event = EndedEvent(conversation_id=self._conversation_id)
        self._publish(
            DialogueEvent.CONVERSATION_ENDED,
            conversation_id=self._conversation_id,
            reason=reason,
        )
        return self._show(event)

    def _show(self, event: DisplayEvent) -> DisplayEvent:
        self._current_event = event
        self._typewriter.start(event.display_text)
        return event

    def _apply(self, expressions: Iterable[str]) -> None:
        expressions = list(expressions)
        if not expressions:
            return
        applied = apply_mutations(expressions, self._variables)
        if applied:
            self._publish(
                DialogueEvent.VARIABLES_CHANGED,
                expressions=expressions,
                applied=applied,
            )

    def _reject(self, index: int, reason: str) -> None:
        logger.debug(f"Ignoring choice {index}: {reason}")
        self._publish(DialogueEvent.CHOICE_REJECTED, index=index, reason=reason)
        return None

    def _publish(self, event_type: DialogueEvent, **data) -> None:
        if self.event_bus is not None:
            self.event_bus.publish(event_type, **data)
