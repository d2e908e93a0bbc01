"""
Dialogue components - script nodes, choices, display events, view state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Union

from pydantic import Field

from convo_engine.core.component import Component


class InterpreterState(Enum):
    """State of a conversation interpreter."""
    AT_LINE = auto()
    AT_CHOICE = auto()
    ENDED = auto()


@dataclass
class Choice:
    """A single branch option inside a choice node."""
    choice_text: str
    target_conversation_id: Optional[str] = None  # None stays in the current conversation
    variable_changes: list[str] = field(default_factory=list)
    required_condition: Optional[str] = None  # False locks the choice, it stays listed


@dataclass
class DialogueNode:
    """
    One step of a conversation.

    A node with a non-empty choice list is a choice node; anything else is
    a line node. `choices` is an empty list (not None) for a freshly opened
    `#Choice` so that following `->` lines can attach to it.
    """
    speaker: str = ""
    text: str = ""
    choices: Optional[list[Choice]] = None
    required_condition: Optional[str] = None
    variable_changes: list[str] = field(default_factory=list)
    has_executed: bool = False

    @property
    def is_choice_node(self) -> bool:
        return bool(self.choices)

    @property
    def has_choice_container(self) -> bool:
        return self.choices is not None


@dataclass(frozen=True)
class ChoiceView:
    """A choice as displayed to the player."""
    text: str
    unlocked: bool = True

    @property
    def locked(self) -> bool:
        return not self.unlocked


@dataclass(frozen=True)
class LineEvent:
    """Show a speaker line."""
    speaker: str
    text: str

    @property
    def display_text(self) -> str:
        return self.text


@dataclass(frozen=True)
class ChoicesEvent:
    """Show the choices of a choice node, locked ones included."""
    choices: tuple[ChoiceView, ...]

    @property
    def display_text(self) -> str:
        lines = []
        for i, choice in enumerate(self.choices, start=1):
            suffix = " (locked)" if choice.locked else ""
            lines.append(f"{i}. {choice.text}{suffix}")
        return "\n".join(lines)


@dataclass(frozen=True)
class EndedEvent:
    """The conversation ran out of nodes or could not be entered."""
    conversation_id: Optional[str] = None

    @property
    def display_text(self) -> str:
        return ""


DisplayEvent = Union[LineEvent, ChoicesEvent, EndedEvent]


class DialogueContext(Component):
    """
    View state mirrored for the presentation layer.

    Attributes:
        state: Interpreter state at the last sync
        conversation_id: Active conversation
        speaker_name: Current speaker name
        full_text: Complete text of the current event
        displayed_text: Text revealed so far (typewriter)
        choices: Displayed choices
        selected_choice: Highlighted choice index
    """
    state: InterpreterState = InterpreterState.AT_LINE
    conversation_id: Optional[str] = None
    speaker_name: str = ""
    full_text: str = ""
    displayed_text: str = ""
    choices: list[ChoiceView] = Field(default_factory=list)
    selected_choice: int = 0

    @property
    def is_active(self) -> bool:
        """Check if the conversation is still running."""
        return self.state != InterpreterState.ENDED

    @property
    def is_text_complete(self) -> bool:
        """Check if the reveal has caught up with the full text."""
        return self.displayed_text == self.full_text

    def select_next_choice(self) -> None:
        """Move the highlight to the next choice."""
        if self.choices:
            self.selected_choice = (self.selected_choice + 1) % len(self.choices)

    def select_prev_choice(self) -> None:
        """Move the highlight to the previous choice."""
        if self.choices:
            self.selected_choice = (self.selected_choice - 1) % len(self.choices)
