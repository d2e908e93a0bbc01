"""
Dialogue components - data definitions shared by the parser,
interpreter and presentation layer.
"""

from convo_framework.components.variables import VariableStore
from convo_framework.components.dialogue import (
    Choice,
    ChoicesEvent,
    ChoiceView,
    DialogueContext,
    DialogueNode,
    DisplayEvent,
    EndedEvent,
    InterpreterState,
    LineEvent,
)

__all__ = [
    "VariableStore",
    "Choice",
    "ChoicesEvent",
    "ChoiceView",
    "DialogueContext",
    "DialogueNode",
    "DisplayEvent",
    "EndedEvent",
    "InterpreterState",
    "LineEvent",
]
