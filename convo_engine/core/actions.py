"""
Input action definitions.

Actions abstract raw input (keys, buttons) into semantic actions.
Dialogue logic consumes Actions, never raw keys; binding physical keys
to these actions is left to the host.

Usage:
    if dialogue_system.handle_action(Action.CONFIRM):
        ...
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Optional


class Action(Enum):
    """
    Semantic input actions understood by the dialogue system.
    """

    # Flow
    CONFIRM = auto()
    SKIP = auto()

    # Choice highlight
    MENU_UP = auto()
    MENU_DOWN = auto()

    # Direct choice selection (digit keys 1..9 in most hosts)
    CHOICE_1 = auto()
    CHOICE_2 = auto()
    CHOICE_3 = auto()
    CHOICE_4 = auto()
    CHOICE_5 = auto()
    CHOICE_6 = auto()
    CHOICE_7 = auto()
    CHOICE_8 = auto()
    CHOICE_9 = auto()


CHOICE_ACTIONS: tuple[Action, ...] = (
    Action.CHOICE_1,
    Action.CHOICE_2,
    Action.CHOICE_3,
    Action.CHOICE_4,
    Action.CHOICE_5,
    Action.CHOICE_6,
    Action.CHOICE_7,
    Action.CHOICE_8,
    Action.CHOICE_9,
)


def choice_index(action: Action) -> Optional[int]:
    """Zero-based choice index for a CHOICE_n action, None for anything else."""
    try:
        return CHOICE_ACTIONS.index(action)
    except ValueError:
        return None


def choice_action(index: int) -> Action:
    """CHOICE_n action for a zero-based choice index."""
    if not 0 <= index < len(CHOICE_ACTIONS):
        raise IndexError(f"No choice action for index {index}")
    return CHOICE_ACTIONS[index]
