"""
Core engine module.

Exports:
- EngineConfig, configure_logging: Configuration
- Component: Data container base
- System: Per-frame logic base
- EventBus, Event, DialogueEvent: Event system
- Action: Input actions
"""

from convo_engine.core.config import EngineConfig, configure_logging
from convo_engine.core.component import Component
from convo_engine.core.system import System
from convo_engine.core.events import EventBus, Event, DialogueEvent
from convo_engine.core.actions import Action, choice_index, choice_action

__all__ = [
    # Config
    "EngineConfig",
    "configure_logging",
    # Data / logic
    "Component",
    "System",
    # Events
    "EventBus",
    "Event",
    "DialogueEvent",
    # Input
    "Action",
    "choice_index",
    "choice_action",
]
