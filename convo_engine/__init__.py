"""
Convo Engine

Runtime plumbing for the branching-dialogue engine: configuration,
event bus, input actions and the component/system base classes.

Quick Start:
    from convo_engine.core import EngineConfig, EventBus
    from convo_framework.dialogue import parse_script, DialogueInterpreter

    graph = parse_script(script_text)
    interpreter = DialogueInterpreter(graph, event_bus=EventBus())
    event = interpreter.advance()
"""

__version__ = "0.1.0"

# Re-export core components for convenience
from convo_engine.core import (
    EngineConfig,
    configure_logging,
    Component,
    System,
    EventBus,
    Event,
    DialogueEvent,
    Action,
)

__all__ = [
    "EngineConfig",
    "configure_logging",
    "Component",
    "System",
    "EventBus",
    "Event",
    "DialogueEvent",
    "Action",
]
