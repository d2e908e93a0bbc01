"""
Component base class for data containers.

Components hold state that the presentation layer or the host reads
and writes directly (variable stores, dialogue view models). Logic that
drives a conversation lives in the interpreter and the systems.

Usage:
    class Counter(Component):
        value: int = 0
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Component(BaseModel):
    """
    Base class for all components.

    Components are data containers using Pydantic for:
    - Automatic validation
    - Dict/JSON serialization
    - Type hints
    - Default values
    """

    model_config = ConfigDict(
        # Allow arbitrary types (dataclass payloads, enums)
        arbitrary_types_allowed=True,
        # Validate on assignment
        validate_assignment=True,
        # Reject unknown fields so typos in host code surface early
        extra='forbid',
    )

    def clone(self) -> Component:
        """Create a deep copy of this component."""
        return self.model_copy(deep=True)
