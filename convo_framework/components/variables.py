"""
Variable store - typed flags and counters that drive branching.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from convo_engine.core.component import Component


class VariableStore(Component):
    """
    Integer and boolean variables used by conditions and mutations.

    The two namespaces are independent: the same name may hold an integer
    and a boolean at the same time. Absent names read as the default passed
    by the caller.

    Attributes:
        ints: Integer variables
        bools: Boolean variables (flags)
    """
    ints: dict[str, int] = Field(default_factory=dict)
    bools: dict[str, bool] = Field(default_factory=dict)

    def get_int(self, name: str, default: int = 0) -> int:
        """Get an integer variable."""
        return self.ints.get(name, default)

    def set_int(self, name: str, value: int) -> None:
        """Set an integer variable."""
        self.ints[name] = int(value)

    def get_bool(self, name: str, default: bool = False) -> bool:
        """Get a boolean variable."""
        return self.bools.get(name, default)

    def set_bool(self, name: str, value: bool) -> None:
        """Set a boolean variable."""
        self.bools[name] = bool(value)

    def clear(self) -> None:
        """Forget every variable."""
        self.ints.clear()
        self.bools.clear()

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict snapshot for host-side persistence."""
        return {
            'ints': dict(self.ints),
            'bools': dict(self.bools),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VariableStore:
        """Rebuild a store from a to_dict() snapshot."""
        return cls.model_validate({
            'ints': data.get('ints', {}),
            'bools': data.get('bools', {}),
        })

    def __len__(self) -> int:
        return len(self.ints) + len(self.bools)
