"""
System base class for logic processors.

Systems sit between the host's frame loop and the dialogue core: they
receive a delta time every frame and semantic input actions, and
translate both into interpreter operations.

Usage:
    class RevealSystem(System):
        def process(self, dt: float) -> None:
            self.typewriter.tick(dt)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar


class System(ABC):
    """
    Base class for all systems.

    Override process to define per-frame logic.
    """

    # Priority for execution order (higher = earlier)
    priority: ClassVar[int] = 0

    # Whether this system is enabled
    enabled: bool = True

    def update(self, dt: float) -> None:
        """
        Update this system.

        Args:
            dt: Delta time in seconds
        """
        if not self.enabled:
            return

        self.pre_update(dt)
        self.process(dt)
        self.post_update(dt)

    def pre_update(self, dt: float) -> None:
        """
        Called before process.

        Override for per-frame initialization.
        """
        pass

    def post_update(self, dt: float) -> None:
        """
        Called after process.

        Override for per-frame finalization.
        """
        pass

    @abstractmethod
    def process(self, dt: float) -> None:
        """
        Run one frame of system logic.

        Args:
            dt: Delta time in seconds
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(enabled={self.enabled})"
