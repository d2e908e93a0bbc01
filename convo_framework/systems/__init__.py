"""
Dialogue systems - logic processors driven by the host's frame loop.
"""

from convo_framework.systems.dialogue import DialogueSystem

__all__ = [
    "DialogueSystem",
]
