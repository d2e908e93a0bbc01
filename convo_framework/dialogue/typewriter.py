"""
Typewriter effect - progressive reveal of dialogue text.

The reveal never drives itself. A host either ticks it with frame time:

    typewriter.start("Hello there")
    typewriter.tick(dt)          # -> "Hel"

or pulls one glyph at a time and schedules its own delays:

    for shown in typewriter.increments():
        render(shown)
        sleep(typewriter.seconds_per_char)

`skip()` completes the reveal at any point; a running `increments()`
generator stops after that, and `start()` restarts from zero for the
next line.
"""

from __future__ import annotations

from typing import Iterator


class Typewriter:
    """
    Cancellable, restartable reveal of one text at a time.

    Attributes:
        chars_per_second: Reveal speed
        full_text: Complete text being revealed
        char_index: Fractional reveal position
    """

    def __init__(self, chars_per_second: float = 20.0):
        if chars_per_second <= 0:
            raise ValueError(f"chars_per_second must be positive, got {chars_per_second}")
        self.chars_per_second = chars_per_second
        self.full_text = ""
        self.char_index = 0.0
        self._generation = 0

    @property
    def seconds_per_char(self) -> float:
        return 1.0 / self.chars_per_second

    @property
    def displayed_text(self) -> str:
        """Text revealed so far."""
        return self.full_text[:int(self.char_index)]

    @property
    def is_complete(self) -> bool:
        """Check if the whole text is revealed."""
        return int(self.char_index) >= len(self.full_text)

    @property
    def is_revealing(self) -> bool:
        return not self.is_complete

    def start(self, text: str) -> None:
        """Begin revealing a new text from the first glyph."""
        self.full_text = text
        self.char_index = 0.0
        self._generation += 1

    def tick(self, dt: float) -> str:
        """
        Advance the reveal by elapsed time.

        Args:
            dt: Delta time in seconds

        Returns:
            The displayed text after the tick
        """
        if not self.is_complete and dt > 0:
            self.char_index = min(
                float(len(self.full_text)),
                self.char_index + self.chars_per_second * dt,
            )
        return self.displayed_text

    def skip(self) -> str:
        """Skip to the end of the current text."""
        self.char_index = float(len(self.full_text))
        return self.full_text

    def increments(self) -> Iterator[str]:
        """
        Yield the displayed text one glyph at a time.

        Stops when the text is complete, when skip() is called, or when
        start() begins a different text.
        """
        generation = self._generation
        while generation == self._generation and not self.is_complete:
            self.char_index = float(int(self.char_index) + 1)
            yield self.displayed_text
