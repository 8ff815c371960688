"""A text spinner for progress lines."""

from __future__ import annotations

import sys
import time
from dataclasses import dataclass, field

if sys.platform == "win32":
    FRAMES: tuple[str, ...] = ("-",)
    DONE_FRAME = "-"
else:
    FRAMES = ("⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏")
    DONE_FRAME = "⠿"


@dataclass
class Spinner:
    """Cycle through frames once it has been alive for more than 100 ms."""

    chars: list[str] = field(default_factory=lambda: list(FRAMES))
    done: str = DONE_FRAME
    index: int = 0
    started: float = field(default_factory=time.monotonic)
    stopped: bool = False

    def __str__(self) -> str:
        if self.stopped:
            return self.done
        if time.monotonic() - self.started > 0.1:
            self.index = (self.index + 1) % len(self.chars)
        return self.chars[self.index]

    def stop(self) -> None:
        """Freeze the spinner on its final frame."""
        self.stopped = True