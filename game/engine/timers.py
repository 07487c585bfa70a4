"""Frame-counted jump timers and the hold-to-throw press tracker."""

from __future__ import annotations

from dataclasses import dataclass

COYOTE_FRAMES = 8
JUMP_BUFFER_FRAMES = 8


@dataclass
class JumpTimers:
    """Coyote time and jump buffering, advanced once per tick.

    ``request`` is the one-shot latch the input layer sets on the jump key's
    press edge. The buffer consumes it on the next :meth:`advance`.
    """

    coyote_frames: int = COYOTE_FRAMES
    buffer_frames: int = JUMP_BUFFER_FRAMES
    coyote: int = 0
    buffer: int = 0
    request: bool = False

    def advance(self, grounded: bool) -> bool:
        """Step both timers and return ``True`` when a jump should fire.

        Firing zeroes both timers so one press can never trigger twice.
        """

        if grounded:
            self.coyote = self.coyote_frames
        elif self.coyote > 0:
            self.coyote -= 1

        if self.request:
            self.buffer = self.buffer_frames
            self.request = False
        elif self.buffer > 0:
            self.buffer -= 1

        if self.buffer > 0 and self.coyote > 0:
            self.coyote = 0
            self.buffer = 0
            return True
        return False

    def reset(self) -> None:
        self.coyote = 0
        self.buffer = 0
        self.request = False


@dataclass
class PressTracker:
    """Remember when the interact key went down and whether a grab used it."""

    press_time: float = 0.0
    consumed: bool = False

    def press(self, now: float) -> None:
        self.press_time = now
        self.consumed = False

    def consume(self) -> None:
        self.consumed = True

    def elapsed(self, now: float) -> float:
        return max(0.0, now - self.press_time)

    def reset(self) -> None:
        self.press_time = 0.0
        self.consumed = False
