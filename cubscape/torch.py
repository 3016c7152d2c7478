"""Timing and frame selection for the animated torch."""

import os
from dataclasses import dataclass

FRAME_COUNT = 6
FRAME_INTERVAL = 0.1
TORCH_DIR = "./torch"
_FRAME_SUFFIX = "Torch_Sheet.png"


def next_frame(hold_lamp, frame):
    """Frame after ``frame``: lit torches cycle 1..5, lowered ones wind back to 0."""
    if hold_lamp % 2 == 0:
        if hold_lamp == 0:
            return 0
        return frame - 1 if frame > 0 else frame
    frame += 1
    if frame > FRAME_COUNT - 1:
        frame = 1
    return frame


def frame_paths(directory=TORCH_DIR):
    """Paths of the torch frame images, in frame order."""
    return [os.path.join(directory, f"{index}{_FRAME_SUFFIX}") for index in range(FRAME_COUNT)]


@dataclass
class TorchAnimator:
    """Advances the torch frame no more often than every ``interval`` seconds."""

    frame: int = 0
    last: float = 0.0
    interval: float = FRAME_INTERVAL

    def tick(self, now, hold_lamp):
        """Return the new frame index if it is time to advance, else None."""
        if now - self.last < self.interval:
            return None
        self.frame = next_frame(hold_lamp, self.frame)
        self.last = now
        return self.frame