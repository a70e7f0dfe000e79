"""Terminal rendering loop."""

import os
import sys
import time
from typing import Callable, TextIO

CLEAR_SCREEN = "\x1b[2J"
CURSOR_HOME = "\x1b[H"

FrameSource = Callable[[], list[str]]


def fit_frame(lines: list[str], width: int, height: int) -> list[str]:
    """Clip a frame to ``height`` lines, each cut or space-padded to exactly ``width``."""
    return [line[:width].ljust(width) for line in lines[:height]]


class Display:
    """Redraws a frame source on a full-screen terminal."""

    def __init__(
        self,
        frame_source: FrameSource,
        stream: TextIO | None = None,
        terminal_size: Callable[[], tuple[int, int]] | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Initialize the Display.

        Args:
            frame_source: Builds the lines of one frame.
            stream: Output stream. Defaults to stdout.
            terminal_size: Returns (width, height). Defaults to the size of ``stream``.
            sleep: Blocks between cycles.
        """
        self._frame_source = frame_source
        self._stream = stream if stream is not None else sys.stdout
        self._terminal_size = terminal_size or self._stream_size
        self._sleep = sleep

    def _stream_size(self) -> tuple[int, int]:
        size = os.get_terminal_size(self._stream.fileno())
        return size.columns, size.lines

    def show(self) -> None:
        """Run one cycle: measure, build, write and flush."""
        width, height = self._terminal_size()
        lines = fit_frame(self._frame_source(), width, height)
        self._stream.write(CLEAR_SCREEN + CURSOR_HOME + "\n".join(lines))
        self._stream.flush()

    def run(self, once: bool = False, delay: float = 0.25, iterations: int | None = None) -> int:
        """
        Redraw until done and return the number of cycles run.

        ``once`` runs a single cycle. Otherwise cycles repeat every ``delay``
        seconds, forever or until ``iterations`` cycles have run.
        """
        if once:
            iterations = 1
        cycles = 0
        while True:
            self.show()
            cycles += 1
            if iterations is not None and cycles >= iterations:
                return cycles
            self._sleep(delay)
