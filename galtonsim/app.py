"""Main loop of the Galton board: buttons, timing and a text view of the screen."""

from __future__ import annotations

import argparse
import sys

from .display import BUFFER_LENGTH, HEIGHT, PAGE_HEIGHT, WIDTH, new_frame
from .simulation import BATCH_SIZE, GaltonBoard

DEBOUNCE_MS = 300
SPAWN_INTERVAL_MS = 2000
SIMULATION_DELAY_MS = 30
HISTOGRAM_DELAY_MS = 100


class Controller:
    """Turns button presses and elapsed time into board updates and frames."""

    def __init__(self, board: GaltonBoard) -> None:
        self.board = board
        self.show_histogram = False
        self.last_spawn_ms = 0
        self.last_button_a_ms = 0
        self.last_button_b_ms = 0
        self.frame = new_frame(0xFF)

    def step(self, now_ms: int, button_a: bool, button_b: bool) -> tuple[bytearray, int]:
        """Run one pass of the loop; return the frame to show and the delay in ms before the next."""
        if button_a and now_ms - self.last_button_a_ms > DEBOUNCE_MS:
            self.show_histogram = not self.show_histogram
            self.last_button_a_ms = now_ms

        if button_b and now_ms - self.last_button_b_ms > DEBOUNCE_MS:
            self.board.spawn_multiple_balls(BATCH_SIZE)
            self.last_button_b_ms = now_ms

        self.board.commit_pending()

        if self.show_histogram:
            self.board.draw_histogram(self.frame)
            return self.frame, HISTOGRAM_DELAY_MS

        if now_ms - self.last_spawn_ms >= SPAWN_INTERVAL_MS:
            if self.board.spawn_ball():
                self.board.total_balls += 1
            self.last_spawn_ms = now_ms

        self.frame = self.board.render_frame()
        return self.frame, SIMULATION_DELAY_MS


def frame_to_text(frame: bytes) -> str:
    """One line per row: '#' where a pixel is drawn (bit cleared), '.' where it is set."""
    if len(frame) != BUFFER_LENGTH:
        raise ValueError(f"frame holds {len(frame)} bytes, expected {BUFFER_LENGTH}")
    rows = []
    for y in range(HEIGHT):
        page = (y // PAGE_HEIGHT) * WIDTH
        mask = 1 << (y % PAGE_HEIGHT)
        rows.append("".join("." if frame[page + x] & mask else "#" for x in range(WIDTH)))
    return "\n".join(rows)


def _positive(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"expected a positive number, got {value}")
    return value


def main(argv: list[str] | None = None) -> int:
    """Run the board on a simulated clock and print the last frame and the counts."""
    parser = argparse.ArgumentParser(prog="galtonsim", description="Galton board simulation.")
    parser.add_argument("--steps", type=_positive, default=300, help="loop passes to run")
    parser.add_argument("--start-ms", type=int, default=1000, help="clock value of the first pass")
    parser.add_argument("--seed", type=int, default=0, help="offset added to the ball seed clock")
    parser.add_argument("--burst", action="store_true", help="press button B on the first pass")
    parser.add_argument("--histogram", action="store_true", help="press button A on the first pass")
    args = parser.parse_args(argv)

    elapsed_ms = args.start_ms
    board = GaltonBoard(clock=lambda: elapsed_ms * 1000 + args.seed)
    controller = Controller(board)

    frame = controller.frame
    for step in range(args.steps):
        first = step == 0
        frame, delay = controller.step(elapsed_ms, args.histogram and first, args.burst and first)
        elapsed_ms += delay

    sys.stdout.write(frame_to_text(frame) + "\n")
    sys.stdout.write(f"Total: {board.total_balls}\n")
    sys.stdout.write("Channels: " + " ".join(str(count) for count in board.channels) + "\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())