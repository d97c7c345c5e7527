"""Galton board simulation: balls drift right across pegs and settle into channels."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

from .display import BUFFER_LENGTH, HEIGHT, PAGE_HEIGHT, WIDTH, draw_char, new_frame

SCREEN_WIDTH = WIDTH
SCREEN_HEIGHT = HEIGHT
FRAME_SIZE = BUFFER_LENGTH

BALL_RADIUS = 2
OBSTACLE_RADIUS = 2

MAX_BALLS = 100
NUM_CHANNELS = 8
CHANNEL_WIDTH = SCREEN_HEIGHT // NUM_CHANNELS
MAX_STACKED = 6
BATCH_SIZE = 50

TEXT_ADVANCE = 6
_TEXT_LIMIT = 19

OBSTACLE_CENTERS: tuple[tuple[int, int], ...] = (
    (77, 20), (57, 24), (37, 29), (77, 29), (16, 34),
    (57, 34), (37, 38), (78, 38), (58, 43), (78, 48),
)

_MASK32 = 0xFFFFFFFF

# Upper bounds (exclusive) of the roll ranges and the vertical shift chosen for each.
_DEFLECTIONS: tuple[tuple[int, int], ...] = (
    (10, -3), (35, -2), (50, -1), (65, 1), (90, 2), (100, 3),
)


def pseudo_rand(seed: int) -> tuple[int, int]:
    """Advance a 32-bit linear congruential seed; return ``(new_seed, value)`` with value in 0..32767."""
    seed = (seed * 1103515245 + 12345) & _MASK32
    return seed, (seed >> 16) & 0x7FFF


def deflection(roll: int) -> int:
    """Vertical shift for a roll in 0..99, weighted towards small moves of two pixels."""
    if not 0 <= roll < 100:
        raise ValueError(f"roll {roll} outside 0..99")
    return next(offset for limit, offset in _DEFLECTIONS if roll < limit)


def _in_screen(x: int, y: int) -> bool:
    return 0 <= x < SCREEN_WIDTH and 0 <= y < SCREEN_HEIGHT


def _clear_pixel(frame: bytearray, x: int, y: int) -> None:
    frame[(y // PAGE_HEIGHT) * SCREEN_WIDTH + x] &= ~(1 << (y % PAGE_HEIGHT)) & 0xFF


def draw_filled_circle(frame: bytearray, cx: int, cy: int, r: int) -> None:
    """Clear every on-screen pixel within distance ``r`` of the centre."""
    for dy in range(-r, r + 1):
        for dx in range(-r, r + 1):
            if dx * dx + dy * dy <= r * r and _in_screen(cx + dx, cy + dy):
                _clear_pixel(frame, cx + dx, cy + dy)


def draw_obstacles(frame: bytearray) -> None:
    """Draw every peg of the board."""
    for x, y in OBSTACLE_CENTERS:
        draw_filled_circle(frame, x, y, OBSTACLE_RADIUS)


def is_obstacle(frame: bytes, x: int, y: int) -> bool:
    """True when the pixel is drawn (cleared) or lies off the screen."""
    if not _in_screen(x, y):
        return True
    return not frame[(y // PAGE_HEIGHT) * SCREEN_WIDTH + x] & (1 << (y % PAGE_HEIGHT))


@dataclass
class Ball:
    """One ball slot; inactive slots are free for new balls."""

    x: int = 0
    y: int = 0
    active: bool = False
    seed: int = 0


def _default_clock() -> int:
    return time.monotonic_ns() // 1000


class GaltonBoard:
    """The balls in flight, the channel counts and the number of balls launched."""

    def __init__(self, clock: Callable[[], int] = _default_clock) -> None:
        self.clock = clock
        self.balls = [Ball() for _ in range(MAX_BALLS)]
        self.channels = [0] * NUM_CHANNELS
        self.total_balls = 0
        self.pending_batch = False

    @property
    def active_balls(self) -> list[Ball]:
        return [ball for ball in self.balls if ball.active]

    def spawn_ball(self) -> bool:
        """Launch a ball from the left edge into the first free slot; False when all are busy."""
        for index, ball in enumerate(self.balls):
            if not ball.active:
                ball.x = 0
                ball.y = SCREEN_HEIGHT // 2
                ball.seed = (self.clock() + index * 17) & _MASK32
                ball.active = True
                return True
        return False

    def spawn_multiple_balls(self, count: int) -> None:
        """Launch up to ``count`` balls and mark a batch for the total."""
        for _ in range(count):
            self.spawn_ball()
        self.pending_batch = True

    def commit_pending(self) -> bool:
        """Add a marked batch to the total; True when one was added."""
        if not self.pending_batch:
            return False
        self.total_balls += BATCH_SIZE
        self.pending_batch = False
        return True

    def _touches_obstacle(self, ball: Ball) -> bool:
        reach = (OBSTACLE_RADIUS + BALL_RADIUS) ** 2
        return any((ball.x - ox) ** 2 + (ball.y - oy) ** 2 <= reach for ox, oy in OBSTACLE_CENTERS)

    def update_balls(self, frame: bytearray) -> None:
        """Move every ball one step, deflecting at pegs and counting those that arrive."""
        for ball in self.active_balls:
            if self._touches_obstacle(ball):
                ball.seed, value = pseudo_rand(ball.seed)
                ball.y += deflection(value % 100)
                ball.y = min(max(ball.y, BALL_RADIUS), SCREEN_HEIGHT - BALL_RADIUS)

            ball.x += 1

            if ball.x >= SCREEN_WIDTH - BALL_RADIUS:
                channel = ball.y // CHANNEL_WIDTH
                if 0 <= channel < NUM_CHANNELS:
                    self.channels[channel] += 1
                ball.active = False
            else:
                draw_filled_circle(frame, ball.x, ball.y, BALL_RADIUS)

    def draw_channels(self, frame: bytearray) -> None:
        """Stack up to six small dots per channel at the right edge."""
        for channel, count in enumerate(self.channels):
            base_y = channel * CHANNEL_WIDTH + CHANNEL_WIDTH // 2
            for height in range(min(count, MAX_STACKED)):
                draw_filled_circle(frame, SCREEN_WIDTH - 3 - height * 6, base_y, 1)

    def draw_histogram(self, frame: bytearray) -> None:
        """Fill ``frame`` with a bar per channel and the launched total in the top right."""
        frame[:] = new_frame(0xFF)
        for channel, count in enumerate(self.channels):
            height = min(count, SCREEN_WIDTH - 10)
            for w in range(height):
                for dy in range(CHANNEL_WIDTH - 2):
                    _clear_pixel(frame, 10 + w, channel * CHANNEL_WIDTH + 1 + dy)

        text = f"Total: {self.total_balls}"[:_TEXT_LIMIT]
        x = SCREEN_WIDTH - TEXT_ADVANCE * len(text) - 2
        for offset, character in enumerate(text):
            draw_char(frame, x + offset * TEXT_ADVANCE, 0, character)

    def render_frame(self) -> bytearray:
        """Advance the balls one step and return the drawn board."""
        frame = new_frame(0xFF)
        draw_obstacles(frame)
        self.update_balls(frame)
        self.draw_channels(frame)
        return frame