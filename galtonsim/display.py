"""Frame-buffer drawing and the command protocol of a 128x64 SSD1306 OLED on I2C."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable, Protocol

from .font import GLYPH_HEIGHT, glyph

WIDTH = 128
HEIGHT = 64
PAGE_HEIGHT = 8
N_PAGES = HEIGHT // PAGE_HEIGHT
BUFFER_LENGTH = N_PAGES * WIDTH

I2C_ADDRESS = 0x3C
I2C_CLOCK_KHZ = 400

COMMAND_CONTROL = 0x80
DATA_CONTROL = 0x40


class Command(IntEnum):
    """Configuration command bytes of the controller."""

    SET_MEMORY_MODE = 0x20
    SET_COLUMN_ADDRESS = 0x21
    SET_PAGE_ADDRESS = 0x22
    SET_HORIZONTAL_SCROLL = 0x26
    SET_SCROLL = 0x2E
    SET_DISPLAY_START_LINE = 0x40
    SET_CONTRAST = 0x81
    SET_CHARGE_PUMP = 0x8D
    SET_SEGMENT_REMAP = 0xA0
    SET_ENTIRE_ON = 0xA4
    SET_ALL_ON = 0xA5
    SET_NORMAL_DISPLAY = 0xA6
    SET_INVERSE_DISPLAY = 0xA7
    SET_MUX_RATIO = 0xA8
    SET_DISPLAY = 0xAE
    SET_COMMON_OUTPUT_DIRECTION = 0xC0
    SET_DISPLAY_OFFSET = 0xD3
    SET_DISPLAY_CLOCK_DIVIDE_RATIO = 0xD5
    SET_PRECHARGE = 0xD9
    SET_COMMON_PIN_CONFIGURATION = 0xDA
    SET_VCOMH_DESELECT_LEVEL = 0xDB
    WRITE_MODE = 0xFE
    READ_MODE = 0xFF


def _pin_configuration(width: int, height: int) -> int:
    return 0x12 if (width, height) == (128, 64) else 0x02


class Bus(Protocol):
    """Anything that can write a block of bytes to an I2C address."""

    def write(self, address: int, data: bytes) -> None: ...


@dataclass
class RecordingBus:
    """A bus that keeps every write as an (address, bytes) pair."""

    writes: list[tuple[int, bytes]] = field(default_factory=list)

    def write(self, address: int, data: bytes) -> None:
        self.writes.append((address, bytes(data)))


@dataclass(frozen=True)
class RenderArea:
    """A rectangle of columns and pages to be sent to the display."""

    start_column: int = 0
    end_column: int = WIDTH - 1
    start_page: int = 0
    end_page: int = N_PAGES - 1

    def buffer_length(self) -> int:
        """Number of frame bytes covered by the area."""
        return (self.end_column - self.start_column + 1) * (self.end_page - self.start_page + 1)


def new_frame(fill: int = 0) -> bytearray:
    """A full-screen frame buffer with every byte set to ``fill``."""
    if not 0 <= fill <= 0xFF:
        raise ValueError(f"fill byte {fill} out of range")
    return bytearray([fill]) * BUFFER_LENGTH


def set_pixel(frame: bytearray, x: int, y: int, on: bool) -> None:
    """Set or clear one pixel; coordinates outside the screen are an error."""
    if not (0 <= x < WIDTH and 0 <= y < HEIGHT):
        raise ValueError(f"pixel ({x}, {y}) is outside the {WIDTH}x{HEIGHT} screen")
    index = (y // PAGE_HEIGHT) * WIDTH + x
    mask = 1 << (y % PAGE_HEIGHT)
    if on:
        frame[index] |= mask
    else:
        frame[index] &= ~mask & 0xFF


def draw_line(frame: bytearray, x0: int, y0: int, x1: int, y1: int, on: bool) -> None:
    """Draw a straight line between two points, both ends included (Bresenham)."""
    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    error = dx + dy
    while True:
        set_pixel(frame, x0, y0, on)
        if x0 == x1 and y0 == y1:
            break
        doubled = 2 * error
        if doubled >= dy:
            error += dy
            x0 += sx
        if doubled <= dx:
            error += dx
            y0 += sy


def draw_char(frame: bytearray, x: int, y: int, character: str | int) -> None:
    """Copy a glyph into the page holding row ``y``, starting at column ``x``.

    Characters that would not fit at the right or bottom edge are skipped.
    """
    if x > WIDTH - GLYPH_HEIGHT or y > HEIGHT - GLYPH_HEIGHT:
        return
    if x < 0 or y < 0:
        raise ValueError(f"character position ({x}, {y}) is outside the screen")
    start = (y // PAGE_HEIGHT) * WIDTH + x
    frame[start:start + GLYPH_HEIGHT] = glyph(character)


def draw_string(frame: bytearray, x: int, y: int, text: str) -> None:
    """Draw text with 8-pixel character spacing; characters past the edge are skipped."""
    if x > WIDTH - GLYPH_HEIGHT or y > HEIGHT - GLYPH_HEIGHT:
        return
    for offset, character in enumerate(text):
        draw_char(frame, x + offset * GLYPH_HEIGHT, y, character)


class Ssd1306:
    """A display driven with one command per I2C write and a full buffer write."""

    def __init__(self, bus: Bus, address: int = I2C_ADDRESS) -> None:
        self.bus = bus
        self.address = address

    def send_command(self, command: int) -> None:
        self.bus.write(self.address, bytes((COMMAND_CONTROL, command)))

    def send_commands(self, commands: Iterable[int]) -> None:
        for command in commands:
            self.send_command(command)

    def send_buffer(self, data: bytes) -> None:
        self.bus.write(self.address, bytes((DATA_CONTROL,)) + bytes(data))

    def init(self) -> None:
        """Send the power-up configuration sequence."""
        self.send_commands((
            Command.SET_DISPLAY,
            Command.SET_MEMORY_MODE, 0x00,
            Command.SET_DISPLAY_START_LINE,
            Command.SET_SEGMENT_REMAP | 0x01,
            Command.SET_MUX_RATIO, HEIGHT - 1,
            Command.SET_COMMON_OUTPUT_DIRECTION | 0x08,
            Command.SET_DISPLAY_OFFSET, 0x00,
            Command.SET_COMMON_PIN_CONFIGURATION, _pin_configuration(WIDTH, HEIGHT),
            Command.SET_DISPLAY_CLOCK_DIVIDE_RATIO, 0x80,
            Command.SET_PRECHARGE, 0xF1,
            Command.SET_VCOMH_DESELECT_LEVEL, 0x30,
            Command.SET_CONTRAST, 0xFF,
            Command.SET_ENTIRE_ON,
            Command.SET_NORMAL_DISPLAY,
            Command.SET_CHARGE_PUMP, 0x14,
            Command.SET_SCROLL | 0x00,
            Command.SET_DISPLAY | 0x01,
        ))

    def scroll(self, enabled: bool) -> None:
        """Set up horizontal scrolling and switch it on or off."""
        self.send_commands((
            Command.SET_HORIZONTAL_SCROLL | 0x00, 0x00, 0x00, 0x00, 0x03,
            0x00, 0xFF, Command.SET_SCROLL | (0x01 if enabled else 0x00),
        ))

    def render(self, frame: bytes, area: RenderArea) -> None:
        """Address the area and send the leading bytes of ``frame`` that fill it."""
        length = area.buffer_length()
        if len(frame) < length:
            raise ValueError(f"frame holds {len(frame)} bytes, area needs {length}")
        self.send_commands((
            Command.SET_COLUMN_ADDRESS, area.start_column, area.end_column,
            Command.SET_PAGE_ADDRESS, area.start_page, area.end_page,
        ))
        self.send_buffer(frame[:length])


class BitmapDisplay:
    """A display that keeps its own RAM image, sent whole on every update."""

    def __init__(
        self,
        bus: Bus,
        width: int = WIDTH,
        height: int = HEIGHT,
        external_vcc: bool = False,
        address: int = I2C_ADDRESS,
    ) -> None:
        self.bus = bus
        self.width = width
        self.height = height
        self.pages = height // PAGE_HEIGHT
        self.external_vcc = external_vcc
        self.address = address
        self.bufsize = self.pages * width + 1
        self.ram_buffer = bytearray(self.bufsize)
        self.ram_buffer[0] = DATA_CONTROL

    def command(self, command: int) -> None:
        self.bus.write(self.address, bytes((COMMAND_CONTROL, command)))

    def config(self) -> None:
        """Send the configuration sequence used for bitmap display."""
        for command in (
            Command.SET_DISPLAY | 0x00,
            Command.SET_MEMORY_MODE, 0x01,
            Command.SET_DISPLAY_START_LINE | 0x00,
            Command.SET_SEGMENT_REMAP | 0x01,
            Command.SET_MUX_RATIO, HEIGHT - 1,
            Command.SET_COMMON_OUTPUT_DIRECTION | 0x08,
            Command.SET_DISPLAY_OFFSET, 0x00,
            Command.SET_COMMON_PIN_CONFIGURATION, 0x12,
            Command.SET_DISPLAY_CLOCK_DIVIDE_RATIO, 0x80,
            Command.SET_PRECHARGE, 0xF1,
            Command.SET_VCOMH_DESELECT_LEVEL, 0x30,
            Command.SET_CONTRAST, 0xFF,
            Command.SET_ENTIRE_ON,
            Command.SET_NORMAL_DISPLAY,
            Command.SET_CHARGE_PUMP, 0x14,
            Command.SET_DISPLAY | 0x01,
        ):
            self.command(command)

    def send_data(self) -> None:
        """Address the whole screen and send the RAM image."""
        for command in (
            Command.SET_COLUMN_ADDRESS, 0, self.width - 1,
            Command.SET_PAGE_ADDRESS, 0, self.pages - 1,
        ):
            self.command(command)
        self.bus.write(self.address, bytes(self.ram_buffer))

    def draw_bitmap(self, bitmap: bytes) -> None:
        """Copy a bitmap into RAM byte by byte, sending the image after each byte."""
        length = self.bufsize - 1
        if len(bitmap) < length:
            raise ValueError(f"bitmap holds {len(bitmap)} bytes, display needs {length}")
        for offset, value in enumerate(bitmap[:length], start=1):
            self.ram_buffer[offset] = value
            self.send_data()