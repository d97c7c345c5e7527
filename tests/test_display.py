import pytest

from galtonsim.display import (
    BUFFER_LENGTH,
    HEIGHT,
    I2C_ADDRESS,
    WIDTH,
    BitmapDisplay,
    Command,
    RecordingBus,
    RenderArea,
    Ssd1306,
    draw_char,
    draw_line,
    draw_string,
    new_frame,
    set_pixel,
)
from galtonsim.font import glyph


def _pixel(frame, x, y):
    return bool(frame[(y // 8) * WIDTH + x] & (1 << (y % 8)))


def test_full_render_area_covers_whole_frame():
    assert RenderArea().buffer_length() == BUFFER_LENGTH


def test_render_area_length_is_columns_times_pages():
    area = RenderArea(start_column=10, end_column=19, start_page=2, end_page=4)
    assert area.buffer_length() == 10 * 3


def test_new_frame_fill():
    frame = new_frame(0xFF)
    assert len(frame) == BUFFER_LENGTH
    assert set(frame) == {0xFF}


def test_new_frame_rejects_bad_fill():
    with pytest.raises(ValueError):
        new_frame(256)


def test_set_and_clear_pixel_round_trip():
    frame = new_frame(0)
    set_pixel(frame, 5, 13, True)
    assert _pixel(frame, 5, 13)
    assert sum(bin(b).count("1") for b in frame) == 1
    set_pixel(frame, 5, 13, False)
    assert frame == new_frame(0)


@pytest.mark.parametrize("x, y", [(-1, 0), (WIDTH, 0), (0, HEIGHT), (0, -1)])
def test_set_pixel_out_of_range(x, y):
    with pytest.raises(ValueError):
        set_pixel(new_frame(0), x, y, True)


def test_horizontal_line():
    frame = new_frame(0)
    draw_line(frame, 3, 10, 9, 10, True)
    lit = [x for x in range(WIDTH) if _pixel(frame, x, 10)]
    assert lit == list(range(3, 10))


def test_diagonal_line_includes_both_ends_and_is_symmetric():
    forward = new_frame(0)
    backward = new_frame(0)
    draw_line(forward, 0, 0, 20, 20, True)
    draw_line(backward, 20, 20, 0, 0, True)
    assert forward == backward
    assert all(_pixel(forward, i, i) for i in range(21))


def test_draw_char_copies_glyph():
    frame = new_frame(0)
    draw_char(frame, 16, 8, "b")
    start = WIDTH + 16
    assert bytes(frame[start:start + 8]) == glyph("B")


def test_draw_char_past_edge_is_skipped():
    frame = new_frame(0)
    draw_char(frame, WIDTH - 7, 0, "A")
    draw_char(frame, 0, HEIGHT - 7, "A")
    assert frame == new_frame(0)


def test_draw_string_spaces_characters():
    frame = new_frame(0)
    draw_string(frame, 0, 0, "HI")
    assert bytes(frame[0:8]) == glyph("H")
    assert bytes(frame[8:16]) == glyph("I")


def test_recording_bus_keeps_writes():
    bus = RecordingBus()
    bus.write(I2C_ADDRESS, bytearray(b"\x01\x02"))
    assert bus.writes == [(0x3C, b"\x01\x02")]


def test_send_command_wire_format():
    bus = RecordingBus()
    Ssd1306(bus).send_command(Command.SET_DISPLAY)
    assert bus.writes == [(0x3C, bytes((0x80, 0xAE)))]


def test_send_buffer_prefixes_data_control():
    bus = RecordingBus()
    Ssd1306(bus).send_buffer(b"\x11\x22")
    assert bus.writes == [(0x3C, b"\x40\x11\x22")]


def test_init_sequence_bounds():
    bus = RecordingBus()
    Ssd1306(bus).init()
    commands = [data[1] for _, data in bus.writes]
    assert all(data[0] == 0x80 and len(data) == 2 for _, data in bus.writes)
    assert commands[0] == 0xAE
    assert commands[-1] == 0xAF
    pin = commands.index(Command.SET_COMMON_PIN_CONFIGURATION)
    assert commands[pin + 1] == 0x12


def test_scroll_last_command_toggles():
    on, off = RecordingBus(), RecordingBus()
    Ssd1306(on).scroll(True)
    Ssd1306(off).scroll(False)
    assert on.writes[:-1] == off.writes[:-1]
    assert on.writes[-1][1][1] == 0x2F
    assert off.writes[-1][1][1] == 0x2E


def test_render_sends_addresses_then_frame():
    bus = RecordingBus()
    frame = new_frame(0xFF)
    Ssd1306(bus).render(frame, RenderArea())
    commands = [data[1] for _, data in bus.writes[:-1]]
    assert commands == [0x21, 0, WIDTH - 1, 0x22, 0, 7]
    assert bus.writes[-1][1] == b"\x40" + bytes(frame)


def test_render_rejects_short_frame():
    with pytest.raises(ValueError):
        Ssd1306(RecordingBus()).render(b"\x00" * 10, RenderArea())


def test_bitmap_display_buffer_layout():
    display = BitmapDisplay(RecordingBus())
    assert display.bufsize == BUFFER_LENGTH + 1
    assert display.ram_buffer[0] == 0x40


def test_bitmap_config_uses_horizontal_memory_mode():
    bus = RecordingBus()
    BitmapDisplay(bus).config()
    commands = [data[1] for _, data in bus.writes]
    mode = commands.index(Command.SET_MEMORY_MODE)
    assert commands[mode + 1] == 0x01
    assert commands[-1] == 0xAF


def test_draw_bitmap_sends_after_each_byte():
    bus = RecordingBus()
    display = BitmapDisplay(bus, width=16, height=8)
    bitmap = bytes(range(16))
    display.draw_bitmap(bitmap)
    data_writes = [data for _, data in bus.writes if data[0] == 0x40]
    assert len(data_writes) == len(bitmap)
    assert data_writes[-1] == b"\x40" + bitmap
    assert bytes(display.ram_buffer[1:]) == bitmap


def test_draw_bitmap_rejects_short_bitmap():
    with pytest.raises(ValueError):
        BitmapDisplay(RecordingBus()).draw_bitmap(b"\x00")