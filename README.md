# galtonsim

A small Galton board ("bean machine") simulation. Balls enter at the left
edge of a 128x64 monochrome frame, halfway down, and move one pixel to the
right on each step. When a ball touches one of the ten fixed pegs, it is pushed
up or down by a weighted random offset of 1 to 3 pixels. When a ball reaches
the right edge, it is counted in one of eight channels, each 8 pixels tall.
A histogram view shows one bar per channel and the total number of balls
launched.

Frames use the page layout of an SSD1306 OLED controller. A frame is 1024
bytes: 8 pages of 128 columns, and each byte holds 8 vertical pixels. A
cleared bit is a drawn pixel. The package also includes a driver for the
SSD1306 command set. The driver writes to any object that has a
`write(address, data)` method. `RecordingBus` is one such object; it only keeps
a list of the writes sent to it.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Command line

```
galtonsim
```

This runs the main loop on a simulated clock. When the loop finishes, the
command prints the last frame as text (`#` for a drawn pixel, `.` for a blank
one), followed by the total number of balls launched and the count in each
channel.

Options:

- `--steps N`: number of loop passes to run (default 300, must be positive).
- `--start-ms MS`: clock value of the first pass (default 1000).
- `--seed N`: offset added to the clock that seeds each ball's random numbers (default 0).
- `--burst`: press button B on the first pass, which launches 50 balls.
- `--histogram`: press button A on the first pass, which switches to the histogram view.

After each pass, the simulated clock moves forward by the pass's delay: 30 ms
in the board view and 100 ms in the histogram view.

## Library use

```python
from galtonsim.simulation import GaltonBoard
from galtonsim.app import Controller, frame_to_text

board = GaltonBoard()
board.spawn_multiple_balls(50)
board.commit_pending()
frame = board.render_frame()
print(frame_to_text(frame))
```

`GaltonBoard` holds up to 100 balls. `spawn_ball()` returns `False` when every
slot is busy. `spawn_multiple_balls(count)` marks a batch, and
`commit_pending()` then adds 50 to `total_balls`, even if some of the balls
found no free slot. `render_frame()` draws the pegs, advances every ball by one
step and stacks up to six dots per channel at the right edge. The optional
`clock` argument is a function that returns microseconds; the board uses it to
seed each new ball's random number generator.

`Controller.step(now_ms, button_a, button_b)` runs one pass of the main loop.
It returns the frame to show and the delay in milliseconds before the next
pass:

- Button A switches between the board view and the histogram. A press within 300 ms of the last accepted press is ignored.
- Button B launches 50 balls at once, with the same 300 ms debounce.
- In the board view, one ball is launched every 2 seconds and counted in the total.

The drawing helpers in `galtonsim.display` work on any frame made with
`new_frame`:

- `set_pixel`
- `draw_line` (Bresenham)
- `draw_char`
- `draw_string`

`Ssd1306` sends the display's initialisation sequence (`init`), sets up
scrolling (`scroll`) and sends a frame for a `RenderArea` (`render`).
`BitmapDisplay` keeps its own RAM image and sends the whole image with
`send_data`.

The built-in font in `galtonsim.font` covers the letters A–Z and the digits
0–9. Lower-case letters are drawn as upper case, and any other character is
drawn as a blank.

## What it does not do

The package does not open a window and does not talk to real hardware. Frames
are only byte buffers, and the command line prints the last one as text.
Buttons exist only as arguments to `Controller.step`. The display driver needs
a bus object that you supply; apart from `RecordingBus`, the package includes
no I2C bus.