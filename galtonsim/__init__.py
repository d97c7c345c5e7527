"""Galton board simulation drawn into a monochrome SSD1306-style frame buffer, with a display driver."""

__version__ = "0.1.0"
__all__ = ["font", "display", "simulation", "app"]