"""Storage server for the Arduino TFT canvas app."""

__version__ = "0.3.0"
