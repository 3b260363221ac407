from __future__ import annotations


class CanvasError(Exception):
    """Base class for errors raised while serving a single connection."""


class FramingError(CanvasError, ConnectionError):
    """The peer closed the stream before a complete message arrived."""


class InvalidCode(CanvasError, ValueError):
    def __init__(self, code: int) -> None:
        super().__init__(f"Invalid color code: {code}")
        self.code = code


class UnknownColor(CanvasError, ValueError):
    def __init__(self, value: int) -> None:
        super().__init__(f"Color 0x{value:04X} is not in the palette")
        self.value = value


class CorruptBitmap(CanvasError, ValueError):
    pass


class UnsupportedOperation(CanvasError, ValueError):
    def __init__(self, operation: int) -> None:
        super().__init__(f"Unsupported operation: {operation}")
        self.operation = operation
