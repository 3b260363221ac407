from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Protocol

from .errors import UnsupportedOperation

HEADER_FORMAT = "<BBHH"
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)


class ByteStream(Protocol):
    def read_exact(self, size: int) -> bytes: ...

    def write_all(self, data: bytes) -> None: ...


class Operation(IntEnum):
    SAVE = 1
    LOAD = 2


@dataclass
class ImageGrid:
    """Top-down rows of RGB565 values, all ``width`` entries long."""

    width: int
    rows: List[List[int]]

    @classmethod
    def blank(cls, width: int, height: int) -> "ImageGrid":
        return cls(width, [[0] * width for _ in range(height)])

    def validate(self) -> None:
        """Reject negative widths and ragged rows."""
        if self.width < 0:
            raise ValueError("Width must not be negative")
        for index, row in enumerate(self.rows):
            if len(row) != self.width:
                raise ValueError(f"Row {index} has {len(row)} pixels, expected {self.width}")

    @property
    def height(self) -> int:
        return len(self.rows)


@dataclass(frozen=True)
class RequestHeader:
    """The six bytes that open every connection."""

    operation: int
    slot: int
    height: int
    width: int

    @classmethod
    def from_bytes(cls, data: bytes) -> "RequestHeader":
        if len(data) != HEADER_SIZE:
            raise ValueError(f"Header must be {HEADER_SIZE} bytes, got {len(data)}")
        operation, slot, height, width = struct.unpack(HEADER_FORMAT, data)
        return cls(operation, slot, height, width)

    def to_bytes(self) -> bytes:
        return struct.pack(HEADER_FORMAT, self.operation, self.slot, self.height, self.width)

    def require_operation(self) -> Operation:
        try:
            return Operation(self.operation)
        except ValueError:
            raise UnsupportedOperation(self.operation) from None

    @property
    def filename(self) -> str:
        return slot_filename(self.slot)


def slot_filename(slot: int) -> str:
    return f"image_{slot}.bmp"
