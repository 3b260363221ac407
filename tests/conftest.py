from __future__ import annotations

import pytest

from canvasserver.protocol import FramingError
from canvasserver.storage import SlotStore


class MemoryStream:
    """In-memory stand-in for a connection: reads from ``incoming``, records writes."""

    def __init__(self, incoming: bytes = b"") -> None:
        self.incoming = bytearray(incoming)
        self.written = bytearray()

    def read_exact(self, size: int) -> bytes:
        if len(self.incoming) < size:
            raise FramingError(f"Wanted {size} bytes, {len(self.incoming)} left")
        data = bytes(self.incoming[:size])
        del self.incoming[:size]
        return data

    def write_all(self, data: bytes) -> None:
        self.written += data


@pytest.fixture
def store(tmp_path):
    slots = SlotStore(tmp_path / "images")
    slots.prepare()
    return slots
