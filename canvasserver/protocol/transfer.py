from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, List, Optional

from .encoding import CompressedRow, encode_row, read_row
from .palette import code_to_color, color_to_code
from .types import HEADER_SIZE, ByteStream, ImageGrid, Operation, RequestHeader

if TYPE_CHECKING:
    from ..storage.slots import SlotStore

RowCallback = Callable[[int], None]


@dataclass
class TransferStats:
    raw_rows: int = 0
    compressed_rows: int = 0
    bytes_sent: int = 0

    @property
    def rows(self) -> int:
        return self.raw_rows + self.compressed_rows


@dataclass
class LoadResult:
    grid: ImageGrid
    blank: bool
    stats: TransferStats = field(default_factory=TransferStats)


def read_header(stream: ByteStream) -> RequestHeader:
    return RequestHeader.from_bytes(stream.read_exact(HEADER_SIZE))


def receive_image(
    stream: ByteStream,
    width: int,
    height: int,
    on_row: Optional[RowCallback] = None,
) -> ImageGrid:
    """Read ``height`` framed rows and translate them into RGB565 values."""
    rows: List[List[int]] = []
    for index in range(height):
        codes = read_row(stream, width).codes_for(width)
        rows.append([int(code_to_color(code)) for code in codes])
        if on_row:
            on_row(index)
    return ImageGrid(width, rows)


def send_image(
    stream: ByteStream,
    grid: ImageGrid,
    on_row: Optional[RowCallback] = None,
) -> TransferStats:
    """Write every row of ``grid`` using the cheaper framing per row."""
    stats = TransferStats()
    for index, values in enumerate(grid.rows):
        row = encode_row([color_to_code(value) for value in values])
        data = row.to_bytes()
        stream.write_all(data)
        if isinstance(row, CompressedRow):
            stats.compressed_rows += 1
        else:
            stats.raw_rows += 1
        stats.bytes_sent += len(data)
        if on_row:
            on_row(index)
    return stats


def handle_save(
    header: RequestHeader,
    stream: ByteStream,
    store: "SlotStore",
    on_row: Optional[RowCallback] = None,
) -> ImageGrid:
    """Receive a full image and store it in the header's slot.

    The slot file is only written once every row has arrived, so a dropped
    connection never leaves a partial image behind.
    """
    if header.operation != Operation.SAVE:
        raise ValueError(f"Not a save request: {header}")
    grid = receive_image(stream, header.width, header.height, on_row)
    store.save(header.slot, grid)
    return grid


def handle_load(
    header: RequestHeader,
    stream: ByteStream,
    store: "SlotStore",
    on_row: Optional[RowCallback] = None,
) -> LoadResult:
    """Send the slot's image back, or a blank canvas if it is absent or sized differently."""
    if header.operation != Operation.LOAD:
        raise ValueError(f"Not a load request: {header}")
    blank = store.dimensions(header.slot) != (header.width, header.height)
    grid = store.load(header.slot, header.width, header.height)
    stats = send_image(stream, grid, on_row)
    return LoadResult(grid, blank, stats)
