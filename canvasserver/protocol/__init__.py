from .encoding import (
    MAX_RUN_LENGTH,
    MAX_SEGMENTS,
    MODE_RAW,
    CompressedRow,
    RawRow,
    Row,
    compress,
    encode_row,
    pack_segment,
    read_row,
    uncompress,
    unpack_segment,
)
from .errors import CanvasError, CorruptBitmap, FramingError, InvalidCode, UnknownColor, UnsupportedOperation
from .palette import PALETTE, Color, code_to_color, color_to_code
from .transfer import LoadResult, TransferStats, handle_load, handle_save, read_header, receive_image, send_image
from .types import HEADER_SIZE, ByteStream, ImageGrid, Operation, RequestHeader

__all__ = [
    "ByteStream",
    "CanvasError",
    "Color",
    "CompressedRow",
    "CorruptBitmap",
    "FramingError",
    "HEADER_SIZE",
    "ImageGrid",
    "InvalidCode",
    "LoadResult",
    "MAX_RUN_LENGTH",
    "MAX_SEGMENTS",
    "MODE_RAW",
    "Operation",
    "PALETTE",
    "RawRow",
    "RequestHeader",
    "Row",
    "TransferStats",
    "UnknownColor",
    "UnsupportedOperation",
    "code_to_color",
    "color_to_code",
    "compress",
    "encode_row",
    "handle_load",
    "handle_save",
    "pack_segment",
    "read_header",
    "read_row",
    "receive_image",
    "send_image",
    "uncompress",
    "unpack_segment",
]
