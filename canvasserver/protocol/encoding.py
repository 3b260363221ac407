from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union

from .types import ByteStream

MODE_RAW = 0
MAX_SEGMENTS = 105
MAX_RUN_LENGTH = 0x1FF
CODE_MASK = 0xF
SEGMENT_SIZE = 2


def pack_segment(code: int, length: int) -> int:
    """Pack one run into a segment word: code in bits 0-3, length in bits 4-12."""
    if not 0 <= code <= CODE_MASK:
        raise ValueError(f"Code does not fit in 4 bits: {code}")
    if not 1 <= length <= MAX_RUN_LENGTH:
        raise ValueError(f"Run length out of range: {length}")
    return (length << 4) | code


def unpack_segment(word: int) -> Tuple[int, int]:
    return word & CODE_MASK, (word >> 4) & MAX_RUN_LENGTH


def encode_run(code: int, count: int) -> List[int]:
    """Encode a single run, splitting it when it exceeds the 9-bit length field."""
    out = []
    while count > MAX_RUN_LENGTH:
        out.append(pack_segment(code, MAX_RUN_LENGTH))
        count -= MAX_RUN_LENGTH
    if count > 0:
        out.append(pack_segment(code, count))
    return out


def compress(codes: Sequence[int]) -> List[int]:
    """Run-length encode a row of color codes into segment words."""
    if not codes:
        return []
    segments: List[int] = []
    prev = codes[0]
    count = 1
    for code in codes[1:]:
        if code == prev:
            count += 1
        else:
            segments.extend(encode_run(prev, count))
            prev = code
            count = 1
    segments.extend(encode_run(prev, count))
    return segments


def uncompress(segments: Sequence[int], width: int) -> List[int]:
    """Expand segment words into ``width`` codes.

    Expansion stops at the first segment that would run past ``width``;
    anything not covered stays 0.
    """
    codes = [0] * width
    index = 0
    for word in segments:
        code, length = unpack_segment(word)
        if index + length > width:
            break
        codes[index : index + length] = [code] * length
        index += length
    return codes


@dataclass(frozen=True)
class RawRow:
    codes: bytes

    @property
    def mode(self) -> int:
        return MODE_RAW

    def to_bytes(self) -> bytes:
        return bytes([MODE_RAW]) + self.codes

    def codes_for(self, width: int) -> List[int]:
        return list(self.codes[:width])


@dataclass(frozen=True)
class CompressedRow:
    segments: Tuple[int, ...]

    @property
    def mode(self) -> int:
        return len(self.segments)

    def to_bytes(self) -> bytes:
        return bytes([self.mode]) + struct.pack(f"<{self.mode}H", *self.segments)

    def codes_for(self, width: int) -> List[int]:
        return uncompress(self.segments, width)


Row = Union[RawRow, CompressedRow]


def encode_row(codes: Sequence[int]) -> Row:
    """Pick the wire framing for one row of color codes."""
    segments = compress(codes)
    if 0 < len(segments) <= MAX_SEGMENTS:
        return CompressedRow(tuple(segments))
    return RawRow(bytes(codes))


def decode_row(mode: int, payload: bytes) -> Row:
    if mode == MODE_RAW:
        return RawRow(payload)
    if len(payload) != mode * SEGMENT_SIZE:
        raise ValueError(f"Expected {mode * SEGMENT_SIZE} segment bytes, got {len(payload)}")
    return CompressedRow(struct.unpack(f"<{mode}H", payload))


def read_row(stream: ByteStream, width: int) -> Row:
    """Read one framed row: a mode byte followed by raw codes or segment words."""
    mode = stream.read_exact(1)[0]
    if mode == MODE_RAW:
        payload = stream.read_exact(width)
    else:
        payload = stream.read_exact(mode * SEGMENT_SIZE)
    return decode_row(mode, payload)
