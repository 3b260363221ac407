from __future__ import annotations

import socket

from ..protocol.errors import FramingError


class SocketStream:
    """Exact-length reads and writes over a connected TCP socket.

    With ``buffered`` set, writes collect in memory until :meth:`flush`.
    """

    def __init__(self, sock: socket.socket, buffered: bool = False) -> None:
        self._sock = sock
        self._buffered = buffered
        self._pending = bytearray()

    def read_exact(self, size: int) -> bytes:
        """Receive exactly ``size`` bytes or raise FramingError."""
        chunks = []
        received = 0
        while received < size:
            chunk = self._sock.recv(size - received)
            if not chunk:
                raise FramingError(f"Connection closed after {received} of {size} bytes")
            chunks.append(chunk)
            received += len(chunk)
        return b"".join(chunks)

    def write_all(self, data: bytes) -> None:
        if self._buffered:
            self._pending += data
            return
        self._sock.sendall(data)

    def flush(self) -> None:
        if self._pending:
            data = bytes(self._pending)
            self._pending.clear()
            self._sock.sendall(data)
