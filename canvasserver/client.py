from __future__ import annotations

import socket
from typing import Optional

from .config import DEFAULT_PORT, DEFAULT_SOCKET_TIMEOUT
from .protocol import ImageGrid, Operation, RequestHeader, TransferStats, receive_image, send_image
from .storage.slots import MAX_SLOT
from .transport import SocketStream

ACK = b"\x01"


class CanvasClient:
    """Speaks the display side of the protocol, for tooling and tests."""

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        timeout: Optional[float] = DEFAULT_SOCKET_TIMEOUT,
        ack_every: int = 0,
    ) -> None:
        self.host = host
        self.port = port
        self.timeout = timeout
        self.ack_every = ack_every

    def upload(self, slot: int, grid: ImageGrid) -> TransferStats:
        """Send ``grid`` to ``slot`` and wait until the server has closed the connection."""
        grid.validate()
        header = self._header(Operation.SAVE, slot, grid.width, grid.height)
        with self._connect() as sock:
            stream = SocketStream(sock)
            stream.write_all(header.to_bytes())
            stats = send_image(stream, grid)
            sock.shutdown(socket.SHUT_WR)
            self._wait_for_close(sock)
        return stats

    def download(self, slot: int, width: int, height: int) -> ImageGrid:
        header = self._header(Operation.LOAD, slot, width, height)
        with self._connect() as sock:
            stream = SocketStream(sock)
            stream.write_all(header.to_bytes())

            def on_row(index: int) -> None:
                if self.ack_every and index % self.ack_every == 0:
                    stream.write_all(ACK)

            grid = receive_image(stream, width, height, on_row)
            if self.ack_every:
                stream.write_all(ACK)
        return grid

    def _connect(self) -> socket.socket:
        return socket.create_connection((self.host, self.port), timeout=self.timeout)

    @staticmethod
    def _header(operation: Operation, slot: int, width: int, height: int) -> RequestHeader:
        if not 0 <= slot <= MAX_SLOT:
            raise ValueError(f"Slot must be 0..{MAX_SLOT}, got {slot}")
        if not (0 <= width <= 0xFFFF and 0 <= height <= 0xFFFF):
            raise ValueError(f"Dimensions do not fit the header: {width} x {height}")
        return RequestHeader(int(operation), slot, height, width)

    @staticmethod
    def _wait_for_close(sock: socket.socket) -> None:
        while sock.recv(64):
            pass
