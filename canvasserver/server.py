from __future__ import annotations

import socket
import threading
from typing import Optional, Tuple

from .config import DEFAULT_BACKLOG, ServerSettings
from .logger import make_logger
from .progress import RowProgress
from .protocol import (
    CanvasError,
    FramingError,
    Operation,
    RequestHeader,
    handle_load,
    handle_save,
    read_header,
)
from .storage import SlotStore
from .transport import SocketStream

log = make_logger("server")

ACCEPT_POLL_INTERVAL = 0.5

Address = Tuple[str, int]


def local_ip() -> Optional[str]:
    """Best guess at the address clients on the LAN should connect to."""
    probe = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        # UDP connect sends nothing; it only selects the outbound interface.
        probe.connect(("10.255.255.255", 1))
        return probe.getsockname()[0]
    except OSError:
        return None
    finally:
        probe.close()


class CanvasServer:
    def __init__(self, settings: Optional[ServerSettings] = None, store: Optional[SlotStore] = None) -> None:
        self.settings = settings or ServerSettings()
        self.store = store or SlotStore(self.settings.image_dir)
        self._sock: Optional[socket.socket] = None
        self._running = threading.Event()

    @property
    def address(self) -> Optional[Address]:
        if self._sock is None:
            return None
        host, port = self._sock.getsockname()[:2]
        return host, port

    def prepare_storage(self) -> None:
        if self.store.prepare():
            log.info("Created image directory %s", self.store.directory)
        else:
            log.info("Found image directory %s", self.store.directory)

    def bind(self) -> Address:
        srv = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        srv.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            srv.bind((self.settings.host, self.settings.port))
            srv.listen(DEFAULT_BACKLOG)
        except OSError:
            srv.close()
            raise
        srv.settimeout(ACCEPT_POLL_INTERVAL)
        self._sock = srv
        return self.address

    def serve_forever(self) -> None:
        if self._sock is None:
            self.bind()
        self._log_listening()
        self._running.set()
        try:
            while self._running.is_set():
                try:
                    conn, addr = self._sock.accept()
                except socket.timeout:
                    continue
                except OSError as exc:
                    if not self._running.is_set():
                        break
                    log.error("Failed to accept connection: %s", exc)
                    continue
                t = threading.Thread(target=self.handle_client, args=(conn, addr), daemon=True)
                t.start()
        finally:
            self._running.clear()
            self.close()

    def shutdown(self) -> None:
        self._running.clear()

    def close(self) -> None:
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def handle_client(self, conn: socket.socket, addr: Address) -> None:
        log.debug("Client connected: %s", addr)
        try:
            conn.settimeout(self.settings.timeout)
            stream = SocketStream(conn, buffered=self.settings.buffered)
            header = read_header(stream)
            operation = header.require_operation()
            if operation == Operation.SAVE:
                self._save(header, stream, addr)
            else:
                self._load(header, stream, addr)
        except socket.timeout:
            log.warning("Client %s timed out", addr)
        except FramingError as exc:
            log.warning("Client %s disconnected mid-request: %s", addr, exc)
        except CanvasError as exc:
            log.error("Aborted request from %s: %s", addr, exc)
        except OSError as exc:
            log.error("Connection error with %s: %s", addr, exc)
        except Exception as exc:
            log.exception("Error handling client %s: %s", addr, exc)
        finally:
            try:
                conn.close()
            except OSError:
                pass

    def _save(self, header: RequestHeader, stream: SocketStream, addr: Address) -> None:
        log.info(
            "Saving image from %s: %d x %d as %s", addr, header.height, header.width, header.filename
        )
        progress = self._progress(header, "save")
        grid = handle_save(header, stream, self.store, progress.update)
        progress.finish()
        log.info("Stored %s (%d rows)", self.store.path_for(header.slot), grid.height)

    def _load(self, header: RequestHeader, stream: SocketStream, addr: Address) -> None:
        log.info(
            "Loading image to %s: %d x %d from %s", addr, header.height, header.width, header.filename
        )
        progress = self._progress(header, "load")
        ack_every = self.settings.ack_every

        def on_row(index: int) -> None:
            progress.update(index)
            if ack_every and index % ack_every == 0:
                stream.flush()
                stream.read_exact(1)

        result = handle_load(header, stream, self.store, on_row)
        stream.flush()
        if ack_every:
            stream.read_exact(1)
        progress.finish()
        if result.blank:
            log.info("Slot %d has no %d x %d image, sent blank canvas", header.slot, header.height, header.width)
        log.info(
            "Sent %d rows to %s (%d compressed, %d raw, %d bytes)",
            result.stats.rows,
            addr,
            result.stats.compressed_rows,
            result.stats.raw_rows,
            result.stats.bytes_sent,
        )

    def _progress(self, header: RequestHeader, action: str) -> RowProgress:
        return RowProgress(header.height, f"{action} {header.filename}", self.settings.show_progress)

    def _log_listening(self) -> None:
        host, port = self.address
        if host in ("0.0.0.0", ""):
            ip = local_ip()
            if ip:
                log.info('Waiting for requests on "%s:%d"', ip, port)
                return
            log.info('Waiting for requests on port "%d"', port)
            return
        log.info('Waiting for requests on "%s:%d"', host, port)
