import socket
import threading

import pytest

from canvasserver.client import CanvasClient
from canvasserver.config import ServerSettings
from canvasserver.protocol import PALETTE, ImageGrid
from canvasserver.server import CanvasServer


@pytest.fixture
def start_server(store):
    started = []

    def start(**overrides):
        options = dict(
            host="127.0.0.1",
            port=0,
            image_dir=str(store.directory),
            timeout=2.0,
            show_progress=False,
        )
        options.update(overrides)
        server = CanvasServer(ServerSettings(**options), store)
        server.bind()
        thread = threading.Thread(target=server.serve_forever, daemon=True)
        thread.start()
        started.append((server, thread))
        return server

    yield start
    for server, thread in started:
        server.shutdown()
        thread.join(5)


def striped_grid(width, height):
    rows = []
    for y in range(height):
        rows.append([int(PALETTE[(x // 7 + y) % len(PALETTE)]) for x in range(width)])
    return ImageGrid(width, rows)


def client_for(server, **kwargs):
    host, port = server.address
    return CanvasClient(host, port, timeout=5.0, **kwargs)


def raw_exchange(server, payload):
    """Send bytes, then return whatever the server writes before closing."""
    with socket.create_connection(server.address, timeout=5.0) as sock:
        sock.sendall(payload)
        chunks = []
        while True:
            chunk = sock.recv(4096)
            if not chunk:
                return b"".join(chunks)
            chunks.append(chunk)


def test_upload_then_download(start_server, store):
    server = start_server()
    grid = striped_grid(40, 12)
    client = client_for(server)

    stats = client.upload(3, grid)

    assert stats.rows == 12
    assert store.load(3, 40, 12) == grid
    assert client.download(3, 40, 12) == grid


def test_download_unknown_slot_is_blank(start_server):
    server = start_server()
    assert client_for(server).download(200, 8, 4) == ImageGrid.blank(8, 4)


def test_download_with_acks_and_buffering(start_server, store):
    server = start_server(ack_every=10, buffered=True)
    grid = striped_grid(16, 25)
    store.save(11, grid)
    assert client_for(server, ack_every=10).download(11, 16, 25) == grid


def test_unsupported_operation_closes_connection(start_server):
    server = start_server()
    assert raw_exchange(server, bytes([9, 0, 1, 0, 1, 0])) == b""


def test_invalid_code_upload_is_not_stored(start_server, store):
    server = start_server()
    header = bytes([1, 4, 1, 0, 2, 0])
    assert raw_exchange(server, header + bytes([0, 1, 12])) == b""
    assert not store.exists(4)


def test_stalled_client_times_out_without_blocking_others(start_server, store):
    server = start_server(timeout=0.5)
    with socket.create_connection(server.address, timeout=5.0) as stalled:
        stalled.sendall(bytes([1, 2, 4, 0, 4, 0]))
        client_for(server).upload(1, striped_grid(4, 4))
        assert store.exists(1)
        assert stalled.recv(16) == b""
    assert not store.exists(2)
