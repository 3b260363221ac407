from __future__ import annotations

import argparse
import errno
import sys
from typing import List, Optional

from ..config import ServerSettings
from ..logger import make_logger, set_level
from ..rendering import grid_to_image
from ..server import CanvasServer
from ..storage import SlotStore

log = make_logger("cli")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    defaults = ServerSettings.from_env()
    parser = argparse.ArgumentParser(
        description="Canvas Server: stores drawings uploaded by the Arduino TFT canvas app."
    )
    parser.add_argument("-p", "--port", type=int, default=defaults.port, help="Port on which to listen for requests")
    parser.add_argument("-i", "--image-dir", default=defaults.image_dir, help="Directory where images are stored")
    parser.add_argument("--host", default=defaults.host, help="Address to bind (default: all interfaces)")
    parser.add_argument(
        "--timeout", type=float, default=defaults.timeout, help="Seconds to wait on a silent client"
    )
    parser.add_argument(
        "--ack-every",
        type=int,
        default=0,
        metavar="N",
        help="On load, wait for a one-byte ack from the client every N rows (0 disables)",
    )
    parser.add_argument("--buffered", action="store_true", help="Buffer load rows between acks")
    parser.add_argument("--no-progress", action="store_true", help="Hide the per-transfer progress bar")
    parser.add_argument("--list-slots", action="store_true", help="List stored slots and exit")
    parser.add_argument(
        "--export", nargs=2, metavar=("SLOT", "PATH"), help="Write a stored slot as an image file and exit"
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Log every connection")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors")
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> ServerSettings:
    settings = ServerSettings(
        host=args.host,
        port=args.port,
        image_dir=args.image_dir,
        timeout=args.timeout,
        show_progress=not args.no_progress,
        ack_every=args.ack_every,
        buffered=args.buffered,
    )
    settings.validate()
    return settings


def list_slots(store: SlotStore) -> int:
    for slot in store.slots():
        dimensions = store.dimensions(slot)
        if dimensions:
            width, height = dimensions
            print(f"{slot}\t{height} x {width}\t{store.path_for(slot)}")
        else:
            print(f"{slot}\t(unreadable)\t{store.path_for(slot)}")
    return 0


def export_slot(store: SlotStore, slot: int, path: str) -> int:
    dimensions = store.dimensions(slot)
    if dimensions is None:
        print(f"Slot {slot} has no readable image", file=sys.stderr)
        return 1
    width, height = dimensions
    grid_to_image(store.load(slot, width, height)).save(path)
    print(f"Exported slot {slot} to {path}")
    return 0


def serve(settings: ServerSettings) -> int:
    server = CanvasServer(settings)
    log.info("Starting Canvas Server...")
    try:
        server.prepare_storage()
    except OSError as exc:
        log.error("Failed to create image directory %s: %s", settings.image_dir, exc)
        return 1
    try:
        server.bind()
    except PermissionError:
        log.error("Permission denied while binding server to port %d", settings.port)
        log.error("hint: ports below 1024 need elevated privileges")
        return 1
    except OSError as exc:
        if exc.errno == errno.EADDRINUSE:
            log.error("Port %d is already in use", settings.port)
        else:
            log.error("Failed to bind server to port %d: %s", settings.port, exc)
        return 1
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        log.info("Shutting down (Ctrl+C).")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    set_level(args.verbose, args.quiet)
    try:
        settings = build_settings(args)
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 2
    store = SlotStore(settings.image_dir)
    if args.list_slots:
        return list_slots(store)
    if args.export:
        slot_arg, path = args.export
        try:
            slot = int(slot_arg)
            store.path_for(slot)
        except ValueError as exc:
            print(f"Invalid slot {slot_arg!r}: {exc}", file=sys.stderr)
            return 2
        return export_slot(store, slot, path)
    return serve(settings)


if __name__ == "__main__":
    raise SystemExit(main())
