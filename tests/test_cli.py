import argparse

import pytest
from PIL import Image

from canvasserver.app import cli, client_cli
from canvasserver.protocol import Color, ImageGrid
from canvasserver.storage import SlotStore


def test_server_args_follow_environment(monkeypatch):
    monkeypatch.setenv("CANVAS_PORT", "7007")
    args = cli.parse_args(["-i", "drawings", "--ack-every", "10", "--no-progress"])
    settings = cli.build_settings(args)
    assert settings.port == 7007
    assert settings.image_dir == "drawings"
    assert settings.ack_every == 10
    assert settings.show_progress is False


def test_server_rejects_bad_settings(tmp_path, capsys):
    assert cli.main(["-i", str(tmp_path), "--timeout", "0"]) == 2
    assert "timeout" in capsys.readouterr().err


def test_list_and_export_slots(tmp_path, capsys):
    store = SlotStore(tmp_path)
    store.save(5, ImageGrid(3, [[Color.RED, Color.GREEN, Color.BLUE]]))
    assert cli.main(["-i", str(tmp_path), "--list-slots"]) == 0
    assert capsys.readouterr().out.startswith("5\t1 x 3\t")

    out = tmp_path / "slot5.png"
    assert cli.main(["-i", str(tmp_path), "--export", "5", str(out)]) == 0
    with Image.open(out) as img:
        assert img.convert("RGB").getpixel((2, 0)) == (0, 0, 255)


def test_export_missing_slot(tmp_path):
    assert cli.main(["-i", str(tmp_path), "--export", "9", str(tmp_path / "x.png")]) == 1
    assert cli.main(["-i", str(tmp_path), "--export", "999", str(tmp_path / "x.png")]) == 2


def test_serve_reports_directory_failure(tmp_path):
    blocker = tmp_path / "images"
    blocker.write_text("")
    assert cli.main(["-i", str(blocker), "--host", "127.0.0.1", "-p", "0"]) == 1


def test_client_size_parsing():
    assert client_cli.parse_size("320x240") == (320, 240)
    with pytest.raises(argparse.ArgumentTypeError):
        client_cli.parse_size("320")
    args = client_cli.parse_args(["upload", "a.png", "--slot", "4", "--size", "16x8"])
    assert (args.action, args.slot, args.size) == ("upload", 4, (16, 8))
