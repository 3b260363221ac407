import pytest

from canvasserver.config import DEFAULT_IMAGE_DIR, DEFAULT_PORT, ServerSettings


def test_defaults():
    settings = ServerSettings.from_env({})
    assert settings.port == DEFAULT_PORT == 5005
    assert settings.image_dir == DEFAULT_IMAGE_DIR == "images-dir"
    assert settings.timeout == 8.0
    assert settings.ack_every == 0


def test_environment_overrides():
    settings = ServerSettings.from_env(
        {"CANVAS_PORT": "6000", "CANVAS_IMAGE_DIR": "/srv/canvas", "CANVAS_TIMEOUT": "2.5", "CANVAS_HOST": "127.0.0.1"}
    )
    assert (settings.host, settings.port, settings.image_dir, settings.timeout) == (
        "127.0.0.1",
        6000,
        "/srv/canvas",
        2.5,
    )


def test_bad_environment_value():
    with pytest.raises(ValueError, match="CANVAS_PORT"):
        ServerSettings.from_env({"CANVAS_PORT": "http"})


@pytest.mark.parametrize(
    "overrides",
    [{"port": 70000}, {"timeout": 0}, {"ack_every": -1}, {"image_dir": ""}],
)
def test_validate_rejects(overrides):
    with pytest.raises(ValueError):
        ServerSettings(**overrides).validate()
