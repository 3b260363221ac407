from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 5005
DEFAULT_IMAGE_DIR = "images-dir"
DEFAULT_SOCKET_TIMEOUT = 8.0
DEFAULT_BACKLOG = 16

HOST_ENV_VAR = "CANVAS_HOST"
PORT_ENV_VAR = "CANVAS_PORT"
IMAGE_DIR_ENV_VAR = "CANVAS_IMAGE_DIR"
TIMEOUT_ENV_VAR = "CANVAS_TIMEOUT"


@dataclass
class ServerSettings:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    image_dir: str = DEFAULT_IMAGE_DIR
    timeout: float = DEFAULT_SOCKET_TIMEOUT
    show_progress: bool = True
    # Read one ack byte from the client every N rows on load; 0 disables it.
    ack_every: int = 0
    buffered: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServerSettings":
        env = os.environ if environ is None else environ
        settings = cls()
        if env.get(HOST_ENV_VAR):
            settings.host = env[HOST_ENV_VAR]
        if env.get(PORT_ENV_VAR):
            settings.port = _parse_int(PORT_ENV_VAR, env[PORT_ENV_VAR])
        if env.get(IMAGE_DIR_ENV_VAR):
            settings.image_dir = env[IMAGE_DIR_ENV_VAR]
        if env.get(TIMEOUT_ENV_VAR):
            settings.timeout = _parse_float(TIMEOUT_ENV_VAR, env[TIMEOUT_ENV_VAR])
        return settings

    def validate(self) -> None:
        if not 0 <= self.port <= 65535:
            raise ValueError(f"Port must be 0..65535, got {self.port}")
        if self.timeout <= 0:
            raise ValueError("Socket timeout must be greater than zero")
        if self.ack_every < 0:
            raise ValueError("Ack interval must not be negative")
        if not self.image_dir:
            raise ValueError("Image directory must not be empty")


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


def _parse_float(name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}") from None
