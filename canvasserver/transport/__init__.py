from .stream import SocketStream

__all__ = ["SocketStream"]
