from .bitmap import deserialize_bitmap, load_bitmap, save_bitmap, serialize_bitmap
from .slots import SlotStore

__all__ = [
    "SlotStore",
    "deserialize_bitmap",
    "load_bitmap",
    "save_bitmap",
    "serialize_bitmap",
]
