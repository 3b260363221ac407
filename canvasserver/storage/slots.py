from __future__ import annotations

import os
import re
import tempfile
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ..protocol.types import ImageGrid, slot_filename
from .bitmap import load_bitmap, read_bitmap_file, read_dimensions, serialize_bitmap

MAX_SLOT = 255

_SLOT_FILE_RE = re.compile(r"^image_(\d{1,3})\.bmp$")


class SlotStore:
    """Maps slot ids to bitmap files inside one storage directory.

    Writers replace the file atomically, but two connections saving the
    same slot at once are not serialized: the last rename wins.
    """

    def __init__(self, directory: Union[str, Path]) -> None:
        self.directory = Path(directory)

    def prepare(self) -> bool:
        """Create the storage directory; return False if it already existed."""
        try:
            self.directory.mkdir()
        except FileExistsError:
            if not self.directory.is_dir():
                raise
            return False
        return True

    def path_for(self, slot: int) -> Path:
        if not 0 <= slot <= MAX_SLOT:
            raise ValueError(f"Slot must be 0..{MAX_SLOT}, got {slot}")
        return self.directory / slot_filename(slot)

    def exists(self, slot: int) -> bool:
        return self.path_for(slot).is_file()

    def save(self, slot: int, grid: ImageGrid) -> Path:
        path = self.path_for(slot)
        data = serialize_bitmap(grid)
        fd, tmp = tempfile.mkstemp(dir=self.directory, prefix=path.name + ".", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
            os.replace(tmp, path)
        except BaseException:
            os.unlink(tmp)
            raise
        return path

    def load(self, slot: int, width: int, height: int) -> ImageGrid:
        return load_bitmap(self.path_for(slot), width, height)

    def dimensions(self, slot: int) -> Optional[Tuple[int, int]]:
        data = read_bitmap_file(self.path_for(slot))
        if data is None:
            return None
        return read_dimensions(data)

    def slots(self) -> List[int]:
        if not self.directory.is_dir():
            return []
        found = []
        for entry in self.directory.iterdir():
            match = _SLOT_FILE_RE.match(entry.name)
            if match and int(match.group(1)) <= MAX_SLOT:
                found.append(int(match.group(1)))
        return sorted(found)
