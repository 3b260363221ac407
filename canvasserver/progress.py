from __future__ import annotations

import sys
from typing import Optional, TextIO

BAR_WIDTH = 40


class RowProgress:
    """In-place text progress bar for row transfers."""

    def __init__(
        self,
        total: int,
        label: str = "",
        enabled: bool = True,
        out: Optional[TextIO] = None,
    ) -> None:
        self.total = total
        self.label = label
        self.out = out or sys.stderr
        self.enabled = enabled and self.out.isatty()
        self.done = 0

    def update(self, index: int) -> None:
        self.done = index + 1
        if self.enabled:
            self.out.write("\r" + self.render())
            self.out.flush()

    def finish(self) -> None:
        if self.enabled:
            self.out.write("\r" + self.render() + "\n")
            self.out.flush()

    def render(self) -> str:
        filled = BAR_WIDTH if self.total <= 0 else BAR_WIDTH * self.done // self.total
        bar = "#" * filled + "." * (BAR_WIDTH - filled)
        prefix = f"{self.label} " if self.label else ""
        return f"{prefix}[{bar}] {self.done}/{self.total}"
