"""Clipboard-like text channel used for loadout export/import."""

from typing import Protocol


class Clipboard(Protocol):
    """A single shared text blob."""

    def read_text(self) -> str | None: ...

    def write_text(self, text: str) -> bool:
        """Returns False if the host refused the write."""
        ...


class MemoryClipboard:
    """Clipboard held in memory."""

    def __init__(self, text: str | None = None) -> None:
        self.text = text

    def read_text(self) -> str | None:
        return self.text

    def write_text(self, text: str) -> bool:
        self.text = text
        return True
