"""Errors raised by the chordkey engine."""

from __future__ import annotations

from collections.abc import Sequence


class KeyNotFoundError(LookupError):
    """The requested key has no column in the grid's header row."""

    def __init__(self, key: str, headers: Sequence[str] = ()) -> None:
        self.key = key
        self.headers = tuple(headers)
        super().__init__(f"Key '{key}' not found in table headers.")
