"""
chordkey.config
~~~~~~~~~~~~~~~

Default theory tables and the injectable :class:`TheoryConfig`.

Every engine class takes a ``TheoryConfig`` at construction time, so tests
(or callers with a different key set or progression catalogue) can swap
any table with :func:`dataclasses.replace` instead of patching globals.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

# ── Pitch classes ────────────────────────────────────────────────────
NOTE_NAMES: Final[tuple[str, ...]] = (
    "C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B",
)
"""Canonical sharp spelling, index 0 = C."""

FLAT_NAMES: Final[tuple[tuple[int, str], ...]] = (
    (1, "Db"), (3, "Eb"), (6, "Gb"), (8, "Ab"), (10, "Bb"),
)
"""Flat spelling for the black-key pitch classes, as (index, name) pairs."""

FLAT_KEYS: Final[frozenset[str]] = frozenset({"F", "Bb", "Eb", "Ab", "Db", "Gb"})
"""Major keys spelled with flats. Everything else is spelled with sharps."""

# ── Grid layout (theory-row numbering) ───────────────────────────────
FIRST_THEORY_ROW: Final[int] = 5
"""Theory-row number of the first data row under the header line."""

PRIMARY_ROWS: Final[tuple[int, ...]] = (5, 6, 7, 8, 9, 10)
"""Rows holding I, ii, iii, IV, V, vi."""

MODAL_ROWS: Final[tuple[int, ...]] = (14, 15, 17, 18)
"""Rows holding ♭III, ♭IV/iv, ♭VI, ♭VII."""

DOMINANT_ROW: Final[int] = 9
"""Row holding the V chord, read during two-step resolution."""

# ── Key matching ─────────────────────────────────────────────────────
CANDIDATE_KEYS: Final[tuple[str, ...]] = (
    "C", "Db", "D", "Eb", "E", "F", "F#", "G", "Ab", "A", "Bb", "B",
)

NEAR_HIT_WEIGHT: Final[float] = 0.5
"""A near-hit counts as half a diatonic hit."""

PROGRESSIONS: Final[tuple[tuple[str, ...], ...]] = (
    ("ii", "V", "I"),
    ("I", "V", "vi", "IV"),
    ("I", "vi", "IV", "V"),
    ("I", "IV", "V"),
    ("vi", "IV", "I", "V"),
    ("IV", "V", "I"),
)
"""Functional progressions reported by the matcher, in check order."""

TOP_MATCHES: Final[int] = 5


@dataclass(frozen=True)
class TheoryConfig:
    """Immutable bundle of the tables the engine reads."""

    note_names: tuple[str, ...] = NOTE_NAMES
    flat_names: tuple[tuple[int, str], ...] = FLAT_NAMES
    flat_keys: frozenset[str] = FLAT_KEYS
    first_theory_row: int = FIRST_THEORY_ROW
    primary_rows: tuple[int, ...] = PRIMARY_ROWS
    modal_rows: tuple[int, ...] = MODAL_ROWS
    dominant_row: int = DOMINANT_ROW
    candidate_keys: tuple[str, ...] = CANDIDATE_KEYS
    progressions: tuple[tuple[str, ...], ...] = PROGRESSIONS
    near_hit_weight: float = NEAR_HIT_WEIGHT

    @property
    def semitones(self) -> int:
        return len(self.note_names)


DEFAULT_CONFIG: Final[TheoryConfig] = TheoryConfig()
