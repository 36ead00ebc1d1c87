"""ChordDeriver: reads a key's chord set out of a pasted grid."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from chordkey.chord_token import DIM_GLYPH, root_token
from chordkey.config import DEFAULT_CONFIG, TheoryConfig
from chordkey.exceptions import KeyNotFoundError
from chordkey.grid_table import GridTable, parse
from chordkey.pitch_class import PitchSpeller

log = logging.getLogger(__name__)

LEADING_TONE_OFFSET = -1  # semitones from the tonic to the seventh degree
PERFECT_FIFTH = 7


@dataclass(frozen=True)
class ChordSet:
    """
    Every chord derived for one key. Any field may be "" when the grid
    does not supply it.

    Attributes:
        key:           The key the set was derived for.
        one..six:      I, ii, iii, IV, V, vi as written in the grid.
        flat_three..:  Modal-interchange chords ♭III, ♭IV/iv, ♭VI, ♭VII.
        five_of_one..: Secondary dominants V/I ... V/vi (two-step lookup).
        seven:         Leading-tone diminished triad, by pitch arithmetic.
        five_of_seven: Dominant seventh of the leading tone, by pitch arithmetic.
    """

    key: str
    one: str = ""
    two: str = ""
    three: str = ""
    four: str = ""
    five: str = ""
    six: str = ""
    flat_three: str = ""
    flat_four: str = ""
    flat_six: str = ""
    flat_seven: str = ""
    five_of_one: str = ""
    five_of_two: str = ""
    five_of_three: str = ""
    five_of_four: str = ""
    five_of_five: str = ""
    five_of_six: str = ""
    seven: str = ""
    five_of_seven: str = ""

    def primary(self) -> dict[str, str]:
        return {
            "I": self.one, "ii": self.two, "iii": self.three,
            "IV": self.four, "V": self.five, "vi": self.six,
        }

    def secondary_dominants(self) -> dict[str, str]:
        return {
            "V/I": self.five_of_one, "V/ii": self.five_of_two,
            "V/iii": self.five_of_three, "V/IV": self.five_of_four,
            "V/V": self.five_of_five, "V/vi": self.five_of_six,
        }

    def modal_interchange(self) -> dict[str, str]:
        return {
            "♭III": self.flat_three, "♭IV": self.flat_four,
            "♭VI": self.flat_six, "♭VII": self.flat_seven,
        }

    def leading_tone(self) -> dict[str, str]:
        return {f"vii{DIM_GLYPH}": self.seven, f"V/vii{DIM_GLYPH}": self.five_of_seven}

    def slots(self) -> dict[str, str]:
        """All chords keyed by display label, in presentation order."""
        return {
            **self.primary(),
            **self.secondary_dominants(),
            **self.modal_interchange(),
            **self.leading_tone(),
        }


_PRIMARY_FIELDS = ("one", "two", "three", "four", "five", "six")
_MODAL_FIELDS = ("flat_three", "flat_four", "flat_six", "flat_seven")
_DOMINANT_FIELDS = tuple(f"five_of_{name}" for name in _PRIMARY_FIELDS)


class ChordDeriver:
    """
    Derives the diatonic, secondary-dominant and borrowed chords of a key.

    Algorithm overview
    ------------------
    1. **Column** – the key is looked up in the header row; a missing key
       raises :class:`KeyNotFoundError` since nothing else can be read.

    2. **Grid chords** – I..vi come from theory rows 5-10 and the borrowed
       chords from rows 14, 15, 17 and 18 of that column, verbatim. The grid
       is authoritative here: it may encode qualities that plain scale
       arithmetic would not produce.

    3. **Two-step secondary dominants** – for each of rows 5-10 the root of
       the chord is treated as a key of its own: the header whose root
       matches it is found, the V chord (row 9) of *that* column is read and
       its root gets a ``7``. A missing root or column leaves the field "".

    4. **Leading tone** – the grid has no seventh degree, so vii° is the key
       one semitone down and V/vii° a fifth above that, computed directly.
       This can disagree with what the grid's row 9 implies; both are
       reported as they are.
    """

    def __init__(self, config: TheoryConfig = DEFAULT_CONFIG) -> None:
        self.config = config
        self.speller = PitchSpeller(config)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _two_step(self, table: GridTable, header_roots: list[str], row: int, column: int) -> str:
        """Secondary dominant of the chord at ``(row, column)``, or ""."""
        source = table.cell_at(row, column)
        source_root = root_token(source)
        if not source_root:
            log.debug("Row %d: no root in %r, skipping secondary dominant", row, source)
            return ""

        try:
            match_col = header_roots.index(source_root)
        except ValueError:
            log.debug("Row %d: no header column for root %r", row, source_root)
            return ""

        dominant_root = root_token(table.cell_at(self.config.dominant_row, match_col))
        return f"{dominant_root}7" if dominant_root else ""

    def _leading_tone_chords(self, key: str) -> tuple[str, str]:
        prefer_flats = self.speller.prefers_flats(key)
        leading = self.speller.transpose(root_token(key), LEADING_TONE_OFFSET, prefer_flats)
        if not leading:
            return "", ""
        dominant = self.speller.transpose(leading, PERFECT_FIFTH, prefer_flats)
        return f"{leading}{DIM_GLYPH}", f"{dominant}7"

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def derive(self, key: str, table: GridTable) -> ChordSet:
        """
        Build the :class:`ChordSet` for ``key`` from ``table``.

        Row numbers come from the injected config, so the table is read
        with its first data row at ``config.first_theory_row`` whatever
        ``first_row`` it was parsed with.

        Raises:
            KeyNotFoundError: If no header matches ``key``.
        """
        if table.first_row != self.config.first_theory_row:
            log.debug(
                "Table starts at row %d, reading it from row %d",
                table.first_row,
                self.config.first_theory_row,
            )
            table = replace(table, first_row=self.config.first_theory_row)

        column = table.find_column(key)
        if column is None:
            raise KeyNotFoundError(key, table.headers)

        values: dict[str, str] = {}
        for name, row in zip(_PRIMARY_FIELDS, self.config.primary_rows):
            values[name] = table.cell_at(row, column)
        for name, row in zip(_MODAL_FIELDS, self.config.modal_rows):
            values[name] = table.cell_at(row, column)

        header_roots = table.header_roots
        for name, row in zip(_DOMINANT_FIELDS, self.config.primary_rows):
            values[name] = self._two_step(table, header_roots, row, column)

        values["seven"], values["five_of_seven"] = self._leading_tone_chords(key)
        return ChordSet(key=key.strip(), **values)


def derive_chords(key: str, raw_table: str, config: TheoryConfig = DEFAULT_CONFIG) -> ChordSet:
    """Parse ``raw_table`` and derive the chord set of ``key`` from it."""
    table = parse(raw_table, first_row=config.first_theory_row)
    return ChordDeriver(config).derive(key, table)
