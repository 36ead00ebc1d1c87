"""A complete example grid in the theory-row layout, used as the CLI default."""

from __future__ import annotations

from chordkey.config import DEFAULT_CONFIG, TheoryConfig
from chordkey.pitch_class import PitchSpeller

# One entry per theory row, starting at the first data row (row 5):
# (semitones above the tonic, chord suffix, always spell with flats)
DEMO_ROWS: list[tuple[int, str, bool]] = [
    (0, "maj", False),    # 5  I
    (2, "min", False),    # 6  ii
    (4, "min", False),    # 7  iii
    (5, "maj", False),    # 8  IV
    (7, "maj", False),    # 9  V
    (9, "min", False),    # 10 vi
    (11, "dim", False),   # 11 vii°
    (0, "maj7", False),   # 12 Imaj7
    (7, "7", False),      # 13 V7
    (3, "maj", True),     # 14 ♭III
    (5, "min", False),    # 15 iv
    (1, "maj", True),     # 16 ♭II
    (8, "maj", True),     # 17 ♭VI
    (10, "maj", True),    # 18 ♭VII
]


def build_demo_table(config: TheoryConfig = DEFAULT_CONFIG, delimiter: str = ",") -> str:
    """Render a grid with one column per candidate key as delimited text."""
    speller = PitchSpeller(config)
    keys = list(config.candidate_keys)
    lines = [delimiter.join(keys)]
    for interval, suffix, flats in DEMO_ROWS:
        cells = []
        for key in keys:
            prefer_flats = flats or speller.prefers_flats(key)
            cells.append(speller.transpose(key, interval, prefer_flats) + suffix)
        lines.append(delimiter.join(cells))
    return "\n".join(lines) + "\n"


DEMO_TABLE: str = build_demo_table()
