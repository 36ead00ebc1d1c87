"""
chordkey
~~~~~~~~

Chord sets, secondary dominants and key matching for major keys.

Quick-start::

    from chordkey import derive_chords, match_chords, DEMO_TABLE

    chord_set = derive_chords("C", DEMO_TABLE)
    chord_set.five_of_two            # 'A7'

    report = match_chords("Dm7 G7 Cmaj7")
    report.best.key                  # 'C'
    report.progressions              # ('ii–V–I',)
"""

from __future__ import annotations

__version__: str = "0.1.0"

from chordkey.chord_deriver import ChordDeriver, ChordSet, derive_chords
from chordkey.chord_token import EMPTY_CHORD, NormalizedChord, normalize, root_token
from chordkey.config import DEFAULT_CONFIG, TheoryConfig
from chordkey.demo_table import DEMO_TABLE, build_demo_table
from chordkey.exceptions import KeyNotFoundError
from chordkey.grid_table import GridTable, find_column, parse
from chordkey.key_matcher import (
    DiatonicKeySet,
    KeyMatcher,
    KeyMatchResult,
    MatchReport,
    NoChordsProvided,
    detect_progressions,
    match_chords,
)
from chordkey.pitch_class import PitchSpeller, index_of, name_of, transpose

__all__: list[str] = [
    "ChordDeriver",
    "ChordSet",
    "derive_chords",
    "EMPTY_CHORD",
    "NormalizedChord",
    "normalize",
    "root_token",
    "DEFAULT_CONFIG",
    "TheoryConfig",
    "DEMO_TABLE",
    "build_demo_table",
    "KeyNotFoundError",
    "GridTable",
    "find_column",
    "parse",
    "DiatonicKeySet",
    "KeyMatcher",
    "KeyMatchResult",
    "MatchReport",
    "NoChordsProvided",
    "detect_progressions",
    "match_chords",
    "PitchSpeller",
    "index_of",
    "name_of",
    "transpose",
]
