"""KeyMatcher: best-fit major key, Roman numerals and progression detection."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from chordkey.chord_token import (
    DIM_GLYPH,
    DIMINISHED,
    MAJOR,
    MINOR,
    ChordNormalizer,
    NormalizedChord,
)
from chordkey.config import DEFAULT_CONFIG, TheoryConfig
from chordkey.pitch_class import PitchSpeller

log = logging.getLogger(__name__)

UNKNOWN_NUMERAL = "?"
PROGRESSION_JOINER = "–"

#: (semitones above tonic, triad quality, Roman numeral) for the major scale
MAJOR_SCALE_DEGREES: list[tuple[int, str, str]] = [
    (0, MAJOR, "I"),
    (2, MINOR, "ii"),
    (4, MINOR, "iii"),
    (5, MAJOR, "IV"),
    (7, MAJOR, "V"),
    (9, MINOR, "vi"),
    (11, DIMINISHED, f"vii{DIM_GLYPH}"),
]

#: Degrees that receive a secondary dominant in the near-hit set (ii .. vii°)
SECONDARY_TARGETS: list[int] = [2, 4, 5, 7, 9, 11]

#: Borrowed chords from the parallel minor: (semitones, chord suffix)
BORROWED_CHORDS: list[tuple[int, str]] = [(3, ""), (5, "m"), (8, ""), (10, "")]

PERFECT_FIFTH = 7


@dataclass(frozen=True)
class DiatonicKeySet:
    """The seven diatonic triads of a major key, each with its numeral."""

    key: str
    chords: tuple[tuple[NormalizedChord, str], ...] = ()

    def numeral_for(self, chord: NormalizedChord) -> str | None:
        for member, numeral in self.chords:
            if member == chord:
                return numeral
        return None

    def __contains__(self, chord: object) -> bool:
        return any(member == chord for member, _ in self.chords)

    def labels(self) -> dict[str, str]:
        """Chord symbol -> numeral, e.g. ``{"C": "I", "Dm": "ii", ...}``."""
        return {member.label: numeral for member, numeral in self.chords}


@dataclass(frozen=True)
class KeyMatchResult:
    """Fit of one candidate key against a chord sequence."""

    key: str
    hit: int
    near: int
    percent: int


@dataclass(frozen=True)
class MatchReport:
    """Everything the matching path produces for a non-empty chord sequence."""

    chords: tuple[NormalizedChord, ...]
    ranked: tuple[KeyMatchResult, ...]
    romanization: tuple[str, ...]
    progressions: tuple[str, ...]

    @property
    def best(self) -> KeyMatchResult:
        return self.ranked[0]

    def top(self, count: int) -> tuple[KeyMatchResult, ...]:
        return self.ranked[:count]


@dataclass(frozen=True)
class NoChordsProvided:
    """Outcome of matching text that holds no parseable chord."""

    text: str

    @property
    def message(self) -> str:
        return "No chords provided."


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (62.5 -> 63)."""
    return int(math.floor(value + 0.5))


def tokenize(text: str | None) -> list[str]:
    """Split a chord sequence on whitespace."""
    return (text or "").split()


def detect_progressions(
    romans: Sequence[str],
    patterns: Iterable[Sequence[str]] = DEFAULT_CONFIG.progressions,
) -> list[str]:
    """
    Names of the known progressions found as contiguous runs in ``romans``.

    ``?`` placeholders are dropped first, so a non-diatonic chord between
    two numerals does not break a run. Each pattern is reported at most
    once, in catalogue order.
    """
    known = [numeral for numeral in romans if numeral != UNKNOWN_NUMERAL]
    found: list[str] = []
    for pattern in patterns:
        run = list(pattern)
        size = len(run)
        name = PROGRESSION_JOINER.join(run)
        if name in found or size == 0:
            continue
        if any(known[i:i + size] == run for i in range(len(known) - size + 1)):
            found.append(name)
    return found


class KeyMatcher:
    """
    Scores chord sequences against candidate major keys.

    Scoring
    -------
    Each chord that is one of the key's seven diatonic triads is a *hit*.
    A chord that is not diatonic but is a secondary dominant (V/ii .. V/vii°)
    or a borrowed chord (♭III, iv, ♭VI, ♭VII) is a *near* hit worth half::

        percent = round(100 * (hit + 0.5 * near) / max(1, len(chords)))

    Keys are ranked by percent, ties keeping candidate order.
    """

    def __init__(self, config: TheoryConfig = DEFAULT_CONFIG) -> None:
        self.config = config
        self.speller = PitchSpeller(config)
        self.normalizer = ChordNormalizer(self.speller)

    # ------------------------------------------------------------------
    # Key sets
    # ------------------------------------------------------------------

    def diatonic_set(self, key: str) -> DiatonicKeySet:
        tonic = self.speller.index_of(key)
        if tonic is None:
            return DiatonicKeySet(key=key)

        prefer_flats = self.speller.prefers_flats(key)
        chords = []
        for interval, quality, numeral in MAJOR_SCALE_DEGREES:
            pitch_class = (tonic + interval) % self.speller.size
            root = self.speller.name_of(pitch_class, prefer_flats)
            chords.append((NormalizedChord(root, pitch_class, quality), numeral))
        return DiatonicKeySet(key=key, chords=tuple(chords))

    def near_hit_set(self, key: str) -> frozenset[NormalizedChord]:
        tonic = self.speller.index_of(key)
        if tonic is None:
            return frozenset()

        prefer_flats = self.speller.prefers_flats(key)
        labels = [
            self.speller.name_of(tonic + target + PERFECT_FIFTH, prefer_flats) + "7"
            for target in SECONDARY_TARGETS
        ]
        labels += [
            self.speller.name_of(tonic + interval, prefer_flats=True) + suffix
            for interval, suffix in BORROWED_CHORDS
        ]
        return frozenset(self.normalizer.normalize(label) for label in labels)

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def score(self, key: str, chords: Sequence[NormalizedChord]) -> KeyMatchResult:
        diatonic = self.diatonic_set(key)
        near_hits = self.near_hit_set(key)

        hit = near = 0
        for chord in chords:
            if not chord:
                continue
            if chord in diatonic:
                hit += 1
            elif chord in near_hits:
                near += 1

        weighted = hit + self.config.near_hit_weight * near
        percent = round_half_up(100 * weighted / max(1, len(chords)))
        return KeyMatchResult(key=key, hit=hit, near=near, percent=percent)

    def rank_keys(
        self, candidate_keys: Iterable[str], chords: Sequence[NormalizedChord]
    ) -> list[KeyMatchResult]:
        results = [self.score(key, chords) for key in candidate_keys]
        return sorted(results, key=lambda result: -result.percent)

    def romanize(self, chords: Sequence[NormalizedChord], key: str) -> list[str]:
        diatonic = self.diatonic_set(key)
        return [diatonic.numeral_for(chord) or UNKNOWN_NUMERAL for chord in chords]

    def detect_progressions(self, romans: Sequence[str]) -> list[str]:
        return detect_progressions(romans, self.config.progressions)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def normalize_sequence(self, text: str | None) -> list[NormalizedChord]:
        """Normalize every token of ``text``, dropping the unparseable ones."""
        chords = [self.normalizer.normalize(token) for token in tokenize(text)]
        return [chord for chord in chords if chord]

    def match(
        self, text: str | None, candidate_keys: Iterable[str] | None = None
    ) -> MatchReport | NoChordsProvided:
        """
        Find the best key for a whitespace-separated chord sequence.

        Args:
            text:           e.g. ``"Dm7 G7 Cmaj7 Am"``.
            candidate_keys: Keys to try, in tie-break order. Defaults to the
                            configured candidate keys.

        Returns:
            A :class:`MatchReport`, or :class:`NoChordsProvided` when
            ``text`` holds no parseable chord.
        """
        chords = self.normalize_sequence(text)
        if not chords:
            return NoChordsProvided(text=text or "")

        keys = list(candidate_keys) if candidate_keys is not None else list(self.config.candidate_keys)
        if not keys:
            raise ValueError("At least one candidate key is required.")

        ranked = self.rank_keys(keys, chords)
        best = ranked[0]
        log.info("Best key %s (%d%%) for %d chord(s)", best.key, best.percent, len(chords))

        romanization = self.romanize(chords, best.key)
        return MatchReport(
            chords=tuple(chords),
            ranked=tuple(ranked),
            romanization=tuple(romanization),
            progressions=tuple(self.detect_progressions(romanization)),
        )


def match_chords(
    text: str | None,
    candidate_keys: Iterable[str] | None = None,
    config: TheoryConfig = DEFAULT_CONFIG,
) -> MatchReport | NoChordsProvided:
    return KeyMatcher(config).match(text, candidate_keys)
