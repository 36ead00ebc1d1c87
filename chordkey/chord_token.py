"""Chord-symbol parsing: root extraction and coarse quality normalization."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from chordkey.pitch_class import PitchSpeller, spell_root

log = logging.getLogger(__name__)

MAJOR = "major"
MINOR = "minor"
DIMINISHED = "diminished"

DIM_GLYPH = "°"

#: Label suffix written after the root for each quality
QUALITY_SUFFIX: dict[str, str] = {MAJOR: "", MINOR: "m", DIMINISHED: DIM_GLYPH}

_ROOT_RE = re.compile(r"^([A-Ga-g])([#b]?)")
_TOKEN_RE = re.compile(r"^([A-Ga-g])([#b]?)(.*)$", re.DOTALL)
# A lower-case "m" that does not start "maj"
_MINOR_RE = re.compile(r"m(?!aj)")


@dataclass(frozen=True)
class NormalizedChord:
    """
    A chord reduced to root + triad quality.

    Attributes:
        root:        Written root, e.g. ``"Bb"`` or ``"F#"`` (display only).
        pitch_class: Root pitch class (0=C ... 11=B), ``None`` for the empty chord.
        quality:     ``"major"``, ``"minor"`` or ``"diminished"``.

    Equality ignores the spelling, so ``A#`` and ``Bb`` chords compare equal.
    """

    root: str = field(compare=False)
    pitch_class: int | None
    quality: str

    def __bool__(self) -> bool:
        return self.pitch_class is not None

    @property
    def label(self) -> str:
        """Short symbol, e.g. ``'Em'``, ``'G'`` or ``'B°'``."""
        if not self:
            return ""
        return f"{self.root}{QUALITY_SUFFIX.get(self.quality, '')}"

    def __str__(self) -> str:
        return self.label


EMPTY_CHORD = NormalizedChord(root="", pitch_class=None, quality="")


def root_token(cell_text: str | None) -> str:
    """
    Return the root written at the start of a table cell.

    ``"Gmaj"`` -> ``"G"``, ``" bbm7"`` -> ``"Bb"``, ``"(blank)"`` -> ``""``.
    """
    if not cell_text:
        return ""
    match = _ROOT_RE.match(str(cell_text).strip())
    if match is None:
        return ""
    return spell_root(*match.groups())


def classify_quality(tail: str) -> str:
    """Collapse everything after the root to major, minor or diminished."""
    if "dim" in tail or DIM_GLYPH in tail:
        return DIMINISHED
    if _MINOR_RE.search(tail):
        return MINOR
    return MAJOR


class ChordNormalizer:
    """Parses free-form chord symbols with a given :class:`PitchSpeller`."""

    def __init__(self, speller: PitchSpeller | None = None) -> None:
        self.speller = speller or PitchSpeller()

    def normalize(self, token_text: str | None) -> NormalizedChord:
        """
        Reduce a chord symbol to a :class:`NormalizedChord`.

        Sevenths, suspensions, add-tones and the like are ignored, so
        ``"G7"`` becomes ``G`` and ``"Em7"`` becomes ``Em``. The root keeps a
        flat spelling only when the input was written with a flat.

        Returns:
            The normalized chord, or :data:`EMPTY_CHORD` if no root is found.
        """
        match = _TOKEN_RE.match(token_text.strip()) if token_text else None
        if match is None:
            log.debug("Unparseable chord token %r", token_text)
            return EMPTY_CHORD

        letter, accidental, tail = match.groups()
        pitch_class = self.speller.index_of(letter + accidental)
        if pitch_class is None:
            return EMPTY_CHORD

        root = self.speller.name_of(pitch_class, prefer_flats=accidental == "b")
        return NormalizedChord(
            root=root,
            pitch_class=pitch_class,
            quality=classify_quality(tail),
        )


_default_normalizer = ChordNormalizer()


def normalize(token_text: str | None) -> NormalizedChord:
    return _default_normalizer.normalize(token_text)
