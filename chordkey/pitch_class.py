"""PitchSpeller: 12-tone pitch-class arithmetic with sharp/flat spelling."""

from __future__ import annotations

import re

from chordkey.config import DEFAULT_CONFIG, TheoryConfig

# Letter (any case) plus an optional sharp or flat sign
NOTE_PATTERN = re.compile(r"^([A-Ga-g])([#b]?)$")


def spell_root(letter: str, accidental: str) -> str:
    """Canonical written form of a root: upper-case letter, accidental as given."""
    return f"{letter.upper()}{accidental}"


class PitchSpeller:
    """
    Converts note names to pitch-class indices and back.

    The integer index is the only thing arithmetic touches; whether a black
    key is written ``A#`` or ``Bb`` is decided afterwards by ``prefer_flats``.

    Flat preference is a fixed list of keys (F, Bb, Eb, Ab, Db, Gb) rather
    than a full key-signature model, so double accidentals and keys such as
    Cb or C# are not spelled the way a textbook would spell them.
    """

    def __init__(self, config: TheoryConfig = DEFAULT_CONFIG) -> None:
        self.config = config
        self._naturals = {
            name: idx for idx, name in enumerate(config.note_names) if len(name) == 1
        }
        self._flat_spelling = dict(config.flat_names)
        self._flat_lookup = {name: idx for idx, name in config.flat_names}

    @property
    def size(self) -> int:
        return self.config.semitones

    def index_of(self, name: str) -> int | None:
        """
        Resolve a note name to its pitch class.

        Args:
            name: ``"C"``, ``"f#"``, ``"Bb"``, ... (letter case is ignored).

        Returns:
            Index in ``[0, 12)`` or ``None`` if the name is not a note.
        """
        match = NOTE_PATTERN.match(name.strip()) if name else None
        if match is None:
            return None

        letter, accidental = match.groups()
        spelled = spell_root(letter, accidental)
        if spelled in self._flat_lookup:
            return self._flat_lookup[spelled]

        natural = self._naturals.get(letter.upper())
        if natural is None:
            return None
        offset = {"#": 1, "b": -1}.get(accidental, 0)
        return (natural + offset) % self.size

    def name_of(self, index: int, prefer_flats: bool = False) -> str:
        """Spell a pitch class, wrapping ``index`` into range first."""
        index %= self.size
        if prefer_flats and index in self._flat_spelling:
            return self._flat_spelling[index]
        return self.config.note_names[index]

    def transpose(self, root_name: str, offset: int, prefer_flats: bool = False) -> str:
        """Move ``root_name`` by ``offset`` semitones; "" if the root is not a note."""
        index = self.index_of(root_name)
        if index is None:
            return ""
        return self.name_of(index + offset, prefer_flats)

    def prefers_flats(self, key: str) -> bool:
        """True when ``key`` is one of the flat-spelled major keys."""
        match = NOTE_PATTERN.match(key.strip()) if key else None
        if match is None:
            return False
        return spell_root(*match.groups()) in self.config.flat_keys


_default_speller = PitchSpeller()


def index_of(name: str) -> int | None:
    return _default_speller.index_of(name)


def name_of(index: int, prefer_flats: bool = False) -> str:
    return _default_speller.name_of(index, prefer_flats)


def transpose(root_name: str, offset: int, prefer_flats: bool = False) -> str:
    return _default_speller.transpose(root_name, offset, prefer_flats)


def prefers_flats(key: str) -> bool:
    return _default_speller.prefers_flats(key)
