"""Unit tests for key scoring, ranking, romanization and progression detection."""

from dataclasses import replace

import pytest

from chordkey.chord_token import normalize
from chordkey.config import DEFAULT_CONFIG
from chordkey.key_matcher import (
    KeyMatcher,
    MatchReport,
    NoChordsProvided,
    detect_progressions,
    round_half_up,
    tokenize,
)


def _chords(text: str) -> list:
    return [normalize(token) for token in text.split()]


@pytest.fixture
def matcher() -> KeyMatcher:
    return KeyMatcher()


# ── Key sets ───────────────────────────────────────────────────────────────────

def test_diatonic_set_c(matcher: KeyMatcher) -> None:
    assert matcher.diatonic_set("C").labels() == {
        "C": "I", "Dm": "ii", "Em": "iii", "F": "IV", "G": "V", "Am": "vi", "B°": "vii°",
    }


def test_diatonic_set_flat_key_spelling(matcher: KeyMatcher) -> None:
    assert list(matcher.diatonic_set("Eb").labels()) == ["Eb", "Fm", "Gm", "Ab", "Bb", "Cm", "D°"]


def test_diatonic_set_unknown_key_is_empty(matcher: KeyMatcher) -> None:
    assert matcher.diatonic_set("H").chords == ()


def test_near_hit_set_c(matcher: KeyMatcher) -> None:
    labels = {chord.label for chord in matcher.near_hit_set("C")}
    assert labels == {"A", "B", "C", "D", "E", "F#", "Eb", "Fm", "Ab", "Bb"}


def test_near_hit_set_has_ten_chords_for_every_key(matcher: KeyMatcher) -> None:
    for key in DEFAULT_CONFIG.candidate_keys:
        assert len(matcher.near_hit_set(key)) == 10


# ── Scoring ────────────────────────────────────────────────────────────────────

def test_score_all_diatonic(matcher: KeyMatcher) -> None:
    result = matcher.score("C", _chords("C F G"))
    assert (result.hit, result.near, result.percent) == (3, 0, 100)


def test_score_near_hits_count_half(matcher: KeyMatcher) -> None:
    # C, G diatonic; A7 is V/ii and Bb is bVII
    result = matcher.score("C", _chords("C A7 Bb G"))
    assert (result.hit, result.near) == (2, 2)
    assert result.percent == 75


def test_score_rounds_half_up(matcher: KeyMatcher) -> None:
    # 2 hits + 1 near over 4 chords = 62.5%
    result = matcher.score("C", _chords("C G A7 C#"))
    assert result.percent == 63


def test_score_empty_input_does_not_divide_by_zero(matcher: KeyMatcher) -> None:
    result = matcher.score("C", [])
    assert (result.hit, result.near, result.percent) == (0, 0, 0)


def test_score_matches_enharmonic_spelling(matcher: KeyMatcher) -> None:
    assert matcher.score("F", _chords("A#")).hit == 1


def test_round_half_up() -> None:
    assert round_half_up(62.5) == 63
    assert round_half_up(62.4) == 62
    assert round_half_up(0) == 0


# ── Ranking ────────────────────────────────────────────────────────────────────

def test_rank_keys_descending(matcher: KeyMatcher) -> None:
    ranked = matcher.rank_keys(["F", "G", "C"], _chords("C F G"))
    assert [r.key for r in ranked] == ["C", "F", "G"]
    assert ranked[0].percent == 100


def test_rank_keys_ties_keep_candidate_order(matcher: KeyMatcher) -> None:
    # Am and C are diatonic to both C and G
    ranked = matcher.rank_keys(["G", "C"], _chords("C Am"))
    assert [r.key for r in ranked] == ["G", "C"]
    assert ranked[0].percent == ranked[1].percent == 100


# ── Romanization ───────────────────────────────────────────────────────────────

def test_romanize_marks_non_diatonic(matcher: KeyMatcher) -> None:
    assert matcher.romanize(_chords("Dm7 G7 Cmaj7 Eb"), "C") == ["ii", "V", "I", "?"]


# ── Progressions ───────────────────────────────────────────────────────────────

def test_detect_progressions_ii_v_i_only() -> None:
    found = detect_progressions(["ii", "V", "I", "IV"])
    assert "ii–V–I" in found
    assert "I–IV–V" not in found
    assert "IV–V–I" not in found


def test_detect_progressions_skips_unknown_placeholders() -> None:
    assert detect_progressions(["ii", "?", "V", "?", "I"]) == ["ii–V–I"]


def test_detect_progressions_reports_each_once_in_catalogue_order() -> None:
    found = detect_progressions(["IV", "V", "I", "IV", "V", "I", "V", "vi", "IV"])
    assert found == ["I–V–vi–IV", "I–IV–V", "IV–V–I"]


def test_detect_progressions_empty() -> None:
    assert detect_progressions([]) == []
    assert detect_progressions(["?", "?"]) == []


def test_detect_progressions_with_injected_catalogue() -> None:
    config = replace(DEFAULT_CONFIG, progressions=(("I", "ii"),))
    assert KeyMatcher(config).detect_progressions(["I", "ii", "V", "I"]) == ["I–ii"]


# ── Full matching path ─────────────────────────────────────────────────────────

def test_tokenize_splits_on_whitespace() -> None:
    assert tokenize(" C\tG\n Am  F ") == ["C", "G", "Am", "F"]
    assert tokenize(None) == []


def test_match_report(matcher: KeyMatcher) -> None:
    report = matcher.match("Dm7 G7 Cmaj7 Am")
    assert isinstance(report, MatchReport)
    assert report.best.key == "C"
    assert report.best.percent == 100
    assert report.romanization == ("ii", "V", "I", "vi")
    assert report.progressions == ("ii–V–I",)
    assert len(report.ranked) == len(DEFAULT_CONFIG.candidate_keys)
    assert len(report.top(5)) == 5


def test_match_drops_unparseable_tokens(matcher: KeyMatcher) -> None:
    report = matcher.match("C | F | N.C. G")
    assert isinstance(report, MatchReport)
    assert [c.label for c in report.chords] == ["C", "F", "G"]
    assert report.progressions == ("I–IV–V",)


def test_match_uses_given_candidate_keys(matcher: KeyMatcher) -> None:
    report = matcher.match("G D Em C", ["D", "G"])
    assert isinstance(report, MatchReport)
    assert [r.key for r in report.ranked] == ["G", "D"]
    assert report.romanization == ("I", "V", "vi", "IV")
    assert report.progressions == ("I–V–vi–IV",)


@pytest.mark.parametrize("text", ["", "   ", "| % N.C.", None])
def test_match_empty_input_is_explicit_outcome(matcher: KeyMatcher, text: str | None) -> None:
    outcome = matcher.match(text)
    assert isinstance(outcome, NoChordsProvided)
    assert outcome.message == "No chords provided."


def test_match_without_candidate_keys_is_an_error(matcher: KeyMatcher) -> None:
    with pytest.raises(ValueError):
        matcher.match("C F G", [])
