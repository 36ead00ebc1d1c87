"""Tests for the click command-line interface."""

import json
from pathlib import Path

from click.testing import CliRunner

from chordkey import __version__
from chordkey.cli import main
from chordkey.demo_table import DEMO_TABLE


def _run(*args: str, stdin_text: str | None = None):
    return CliRunner().invoke(main, list(args), input=stdin_text)


def test_version() -> None:
    result = _run("--version")
    assert result.exit_code == 0
    assert __version__ in result.output


def test_derive_with_demo_table() -> None:
    result = _run("derive", "C")
    assert result.exit_code == 0
    assert "Key of C" in result.output
    assert "Secondary Dominants" in result.output
    assert "A7" in result.output
    assert "F#7" in result.output


def test_derive_json_output() -> None:
    result = _run("derive", "Bb", "--format", "json")
    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["key"] == "Bb"
    assert payload["one"] == "Bbmaj"
    assert payload["seven"] == "A°"


def test_derive_from_table_file(tmp_path: Path) -> None:
    grid = tmp_path / "grid.tsv"
    grid.write_text("C\tD\nDmin\tDmaj\n\t\n\t\n\t\nGmaj\tAmaj\n", encoding="utf-8")
    result = _run("derive", "C", "--table", str(grid), "--format", "json")
    assert result.exit_code == 0
    assert json.loads(result.output)["five_of_one"] == "A7"


def test_derive_from_stdin() -> None:
    result = _run("derive", "G", "--table", "-", "--format", "json", stdin_text=DEMO_TABLE)
    assert result.exit_code == 0
    assert json.loads(result.output)["five"] == "Dmaj"


def test_derive_unknown_key_fails() -> None:
    result = _run("derive", "H")
    assert result.exit_code == 1
    assert "not found" in result.output


def test_derive_empty_table_fails(tmp_path: Path) -> None:
    grid = tmp_path / "empty.csv"
    grid.write_text("\n\n", encoding="utf-8")
    result = _run("derive", "C", "--table", str(grid))
    assert result.exit_code == 1
    assert "empty" in result.output


def test_match_text_output() -> None:
    result = _run("match", "Dm7", "G7", "Cmaj7")
    assert result.exit_code == 0
    assert "1. C" in result.output
    assert "In C: ii V I" in result.output
    assert "ii–V–I" in result.output


def test_match_json_output_respects_top_and_keys() -> None:
    result = _run("match", "G D Em C", "--keys", "D, G", "--top", "1", "--format", "json")
    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["best_key"] == "G"
    assert [r["key"] for r in payload["ranked"]] == ["G"]
    assert payload["progressions"] == ["I–V–vi–IV"]


def test_match_reads_stdin() -> None:
    result = _run("match", "-", stdin_text="C F G\n")
    assert result.exit_code == 0
    assert "I–IV–V" in result.output


def test_match_without_chords_fails() -> None:
    result = _run("match", "N.C.")
    assert result.exit_code == 1
    assert "No chords provided." in result.output


def test_match_only_writes_to_stdout(tmp_path: Path) -> None:
    result = _run("match", "Am", "F", "C", "G", "--midi", str(tmp_path / "song.mid"))
    assert result.exit_code == 2
    assert "No such option" in result.output
    assert list(tmp_path.iterdir()) == []


def test_demo_table_command() -> None:
    result = _run("demo-table")
    assert result.exit_code == 0
    assert result.output == DEMO_TABLE
