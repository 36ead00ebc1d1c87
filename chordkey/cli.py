"""chordkey CLI entry point."""

import json
import logging
import sys
from dataclasses import asdict

import click

from chordkey import __version__
from chordkey.chord_deriver import ChordDeriver, ChordSet
from chordkey.config import DEFAULT_CONFIG, TOP_MATCHES
from chordkey.demo_table import DEMO_TABLE
from chordkey.exceptions import KeyNotFoundError
from chordkey.grid_table import parse
from chordkey.key_matcher import KeyMatcher, MatchReport, NoChordsProvided

OUTPUT_FORMATS = ["text", "json"]


def _split_keys(value: str | None) -> list[str] | None:
    """Turn ``"C, G,D"`` into ``["C", "G", "D"]``."""
    if value is None:
        return None
    return [key.strip() for key in value.split(",") if key.strip()]


def _echo_section(title: str, slots: dict[str, str]) -> None:
    click.echo(title)
    for label, chord in slots.items():
        click.echo(f"  {label:<7} {chord or '-'}")
    click.echo()


def _echo_chord_set(chord_set: ChordSet) -> None:
    click.echo(f"Key of {chord_set.key}")
    click.echo()
    _echo_section("Primary", chord_set.primary())
    _echo_section("Secondary Dominants", chord_set.secondary_dominants())
    _echo_section("Modal Interchange", chord_set.modal_interchange())
    _echo_section("Leading Tone", chord_set.leading_tone())


def _echo_match(report: MatchReport, top: int) -> None:
    click.echo(f"Chords : {' '.join(chord.label for chord in report.chords)}")
    click.echo()
    click.echo("Best matching keys:")
    for rank, result in enumerate(report.top(top), start=1):
        bar = "=" * (result.percent // 5)
        click.echo(
            f"  {rank}. {result.key:<3} {result.percent:>3}%  "
            f"(hits {result.hit}, near {result.near})  {bar}"
        )
    click.echo()
    click.echo(f"In {report.best.key}: {' '.join(report.romanization)}")
    if report.progressions:
        click.echo(f"Progressions: {', '.join(report.progressions)}")
    else:
        click.echo("Progressions: none detected")


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="chordkey")
@click.option("--verbose", "-v", is_flag=True, help="Log lookup details to stderr.")
def main(verbose: bool) -> None:
    """chordkey: chord sets, secondary dominants and key matching."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)-8s %(message)s",
    )


# ── derive subcommand ──────────────────────────────────────────────────────────

@main.command()
@click.argument("key")
@click.option(
    "--table",
    "-t",
    "table_file",
    type=click.File("r", encoding="utf-8"),
    default=None,
    metavar="PATH",
    help="Delimited chord grid (comma, semicolon or tab). Use - for stdin. "
    "Defaults to the built-in demo grid.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS, case_sensitive=False),
    default="text",
    show_default=True,
    help="Output as readable text or a JSON object of named slots.",
)
def derive(key: str, table_file, output_format: str) -> None:
    """
    Derive the chord set of KEY from a pasted chord grid.

    The grid's first line names one key per column; the lines below are
    theory rows 5, 6, 7, ... (I, ii, iii, IV, V, vi at rows 5-10 and the
    borrowed chords at rows 14, 15, 17 and 18).

    \b
    Examples:
      chordkey derive C
      chordkey derive Bb --table my_grid.csv
      chordkey derive G --table - --format json < grid.tsv
    """
    raw_text = table_file.read() if table_file is not None else DEMO_TABLE
    table = parse(raw_text, first_row=DEFAULT_CONFIG.first_theory_row)
    if table.is_empty:
        click.echo("  ERROR: The chord table is empty.", err=True)
        sys.exit(1)

    try:
        chord_set = ChordDeriver(DEFAULT_CONFIG).derive(key, table)
    except KeyNotFoundError as exc:
        click.echo(f"  ERROR: {exc}", err=True)
        click.echo(f"  Available keys: {', '.join(exc.headers)}", err=True)
        sys.exit(1)

    if output_format.lower() == "json":
        click.echo(json.dumps(asdict(chord_set), ensure_ascii=False, indent=2))
    else:
        _echo_chord_set(chord_set)


# ── match subcommand ───────────────────────────────────────────────────────────

@main.command()
@click.argument("chords", nargs=-1)
@click.option(
    "--keys",
    default=None,
    metavar="LIST",
    help="Comma-separated candidate keys, in tie-break order. Defaults to all 12 major keys.",
)
@click.option(
    "--top",
    type=click.IntRange(1, None),
    default=TOP_MATCHES,
    show_default=True,
    help="Number of ranked keys to show.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS, case_sensitive=False),
    default="text",
    show_default=True,
)
def match(chords: tuple[str, ...], keys: str | None, top: int, output_format: str) -> None:
    """
    Find the major key that best fits a chord sequence.

    CHORDS are chord symbols separated by spaces (quote them as one
    argument or pass them separately). Use - to read them from stdin.

    \b
    Examples:
      chordkey match Dm7 G7 Cmaj7 Am
      chordkey match "C G Am F" --keys C,G,F --top 3
      chordkey match Em C G D --format json
    """
    if chords == ("-",):
        text = click.get_text_stream("stdin").read()
    else:
        text = " ".join(chords)

    matcher = KeyMatcher(DEFAULT_CONFIG)
    try:
        outcome = matcher.match(text, _split_keys(keys))
    except ValueError as exc:
        click.echo(f"  ERROR: {exc}", err=True)
        sys.exit(1)

    if isinstance(outcome, NoChordsProvided):
        click.echo(outcome.message, err=True)
        sys.exit(1)

    if output_format.lower() == "json":
        payload = {
            "chords": [chord.label for chord in outcome.chords],
            "ranked": [asdict(result) for result in outcome.top(top)],
            "best_key": outcome.best.key,
            "romanization": list(outcome.romanization),
            "progressions": list(outcome.progressions),
        }
        click.echo(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        _echo_match(outcome, top)


# ── demo-table subcommand ──────────────────────────────────────────────────────

@main.command("demo-table")
def demo_table() -> None:
    """Print the built-in demo grid (edit it and pass it back with --table)."""
    click.echo(DEMO_TABLE, nl=False)
