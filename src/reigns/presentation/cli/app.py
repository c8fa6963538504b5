"""Console-driven UI loops for Reality Reigns."""
from __future__ import annotations

import argparse
import logging
import secrets
import time
from pathlib import Path
from typing import Dict, Sequence

from reigns.core.types import Side
from reigns.data.deck_codec import load_deck_file, write_deck_file, write_themes_file
from reigns.data.errors import DataError, DataLoadError
from reigns.data.repositories import ThemesRepository
from reigns.domain.defs import ThemeDef
from reigns.presentation.cli.config import configure_logging, load_config
from reigns.presentation.cli.render import (
    graph_lines,
    render_bullet_lines,
    render_card,
    render_heading,
    render_stats,
)
from reigns.services.deck_graph_validator import format_issue, validate_deck_graph
from reigns.services.deck_session import DeckSession
from reigns.services.deck_editor_service import export_played_deck, import_themes, played_deck_filename
from reigns.services.errors import DeckLoadError, EnginePreconditionError
from reigns.services.generator import OpenAIDeckGenerator
from reigns.services.graph_sync import hidden_targets, project_to_graph
from reigns.services.traversal_service import Playthrough, Verdict, describe_outcome

logger = logging.getLogger(__name__)

_MAX_RANDOM_SEED = 2**31 - 1
_SIDE_ALIASES: Dict[str, Side] = {
    "l": "left",
    "left": "left",
    "1": "left",
    "r": "right",
    "right": "right",
    "2": "right",
}


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="reigns", description="Play and inspect branching card decks."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    play = subparsers.add_parser("play", help="Play a theme's deck in the terminal.")
    play.add_argument("--theme", help="Theme id; defaults to the configured theme.")
    play.add_argument("--deck", type=Path, help="Play this deck file instead of the theme's deck.")
    play.add_argument("--seed", type=int, help="Seed used to assign theme images.")

    graph = subparsers.add_parser("graph", help="Print the graph projection of a deck file.")
    graph.add_argument("--deck", type=Path, required=True)

    validate = subparsers.add_parser("validate", help="Report structural issues in a deck file.")
    validate.add_argument("--deck", type=Path, required=True)

    themes = subparsers.add_parser("themes", help="List the bundled themes.")
    themes.add_argument("--file", type=Path, help="List the themes in an exported themes file instead.")

    export = subparsers.add_parser("export", help="Export bundled themes or a theme's deck.")
    target = export.add_mutually_exclusive_group(required=True)
    target.add_argument("--themes", type=Path, help="Write every bundled theme to this file.")
    target.add_argument("--deck", type=Path, help="Write the deck of --theme to this file.")
    export.add_argument("--theme", help="Theme id; defaults to the configured theme.")
    return parser.parse_args(argv)


def parse_side(text: str) -> Side | None:
    """Map player input to a choice side, or None when unrecognised."""
    return _SIDE_ALIASES.get(text.strip().lower())


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return a process exit code."""
    configure_logging()
    args = parse_args(argv)
    try:
        if args.command == "themes":
            if args.file is not None:
                return _list_theme_file(args.file)
            return _list_themes(ThemesRepository().all())
        if args.command == "export":
            return _export(args)
        if args.command == "graph":
            return _print_graph(args.deck)
        if args.command == "validate":
            return _validate(args.deck)
        return _play(args)
    except DataError as exc:
        print(f"Error: {exc}")
        return 1


def _list_themes(themes: Sequence[ThemeDef]) -> int:
    render_heading("Themes")
    for theme in themes:
        if theme.deck is not None:
            source = "embedded deck"
        elif theme.deck_url:
            source = "remote deck"
        else:
            source = "generated deck"
        print(f"{theme.id:<12} {theme.name} ({source})")
    return 0


def _list_theme_file(path: Path) -> int:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DataLoadError(f"Unable to read themes file: {path}") from exc
    result = import_themes((), text)
    print(result.message)
    if not result.ok:
        return 1
    return _list_themes(result.themes)


def _export(args: argparse.Namespace) -> int:
    repo = ThemesRepository()
    if args.themes is not None:
        themes = repo.all()
        write_themes_file(themes, args.themes)
        print(f"Exported {len(themes)} realities to {args.themes}")
        return 0
    theme_id = args.theme or load_config()["default_theme_id"]
    try:
        theme = repo.get(theme_id)
    except KeyError:
        print(f"Unknown theme: {theme_id}")
        return 1
    try:
        deck = export_played_deck(theme, theme.deck)
    except EnginePreconditionError as exc:
        print(exc)
        return 1
    write_deck_file(deck, args.deck)
    print(f"Exported {deck.name} to {args.deck}")
    return 0


def _print_graph(deck_path: Path) -> int:
    deck = load_deck_file(deck_path)
    render_heading(deck.name or deck_path.name)
    for line in graph_lines(project_to_graph(deck)):
        print(line)
    hidden = hidden_targets(deck)
    if hidden:
        print()
        print("Targets not shown in the graph:")
        render_bullet_lines(f"#{item.index} {item.side} -> {item.target}" for item in hidden)
    return 0


def _validate(deck_path: Path) -> int:
    deck = load_deck_file(deck_path)
    issues = validate_deck_graph(deck)
    if not issues:
        print(f"{deck_path}: no issues found.")
        return 0
    for issue in issues:
        print(format_issue(issue))
    return 1 if any(issue.severity == "ERROR" for issue in issues) else 0


def _play(args: argparse.Namespace) -> int:
    config = load_config()
    repo = ThemesRepository()
    theme_id = args.theme or config["default_theme_id"]
    try:
        theme = repo.get(theme_id)
    except KeyError:
        print(f"Unknown theme: {theme_id}")
        return 1
    if args.deck is not None:
        theme = theme.with_deck(load_deck_file(args.deck))

    seed = args.seed if args.seed is not None else secrets.randbelow(_MAX_RANDOM_SEED) + 1
    logger.debug("Starting %s with seed %d", theme.id, seed)
    session = DeckSession(theme, generator=OpenAIDeckGenerator(), seed=seed)
    playthrough = _load_with_retry(session)
    if playthrough is None:
        return 1
    print(f"=== {theme.name} ===")
    print(theme.description)
    _run_playthrough(playthrough, theme, step_mode=config["text_display_mode"] == "step")
    return 0


def _load_with_retry(session: DeckSession) -> Playthrough | None:
    print("Loading deck...")
    try:
        return session.load()
    except DeckLoadError as exc:
        print(f"Connection Lost: {exc.message}")
        if not exc.can_retry_with_generator:
            return None
    answer = input("Generate a new reality with AI instead? (y/n): ").strip().lower()
    if answer not in ("y", "yes"):
        return None
    try:
        return session.retry_with_generator()
    except DeckLoadError as exc:
        print(f"Connection Lost: {exc.message}")
        return None


def _run_playthrough(playthrough: Playthrough, theme: ThemeDef, *, step_mode: bool = False) -> None:
    while not playthrough.is_over:
        card = playthrough.current_card()
        assert card is not None
        print()
        render_stats(playthrough.state.stats, theme)
        render_card(card, playthrough.state.index, len(playthrough.deck))
        side = _prompt_side()
        if side is None:
            print("You walk away from this reality.")
            return
        playthrough.choose(side)
        if step_mode and not playthrough.is_over:
            input("Press Enter to continue...")

    outcome = playthrough.last_outcome
    assert outcome is not None
    print()
    render_stats(outcome.stats, theme)
    render_heading("Victory" if outcome.verdict is Verdict.WIN else "Game Over")
    print(describe_outcome(outcome, theme))
    print(f"Choices made: {playthrough.steps}")
    _offer_export(playthrough, theme)


def _offer_export(playthrough: Playthrough, theme: ThemeDef) -> None:
    answer = input("Export this story? (y/n): ").strip().lower()
    if answer not in ("y", "yes"):
        return
    deck = export_played_deck(theme, playthrough.deck)
    target = Path.cwd() / played_deck_filename(theme, int(time.time() * 1000))
    write_deck_file(deck, target)
    print(f"Story saved to {target}")


def _prompt_side() -> Side | None:
    while True:
        raw = input("Choose [L]eft or [R]ight (Q to quit): ")
        if raw.strip().lower() in ("q", "quit"):
            return None
        side = parse_side(raw)
        if side is not None:
            return side
        print("Invalid selection. Please enter L or R.")
