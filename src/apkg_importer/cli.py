"""Command-line interface for inspecting Anki packages."""

import json
import logging
import re
from pathlib import Path
from typing import Optional

import click
from bs4 import BeautifulSoup
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .config import ImportConfig
from .errors import PackageImportError
from .importer import ImportResult, import_package_file
from .models import RenderedCard, RenderPath

console = Console()


def configure_logging(verbose: bool = False) -> None:
    """Send library logs through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def html_to_text(html_content: str) -> str:
    """Flatten card markup to plain text for terminal display."""
    if not html_content:
        return ""
    soup = BeautifulSoup(html_content, "html.parser")

    for element in soup(["script", "style", "audio"]):
        element.decompose()

    text = soup.get_text(separator="\n")
    lines = (line.strip() for line in text.splitlines())
    text = "\n".join(line for line in lines if line)
    return re.sub(r"\n{3,}", "\n\n", text).strip()


def load_package(package_path: str, config: Optional[ImportConfig] = None) -> ImportResult:
    """Import a package, turning fatal import errors into a CLI failure."""
    try:
        with console.status("Importing package..."):
            return import_package_file(package_path, config)
    except PackageImportError as e:
        console.print(f"[red]Error:[/red] {e.user_message} ({escape(str(e))})")
        raise click.exceptions.Exit(1)


def display_summary(package_path: str, result: ImportResult) -> None:
    """Display import counts."""
    summary = result.summary()

    table = Table(title=Path(package_path).name)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Cards rendered", str(summary["cards"]))
    table.add_row("Card rows", str(summary["card_rows"]))
    table.add_row("Notes", str(summary["notes"]))
    table.add_row("Models", str(summary["models"]))
    table.add_row("Orphaned cards", str(summary["orphaned_cards"]))
    table.add_row("Fallback-rendered cards", str(summary["fallback_cards"]))
    table.add_row("Media files", str(summary["media"]))
    table.add_row("Media missing from archive", str(summary["media_missing"]))

    console.print(table)


def display_card(card: RenderedCard, raw: bool = False) -> None:
    """Display one rendered card."""
    front = escape(card.front_html if raw else html_to_text(card.front_html))
    back = escape(card.back_html if raw else html_to_text(card.back_html))

    path_note = "" if card.render_path == RenderPath.TEMPLATE else " [yellow](fallback)[/yellow]"
    body = f"[bold]Front:[/bold] {front}\n[bold]Back:[/bold] {back}"
    if card.audio_refs:
        body += f"\n[dim]Audio: {len(card.audio_refs)} file(s)[/dim]"

    console.print(Panel(body, title=f"Card {card.card_id}{path_note}", border_style="blue"))


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def cli(verbose: bool):
    """Inspect Anki .apkg packages."""
    configure_logging(verbose)


@cli.command()
@click.argument("package_path", type=click.Path(exists=True, dir_okay=False))
def info(package_path: str):
    """Show counts for a package."""
    with load_package(package_path) as result:
        display_summary(package_path, result)


@cli.command()
@click.argument("package_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--limit", "-l", type=int, default=5, show_default=True, help="Cards to show")
@click.option("--raw", is_flag=True, help="Show markup instead of plain text")
def show(package_path: str, limit: int, raw: bool):
    """Preview rendered cards."""
    with load_package(package_path) as result:
        num_shown = min(limit, len(result.cards))
        console.print(f"\n[bold]Cards (showing {num_shown} of {len(result.cards)}):[/bold]\n")
        for card in result.cards[:limit]:
            display_card(card, raw=raw)


@cli.command("export-json")
@click.argument("package_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(dir_okay=False), required=True, help="Output .json path")
@click.option(
    "--media-dir",
    type=click.Path(file_okay=False),
    help="Where extracted media is kept (default: <output>_media)",
)
def export_json(package_path: str, output: str, media_dir: Optional[str]):
    """Export rendered cards as JSON, keeping extracted media on disk."""
    output_path = Path(output)
    media_root = Path(media_dir) if media_dir else output_path.with_name(f"{output_path.stem}_media")

    # Media is left on disk: the exported markup points at it
    result = load_package(package_path, ImportConfig(media_root=media_root))

    data = {
        "summary": result.summary(),
        "cards": [card.model_dump(mode="json") for card in result.cards],
        "media": [entry.model_dump(mode="json", exclude={"payload"}) for entry in result.media],
    }
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")

    console.print(f"[green]O[/green] Exported {len(result.cards)} cards to: {output_path}")
    console.print(f"[green]O[/green] Media kept in: {result.catalog.session_dir}")


def main():
    """Entry point."""
    cli()


if __name__ == "__main__":
    main()
