"""
FILE: doerfy/cli/commands/banner.py
PURPOSE: Home banner commands (banner show, image, quote, audio, set, rm)
"""

from typing import Optional

import typer

from ..main import banner_app, console, error_console
from ...core import service
from ...core.exceptions import DoerfyError
from ...formatting import TaskFormatter


@banner_app.command("show")
def banner_show(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Show the banner configuration."""
    try:
        config = service.get_banner_config()
        if json_output:
            typer.echo(config.to_json())
        else:
            console.print(TaskFormatter.create_banner_panel(config))

    except DoerfyError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@banner_app.command("image")
def banner_image(
    url: str = typer.Argument(..., help="Image URL"),
):
    """
    Add a banner image.

    Example:
        doerfy banner image https://example.com/mountains.jpg
    """
    try:
        config = service.add_banner_image(url)
        console.print(f"[green]✓[/green] Added image #{len(config.images)}")

    except DoerfyError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@banner_app.command("quote")
def banner_quote(
    text: str = typer.Argument(..., help="Quote text"),
    author: Optional[str] = typer.Option(None, "--author", "-a", help="Who said it"),
):
    """
    Add a banner quote.

    Example:
        doerfy banner quote "Well begun is half done" --author Aristotle
    """
    try:
        config = service.add_banner_quote(text, author)
        console.print(f"[green]✓[/green] Added quote #{len(config.quotes)}")

    except DoerfyError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@banner_app.command("audio")
def banner_audio(
    url: str = typer.Argument(..., help="Audio track URL"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Track name"),
):
    """Add a background audio track."""
    try:
        config = service.add_banner_audio(url, name)
        console.print(f"[green]✓[/green] Added track #{len(config.audio)}: {config.audio[-1]['name']}")

    except DoerfyError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@banner_app.command("set")
def banner_set(
    transition: Optional[int] = typer.Option(None, "--transition", help="Seconds per image"),
    autoplay: Optional[bool] = typer.Option(None, "--autoplay/--no-autoplay", help="Start audio automatically"),
    volume: Optional[int] = typer.Option(None, "--volume", help="Volume 0-100"),
    rotate: Optional[bool] = typer.Option(None, "--rotate/--no-rotate", help="Rotate quotes"),
    quote_duration: Optional[int] = typer.Option(None, "--quote-duration", help="Seconds per quote"),
):
    """
    Change banner playback settings.

    Example:
        doerfy banner set --transition 8 --volume 30 --rotate
    """
    try:
        service.update_banner_settings(
            transition_time=transition,
            autoplay=autoplay,
            volume=volume,
            quote_rotation=rotate,
            quote_duration=quote_duration,
        )
        console.print("[green]✓[/green] Banner settings saved")

    except DoerfyError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@banner_app.command("rm")
def banner_rm(
    kind: str = typer.Argument(..., help="image, quote or audio"),
    number: int = typer.Argument(..., help="Item number as shown by 'banner show'"),
):
    """
    Remove a banner image, quote or audio track.

    Example:
        doerfy banner rm quote 2
    """
    try:
        service.remove_banner_item(kind, number)
        console.print(f"[red]✗[/red] Removed {kind} #{number}")

    except DoerfyError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
