"""Command line entry point for BRB Shorts."""

from __future__ import annotations

import random
import threading
import webbrowser

import click
import uvicorn
from rich.console import Console

from brb_shorts.config import load_settings
from brb_shorts.errors import YouTubeCatalogError
from brb_shorts.services.catalog_fetcher import CatalogFetcher
from brb_shorts.services.config_store import (
    API_KEY_ENV,
    CHANNEL_ID_ENV,
    EnvironmentConfigStore,
)
from brb_shorts.services.network import get_local_ip
from brb_shorts.services.playback import PlaybackSequencer

console = Console()


def _print_banner(port: int, local_ip: str) -> None:
    rule = "=" * 58
    console.print()
    console.print(rule)
    console.print("   [bold]OBS BRB Shorts[/bold] - Server Running!")
    console.print(rule)
    console.print()
    console.print("  [bold]PLAYER URLs[/bold]")
    console.print(f"  This computer:     [cyan]http://localhost:{port}/player[/cyan]")
    console.print(f"  Other devices:     [cyan]http://{local_ip}:{port}/player[/cyan]")
    console.print()
    console.print("  Use 'localhost' if OBS is on this computer.")
    console.print(f"  Use the IP address ({local_ip}) from other computers on your network.")
    console.print()
    console.print("  [bold]SETUP & HELP[/bold]")
    console.print(f"  First-time setup:  http://localhost:{port}/setup")
    console.print(f"  OBS Guide:         http://localhost:{port}/obs-guide")
    console.print(f"  Settings:          http://localhost:{port}/settings")
    console.print()
    console.print(f"  Config stored in:  environment variables ({API_KEY_ENV}, {CHANNEL_ID_ENV})")
    console.print(rule)
    console.print("  Keep this window open while streaming! Press Ctrl+C to stop.")
    console.print()


@click.group()
@click.version_option(version="0.1.0")
def main() -> None:
    """BRB Shorts - rotating YouTube Shorts for your stream's break scene."""


@main.command()
@click.option("--host", default=None, help="Interface to bind (default from BRB_SHORTS_HOST).")
@click.option("--port", default=None, type=int, help="Port to bind (default from BRB_SHORTS_PORT).")
@click.option("--no-browser", is_flag=True, help="Never open the setup page automatically.")
def serve(host: str | None, port: int | None, no_browser: bool) -> None:
    """Run the player and setup server."""
    settings = load_settings()
    bind_host = host or settings.host
    bind_port = port or settings.port

    _print_banner(bind_port, get_local_ip())

    first_run = EnvironmentConfigStore().load() is None
    if first_run and settings.open_browser_on_first_run and not no_browser:
        url = f"http://localhost:{bind_port}"
        threading.Timer(1.0, webbrowser.open, args=(url,)).start()

    uvicorn.run("brb_shorts.main:app", host=bind_host, port=bind_port, log_config=None)


@main.command("show-config")
def show_config() -> None:
    """Show the stored channel configuration (never the API key)."""
    config = EnvironmentConfigStore().load()
    if config is None:
        console.print("[yellow]Not configured.[/yellow] Run `brb-shorts serve` and open /setup.")
        return
    console.print(f"Channel ID:  [cyan]{config.channel_id}[/cyan]")
    console.print("API key:     [green]set[/green]")
    console.print(f"Filter mode: [cyan]{config.filter_mode}[/cyan]")


@main.command("clear-config")
@click.confirmation_option(prompt="Clear the saved API key and channel?")
def clear_config() -> None:
    """Remove the stored channel configuration."""
    EnvironmentConfigStore().clear()
    console.print("[green]Configuration cleared.[/green]")


@main.command()
@click.option("--cycles", default=1, show_default=True, type=click.IntRange(min=1))
@click.option("--seed", default=None, type=int, help="Seed the shuffle for a repeatable order.")
def preview(cycles: int, seed: int | None) -> None:
    """Fetch the catalog once and print the shuffled play order."""
    config = EnvironmentConfigStore().load()
    if config is None:
        raise click.ClickException("Not configured. Run `brb-shorts serve` and open /setup.")

    settings = load_settings()
    fetcher = CatalogFetcher(max_pages=settings.catalog_max_pages)
    with console.status("Fetching uploads from YouTube..."):
        try:
            result = fetcher.refresh_catalog(config)
        except YouTubeCatalogError as exc:
            raise click.ClickException(str(exc)) from exc

    console.print(
        f"Found [bold]{len(result.video_ids)}[/bold] videos "
        f"({config.filter_mode} mode, {result.pages_fetched} pages scanned)"
    )
    if not result.video_ids:
        return

    sequencer = PlaybackSequencer(result.video_ids, rng=random.Random(seed))
    for cycle in range(1, cycles + 1):
        console.print(f"\n[bold]Cycle {cycle}[/bold]")
        for position, video_id in enumerate(sequencer.take(len(result.video_ids)), start=1):
            console.print(f"  {position:>3}. https://youtu.be/{video_id}")


if __name__ == "__main__":
    main()
