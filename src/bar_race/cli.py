"""CLI interface for bar-race."""

import logging
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.live import Live
from rich.logging import RichHandler

from .animation_pipeline import encode_animation
from .config import RaceConfig
from .console_printer import RaceConsolePrinter
from .data import DatasetError, EmptyDatasetError, Frame, load_frames
from .output import resolve_output_provider, supported_output_formats
from .race.scheduler import MonotonicFrameScheduler
from .race.session import RaceSession

console = Console()
err_console = Console(stderr=True)
SUPPORTED_OUTPUT_FORMATS_TEXT = ", ".join(supported_output_formats()).upper()


class CLIError(Exception):
    """Base exception for CLI errors with user-friendly messages."""
    pass


def main(
    data_file: str = typer.Argument(None, help="CSV file with Entity, Year and value columns"),
    out: str = typer.Option(
        None,
        "--output",
        "-out",
        "-o",
        help=f"Generate animated chart ({SUPPORTED_OUTPUT_FORMATS_TEXT})",
    ),
    top_k: int | None = typer.Option(None, "--top-k", "-k", help="Number of bars per period"),
    interval: int | None = typer.Option(
        None, "--interval", help="Milliseconds between period steps"
    ),
    transition: int | None = typer.Option(
        None, "--transition", help="Milliseconds each bar transition lasts"
    ),
    fps: int | None = typer.Option(None, "--fps", help="Frames per second for the animation"),
    max_frames: int | None = typer.Option(
        None,
        "--max-frame",
        help="Maximum number of frames to generate",
    ),
    category_fallback: str | None = typer.Option(
        None,
        "--category-fallback",
        help="Category for rows without a known region (entity, uncategorized)",
    ),
    timeline_step: int | None = typer.Option(
        None, "--timeline-step", help="Label every Nth period on the timeline"
    ),
    live: float | None = typer.Option(
        None, "--live", help="Play the ranking in the terminal for this many seconds"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """
    Load a time-series table and render it as a bar-chart race.

    Examples:
      # Render a GIF next to the data
      bar-race population.csv

      # Animated SVG with 12 bars and slower steps
      bar-race population.csv -o race.svg --top-k 12 --interval 250
    """
    _configure_logging(verbose)
    try:
        if not data_file:
            raise CLIError("Data file is required")

        config = _resolve_config(
            top_k=top_k,
            interval_ms=interval,
            transition_ms=transition,
            fps=fps,
            timeline_step=timeline_step,
            category_fallback=category_fallback,
        )
        frames = _load_frames(data_file, config)

        printer = RaceConsolePrinter(console)
        printer.display_stats(frames)
        printer.display_rankings(frames, config.top_k)

        if live:
            _play_live(frames, config, live, printer)
            return

        output_path = out or f"{Path(data_file).stem}-race.gif"
        _generate_output(frames, output_path, config, max_frames, Path(data_file).parent)

    except CLIError as e:
        err_console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(1)

    except Exception as e:
        err_console.print(f"[bold red]Unexpected error:[/bold red] {e}")
        sys.exit(1)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _resolve_config(**overrides: object) -> RaceConfig:
    """Environment (and .env) settings, overridden by explicit options."""
    try:
        return RaceConfig.from_env().with_overrides(**overrides)
    except ValueError as e:
        raise CLIError(f"Invalid configuration: {e}")


def _load_frames(file_path: str, config: RaceConfig) -> tuple[Frame, ...]:
    console.print(f"[bold blue]Loading data from {file_path}...[/bold blue]")
    try:
        return load_frames(file_path, config.category_fallback)
    except EmptyDatasetError:
        raise CLIError(f"No usable frames in '{file_path}' (every row was dropped)")
    except DatasetError as e:
        raise CLIError(str(e))


def _play_live(
    frames: tuple[Frame, ...], config: RaceConfig, seconds: float, printer: RaceConsolePrinter
) -> None:
    """Run the interactive session against the wall clock, redrawing on every step."""
    scheduler = MonotonicFrameScheduler()
    session = RaceSession(frames, scheduler, config)
    try:
        with Live(printer.top_table(session.view), console=console, auto_refresh=False) as view:
            session.controller.subscribe(
                lambda _index: view.update(printer.top_table(session.view), refresh=True)
            )
            scheduler.run_for(seconds * 1000)
    finally:
        session.close()


def _generate_output(
    frames: tuple[Frame, ...],
    output_path: str,
    config: RaceConfig,
    max_frames: int | None,
    decoration_dir: Path,
) -> None:
    """Generate animation in the format specified by output_path."""
    if output_path.lower().endswith(".gif") and config.fps > 50:
        console.print(
            f"[yellow]Warning:[/yellow] FPS > 50 may not display correctly in browsers "
            f"(GIF delay will be {config.frame_duration}ms, but browsers clamp delays < 20ms to ~100ms)"
        )

    ext = Path(output_path).suffix[1:].upper()
    try:
        provider = resolve_output_provider(output_path)
    except ValueError as e:
        raise CLIError(str(e))

    console.print(f"\n[bold blue]Generating {ext} animation...[/bold blue]")
    try:
        encoded = encode_animation(
            frames,
            output_path,
            config=config,
            max_frames=max_frames,
            decoration_dir=decoration_dir,
            provider=provider,
        )
    except Exception as e:
        raise CLIError(f"Failed to generate output: {e}")

    console.print(f"[bold blue]Saving to {output_path}...[/bold blue]")
    try:
        provider.write(encoded)
    except OSError as e:
        raise CLIError(f"Failed to save file '{output_path}': {e}")
    console.print(f"[green]✓[/green] {ext} saved to {output_path}")


app = typer.Typer()
app.command()(main)

if __name__ == "__main__":
    app()
