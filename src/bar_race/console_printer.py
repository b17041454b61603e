"""Rich console output for loaded datasets."""

from typing import Sequence

from rich.console import Console
from rich.table import Table

from .data.records import Frame
from .race.scales import format_count
from .race.scene import RankedView, rank_frame


class RaceConsolePrinter:
    """Prints dataset statistics and ranking tables."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def display_stats(self, frames: Sequence[Frame]) -> None:
        """Print period span and entity counts."""
        names = {entity.name for frame in frames for entity in frame.entities}
        rows = sum(len(frame) for frame in frames)
        self.console.print(
            f"[bold]{len(frames)}[/bold] periods "
            f"([cyan]{frames[0].period}[/cyan]..[cyan]{frames[-1].period}[/cyan]), "
            f"[bold]{len(names)}[/bold] entities, [bold]{rows}[/bold] rows"
        )

    def display_rankings(self, frames: Sequence[Frame], top_k: int) -> None:
        """Print the top-K table of the first and last period."""
        self.console.print(self.top_table(rank_frame(frames[0], top_k)))
        if len(frames) > 1:
            self.console.print(self.top_table(rank_frame(frames[-1], top_k)))

    def top_table(self, view: RankedView) -> Table:
        table = Table(title=f"{view.frame.period}  (total {format_count(view.total)})")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Entity")
        table.add_column("Category", style="magenta")
        table.add_column("Value", justify="right", style="green")
        for rank, entity in enumerate(view.selection, start=1):
            table.add_row(str(rank), entity.name, entity.category.key, format_count(entity.value))
        return table
