"""
Terminal user interface built on rich.

`ConsolePrompter` is the only place that talks to the terminal. The
interactive flow depends on its small surface (`ask_choice`, `ask_text`,
`ask_int`, `ask_confirm`, `progress`, `show`), so a scripted stand-in can
drive the flow in tests.
"""
from contextlib import contextmanager
from typing import Iterator, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.text import Text

from ..config.common import PROGRAM_NAME, PROGRAM_TAGLINE


class ProgressSink:
    """Receives progress updates for one running task."""

    def __init__(self, progress: Progress, task_id):
        self._progress = progress
        self._task_id = task_id

    def update(self, completed: Optional[float], total: Optional[float] = 100) -> None:
        """
        Moves the bar to `completed` out of `total`.

        A None total switches the bar to indeterminate while keeping the
        position; a None completed means the position itself is unknown and
        also makes the bar indeterminate.
        """
        if completed is None:
            self._progress.update(self._task_id, total=None)
        else:
            self._progress.update(self._task_id, completed=completed, total=total)


class ConsolePrompter:
    """Renders menus, prompts and progress bars on the terminal."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def clear(self) -> None:
        self.console.clear()

    def banner(self) -> None:
        self.console.print(
            Panel(
                Text(PROGRAM_NAME, style="bold yellow", justify="center"),
                subtitle=f"[dim]{PROGRAM_TAGLINE}[/]",
                expand=False,
                padding=(0, 6),
            )
        )

    def show(self, message: str, style: Optional[str] = None) -> None:
        """Prints one line. `message` is plain text; markup in it is not interpreted."""
        self.console.print(escape(message), style=style)

    def ask_choice(self, title: str, choices: Sequence[str], default: Optional[str] = None) -> str:
        """Shows a numbered menu and returns the chosen entry."""
        if not choices:
            raise ValueError("ask_choice needs at least one choice.")
        self.console.print(f"\n[bold]{escape(title)}[/]")
        for number, choice in enumerate(choices, start=1):
            self.console.print(f"  [cyan]{number}[/]) {escape(choice)}")
        numbers = [str(n) for n in range(1, len(choices) + 1)]
        default_number = str(choices.index(default) + 1) if default in choices else "1"
        picked = Prompt.ask(
            "[bold cyan]>[/]", choices=numbers, default=default_number, console=self.console
        )
        return choices[int(picked) - 1]

    def ask_text(self, prompt: str, default: Optional[str] = None) -> str:
        if default is None:
            return Prompt.ask(prompt, console=self.console)
        return Prompt.ask(prompt, default=default, console=self.console)

    def ask_int(
        self,
        prompt: str,
        minimum: int,
        maximum: int,
        default: Optional[int] = None,
    ) -> int:
        """Asks for an integer until one within [minimum, maximum] is entered."""
        while True:
            if default is None:
                value = IntPrompt.ask(prompt, console=self.console)
            else:
                value = IntPrompt.ask(prompt, default=default, console=self.console)
            if minimum <= value <= maximum:
                return value
            self.console.print(f"[red]Value must be between {minimum} and {maximum}[/]")

    def ask_confirm(self, prompt: str, default: bool = False) -> bool:
        return Confirm.ask(prompt, default=default, console=self.console)

    def wait_for_enter(self, prompt: str = "Press Enter to continue...") -> None:
        self.console.input(f"[yellow]{escape(prompt)}[/]")

    @contextmanager
    def progress(self, description: str, transfer: bool = False) -> Iterator[ProgressSink]:
        """
        Shows a progress bar for the duration of the `with` block.

        Args:
            description: Label shown left of the bar.
            transfer: If True, completed/total are bytes and shown as sizes.
        """
        amount_column = DownloadColumn() if transfer else TaskProgressColumn()
        with Progress(
            SpinnerColumn(),
            TextColumn("[bold cyan]{task.description}"),
            BarColumn(bar_width=38, complete_style="cyan", finished_style="green"),
            amount_column,
            TimeElapsedColumn(),
            TimeRemainingColumn(),
            console=self.console,
        ) as progress:
            task_id = progress.add_task(description, total=None if transfer else 100)
            yield ProgressSink(progress, task_id)
