"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/barras en múltiples comandos.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TaskID,
    TextColumn,
    TransferSpeedColumn,
)
from rich.table import Table

from core.domain.models import InstallOutcome, InstallStatus


def print_error(console: Console, message: str) -> None:
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")


def print_warning(console: Console, message: str) -> None:
    console.print(f"[yellow]Warning:[/yellow] {escape(message)}")


def print_info(console: Console, message: str) -> None:
    console.print(escape(message))


class DownloadProgress:
    """Barra de descarga que solo aparece con el primer chunk.

    Se usa como callback `(done, total)` del servicio de instalación.
    """

    def __init__(self, console: Console, description: str = "mold") -> None:
        self._description = description
        self._progress = Progress(
            TextColumn("[cyan]{task.description}"),
            BarColumn(),
            DownloadColumn(),
            TransferSpeedColumn(),
            console=console,
            transient=True,
        )
        self._task: TaskID | None = None

    def __call__(self, done: int, total: int | None) -> None:
        if self._task is None:
            self._progress.start()
            self._task = self._progress.add_task(self._description, total=total)
        self._progress.update(self._task, completed=done, total=total)

    def stop(self) -> None:
        if self._task is not None:
            self._progress.stop()
            self._task = None


def build_outcome_table(outcome: InstallOutcome) -> Table:
    table = Table(title="mold", show_header=False)
    table.add_column("Key", style="bright_green", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_row("Status", outcome.status.value)
    table.add_row("Binary", str(outcome.binary_path))
    if outcome.status is InstallStatus.INSTALLED and outcome.artifact is not None:
        table.add_row("Version", outcome.artifact.version)
        table.add_row("Source", outcome.artifact.url)
    if outcome.elevated_with:
        table.add_row("Elevated with", outcome.elevated_with)
    return table
