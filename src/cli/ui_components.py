"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar paneles/tablas entre `check` y `doctor`.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import BatchOutcome, ExposureResult, SkippedCredential


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida (solo comandos interactivos)."""

    title = Text("pwnrange", style="bold cyan")
    subtitle = Text("Breach corpus lookup • k-anonymity range queries", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def format_outcome(outcome: BatchOutcome) -> Text:
    """Una línea legible por resultado."""

    text = Text(f"#{outcome.position}: ", style="bold")
    if isinstance(outcome, SkippedCredential):
        text.append(f"skipped ({outcome.reason})", style="yellow")
    elif outcome.exposed:
        text.append(f"exposed {outcome.count:,} times", style="red")
    else:
        text.append("not exposed", style="green")
    return text


def build_summary_panel(outcomes: list[BatchOutcome], *, aborted: str | None = None) -> Panel:
    """Totales de un lote terminado (o abortado)."""

    results = [o for o in outcomes if isinstance(o, ExposureResult)]
    exposed = sum(1 for r in results if r.exposed)
    skipped = len(outcomes) - len(results)

    table = Table.grid(padding=(0, 2))
    table.add_column(style="dim")
    table.add_column()
    table.add_row("Checked", str(len(results)))
    table.add_row("Exposed", Text(str(exposed), style="red" if exposed else "green"))
    table.add_row("Not exposed", str(len(results) - exposed))
    if skipped:
        table.add_row("Skipped", Text(str(skipped), style="yellow"))
    if aborted:
        table.add_row("Stopped", Text(aborted, style="red"))
    else:
        table.add_row("Note", Text("Not exposed does not mean strong.", style="dim"))

    border = "red" if aborted or exposed else "green"
    return Panel(table, title="Summary", border_style=border)
