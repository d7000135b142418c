"""pwnrange command-line interface.

The CLI is a thin shell around `core.services.batch`: it picks the input
source, builds the range client from settings and flags, and renders
outcomes as they stream in.

Exit codes: 0 nothing exposed, 1 at least one exposure, 2 batch aborted.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from adapters.http_client import ProxyConfig, TlsPolicy
from adapters.json_exporter import export_outcomes_json
from adapters.range_client import RangeQueryClient
from adapters.secret_input import iter_secret_file, iter_secret_lines
from cli import doctor
from cli.ui_components import build_summary_panel, format_outcome
from core.config import AppSettings
from core.domain.errors import BatchAbortedError, QueryError
from core.domain.models import BatchOutcome
from core.services.batch import BatchHooks, Secret, process

EXIT_CLEAN = 0
EXIT_EXPOSED = 1
EXIT_ABORTED = 2

app = typer.Typer(
    no_args_is_help=True,
    help="Check passwords against a breach corpus without sending them.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=_err_console, show_path=False)],
        force=True,
    )


def _secrets_from(
    passwords: list[str] | None,
    *,
    stdin: bool,
    file: Path | None,
) -> Iterable[Secret]:
    if file is not None and str(file) != "-":
        return iter_secret_file(file)
    if stdin or (file is not None and str(file) == "-"):
        return iter_secret_lines(typer.get_binary_stream("stdin"))
    if passwords:
        return passwords
    return [typer.prompt("Password", hide_input=True)]


def _render(outcomes: Iterator[BatchOutcome], collected: list[BatchOutcome]) -> None:
    for outcome in outcomes:
        collected.append(outcome)
        _console.print(format_outcome(outcome))


@app.command()
def check(
    passwords: list[str] | None = typer.Argument(
        None,
        help="Passwords to check. Prefer --stdin or the prompt: arguments show up in process lists.",
        show_default=False,
    ),
    stdin: bool = typer.Option(False, "--stdin", help="Read one password per line from stdin."),
    file: Path | None = typer.Option(
        None,
        "--file",
        "-f",
        exists=True,
        dir_okay=False,
        readable=True,
        allow_dash=True,
        help="Read one password per line from a file ('-' = stdin).",
    ),
    proxy: str | None = typer.Option(None, "--proxy", help="Route queries through a proxy (host:port or URL)."),
    insecure: bool = typer.Option(False, "--insecure", help="Disable certificate validation for this run."),
    ca_bundle: Path | None = typer.Option(
        None,
        "--ca-bundle",
        exists=True,
        dir_okay=False,
        readable=True,
        help="PEM bundle to trust instead of the defaults.",
    ),
    json_path: Path | None = typer.Option(None, "--json", help="Also write outcomes to this JSON file."),
    summary: bool = typer.Option(True, "--summary/--no-summary", help="Print totals at the end."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr."),
) -> None:
    """Check one or more passwords against the breach corpus."""

    configure_logging(verbose)
    settings = AppSettings()

    proxy_config = ProxyConfig(address=proxy) if proxy else ProxyConfig.from_settings(settings)
    if insecure:
        tls = TlsPolicy.insecure()
        _err_console.print("[yellow]Warning:[/yellow] certificate validation is disabled for this run.")
    elif ca_bundle is not None:
        tls = TlsPolicy.strict(ca_bundle)
    else:
        tls = TlsPolicy.from_settings(settings)

    secrets = _secrets_from(passwords, stdin=stdin, file=file)
    hooks = BatchHooks(
        skipped=lambda item: _err_console.print(f"[yellow]Skipped #{item.position}:[/yellow] {escape(item.reason)}"),
    )

    collected: list[BatchOutcome] = []
    aborted: str | None = None
    try:
        client = RangeQueryClient(settings, proxy=proxy_config, tls=tls)
    except QueryError as exc:
        _err_console.print(f"[red]Cannot set up range queries[/red] ({type(exc).__name__}): {escape(str(exc))}")
        raise typer.Exit(code=EXIT_ABORTED) from exc

    with client:
        try:
            _render(process(secrets, client, hooks=hooks), collected)
        except BatchAbortedError as exc:
            cause = exc.__cause__ or exc
            aborted = f"item #{exc.position}: {cause}"
            _err_console.print(f"[red]Batch stopped at item #{exc.position}[/red] ({type(cause).__name__}): {escape(str(cause))}")
            _err_console.print(f"Re-run from item #{exc.position} once the service is reachable.")
        except OSError as exc:
            aborted = f"input unreadable after {len(collected)} items: {exc}"
            _err_console.print(f"[red]Cannot read passwords[/red]: {escape(str(exc))}")

    if summary:
        _console.print(build_summary_panel(collected, aborted=aborted))
    if json_path is not None:
        written = export_outcomes_json(outcomes=collected, output_path=json_path, aborted=aborted)
        _err_console.print(f"[green]Saved JSON to:[/green] {written}")

    if aborted:
        raise typer.Exit(code=EXIT_ABORTED)
    if any(getattr(o, "exposed", False) for o in collected):
        raise typer.Exit(code=EXIT_EXPOSED)
    raise typer.Exit(code=EXIT_CLEAN)


def run() -> None:
    app()
