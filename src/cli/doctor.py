"""Doctor command for environment diagnostics."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from adapters.http_client import ProxyConfig, TlsPolicy
from adapters.range_client import RangeQueryClient
from cli.ui_components import print_banner
from core.config import AppSettings, get_user_env_file, write_user_env_vars
from core.domain.errors import QueryError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()

# Any prefix works; this one is only used to prove the round trip.
_CHECK_PREFIX = "00000"


def _check_range_service(settings: AppSettings) -> tuple[bool, str]:
    try:
        with RangeQueryClient(settings) as client:
            response = client.query(_CHECK_PREFIX)
        return True, f"{len(response)} records for prefix {_CHECK_PREFIX}"
    except QueryError as exc:
        return False, escape(f"{type(exc).__name__}: {exc}")


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    print_banner(_console)
    settings = AppSettings()

    table = Table(title="pwnrange doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("Range API", "OK", settings.range_api_url)
    table.add_row("Padding", "ON" if settings.add_padding else "OFF", "Add-Padding header")

    proxy = ProxyConfig.from_settings(settings)
    table.add_row("Proxy", "SET" if proxy else "DIRECT", proxy.redacted() if proxy else "no proxy configured")

    tls = TlsPolicy.from_settings(settings)
    if not tls.verify:
        table.add_row("TLS", "WARN", "certificate validation disabled")
    elif tls.ca_bundle is not None:
        status = "OK" if tls.ca_bundle.is_file() else "FAIL"
        table.add_row("TLS", status, f"custom CA bundle {tls.ca_bundle}")
    else:
        table.add_row("TLS", "OK", "default trust store")

    ok_http, detail_http = _check_range_service(settings)
    table.add_row("Range query", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)
    _console.print(f"\nUser config: {get_user_env_file()}", style="dim")

    if not ok_http:
        _console.print(
            "\n[yellow]Note:[/yellow] behind a corporate proxy, run `pwnrange doctor setup` "
            "or pass `--proxy host:port`."
        )
        raise typer.Exit(code=1)


@app.command(name="setup")
def setup() -> None:
    """Interactive network setup (stores config in the user config .env)."""

    proxy = typer.prompt("Proxy (host:port, empty for direct)", default="", show_default=False).strip()
    verify = typer.confirm("Verify TLS certificates?", default=True)
    ca_bundle = typer.prompt("Custom CA bundle path (empty for default)", default="", show_default=False).strip()

    if proxy:
        # Validates the address before it is persisted.
        ProxyConfig(address=proxy)
    if ca_bundle and not Path(ca_bundle).is_file():
        raise typer.BadParameter(f"CA bundle not found: {ca_bundle}")

    env_path = write_user_env_vars(
        {
            "PWNRANGE_PROXY": proxy or None,
            "PWNRANGE_TLS_VERIFY": "true" if verify else "false",
            "PWNRANGE_CA_BUNDLE": ca_bundle or None,
        }
    )

    _console.print(f"[green]Saved network config to:[/green] {env_path}")
