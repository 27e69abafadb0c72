"""Doctor command for environment diagnostics."""

from __future__ import annotations

import os

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from adapters.cargo import installed_crates
from adapters.http_client import check_reachable
from adapters.process_runner import SubprocessRunner, find_elevation_tool
from cli.ui_components import print_error
from core.config import AppSettings, MoldSettings, SpellcheckSettings
from core.domain.host import HostInfo
from core.errors import BootstrapError
from core.interfaces.runner import CommandRunner
from core.services.mold_installer import mold_binary_path

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _privileges(host: HostInfo, runner: CommandRunner) -> tuple[str, str]:
    if host.is_root:
        return "OK", "root"
    tool = find_elevation_tool(runner)
    if tool:
        return "OK", os.path.basename(tool)
    return "WARN", "not root and no sudo/doas; only writable prefixes work"


def _typos_status(runner: CommandRunner, settings: SpellcheckSettings) -> tuple[str, str]:
    cargo = runner.which("cargo")
    if not cargo:
        return "FAIL", "cargo not found"
    try:
        installed = installed_crates(runner, cargo).get(settings.crate)
    except BootstrapError as exc:
        return "FAIL", str(exc)
    if installed == settings.version:
        return "OK", f"{settings.crate} v{installed}"
    if installed:
        return "MISSING", f"v{installed} installed, v{settings.version} pinned (installed on next check-spelling)"
    return "MISSING", f"installed on next check-spelling (v{settings.version})"


def collect_checks(
    *,
    host: HostInfo | None = None,
    runner: CommandRunner | None = None,
    check_network: bool = True,
) -> list[tuple[str, str, str]]:
    """Return `(check, status, details)` rows; never raises for a failed check."""

    host = host or HostInfo.detect()
    runner = runner or SubprocessRunner()
    mold = MoldSettings()
    spelling = SpellcheckSettings()

    rows: list[tuple[str, str, str]] = []
    rows.append(("Operating system", "OK" if host.is_linux else "FAIL", host.system or "unknown"))
    rows.append(("Architecture", "OK", host.machine or "unknown"))
    rows.append(("Privileges", *_privileges(host, runner)))

    binary = mold_binary_path(mold.prefix)
    if binary.exists():
        rows.append(("mold", "OK", str(binary)))
    else:
        rows.append(("mold", "MISSING", f"run install-mold (target {binary})"))

    cargo = runner.which("cargo")
    rows.append(("cargo", "OK" if cargo else "FAIL", cargo or "not found on PATH"))
    rows.append(("typos-cli", *_typos_status(runner, spelling)))

    if check_network:
        ok_http, detail_http = check_reachable(mold.download_base)
        rows.append(("mold releases", "OK" if ok_http else "FAIL", detail_http))
    return rows


@app.command()
def run(
    offline: bool = typer.Option(False, "--offline", help="Skip the HTTP connectivity check."),
) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    table = Table(title="devbootstrap doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    try:
        rows = collect_checks(check_network=not offline)
    except ValidationError as exc:
        print_error(_console, f"invalid configuration: {exc}")
        raise typer.Exit(code=1) from exc

    for check, status, details in rows:
        table.add_row(check, status, details)

    _console.print(table)


@app.command()
def env() -> None:
    """Show the effective configuration (environment and .env)."""

    table = Table(title="Configuration")
    table.add_column("Variable", style="bright_green", no_wrap=True)
    table.add_column("Value", style="white")

    for cls in (AppSettings, MoldSettings, SpellcheckSettings):
        try:
            settings = cls()
        except ValidationError as exc:
            print_error(_console, f"invalid configuration: {exc}")
            raise typer.Exit(code=1) from exc
        prefix = cls.model_config.get("env_prefix", "")
        for name, value in settings.model_dump(mode="json").items():
            table.add_row(f"{prefix}{name.upper()}", "" if value is None else str(value))

    _console.print(table)
