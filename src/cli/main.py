"""CLI principal (Typer).

Comandos:
- `install-mold`: instala el linker mold desde las releases oficiales.
- `check-spelling`: asegura typos-cli fijado y lo ejecuta.
- `doctor`: diagnóstico del entorno.
"""

from __future__ import annotations

from pathlib import Path
from typing import TypeVar

import typer
from pydantic import ValidationError
from pydantic_settings import BaseSettings
from rich.console import Console

from cli import doctor
from cli.ui_components import (
    DownloadProgress,
    build_outcome_table,
    print_error,
    print_info,
    print_warning,
)
from core.config import AppSettings, MoldSettings, SpellcheckSettings
from core.domain.models import InstallStatus
from core.errors import BootstrapError
from core.log import configure_logging
from core.services.mold_installer import InstallHooks, install_mold
from core.services.spellcheck import SpellcheckHooks, check_spelling

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Developer environment bootstrap: linker install, spell checking, diagnostics.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)

S = TypeVar("S", bound=BaseSettings)


def _load_settings(cls: type[S]) -> S:
    try:
        return cls()
    except ValidationError as exc:
        print_error(_err_console, f"invalid configuration: {exc}")
        raise typer.Exit(code=1) from exc


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr."),
) -> None:
    settings = _load_settings(AppSettings)
    configure_logging("DEBUG" if verbose else settings.log_level, console=_err_console)


@app.command("install-mold")
def install_mold_command(
    version: str | None = typer.Argument(
        None,
        help="mold release to install, e.g. 2.34.0 (defaults to $MOLD_VERSION).",
        show_default=False,
    ),
    prefix: Path | None = typer.Option(
        None,
        "--prefix",
        help="Install prefix (defaults to $MOLD_PREFIX or /usr/local).",
        show_default=False,
    ),
) -> None:
    """Install the official mold binaries from GitHub Releases (Linux only)."""

    settings = _load_settings(MoldSettings)
    if prefix is not None:
        settings = settings.model_copy(update={"prefix": prefix})

    progress = DownloadProgress(_console)
    hooks = InstallHooks(
        info=lambda msg: print_info(_console, msg),
        warning=lambda msg: print_warning(_err_console, msg),
        download_progress=progress,
    )
    try:
        outcome = install_mold(version, settings=settings, hooks=hooks)
    except BootstrapError as exc:
        print_error(_err_console, str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    finally:
        progress.stop()

    if outcome.status is InstallStatus.INSTALLED:
        _console.print(build_outcome_table(outcome))


@app.command(
    "check-spelling",
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
)
def check_spelling_command(
    ctx: typer.Context,
    config: Path | None = typer.Option(
        None,
        "--config",
        help="typos configuration file (defaults to $TYPOS_CLI_CONFIG).",
        show_default=False,
    ),
) -> None:
    """Install the pinned typos-cli if needed, then run typos.

    Extra arguments are forwarded to typos; the exit code is typos' exit code.
    """

    settings = _load_settings(SpellcheckSettings)
    if config is not None:
        settings = settings.model_copy(update={"config": config})

    try:
        outcome = check_spelling(
            list(ctx.args),
            settings=settings,
            hooks=SpellcheckHooks(info=lambda msg: print_info(_console, msg)),
        )
    except BootstrapError as exc:
        print_error(_err_console, str(exc))
        raise typer.Exit(code=exc.exit_code) from exc

    raise typer.Exit(code=outcome.exit_code)


def run() -> None:
    app()
