"""Chequeo ortográfico con `typos-cli` fijado.

Por qué aquí:
- El pin de versión y la instalación vía cargo viven en el Core; la CLI solo
  traduce el resultado a código de salida.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

from adapters.cargo import cargo_bin_dir, install_crate, installed_crates, require_cargo
from adapters.process_runner import SubprocessRunner
from core.config import SpellcheckSettings
from core.domain.models import SpellcheckOutcome
from core.errors import CommandFailedError, ToolNotFoundError, shell_exit_code
from core.interfaces.runner import CommandRunner

logger = logging.getLogger(__name__)


@dataclass
class SpellcheckHooks:
    info: Callable[[str], None] | None = None


def is_pinned_installed(runner: CommandRunner, cargo: str, settings: SpellcheckSettings) -> bool:
    """A failing `cargo install --list` counts as "not installed"."""

    try:
        installed = installed_crates(runner, cargo)
    except CommandFailedError as exc:
        logger.warning("%s; assuming %s is not installed", exc, settings.crate)
        return False
    return installed.get(settings.crate) == settings.version


def ensure_pinned(
    runner: CommandRunner,
    settings: SpellcheckSettings,
    hooks: SpellcheckHooks | None = None,
) -> bool:
    """Install the pinned crate when missing. Returns True if it was installed now."""

    hooks = hooks or SpellcheckHooks()
    cargo = require_cargo(runner)
    pin = f"{settings.crate}@{settings.version}"

    if is_pinned_installed(runner, cargo, settings):
        if hooks.info:
            hooks.info(f"{pin} is already installed.")
        return False

    if hooks.info:
        hooks.info(f"Installing {pin}...")
    install_crate(runner, cargo, settings.crate, settings.version)
    return True


def locate_binary(runner: CommandRunner, name: str) -> str:
    found = runner.which(name)
    if found:
        return found
    fallback = cargo_bin_dir() / name
    if fallback.is_file():
        return str(fallback)
    raise ToolNotFoundError(f"{name} not found on PATH or in {fallback.parent}")


def build_typos_command(binary: str, config: Path | None, extra_args: Sequence[str]) -> list[str]:
    cmd = [binary]
    if config is not None:
        cmd += ["--config", str(config)]
    cmd += list(extra_args)
    return cmd


def check_spelling(
    extra_args: Sequence[str] = (),
    *,
    settings: SpellcheckSettings | None = None,
    runner: CommandRunner | None = None,
    hooks: SpellcheckHooks | None = None,
) -> SpellcheckOutcome:
    settings = settings or SpellcheckSettings()
    runner = runner or SubprocessRunner()

    installed_now = ensure_pinned(runner, settings, hooks)
    binary = locate_binary(runner, settings.binary)

    result = runner.run(build_typos_command(binary, settings.config, extra_args))
    logger.debug("%s exited with %d", settings.binary, result.returncode)
    return SpellcheckOutcome(
        version=settings.version,
        installed_now=installed_now,
        exit_code=shell_exit_code(result.returncode),
    )
