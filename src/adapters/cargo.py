"""Helpers around `cargo install`.

`cargo install --list` prints one header line per installed crate followed by
the binaries it provides:

    typos-cli v1.24.6:
        typos
"""

from __future__ import annotations

import os
import re
from pathlib import Path

from core.errors import CommandFailedError, ToolNotFoundError
from core.interfaces.runner import CommandRunner

_HEADER_RE = re.compile(r"^(?P<crate>[A-Za-z0-9_-]+) v(?P<version>[^\s:]+)(?: \(.*\))?:$")


def parse_install_list(output: str) -> dict[str, str]:
    """Map crate name -> installed version from `cargo install --list` output."""

    installed: dict[str, str] = {}
    for line in output.splitlines():
        if not line or line[0].isspace():
            continue
        match = _HEADER_RE.match(line.rstrip())
        if match:
            installed[match.group("crate")] = match.group("version")
    return installed


def cargo_bin_dir() -> Path:
    """Directorio donde `cargo install` deja los binarios.

    Reglas:
    - Si CARGO_HOME está definido, `<CARGO_HOME>/bin`.
    - Si no, `~/.cargo/bin`.
    """

    override = (os.environ.get("CARGO_HOME") or "").strip()
    if override:
        return Path(override) / "bin"
    return Path.home() / ".cargo" / "bin"


def require_cargo(runner: CommandRunner) -> str:
    cargo = runner.which("cargo")
    if not cargo:
        raise ToolNotFoundError("cargo not found on PATH; install a Rust toolchain (https://rustup.rs)")
    return cargo


def installed_crates(runner: CommandRunner, cargo: str) -> dict[str, str]:
    cmd = [cargo, "install", "--list"]
    result = runner.run(cmd, capture=True)
    if not result.ok:
        raise CommandFailedError(cmd, result.returncode)
    return parse_install_list(result.stdout)


def install_crate(runner: CommandRunner, cargo: str, crate: str, version: str) -> None:
    cmd = [cargo, "install", f"{crate}@{version}"]
    result = runner.run(cmd)
    if not result.ok:
        raise CommandFailedError(cmd, result.returncode)
