"""Flujo de instalación de mold.

Por qué un servicio:
- La CLI delega aquí todas las decisiones: guardas, estrategia de privilegios,
  descarga y extracción.
- Los efectos visibles (mensajes, barra de progreso) pasan por `InstallHooks`,
  así el flujo se reutiliza desde tests y otros entry-points.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

import httpx
from pydantic import ValidationError

from adapters.archive import extract_tarball
from adapters.http_client import build_client, download_to_file
from adapters.process_runner import SubprocessRunner, find_elevation_tool
from core.config import MoldSettings
from core.domain.host import HostInfo
from core.domain.models import InstallOutcome, InstallStatus, ReleaseArtifact, normalize_version
from core.errors import (
    CommandFailedError,
    MissingVersionError,
    PrivilegeError,
    UnsupportedPlatformError,
)
from core.interfaces.runner import CommandRunner

logger = logging.getLogger(__name__)

USAGE_EXAMPLE = "2.34.0"


@dataclass
class InstallHooks:
    """Optional callbacks for UI layers (messages, progress)."""

    info: Callable[[str], None] | None = None
    warning: Callable[[str], None] | None = None
    download_progress: Callable[[int, int | None], None] | None = None


@dataclass
class PrivilegeStrategy:
    """How the archive reaches the prefix: in-process, or through `sudo`/`doas tar`."""

    elevate_with: str | None = None
    reasons: list[str] = field(default_factory=list)


def mold_binary_path(prefix: Path) -> Path:
    return prefix / "bin" / "mold"


def _is_writable(path: Path) -> bool:
    """True when `path`, or its nearest existing ancestor, is writable."""

    candidate = path
    while not candidate.exists():
        if candidate.parent == candidate:
            return False
        candidate = candidate.parent
    return os.access(candidate, os.W_OK)


def resolve_version(argument: str | None, settings: MoldSettings) -> str:
    """Positional argument first, then `MOLD_VERSION`."""

    for candidate in (argument, settings.version):
        if candidate and candidate.strip():
            return normalize_version(candidate)
    raise MissingVersionError(
        f"Usage: devbootstrap install-mold <version>  (e.g. {USAGE_EXAMPLE}, or set MOLD_VERSION)"
    )


def choose_privilege_strategy(prefix: Path, host: HostInfo, runner: CommandRunner) -> PrivilegeStrategy:
    if host.is_root:
        return PrivilegeStrategy(reasons=["running as root"])
    if _is_writable(prefix):
        return PrivilegeStrategy(reasons=[f"{prefix} is writable"])

    tool = find_elevation_tool(runner)
    if tool is None:
        raise PrivilegeError(
            f"{prefix} is not writable and neither sudo nor doas is available; re-run as root"
        )
    return PrivilegeStrategy(elevate_with=tool, reasons=[f"{prefix} is not writable"])


def _extract_elevated(archive: Path, prefix: Path, elevate_with: str, runner: CommandRunner) -> None:
    cmd = [
        elevate_with,
        "tar",
        "-C",
        str(prefix),
        "--strip-components=1",
        "--no-overwrite-dir",
        "-xzf",
        str(archive),
    ]
    result = runner.run(cmd)
    if not result.ok:
        raise CommandFailedError(cmd, result.returncode)


def install_mold(
    version: str | None = None,
    *,
    settings: MoldSettings | None = None,
    host: HostInfo | None = None,
    runner: CommandRunner | None = None,
    client: httpx.Client | None = None,
    hooks: InstallHooks | None = None,
) -> InstallOutcome:
    settings = settings or MoldSettings()
    host = host or HostInfo.detect()
    runner = runner or SubprocessRunner()
    hooks = hooks or InstallHooks()

    if not host.is_linux:
        raise UnsupportedPlatformError(
            f"install-mold is intended for Linux systems only (detected {host.system or 'unknown'})"
        )

    resolved = resolve_version(version, settings)

    prefix = settings.prefix
    binary = mold_binary_path(prefix)
    if binary.exists():
        if hooks.warning:
            hooks.warning(f"existing mold found at {binary}. Skipping installation.")
        return InstallOutcome(status=InstallStatus.SKIPPED, binary_path=binary)

    if not host.machine:
        raise UnsupportedPlatformError("Cannot determine the machine architecture (uname -m)")
    try:
        artifact = ReleaseArtifact(version=resolved, machine=host.machine, base_url=settings.download_base)
    except ValidationError as exc:
        raise MissingVersionError(f"Invalid mold version {resolved!r} (expected e.g. {USAGE_EXAMPLE})") from exc

    strategy = choose_privilege_strategy(prefix, host, runner)
    logger.debug("privilege strategy: %s (%s)", strategy.elevate_with or "in-process", "; ".join(strategy.reasons))

    if hooks.info:
        hooks.info(f"Downloading from {artifact.url}")

    owns_client = client is None
    http = client or build_client(settings)
    tmp_dir = tempfile.TemporaryDirectory(prefix="devbootstrap-mold-")
    try:
        archive = Path(tmp_dir.name) / artifact.filename
        download_to_file(http, artifact.url, archive, on_progress=hooks.download_progress)

        if strategy.elevate_with:
            _extract_elevated(archive, prefix, strategy.elevate_with, runner)
        else:
            extract_tarball(archive, prefix, strip_components=1)
    finally:
        tmp_dir.cleanup()
        if owns_client:
            http.close()

    logger.info("mold %s installed under %s", resolved, prefix)
    return InstallOutcome(
        status=InstallStatus.INSTALLED,
        binary_path=binary,
        artifact=artifact,
        elevated_with=os.path.basename(strategy.elevate_with) if strategy.elevate_with else None,
    )
