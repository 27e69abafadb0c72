"""Runner de procesos basado en `subprocess`.

Único lugar donde se llama a `subprocess.run`.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from typing import Sequence

from core.errors import ToolNotFoundError
from core.interfaces.runner import CommandResult, CommandRunner

logger = logging.getLogger(__name__)

ELEVATION_TOOLS: tuple[str, ...] = ("sudo", "doas")


class SubprocessRunner(CommandRunner):
    """Implementación real de `CommandRunner`."""

    def which(self, name: str) -> str | None:
        return shutil.which(name)

    def run(self, args: Sequence[str], *, capture: bool = False) -> CommandResult:
        cmd = list(args)
        logger.debug("exec: %s", " ".join(cmd))
        try:
            completed = subprocess.run(
                cmd,
                check=False,
                capture_output=capture,
                text=True,
            )
        except FileNotFoundError as exc:
            raise ToolNotFoundError(f"Command not found: {cmd[0]}") from exc

        logger.debug("exit %d: %s", completed.returncode, cmd[0])
        return CommandResult(
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )


def find_elevation_tool(runner: CommandRunner) -> str | None:
    """Return the path of `sudo`, else `doas`, else None."""

    for name in ELEVATION_TOOLS:
        path = runner.which(name)
        if path:
            return path
    return None
