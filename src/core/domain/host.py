"""Descripción del host compartida por el instalador, el spell checker y `doctor`.

Por qué aquí:
- La detección vive en el dominio, así los tests pasan un `HostInfo` fijo en
  vez de parchear `platform` y `os` globalmente.
"""

from __future__ import annotations

import os
import platform
from dataclasses import dataclass


@dataclass(frozen=True)
class HostInfo:
    """Operating system facts relevant to installing binaries."""

    system: str
    machine: str
    is_root: bool = False

    @classmethod
    def detect(cls) -> "HostInfo":
        """Return the facts for the running interpreter (`uname -s`, `uname -m`, euid)."""

        geteuid = getattr(os, "geteuid", None)
        return cls(
            system=platform.system(),
            machine=platform.machine(),
            is_root=bool(geteuid is not None and geteuid() == 0),
        )

    @property
    def is_linux(self) -> bool:
        return self.system == "Linux"
