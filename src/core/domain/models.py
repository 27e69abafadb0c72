"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación estricta en el borde (versiones, URLs) sin acoplar el Core a I/O.
- Los resultados se pueden volcar a JSON/tabla sin código extra.

Nota:
- Estos modelos describen *qué* se instala, no *cómo* se descarga.
"""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

_VERSION_RE = re.compile(r"^[0-9A-Za-z][0-9A-Za-z.+_-]*$")


def normalize_version(value: str) -> str:
    """Strip whitespace and a leading `v` (`v2.34.0` -> `2.34.0`)."""

    version = value.strip()
    if version[:1] in ("v", "V") and version[1:2].isdigit():
        version = version[1:]
    return version


class ReleaseArtifact(BaseModel):
    """Tarball publicado en la página de releases de mold."""

    version: str = Field(..., min_length=1, max_length=64)
    machine: str = Field(
        ...,
        min_length=1,
        max_length=32,
        description="Arquitectura según `uname -m` (x86_64, aarch64...).",
    )
    base_url: str = Field(..., min_length=8)

    @field_validator("version")
    @classmethod
    def _check_version(cls, value: str) -> str:
        value = normalize_version(value)
        if not _VERSION_RE.match(value):
            raise ValueError(f"invalid version: {value!r}")
        return value

    @property
    def filename(self) -> str:
        return f"mold-{self.version}-{self.machine}-linux.tar.gz"

    @property
    def url(self) -> str:
        return f"{self.base_url.rstrip('/')}/releases/download/v{self.version}/{self.filename}"


class InstallStatus(str, Enum):
    INSTALLED = "installed"
    SKIPPED = "skipped"


class InstallOutcome(BaseModel):
    """Resultado de `install-mold`."""

    status: InstallStatus
    binary_path: Path
    artifact: ReleaseArtifact | None = None
    elevated_with: str | None = Field(
        default=None,
        description="`sudo`/`doas` si la extracción necesitó elevar privilegios.",
    )


class SpellcheckOutcome(BaseModel):
    """Resultado de `check-spelling`."""

    version: str
    installed_now: bool = False
    exit_code: int = 0
