"""Contrato para ejecutar comandos externos.

Por qué Protocol:
- `cargo`, `typos`, `tar` y `sudo` se invocan siempre a través de este
  contrato, así los servicios se prueban con un runner falso sin procesos reales.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence, runtime_checkable


@dataclass(frozen=True)
class CommandResult:
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@runtime_checkable
class CommandRunner(Protocol):
    """Contrato mínimo para lanzar procesos.

    Reglas de diseño:
    - `run` nunca lanza por un código de salida distinto de cero; el servicio
      decide si es un fallo.
    - Con `capture=False` la salida se hereda (el usuario la ve en vivo).
    """

    def which(self, name: str) -> str | None:
        """Resuelve un ejecutable en PATH."""

        ...

    def run(self, args: Sequence[str], *, capture: bool = False) -> CommandResult:
        """Ejecuta `args` y devuelve su resultado."""

        ...
