"""Errores del dominio.

Por qué una jerarquía propia:
- Los servicios lanzan estos errores con su `exit_code`; solo la capa CLI los
  convierte en códigos de salida del proceso.
"""

from __future__ import annotations


def shell_exit_code(returncode: int) -> int:
    """Exit status as a shell reports it: a process killed by signal N exits 128+N."""

    if returncode < 0:
        return 128 + abs(returncode)
    return returncode


class BootstrapError(Exception):
    """Base class for failures that abort a command."""

    exit_code: int = 1

    def __init__(self, message: str, *, exit_code: int | None = None) -> None:
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class UnsupportedPlatformError(BootstrapError):
    pass


class MissingVersionError(BootstrapError):
    pass


class PrivilegeError(BootstrapError):
    pass


class DownloadError(BootstrapError):
    pass


class ArchiveError(BootstrapError):
    pass


class ToolNotFoundError(BootstrapError):
    exit_code = 127


class CommandFailedError(BootstrapError):
    """An external command returned a nonzero status."""

    def __init__(self, command: list[str], returncode: int) -> None:
        super().__init__(
            f"`{' '.join(command)}` failed with exit code {returncode}",
            exit_code=shell_exit_code(returncode) or 1,
        )
        self.command = command
        self.returncode = returncode
