"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Cada comando lee su propio bloque de settings con su prefijo histórico
  (`MOLD_*`, `TYPOS_CLI_*`), así los scripts de CI existentes siguen valiendo.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MOLD_REPO = "https://github.com/rui314/mold"
DEFAULT_TYPOS_CLI_VERSION = "1.24.6"


def _settings_config(prefix: str) -> SettingsConfigDict:
    return SettingsConfigDict(
        env_prefix=prefix,
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
    )


class AppSettings(BaseSettings):
    """Settings shared by every command."""

    model_config = _settings_config("DEVBOOTSTRAP_")

    log_level: str = Field(
        default="WARNING",
        description="Nivel de logging cuando no se pasa --verbose.",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value!r}")
        return level


class MoldSettings(BaseSettings):
    """Configuración del instalador de mold.

    Los nombres de las variables (`MOLD_VERSION`, `MOLD_REPO`, `MOLD_URL`)
    coinciden con los que ya usaban los pipelines de CI.
    """

    model_config = _settings_config("MOLD_")

    version: str | None = Field(
        default=None,
        description="Versión a instalar si no se pasa como argumento.",
    )
    repo: str = Field(
        default=DEFAULT_MOLD_REPO,
        min_length=8,
        description="Repositorio de origen de las releases.",
    )
    url: str | None = Field(
        default=None,
        description="Base de descarga; si está definida reemplaza a `repo`.",
    )
    prefix: Path = Field(
        default=Path("/usr/local"),
        description="Prefijo de instalación (el binario queda en <prefix>/bin/mold).",
    )
    http_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Timeout de la descarga (segundos).",
    )
    user_agent: str = Field(
        default="devbootstrap/0.1",
        min_length=1,
    )

    @property
    def download_base(self) -> str:
        return (self.url or self.repo).rstrip("/")


class SpellcheckSettings(BaseSettings):
    """Pin de `typos-cli` y opciones de invocación."""

    model_config = _settings_config("TYPOS_CLI_")

    version: str = Field(
        default=DEFAULT_TYPOS_CLI_VERSION,
        min_length=1,
        description="Versión fijada de typos-cli.",
    )
    crate: str = Field(default="typos-cli", min_length=1)
    binary: str = Field(default="typos", min_length=1)
    config: Path | None = Field(
        default=None,
        description="Archivo de configuración pasado a `typos --config`.",
    )
