"""Shared fixtures: clean environment, fake command runner, release tarballs."""

from __future__ import annotations

import io
import os
import tarfile
from pathlib import Path
from typing import Callable, Sequence

import pytest

from core.domain.host import HostInfo
from core.interfaces.runner import CommandResult

_ENV_PREFIXES = ("MOLD_", "TYPOS_CLI_", "DEVBOOTSTRAP_")


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for key in list(os.environ):
        if key.startswith(_ENV_PREFIXES):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("CARGO_HOME", raising=False)
    # Keep a developer's .env out of the settings.
    monkeypatch.chdir(tmp_path)


class FakeRunner:
    """`CommandRunner` double that records every command."""

    def __init__(
        self,
        *,
        paths: dict[str, str] | None = None,
        handler: Callable[[list[str]], CommandResult] | None = None,
    ) -> None:
        self.paths = dict(paths or {})
        self.handler = handler or (lambda cmd: CommandResult(returncode=0))
        self.calls: list[list[str]] = []

    def which(self, name: str) -> str | None:
        return self.paths.get(name)

    def run(self, args: Sequence[str], *, capture: bool = False) -> CommandResult:
        cmd = list(args)
        self.calls.append(cmd)
        return self.handler(cmd)


@pytest.fixture
def linux_host() -> HostInfo:
    return HostInfo(system="Linux", machine="x86_64", is_root=False)


def _add_file(tar: tarfile.TarFile, name: str, data: bytes, mode: int = 0o644) -> None:
    info = tarfile.TarInfo(name)
    info.size = len(data)
    info.mode = mode
    tar.addfile(info, io.BytesIO(data))


def _add_dir(tar: tarfile.TarFile, name: str, mode: int = 0o755) -> None:
    info = tarfile.TarInfo(name)
    info.type = tarfile.DIRTYPE
    info.mode = mode
    tar.addfile(info)


def _add_symlink(tar: tarfile.TarFile, name: str, target: str) -> None:
    info = tarfile.TarInfo(name)
    info.type = tarfile.SYMTYPE
    info.linkname = target
    tar.addfile(info)


def build_mold_tarball(version: str = "2.34.0", machine: str = "x86_64") -> bytes:
    """Layout of an official mold release archive."""

    top = f"mold-{version}-{machine}-linux"
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        _add_dir(tar, f"{top}/")
        _add_dir(tar, f"{top}/bin/")
        _add_file(tar, f"{top}/bin/mold", b"#!/bin/sh\necho mold\n", mode=0o755)
        _add_symlink(tar, f"{top}/bin/ld.mold", "mold")
        _add_dir(tar, f"{top}/lib/")
        _add_dir(tar, f"{top}/lib/mold/")
        _add_file(tar, f"{top}/lib/mold/mold-wrapper.so", b"\x7fELF")
        _add_dir(tar, f"{top}/libexec/")
        _add_dir(tar, f"{top}/libexec/mold/")
        _add_symlink(tar, f"{top}/libexec/mold/ld", "../../bin/mold")
    return buf.getvalue()


def build_tarball(members: list[tuple[str, str, bytes | str]]) -> bytes:
    """Arbitrary archive from `(kind, name, payload)` where kind is file/dir/symlink."""

    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for kind, name, payload in members:
            if kind == "dir":
                _add_dir(tar, name)
            elif kind == "symlink":
                _add_symlink(tar, name, str(payload))
            else:
                _add_file(tar, name, payload if isinstance(payload, bytes) else payload.encode())
    return buf.getvalue()


@pytest.fixture
def mold_tarball() -> bytes:
    return build_mold_tarball()
