"""End-to-end CLI behavior through `typer.testing.CliRunner`."""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest
from typer.testing import CliRunner

from cli.main import app
from core.domain.host import HostInfo
from core.interfaces.runner import CommandResult
from core.services import mold_installer, spellcheck

from conftest import FakeRunner

runner = CliRunner()


def _fake_host(monkeypatch: pytest.MonkeyPatch, system: str = "Linux") -> None:
    host = HostInfo(system=system, machine="x86_64", is_root=False)
    monkeypatch.setattr(HostInfo, "detect", classmethod(lambda cls: host))


def _forbid_network(monkeypatch: pytest.MonkeyPatch) -> None:
    def build_client(settings=None):
        raise AssertionError("network must not be used")

    monkeypatch.setattr(mold_installer, "build_client", build_client)


def _serve_release(monkeypatch: pytest.MonkeyPatch, payload: bytes, requests: list[str]) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(str(request.url))
        return httpx.Response(200, content=payload)

    monkeypatch.setattr(
        mold_installer,
        "build_client",
        lambda settings=None: httpx.Client(transport=httpx.MockTransport(handler)),
    )


def test_install_mold_on_macos_exits_1(monkeypatch: pytest.MonkeyPatch) -> None:
    _fake_host(monkeypatch, system="Darwin")
    _forbid_network(monkeypatch)

    result = runner.invoke(app, ["install-mold", "2.34.0"])

    assert result.exit_code == 1
    assert "Linux systems only" in result.output


def test_install_mold_without_version_exits_1(monkeypatch: pytest.MonkeyPatch) -> None:
    _fake_host(monkeypatch)
    _forbid_network(monkeypatch)

    result = runner.invoke(app, ["install-mold"])

    assert result.exit_code == 1
    assert "Usage:" in result.output


def test_install_mold_existing_binary_exits_0(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    _fake_host(monkeypatch)
    _forbid_network(monkeypatch)
    prefix = tmp_path / "usr-local"
    (prefix / "bin").mkdir(parents=True)
    (prefix / "bin" / "mold").write_text("")
    monkeypatch.setenv("MOLD_PREFIX", str(prefix))

    result = runner.invoke(app, ["install-mold", "2.34.0"])

    assert result.exit_code == 0
    assert "Skipping" in result.output


def test_install_mold_reads_version_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, mold_tarball: bytes) -> None:
    _fake_host(monkeypatch)
    requests: list[str] = []
    _serve_release(monkeypatch, mold_tarball, requests)
    monkeypatch.setenv("MOLD_VERSION", "2.34.0")
    prefix = tmp_path / "usr-local"

    result = runner.invoke(app, ["install-mold", "--prefix", str(prefix)])

    assert result.exit_code == 0, result.output
    assert requests == [
        "https://github.com/rui314/mold/releases/download/v2.34.0/mold-2.34.0-x86_64-linux.tar.gz"
    ]
    assert "Downloading from" in result.output
    assert (prefix / "bin" / "mold").exists()


def test_install_mold_download_failure(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    _fake_host(monkeypatch)
    monkeypatch.setattr(
        mold_installer,
        "build_client",
        lambda settings=None: httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(404))),
    )

    result = runner.invoke(app, ["install-mold", "0.0.1", "--prefix", str(tmp_path / "p")])

    assert result.exit_code == 1
    assert "HTTP 404" in result.output


def _install_fake_runner(monkeypatch: pytest.MonkeyPatch, fake: FakeRunner) -> None:
    monkeypatch.setattr(spellcheck, "SubprocessRunner", lambda: fake)


def test_check_spelling_exit_code_mirrors_typos(monkeypatch: pytest.MonkeyPatch) -> None:
    def handler(cmd: list[str]) -> CommandResult:
        if cmd[1:] == ["install", "--list"]:
            return CommandResult(returncode=0, stdout="typos-cli v1.24.6:\n    typos\n")
        return CommandResult(returncode=2)

    fake = FakeRunner(paths={"cargo": "/bin/cargo", "typos": "/bin/typos"}, handler=handler)
    _install_fake_runner(monkeypatch, fake)

    result = runner.invoke(app, ["check-spelling"])

    assert result.exit_code == 2
    assert fake.calls[-1] == ["/bin/typos"]
    assert "already installed" in result.output


def test_check_spelling_installs_pin_and_forwards_args(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TYPOS_CLI_VERSION", "1.26.0")
    fake = FakeRunner(paths={"cargo": "/bin/cargo", "typos": "/bin/typos"})
    _install_fake_runner(monkeypatch, fake)

    result = runner.invoke(app, ["check-spelling", "--config", "typos.toml", "--format", "brief"])

    assert result.exit_code == 0, result.output
    assert fake.calls == [
        ["/bin/cargo", "install", "--list"],
        ["/bin/cargo", "install", "typos-cli@1.26.0"],
        ["/bin/typos", "--config", "typos.toml", "--format", "brief"],
    ]
    assert "Installing typos-cli@1.26.0..." in result.output


def test_check_spelling_without_cargo(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_fake_runner(monkeypatch, FakeRunner())

    result = runner.invoke(app, ["check-spelling"])

    assert result.exit_code == 127
    assert "cargo not found" in result.output


def test_invalid_log_level_is_reported(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DEVBOOTSTRAP_LOG_LEVEL", "chatty")

    result = runner.invoke(app, ["check-spelling"])

    assert result.exit_code == 1
    assert "invalid configuration" in result.output


def test_check_spelling_signal_exit_follows_shell_convention(monkeypatch: pytest.MonkeyPatch) -> None:
    def handler(cmd: list[str]) -> CommandResult:
        if cmd[1:] == ["install", "--list"]:
            return CommandResult(returncode=0, stdout="typos-cli v1.24.6:\n    typos\n")
        return CommandResult(returncode=-2)

    _install_fake_runner(monkeypatch, FakeRunner(paths={"cargo": "/bin/cargo", "typos": "/bin/typos"}, handler=handler))

    result = runner.invoke(app, ["check-spelling"])

    assert result.exit_code == 130
