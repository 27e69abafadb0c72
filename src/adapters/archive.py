"""Extracción de tarballs de release.

Reproduce en proceso lo que hace
`tar -C <prefix> --strip-components=N --no-overwrite-dir -xzf <archive>`:
- se descartan los primeros N componentes de cada ruta;
- los directorios que ya existen no se tocan (ni modo ni dueño);
- se rechaza cualquier miembro que intente salir del prefijo.
"""

from __future__ import annotations

import logging
import os
import shutil
import tarfile
from pathlib import Path, PurePosixPath

from core.errors import ArchiveError

logger = logging.getLogger(__name__)


def strip_member_path(name: str, strip_components: int) -> PurePosixPath | None:
    """Return `name` without its first components, or None when nothing remains."""

    parts = [p for p in PurePosixPath(name).parts if p not in (".", "")]
    if len(parts) <= strip_components:
        return None
    return PurePosixPath(*parts[strip_components:])


def _is_inside(root: Path, path: Path | str) -> bool:
    return Path(path) == root or root in Path(path).parents


def _safe_target(root: Path, relative: PurePosixPath, member_name: str) -> Path:
    """Join `relative` under `root`, refusing `..` and already extracted symlinks leading out."""

    if relative.is_absolute() or ".." in relative.parts:
        raise ArchiveError(f"Refusing to extract {member_name!r}: path escapes the install prefix")
    target = root.joinpath(*relative.parts)
    if not _is_inside(root, target.parent.resolve()):
        raise ArchiveError(f"Refusing to extract {member_name!r}: path escapes the install prefix")
    return target


def _check_link_target(root: Path, target: Path, member: tarfile.TarInfo) -> None:
    if os.path.isabs(member.linkname):
        raise ArchiveError(f"Refusing to extract {member.name!r}: absolute symlink target")
    pointed = os.path.normpath(os.path.join(target.parent.resolve(), member.linkname))
    if not _is_inside(root, pointed):
        raise ArchiveError(f"Refusing to extract {member.name!r}: symlink target escapes the install prefix")


def _replace_existing(target: Path) -> None:
    if target.is_symlink() or target.is_file():
        target.unlink()


def extract_tarball(archive: Path, destination: Path, *, strip_components: int = 1) -> list[Path]:
    """Unpack a `.tar.gz` into `destination` and return the paths written."""

    written: list[Path] = []
    try:
        destination.mkdir(parents=True, exist_ok=True)
        root = destination.resolve()
        with tarfile.open(archive, "r:gz") as tar:
            for member in tar:
                relative = strip_member_path(member.name, strip_components)
                if relative is None:
                    continue
                target = _safe_target(root, relative, member.name)

                if member.isdir():
                    if not target.is_dir():
                        target.mkdir(parents=True)
                        target.chmod(member.mode & 0o7777)
                    continue

                target.parent.mkdir(parents=True, exist_ok=True)

                if member.issym():
                    _check_link_target(root, target, member)
                    _replace_existing(target)
                    os.symlink(member.linkname, target)
                elif member.isfile() or member.islnk():
                    source = tar.extractfile(member)
                    if source is None:
                        raise ArchiveError(f"Cannot read {member.name!r} from {archive.name}")
                    _replace_existing(target)
                    with source, target.open("wb") as out:
                        shutil.copyfileobj(source, out)
                    target.chmod(member.mode & 0o7777)
                else:
                    logger.debug("skipping special member %s", member.name)
                    continue

                written.append(target)
    except tarfile.TarError as exc:
        raise ArchiveError(f"Invalid archive {archive.name}: {exc}") from exc
    except OSError as exc:
        raise ArchiveError(f"Extraction into {destination} failed: {exc}") from exc

    logger.debug("extracted %d entries into %s", len(written), destination)
    return written
