"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers y redirects (GitHub releases redirige a S3).
- Facilita testeo: los tests pasan un `httpx.Client` con `MockTransport`.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

import httpx

from core.config import MoldSettings
from core.errors import DownloadError

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int | None], None]

_CHUNK_SIZE = 64 * 1024


def build_client(settings: MoldSettings | None = None) -> httpx.Client:
    """Crea un `httpx.Client` con defaults seguros para descargar releases."""

    settings = settings or MoldSettings()
    return httpx.Client(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers={
            "User-Agent": settings.user_agent,
            "Accept": "application/octet-stream, */*;q=0.8",
        },
    )


def download_to_file(
    client: httpx.Client,
    url: str,
    destination: Path,
    *,
    on_progress: ProgressCallback | None = None,
) -> int:
    """Stream `url` into `destination` and return the number of bytes written.

    `on_progress(done, total)` is called after every chunk; `total` is None
    when the server sends no Content-Length.
    """

    logger.debug("GET %s -> %s", url, destination)
    written = 0
    try:
        with client.stream("GET", url) as response:
            response.raise_for_status()
            total_header = response.headers.get("Content-Length")
            total = int(total_header) if total_header and total_header.isdigit() else None
            with destination.open("wb") as fh:
                for chunk in response.iter_bytes(_CHUNK_SIZE):
                    fh.write(chunk)
                    written += len(chunk)
                    if on_progress is not None:
                        on_progress(written, total)
    except httpx.HTTPStatusError as exc:
        raise DownloadError(f"Download failed: HTTP {exc.response.status_code} for {url}") from exc
    except httpx.HTTPError as exc:
        raise DownloadError(f"Download failed: {exc}") from exc

    logger.debug("downloaded %d bytes", written)
    return written


def check_reachable(url: str, *, timeout: float = 10.0) -> tuple[bool, str]:
    """Best-effort HEAD request used by `doctor`."""

    try:
        with httpx.Client(timeout=httpx.Timeout(timeout), follow_redirects=True) as client:
            response = client.head(url)
        return True, f"HTTP {response.status_code}"
    except httpx.HTTPError as exc:
        return False, str(exc) or exc.__class__.__name__
