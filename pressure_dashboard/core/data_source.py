"""
================================================================================
Sensor Data Sources - Retrieval by Filename
================================================================================

The session store does not care where sensor files live. It asks a source
for a filename and awaits the text. Three sources are provided:

    DirectorySource: files in a local folder
    HttpSource:      files served under a base URL
    DemoSource:      synthetic recordings, no files needed

Contract:
    fetch(filename) -> str
        - returns the file content ("" for an empty file)
        - raises NotFoundError when the file does not exist
        - raises TransportError for every other failure

Blocking I/O runs in a worker thread via asyncio.to_thread so the event
loop driving the store never stalls.
"""

import asyncio
import io
import logging
import zlib
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

import numpy as np
import requests

from ..config import MonitorConfig
from ..errors import NotFoundError, TransportError

logger = logging.getLogger(__name__)


@runtime_checkable
class SensorDataSource(Protocol):
    """Anything that can fetch sensor text by filename."""

    async def fetch(self, filename: str) -> str:
        ...


class DirectorySource:
    """
    Reads sensor files from a local directory.

    Example:
        >>> source = DirectorySource("sensor-data")
        >>> text = asyncio.run(source.fetch("1c0fd777_20251011.csv"))
    """

    def __init__(self, root: str):
        self.root = Path(root)

    async def fetch(self, filename: str) -> str:
        return await asyncio.to_thread(self._read, filename)

    def _read(self, filename: str) -> str:
        path = self.root / filename
        try:
            return path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            raise NotFoundError(f"Sensor file not found: {path}") from None
        except OSError as e:
            raise TransportError(filename, str(e)) from e


class HttpSource:
    """
    Fetches sensor files over HTTP (e.g. a static /sensor-data/ route).

    A 404 is reported as NotFoundError, any other non-2xx status or
    network failure as TransportError.
    """

    def __init__(self, base_url: str, timeout: float = 10.0,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def url_for(self, filename: str) -> str:
        return f"{self.base_url}/{filename}"

    async def fetch(self, filename: str) -> str:
        return await asyncio.to_thread(self._get, filename)

    def _get(self, filename: str) -> str:
        url = self.url_for(filename)
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(filename, str(e)) from e

        if response.status_code == 404:
            raise NotFoundError(f"Sensor file not found: {url}")
        if not response.ok:
            raise TransportError(
                filename,
                f"{response.status_code} {response.reason}",
                status=response.status_code,
            )
        return response.text


class DemoSource:
    """
    Generates synthetic recordings so the dashboard runs without data.

    Each filename seeds its own generator, so a file always yields the
    same text. The recording is a pressure blob drifting over the mat
    (like a patient shifting in bed) plus low-level sensor noise.
    """

    def __init__(self, config: Optional[MonitorConfig] = None, frames: int = 12):
        self.config = config or MonitorConfig()
        self.frames = frames

    async def fetch(self, filename: str) -> str:
        return self.generate(filename)

    def generate(self, filename: str) -> str:
        """Build the CSV text for a filename."""
        rows, cols = self.config.grid_rows, self.config.grid_cols
        rng = np.random.default_rng(zlib.crc32(filename.encode("utf-8")))

        # Per-file severity so patients land in different tiers
        peak = rng.uniform(120, 320)
        spread = rng.uniform(6, 30)
        center_row = rng.uniform(rows * 0.3, rows * 0.7)
        center_col = rng.uniform(cols * 0.3, cols * 0.7)

        r, c = np.indices((rows, cols))
        out = io.StringIO()
        for f in range(self.frames):
            phase = 2 * np.pi * f / self.frames
            row0 = center_row + np.sin(phase) * rows * 0.1
            col0 = center_col + np.cos(phase) * cols * 0.1
            dist_sq = (r - row0) ** 2 + (c - col0) ** 2
            grid = peak * np.exp(-dist_sq / spread)
            grid = grid + rng.integers(0, 8, size=grid.shape)
            grid = np.clip(grid, self.config.value_min, self.config.value_max)
            for row in grid:
                out.write(",".join(str(int(v)) for v in row))
                out.write("\n")
        return out.getvalue()


def create_source(config: MonitorConfig):
    """
    Pick a source from the configuration.

    Returns:
        HttpSource if base_url is set, DirectorySource if data_dir is set,
        DemoSource otherwise
    """
    if config.base_url:
        logger.info("Reading sensor data from %s", config.base_url)
        return HttpSource(config.base_url)
    if config.data_dir:
        logger.info("Reading sensor data from directory %s", config.data_dir)
        return DirectorySource(config.data_dir)
    logger.info("No data location configured, using synthetic demo data")
    return DemoSource(config)
