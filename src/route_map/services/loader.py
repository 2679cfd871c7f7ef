"""Track loading service.

Fetches route files from an HTTP base URL or a local directory and parses
them into tracks. Every file is loaded independently: a file that cannot be
fetched or parsed is logged and left out, the others still load.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import requests

from route_map.models.track import Track

logger = logging.getLogger("route_map.loader")


@dataclass(frozen=True)
class LoadResult:
    """Outcome of loading a single route file."""

    filename: str
    track: Track | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.track is not None


def is_url(source: str) -> bool:
    """Check whether a source is an HTTP(S) base URL."""
    return source.startswith(("http://", "https://"))


def fetch_track_text(source: str, filename: str, timeout: float | None = None) -> str:
    """Retrieve the raw text of a route file.

    Args:
        source: Base URL or local directory.
        filename: Route filename relative to the source.
        timeout: Request timeout in seconds (None waits indefinitely).

    Returns:
        File content as text.

    Raises:
        requests.RequestException: On network errors or non-success status.
        OSError: If a local file cannot be read.
    """
    if is_url(source):
        url = f"{source.rstrip('/')}/{filename}"
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
        # Route files are UTF-8 whatever charset the Content-Type claims
        return response.content.decode("utf-8")

    return (Path(source) / filename).read_text(encoding="utf-8")


def load_track(source: str, filename: str, timeout: float | None = None) -> LoadResult:
    """Fetch and parse one route file.

    Never raises: any failure is logged and returned as a failed result.
    """
    try:
        text = fetch_track_text(source, filename, timeout=timeout)
        track = Track.from_gpx(text, filename)
    except Exception as e:
        logger.warning("Error loading %s: %s", filename, e)
        return LoadResult(filename=filename, error=str(e))

    logger.debug(
        "Loaded %s: %s (%d points, %.1f km)",
        filename,
        track.name,
        len(track.points),
        track.distance,
    )
    return LoadResult(filename=filename, track=track)


async def load_results(
    filenames: Sequence[str],
    source: str,
    timeout: float | None = None,
) -> list[LoadResult]:
    """Load all route files concurrently.

    Blocking I/O runs in worker threads; results are joined in input order.
    """
    return list(
        await asyncio.gather(
            *(asyncio.to_thread(load_track, source, filename, timeout) for filename in filenames)
        )
    )


async def load_tracks(
    filenames: Sequence[str],
    source: str,
    timeout: float | None = None,
) -> list[Track]:
    """Load route files and keep the ones that succeeded.

    Args:
        filenames: Route filenames, in display order.
        source: Base URL or local directory.
        timeout: Per-request timeout in seconds.

    Returns:
        Successfully loaded tracks, in the order of ``filenames``.
    """
    results = await load_results(filenames, source, timeout=timeout)
    tracks = [result.track for result in results if result.track is not None]

    failed = len(results) - len(tracks)
    if failed:
        logger.info("Loaded %d of %d tracks (%d failed)", len(tracks), len(results), failed)
    else:
        logger.info("Loaded %d tracks", len(tracks))

    return tracks


class TrackStore:
    """Holds the current collection of tracks shown on the map.

    ``refresh`` is the only writer. It replaces the collection in one
    assignment once every file has finished loading.
    """

    def __init__(self) -> None:
        self._tracks: tuple[Track, ...] = ()

    @property
    def tracks(self) -> tuple[Track, ...]:
        return self._tracks

    async def refresh(
        self,
        filenames: Sequence[str],
        source: str,
        timeout: float | None = None,
    ) -> bool:
        """Reload all tracks.

        Returns:
            True if a new collection was published, False if loading failed
            as a whole and the previous collection was kept.
        """
        try:
            tracks = await load_tracks(filenames, source, timeout=timeout)
        except Exception:
            logger.exception("Error loading route files from %s", source)
            return False

        self._tracks = tuple(tracks)
        return True

    def refresh_sync(
        self,
        filenames: Sequence[str],
        source: str,
        timeout: float | None = None,
    ) -> bool:
        """Run ``refresh`` on a fresh event loop."""
        return asyncio.run(self.refresh(filenames, source, timeout=timeout))
