"""Shared pytest fixtures for route-map tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from pathlib import Path

import pytest
from click.testing import CliRunner


def make_gpx(
    points: Sequence[tuple[float, float]],
    name: str | None = None,
    description: str | None = None,
) -> str:
    """Build a minimal GPX 1.1 document with a single track segment."""
    meta = ""
    if name is not None:
        meta += f"    <name>{name}</name>\n"
    if description is not None:
        meta += f"    <desc>{description}</desc>\n"
    trkpts = "".join(
        f'      <trkpt lat="{lat}" lon="{lon}"></trkpt>\n' for lat, lon in points
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<gpx version="1.1" creator="route-map-tests" '
        'xmlns="http://www.topografix.com/GPX/1/1">\n'
        "  <trk>\n"
        f"{meta}"
        "    <trkseg>\n"
        f"{trkpts}"
        "    </trkseg>\n"
        "  </trk>\n"
        "</gpx>\n"
    )


SAMPLE_POINTS = [
    (52.3874, 4.5765),
    (52.3901, 4.5802),
    (52.3950, 4.5850),
]


@pytest.fixture(autouse=True)
def reset_route_map_logger() -> Iterator[None]:
    """Drop handlers installed by setup_logging between tests."""
    yield
    logging.getLogger("route_map").handlers.clear()


@pytest.fixture
def route_dir(tmp_path: Path) -> Path:
    """Directory with three route files, one of them without metadata."""
    directory = tmp_path / "routes"
    directory.mkdir()
    (directory / "116-kennemerduinen.gpx").write_text(
        make_gpx(SAMPLE_POINTS, name="Kennemerduinen", description="Dunes and forest"),
        encoding="utf-8",
    )
    (directory / "125-strabrechtsche-heide.gpx").write_text(
        make_gpx([(51.3905, 5.6092), (51.3950, 5.6150)]),
        encoding="utf-8",
    )
    (directory / "661-schiedam-jeneverstad.gpx").write_text(
        make_gpx([(51.9170, 4.3990), (51.9200, 4.4050)], name="Schiedam Jeneverstad"),
        encoding="utf-8",
    )
    return directory


@pytest.fixture
def cli_runner() -> CliRunner:
    """Click test runner."""
    return CliRunner()


@pytest.fixture
def cli_env(tmp_path: Path, route_dir: Path) -> dict[str, str]:
    """Environment pointing the CLI at the test routes and an empty config."""
    return {
        "ROUTE_MAP_CONFIG": str(tmp_path / "missing-config.toml"),
        "ROUTE_MAP_SOURCE": str(route_dir),
    }


@pytest.fixture
def gpx_factory():
    """Factory building GPX documents from points and metadata."""
    return make_gpx
