"""Track model.

A track is one route loaded from a GPX file: its geometry plus the metadata
shown in the map popup.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any

import gpxpy

from route_map.lib.geo import Point, calculate_distance

# Assumed walking pace used for the time estimate
WALKING_MINUTES_PER_KM = 12


def default_track_name(filename: str) -> str:
    """Derive a readable name from a route filename.

    ``125-strabrechtsche-heide.gpx`` becomes ``"125 Strabrechtsche Heide"``.
    """
    stem = PurePosixPath(filename).stem
    return " ".join(word[:1].upper() + word[1:] for word in stem.split("-"))


def estimate_walking_minutes(distance_km: float) -> int:
    """Estimate walking time in whole minutes, rounded up."""
    return math.ceil(distance_km * WALKING_MINUTES_PER_KM)


def route_id_from_filename(filename: str) -> str:
    """Return the part of a filename before the first hyphen."""
    return filename.split("-")[0]


@dataclass(frozen=True)
class Track:
    """Represents a route loaded from a GPX file."""

    name: str
    description: str
    points: tuple[Point, ...]
    source_id: str
    distance: float = field(init=False)
    start_point: Point | None = field(init=False)
    end_point: Point | None = field(init=False)

    def __post_init__(self) -> None:
        points = tuple((float(lat), float(lon)) for lat, lon in self.points)
        object.__setattr__(self, "points", points)
        object.__setattr__(self, "distance", calculate_distance(points))
        object.__setattr__(self, "start_point", points[0] if points else None)
        object.__setattr__(self, "end_point", points[-1] if points else None)

    @classmethod
    def from_gpx(cls, text: str, filename: str) -> Track:
        """Create a Track from GPX document text.

        Args:
            text: GPX XML content.
            filename: Source filename, used as identity and name fallback.

        Returns:
            Track instance.

        Raises:
            ValueError: If the document contains no track.
            gpxpy.gpx.GPXException: If the document is not valid GPX.
        """
        gpx = gpxpy.parse(text)
        if not gpx.tracks:
            raise ValueError(f"No <trk> element in {filename}")

        name = next((track.name for track in gpx.tracks if track.name), None)
        description = next(
            (track.description for track in gpx.tracks if track.description), ""
        )
        points = [
            (point.latitude, point.longitude)
            for track in gpx.tracks
            for segment in track.segments
            for point in segment.points
        ]

        return cls(
            name=name or default_track_name(filename),
            description=description,
            points=tuple(points),
            source_id=filename,
        )

    @property
    def route_id(self) -> str:
        """Route number shown in the popup."""
        return route_id_from_filename(self.source_id)

    @property
    def walking_minutes(self) -> int:
        """Estimated walking time in whole minutes."""
        return estimate_walking_minutes(self.distance)

    def to_dict(self) -> dict[str, Any]:
        """Convert track to dictionary for JSON serialization.

        Returns:
            Dictionary representation.
        """
        return {
            "name": self.name,
            "description": self.description,
            "source_id": self.source_id,
            "route_id": self.route_id,
            "distance_km": self.distance,
            "walking_minutes": self.walking_minutes,
            "start_point": list(self.start_point) if self.start_point else None,
            "end_point": list(self.end_point) if self.end_point else None,
            "points": [list(p) for p in self.points],
        }
