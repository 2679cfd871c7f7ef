"""Unit tests for map generation."""

from __future__ import annotations

import json
import re

import pytest

from route_map.models.track import Track
from route_map.views.map import generate_map, render_popup, track_color


def _track(
    source_id: str = "661-schiedam-jeneverstad.gpx",
    name: str = "Schiedam Jeneverstad",
    description: str = "",
    points: tuple[tuple[float, float], ...] = ((51.91701, 4.39901), (51.92004, 4.40507)),
) -> Track:
    return Track(name=name, description=description, points=points, source_id=source_id)


def _routes_from_html(html: str) -> list[dict]:
    match = re.search(r"var routes = (.*);\n", html)
    assert match, "routes payload not found"
    return json.loads(match.group(1).replace("<\\/", "</"))


@pytest.mark.ai_generated
class TestTrackColor:
    """Tests for route colors."""

    def test_evenly_spaced_hues(self) -> None:
        """Test hues are spread across the color wheel."""
        assert track_color(0, 15) == "hsl(0, 70%, 50%)"
        assert track_color(1, 15) == "hsl(24, 70%, 50%)"
        assert track_color(2, 4) == "hsl(180, 70%, 50%)"

    def test_distinct_colors(self) -> None:
        """Test every track gets its own color."""
        colors = {track_color(i, 15) for i in range(15)}
        assert len(colors) == 15


@pytest.mark.ai_generated
class TestRenderPopup:
    """Tests for popup content."""

    def test_contains_details(self) -> None:
        """Test popup shows distance, walking time, route ID and coordinates."""
        track = _track()

        popup = render_popup(track)

        assert "Schiedam Jeneverstad" in popup
        assert f"<strong>Distance:</strong> {track.distance} km" in popup
        assert f"<strong>Estimated walking time:</strong> {track.walking_minutes} minutes" in popup
        assert "<strong>Route ID:</strong> 661" in popup
        assert "<strong>Start coordinates:</strong> 51.9170, 4.3990" in popup
        assert "<strong>End coordinates:</strong> 51.9200, 4.4051" in popup

    def test_description_shown_when_present(self) -> None:
        """Test a description paragraph is added when there is one."""
        popup = render_popup(_track(description="Along the old distilleries"))

        assert '<p class="route-description">Along the old distilleries</p>' in popup

    def test_description_omitted_when_empty(self) -> None:
        """Test no description paragraph for an empty description."""
        popup = render_popup(_track(description=""))

        assert "route-description" not in popup

    def test_escapes_metadata(self) -> None:
        """Test names from files cannot inject markup."""
        popup = render_popup(_track(name="<script>alert(1)</script>"))

        assert "<script>" not in popup
        assert "&lt;script&gt;" in popup

    def test_no_coordinates_without_points(self) -> None:
        """Test coordinate lines are left out for a track without points."""
        popup = render_popup(_track(points=()))

        assert "Start coordinates" not in popup
        assert "<strong>Distance:</strong> 0.0 km" in popup


@pytest.mark.ai_generated
class TestGenerateMap:
    """Tests for the HTML map page."""

    def test_valid_html(self) -> None:
        """Test the page has the basic document structure and Leaflet."""
        html = generate_map([_track()])

        assert "<html" in html.lower()
        assert "<head" in html.lower()
        assert "<body" in html.lower()
        assert "leaflet@1.9.4/dist/leaflet.js" in html
        assert "setView([52.1326, 5.2913], 7)" in html

    def test_routes_payload(self) -> None:
        """Test each track is embedded with its color, coordinates and popup."""
        tracks = [
            _track(),
            _track(source_id="116-kennemerduinen.gpx", name="Kennemerduinen"),
        ]

        routes = _routes_from_html(generate_map(tracks))

        assert [r["id"] for r in routes] == ["661-schiedam-jeneverstad.gpx", "116-kennemerduinen.gpx"]
        assert routes[0]["color"] == "hsl(0, 70%, 50%)"
        assert routes[1]["color"] == "hsl(180, 70%, 50%)"
        assert routes[0]["coords"] == [[51.91701, 4.39901], [51.92004, 4.40507]]
        assert routes[0]["popup"] == render_popup(tracks[0])

    def test_script_tags_in_metadata_do_not_close_script(self) -> None:
        """Test embedded data cannot terminate the script element."""
        html = generate_map([_track(description="</script><b>x</b>")])

        assert html.count("</script>") == 2

    def test_empty_map(self) -> None:
        """Test zero tracks still render a page."""
        html = generate_map([])

        assert _routes_from_html(html) == []

    def test_custom_view(self) -> None:
        """Test center, zoom and tile URL are configurable."""
        html = generate_map(
            [],
            center=(51.5, 4.0),
            zoom=9,
            tile_url="https://tiles.example.org/{z}/{x}/{y}.png",
        )

        assert "setView([51.5, 4.0], 9)" in html
        assert '"https://tiles.example.org/{z}/{x}/{y}.png"' in html
