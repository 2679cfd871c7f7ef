"""Map visualization for route-map.

Generates a standalone HTML page using Leaflet.js that draws every track as
a colored polyline with a click popup.
"""

from __future__ import annotations

import html
import http.server
import json
import socketserver
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from route_map.config import DEFAULT_CENTER, DEFAULT_TILE_URL, DEFAULT_ZOOM
from route_map.lib.geo import format_coordinate
from route_map.models.track import Track

POPUP_MAX_WIDTH = 440
LINE_WEIGHT = 3


def track_color(index: int, count: int) -> str:
    """Return an evenly spaced hue for the track at ``index``."""
    hue = (index * 360) / count if count else 0
    return f"hsl({hue:g}, 70%, 50%)"


def render_popup(track: Track) -> str:
    """Render the popup HTML for a track.

    Args:
        track: Track to describe.

    Returns:
        HTML fragment with escaped track metadata.
    """
    lines = [f'<h3 class="route-name">{html.escape(track.name)}</h3>']
    if track.description:
        lines.append(f'<p class="route-description">{html.escape(track.description)}</p>')

    details = [
        ("Distance", f"{track.distance} km"),
        ("Estimated walking time", f"{track.walking_minutes} minutes"),
        ("Route ID", track.route_id),
    ]
    if track.start_point is not None and track.end_point is not None:
        details.append(("Start coordinates", format_coordinate(track.start_point)))
        details.append(("End coordinates", format_coordinate(track.end_point)))

    lines.append('<div class="route-details">')
    for label, value in details:
        lines.append(f"<p><strong>{label}:</strong> {html.escape(value)}</p>")
    lines.append("</div>")

    return "\n".join(lines)


def _routes_payload(tracks: Sequence[Track]) -> list[dict[str, Any]]:
    """Prepare track data for JavaScript."""
    count = len(tracks)
    return [
        {
            "id": track.source_id,
            "name": track.name,
            "color": track_color(index, count),
            "coords": [list(point) for point in track.points],
            "popup": render_popup(track),
        }
        for index, track in enumerate(tracks)
    ]


def generate_map(
    tracks: Sequence[Track],
    center: tuple[float, float] = DEFAULT_CENTER,
    zoom: int = DEFAULT_ZOOM,
    tile_url: str = DEFAULT_TILE_URL,
) -> str:
    """Generate HTML map of tracks.

    Args:
        tracks: Tracks to draw, in display order.
        center: Initial map center as (lat, lon).
        zoom: Initial zoom level.
        tile_url: Leaflet tile URL template.

    Returns:
        HTML content as string.
    """
    # Keep "</script>" inside strings from closing the script element
    routes_json = json.dumps(_routes_payload(tracks)).replace("</", "<\\/")
    tile_url_json = json.dumps(tile_url)

    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Routes Map</title>
    <link rel="stylesheet" href="https://unpkg.com/leaflet@1.9.4/dist/leaflet.css">
    <style>
        body {{ margin: 0; padding: 0; }}
        #map {{ position: absolute; top: 0; bottom: 0; width: 100%; }}
        .leaflet-popup-content {{ font: 14px/18px Arial, Helvetica, sans-serif; }}
        .route-name {{ margin: 0 0 8px 0; font-size: 18px; }}
        .route-description {{ margin: 0 0 8px 0; }}
        .route-details p {{ margin: 0 0 4px 0; }}
    </style>
</head>
<body>
    <div id="map"></div>
    <script src="https://unpkg.com/leaflet@1.9.4/dist/leaflet.js"></script>
    <script>
        var map = L.map('map').setView([{center[0]}, {center[1]}], {zoom});

        L.tileLayer({tile_url_json}, {{
            maxZoom: 19,
            attribution: '&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a>'
        }}).addTo(map);

        var routes = {routes_json};

        routes.forEach(function(route) {{
            if (route.coords.length === 0) {{
                return;
            }}
            var line = L.polyline(route.coords, {{
                color: route.color,
                weight: {LINE_WEIGHT}
            }}).addTo(map);
            line.bindPopup(route.popup, {{ maxWidth: {POPUP_MAX_WIDTH} }});
            line.on('click', function(e) {{
                line.openPopup(e.latlng);
            }});
        }});
    </script>
</body>
</html>"""


def serve_map(
    html_path: Path,
    port: int = 8080,
    host: str = "127.0.0.1",
) -> None:
    """Start a local HTTP server to serve the map.

    Args:
        html_path: Path to the HTML file.
        port: Server port.
        host: Server host.
    """
    directory = html_path.parent

    class Handler(http.server.SimpleHTTPRequestHandler):
        def __init__(self, *args: Any, **kwargs: Any) -> None:
            super().__init__(*args, directory=str(directory), **kwargs)

        def log_message(self, format: str, *args: object) -> None:
            pass  # Suppress logging

    # Allow port reuse to avoid "Address already in use" errors
    socketserver.TCPServer.allow_reuse_address = True

    with socketserver.TCPServer((host, port), Handler) as httpd:
        url = f"http://{host}:{port}/{html_path.name}"
        print(f"Serving at {url}")
        print("Press Ctrl+C to stop")

        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            print("\nServer stopped")
