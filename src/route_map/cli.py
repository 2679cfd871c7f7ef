"""Command-line interface for route-map.

Provides CLI commands for loading GPX routes and rendering them on an
interactive map.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from route_map import __version__
from route_map.config import DEFAULT_CONFIG_PATH, load_config
from route_map.lib.logging import setup_logging
from route_map.services.loader import TrackStore

if TYPE_CHECKING:
    from route_map.config import Config
    from route_map.models.track import Track


class JSONOutput:
    """Helper for JSON output formatting."""

    def __init__(self, enabled: bool = False) -> None:
        self.enabled = enabled
        self._data: dict[str, Any] = {}

    def set(self, key: str, value: Any) -> None:
        """Set a value in the output."""
        self._data[key] = value

    def update(self, data: dict[str, Any]) -> None:
        """Update with multiple values."""
        self._data.update(data)

    def output(self) -> None:
        """Print JSON output if enabled."""
        if self.enabled:
            click.echo(json.dumps(self._data, indent=2, default=str))


# Custom context class to hold shared state
class Context:
    """CLI context holding shared configuration and state."""

    def __init__(self) -> None:
        self.config: Config | None = None
        self.verbose: int = 0
        self.quiet: bool = False
        self.json_output: bool = False
        self.output: JSONOutput = JSONOutput()
        self.store: TrackStore = TrackStore()

    def log(self, message: str, level: int = 0) -> None:
        """Log a message if verbosity allows.

        Args:
            message: Message to log.
            level: Required verbosity level (0=normal, 1=-v, 2=-vv).
        """
        if self.json_output:
            return
        if self.quiet and level == 0:
            return
        if level <= self.verbose or level == 0:
            click.echo(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        if self.json_output:
            self.output.set("error", message)
            self.output.set("status", "error")
        else:
            click.echo(f"Error: {message}", err=True)

    def load_tracks(self, files: tuple[str, ...]) -> tuple[Track, ...]:
        """Load the requested route files, or the configured ones."""
        assert self.config is not None
        routes = self.config.routes
        self.store.refresh_sync(
            list(files) if files else routes.files,
            routes.source,
            timeout=routes.timeout,
        )
        return self.store.tracks


pass_context = click.make_pass_decorator(Context, ensure=True)


@click.group()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, path_type=Path),
    default=None,
    help=f"Configuration file path (default: {DEFAULT_CONFIG_PATH})",
)
@click.option(
    "--source",
    "-s",
    default=None,
    help="Base URL or directory the GPX files are read from",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (can be repeated: -v, -vv)",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Suppress non-error output",
)
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Output in JSON format",
)
@click.version_option(version=__version__, prog_name="route-map")
@pass_context
def main(
    ctx: Context,
    config_path: Path | None,
    source: str | None,
    verbose: int,
    quiet: bool,
    json_output: bool,
) -> None:
    """GPX route map generator.

    Load hiking and cycling routes from GPX files and draw them on an
    interactive map.
    """
    ctx.verbose = verbose
    ctx.quiet = quiet
    ctx.json_output = json_output
    ctx.output = JSONOutput(json_output)

    # Load configuration
    ctx.config = load_config(config_path)

    # Override source if specified
    if source is not None:
        ctx.config.routes.source = source

    setup_logging(
        ctx.config,
        console_level=logging.DEBUG if verbose else logging.INFO,
        quiet=quiet or json_output,
    )


@main.command(name="map")
@click.argument("files", nargs=-1)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    help="Output HTML file (default: stdout, or the configured output with --serve)",
)
@click.option(
    "--serve",
    is_flag=True,
    help="Start local HTTP server to view map",
)
@click.option(
    "--port",
    default=8080,
    help="Server port (default: 8080)",
)
@click.option(
    "--host",
    default="127.0.0.1",
    help="Server host (default: 127.0.0.1)",
)
@pass_context
def map_cmd(
    ctx: Context,
    files: tuple[str, ...],
    output: Path | None,
    serve: bool,
    port: int,
    host: str,
) -> None:
    """Generate interactive map of the routes."""
    from route_map.views.map import generate_map, serve_map

    config = ctx.config
    if config is None:
        ctx.error("Configuration not loaded")
        sys.exit(1)

    try:
        tracks = ctx.load_tracks(files)
        html = generate_map(
            tracks,
            center=config.map.center,
            zoom=config.map.zoom,
            tile_url=config.map.tile_url,
        )

        if serve:
            output_path = output or config.map.output
            output_path.write_text(html, encoding="utf-8")
            ctx.log(f"Map with {len(tracks)} routes saved to {output_path}")
            ctx.log(f"Starting server at http://{host}:{port}")
            serve_map(output_path, port=port, host=host)
        elif output:
            output.write_text(html, encoding="utf-8")
            ctx.log(f"Map with {len(tracks)} routes saved to {output}")
            if ctx.json_output:
                ctx.output.update({
                    "status": "success",
                    "output": str(output),
                    "routes": len(tracks),
                })
                ctx.output.output()
        elif ctx.json_output:
            ctx.output.update({
                "status": "success",
                "routes": len(tracks),
                "html": html,
            })
            ctx.output.output()
        else:
            click.echo(html)

    except Exception as e:
        ctx.error(f"Map generation failed: {e}")
        if ctx.json_output:
            ctx.output.output()
        sys.exit(1)


@main.command(name="list")
@click.argument("files", nargs=-1)
@pass_context
def list_cmd(ctx: Context, files: tuple[str, ...]) -> None:
    """List the routes that load successfully."""
    if ctx.config is None:
        ctx.error("Configuration not loaded")
        sys.exit(1)

    tracks = ctx.load_tracks(files)

    if ctx.json_output:
        ctx.output.update({
            "status": "success",
            "count": len(tracks),
            "routes": [
                {key: value for key, value in track.to_dict().items() if key != "points"}
                for track in tracks
            ],
        })
        ctx.output.output()
        return

    for track in tracks:
        click.echo(
            f"{track.route_id:>5}  {track.name:<40} {track.distance:>6.1f} km"
            f"  {track.walking_minutes:>4} min"
        )
    ctx.log(f"\n{len(tracks)} routes", level=1)


if __name__ == "__main__":
    main()
