"""Configuration management for route-map.

Handles loading configuration from TOML files, environment variables,
and command-line options with proper precedence.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


DEFAULT_CONFIG_PATH = Path.home() / ".config" / "route-map" / "config.toml"
LOCAL_CONFIG_NAME = ".route-map.toml"
DEFAULT_SOURCE = "./routes"
DEFAULT_OUTPUT = Path("./map.html")
DEFAULT_TILE_URL = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
DEFAULT_CENTER = (52.1326, 5.2913)
DEFAULT_ZOOM = 7

DEFAULT_ROUTE_FILES = (
    "116-kennemerduinen.gpx",
    "125-strabrechtsche-heide.gpx",
    "659-waterlinie-culemborg.gpx",
    "660-uiterwaarden-van-cortenoever.gpx",
    "661-schiedam-jeneverstad.gpx",
    "665-overijsselse-buitenplaatsen.gpx",
    "667-limburgs-plateau.gpx",
    "670-hierdense-poort.gpx",
    "673-eiland-van-dordrecht.gpx",
    "677-blauwe-kamer-rhenen.gpx",
    "1084-krickenbecker-seen.gpx",
    "1085-helderse-duinen.gpx",
    "1086-hart-van-het-groene-woud.gpx",
    "1087-gein-en-vecht.gpx",
    "1329-duinen-van-zoutelande.gpx",
)


@dataclass
class RoutesConfig:
    """Where route files come from."""

    source: str = DEFAULT_SOURCE
    files: list[str] = field(default_factory=lambda: list(DEFAULT_ROUTE_FILES))
    timeout: float | None = None


@dataclass
class MapConfig:
    """Map page configuration."""

    center: tuple[float, float] = DEFAULT_CENTER
    zoom: int = DEFAULT_ZOOM
    tile_url: str = DEFAULT_TILE_URL
    output: Path = field(default_factory=lambda: DEFAULT_OUTPUT)


@dataclass
class LoggingConfig:
    """Log file configuration."""

    directory: Path | None = None


@dataclass
class Config:
    """Main configuration container."""

    routes: RoutesConfig = field(default_factory=RoutesConfig)
    map: MapConfig = field(default_factory=MapConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    config_path: Path | None = None


def _get_env_value(key: str, default: str = "") -> str:
    """Get environment variable value."""
    return os.environ.get(key, default)


def _find_config_path() -> Path:
    """Locate the configuration file when none was given explicitly."""
    if env_config := _get_env_value("ROUTE_MAP_CONFIG"):
        return Path(env_config)
    local_config = Path(LOCAL_CONFIG_NAME)
    if local_config.exists():
        return local_config
    return DEFAULT_CONFIG_PATH


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration from file and environment variables.

    Configuration is loaded with the following precedence (highest to lowest):
    1. Environment variables
    2. Configuration file
    3. Default values

    Args:
        config_path: Path to configuration file. If None, uses
            ROUTE_MAP_CONFIG, then ./.route-map.toml, then the default location.

    Returns:
        Populated Config object.
    """
    config = Config()

    if config_path is None:
        config_path = _find_config_path()

    config.config_path = config_path

    if config_path.exists():
        config = _load_from_file(config_path, config)

    return _apply_env_overrides(config)


def _load_from_file(path: Path, config: Config) -> Config:
    """Load configuration from TOML file.

    Args:
        path: Path to TOML file.
        config: Existing config to update.

    Returns:
        Updated Config object.
    """
    with open(path, "rb") as f:
        data = tomllib.load(f)

    # Routes section
    if "routes" in data:
        routes = data["routes"]
        config.routes.source = str(routes.get("source", config.routes.source))
        if "files" in routes:
            config.routes.files = [str(name) for name in routes["files"]]
        if "timeout" in routes:
            config.routes.timeout = float(routes["timeout"])

    # Map section
    if "map" in data:
        map_section = data["map"]
        if "center" in map_section:
            lat, lon = map_section["center"]
            config.map.center = (float(lat), float(lon))
        config.map.zoom = int(map_section.get("zoom", config.map.zoom))
        config.map.tile_url = map_section.get("tile_url", config.map.tile_url)
        if "output" in map_section:
            config.map.output = Path(map_section["output"])

    # Logging section
    if "logging" in data:
        logging_section = data["logging"]
        if "directory" in logging_section:
            config.logging.directory = Path(logging_section["directory"])

    return config


def _apply_env_overrides(config: Config) -> Config:
    """Apply environment variable overrides to configuration.

    Args:
        config: Config to update.

    Returns:
        Updated Config object.
    """
    if source := _get_env_value("ROUTE_MAP_SOURCE"):
        config.routes.source = source
    if timeout := _get_env_value("ROUTE_MAP_TIMEOUT"):
        config.routes.timeout = float(timeout)
    if output := _get_env_value("ROUTE_MAP_OUTPUT"):
        config.map.output = Path(output)
    if log_dir := _get_env_value("ROUTE_MAP_LOG_DIR"):
        config.logging.directory = Path(log_dir)

    return config
