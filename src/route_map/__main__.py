"""Entry point for running route-map as a module.

Usage:
    python -m route_map [command] [options]
"""

from route_map.cli import main

if __name__ == "__main__":
    main()
