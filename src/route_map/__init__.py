"""Hiking and cycling route map generator.

Loads GPX route files from a web server or local directory, computes route
distances, and renders the routes as colored polylines on an interactive
Leaflet map.
"""

__version__ = "0.1.0"
__author__ = "route-map contributors"
__license__ = "Apache-2.0"

__all__ = ["__version__"]
