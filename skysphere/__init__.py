"""Points, circles, arcs and spherical triangles on the celestial sphere, with JSON storage and SVG rendering."""

__version__ = "0.1.0"

__all__ = ["geometry", "circles", "scene", "storage", "render"]