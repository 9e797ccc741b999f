"""Geometry and image helpers shared by the layout and render packages."""
