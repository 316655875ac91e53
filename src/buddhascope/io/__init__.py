"""Presentation hand-off and file output."""

from buddhascope.io.exporter import build_vertices, export, to_rgb_image

__all__ = ["build_vertices", "export", "to_rgb_image"]
