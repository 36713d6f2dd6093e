"""Textured raycasting maze explorer for .cub scene files and XPM textures."""

__version__ = "0.1.0"
__all__ = ["app", "colornames", "player", "raycast", "scene", "xpm"]