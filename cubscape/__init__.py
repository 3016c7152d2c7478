"""A ray-casting first-person maze explorer for .cub scene files."""

__version__ = "0.1.0"