"""Image-processing URL parsing, presets, processing geometry and metrics helpers."""

__version__ = "0.1.0"

__all__ = [
    "gravity",
    "url",
    "stats",
    "sampler",
    "options",
    "paths",
    "geometry",
]