"""Console launcher for Doom source ports."""

__version__ = "0.2.0"
