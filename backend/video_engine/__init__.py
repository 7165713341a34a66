"""Video Engine - script to generated clip sequence."""

__version__ = "1.0.0"
