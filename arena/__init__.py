"""Arena: live multi-sport scoring service."""

__version__ = "1.0.0"
