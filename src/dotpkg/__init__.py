"""Incremental generator of importable content packages."""

__version__ = "0.1.0"
