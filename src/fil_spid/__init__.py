"""Stateless storage provider authentication headers for Filecoin."""

__version__ = "0.1.0"
