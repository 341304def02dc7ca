"""Unslop: local-first product planning backend."""

__version__ = "0.1.0"
