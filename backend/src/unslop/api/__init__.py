"""API module for Unslop backend."""
