"""Database layer for Unslop."""

from unslop.db.connection import Database
from unslop.db.kv import KeyValueStore, run_migrations

__all__ = ["Database", "KeyValueStore", "run_migrations"]
