"""Shared utilities."""

from .async_helpers import run_sync
from .env_file import EnvFile
from .singletons import register_singleton, reset_all_singletons

__all__ = [
    "EnvFile",
    "register_singleton",
    "reset_all_singletons",
    "run_sync",
]
