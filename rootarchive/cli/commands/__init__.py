"""CLI command modules."""

from . import library_cmd, ls_cmd, setup_cmd, users_cmd

__all__ = [
    "library_cmd",
    "ls_cmd",
    "setup_cmd",
    "users_cmd",
]
