"""CLI commands for vitalrec."""

from . import config_cmd, generate

__all__ = ["config_cmd", "generate"]
