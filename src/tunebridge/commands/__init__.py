"""Command groups for the tunebridge CLI.

This package provides sub-apps that are mounted by tunebridge.cli.
"""

from . import backend as backend  # noqa: F401
from . import catalog as catalog  # noqa: F401
from . import config as config  # noqa: F401

__all__ = [
    "backend",
    "catalog",
    "config",
]
