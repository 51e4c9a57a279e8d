"""Utilities package for helper functions and constants."""

from . import constants
from . import helpers

__all__ = [
    "constants",
    "helpers"
]
