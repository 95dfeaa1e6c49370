"""
vyperkit CLI module.

This module provides the `vvm` version manager and the `vyper` wrapper
command-line entry points.
"""

from .parser import CLI, main
from . import utils

__all__ = ["CLI", "main", "utils"]
