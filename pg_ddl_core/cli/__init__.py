"""
Command line interface for pg-ddl-core.
"""

from .cli import main

__all__ = ["main"]
