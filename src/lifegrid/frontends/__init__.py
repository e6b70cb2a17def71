"""Frontend interfaces for the Game of Life grid."""

from .cli import CLIGameOfLife

__all__ = ["CLIGameOfLife"]
