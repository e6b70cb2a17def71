"""Cell states for the Game of Life grid."""

from enum import Enum


class Cell(Enum):
    """State of a single cell.

    The numeric values are part of the contract: when neighbor counts are
    summed, ``ALIVE`` contributes 1 and ``DEAD`` contributes 0. Use
    :meth:`to_int` and :meth:`from_int` instead of relying on coercion.
    """

    DEAD = 0
    ALIVE = 1

    def to_int(self) -> int:
        """Return the numeric encoding of this state (0 or 1)."""
        return self.value

    @classmethod
    def from_int(cls, value: int) -> "Cell":
        """Build a cell state from its numeric encoding.

        Args:
            value: 0 for dead, 1 for alive

        Returns:
            The matching Cell

        Raises:
            ValueError: If value is neither 0 nor 1
        """
        return cls(int(value))

    @property
    def is_alive(self) -> bool:
        return self is Cell.ALIVE

    @property
    def glyph(self) -> str:
        """Console glyph for this state."""
        return "◼" if self is Cell.ALIVE else "◻"
