"""Toroidal grid for Conway's Game of Life."""

from typing import Iterable, List, Tuple
import operator
import numpy as np
import torch
import torch.nn.functional as F

from .cell import Cell


Position = Tuple[int, int]


class Grid:
    """A fixed-size 2D grid whose edges wrap around (a torus).

    Cells are stored row-major in a contiguous ``uint8`` numpy buffer, so
    the flat index of ``(row, column)`` is ``row * width + column``. Every
    cell, border cells included, has exactly eight neighbors.

    Two buffers are kept: ``tick`` writes the next generation into the
    spare one and only then swaps them, so no partially updated state is
    ever used for neighbor counting or observed by a caller.
    """

    def __init__(self, width: int, height: int) -> None:
        """Initialize a new grid with every cell dead.

        Args:
            width: Number of columns (at least 1)
            height: Number of rows (at least 1)

        Raises:
            ValueError: If either dimension is smaller than 1
        """
        if width < 1 or height < 1:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")

        self._width = int(width)
        self._height = int(height)
        self._cells = np.zeros((self._height, self._width), dtype=np.uint8)
        self._next_cells = np.zeros((self._height, self._width), dtype=np.uint8)

        # PyTorch tensors for convolution (reused for efficiency)
        self._torch_input = torch.zeros(1, 1, self._height, self._width, dtype=torch.float32)
        self._torch_kernel = (
            torch.tensor([[1, 1, 1], [1, 0, 1], [1, 1, 1]], dtype=torch.float32).unsqueeze(0).unsqueeze(0)
        )

    @property
    def width(self) -> int:
        """Number of columns."""
        return self._width

    @property
    def height(self) -> int:
        """Number of rows."""
        return self._height

    @property
    def shape(self) -> Tuple[int, int]:
        """Get grid dimensions as (width, height)."""
        return (self._width, self._height)

    @property
    def cells(self) -> np.ndarray:
        """Read-only flat view of the current generation in row-major order.

        The view aliases grid memory. It is only meaningful until the next
        ``set_live_cells``, ``reset`` or ``tick``.
        """
        view = self._cells.reshape(-1)
        view.flags.writeable = False
        return view

    def raw_cells_pointer(self) -> int:
        """Address of the first cell of the contiguous ``uint8`` buffer.

        Intended for zero-copy readers outside Python. The address is
        invalidated by any mutating call; in particular ``tick`` switches
        buffers, so callers must fetch it again after every generation.
        """
        return int(self._cells.ctypes.data)

    @property
    def population(self) -> int:
        """Get the number of living cells."""
        return int(np.count_nonzero(self._cells))

    def index(self, row: int, column: int) -> int:
        """Flat row-major index of a cell."""
        return row * self._width + column

    def position(self, index: int) -> Position:
        """Inverse of :meth:`index`: the (row, column) of a flat index."""
        row, column = divmod(index, self._width)
        return (row, column)

    def contains(self, row: int, column: int) -> bool:
        return 0 <= row < self._height and 0 <= column < self._width

    def _checked_position(self, row: int, column: int) -> Position:
        """Convert a coordinate pair to plain ints and bounds-check it.

        Raises:
            TypeError: If either coordinate is not an integer (bools included)
            IndexError: If the coordinates are outside the grid
        """
        # numpy treats a bool index as a mask and a float index as an error
        if isinstance(row, (bool, np.bool_)) or isinstance(column, (bool, np.bool_)):
            raise TypeError(f"Coordinates ({row!r}, {column!r}) must be integers, not bools")
        row, column = operator.index(row), operator.index(column)

        if not self.contains(row, column):
            raise IndexError(f"Coordinates ({row}, {column}) out of bounds for {self._height}x{self._width} grid")
        return (row, column)

    def cell(self, row: int, column: int) -> Cell:
        """Get the state of a cell.

        Raises:
            TypeError: If either coordinate is not an integer
            IndexError: If the coordinates are outside the grid
        """
        row, column = self._checked_position(row, column)
        return Cell.from_int(self._cells[row, column])

    def set_live_cells(self, positions: Iterable[Position]) -> None:
        """Mark the given cells alive, leaving every other cell untouched.

        All coordinates are checked before anything is written, so a
        rejected call does not change the grid.

        Args:
            positions: (row, column) pairs; order and duplicates don't matter

        Raises:
            TypeError: If any coordinate is not an integer
            IndexError: If any coordinate is outside the grid
        """
        positions = [self._checked_position(row, column) for row, column in positions]

        alive = Cell.ALIVE.to_int()
        for row, column in positions:
            self._cells[row, column] = alive

    def get_live_cells(self) -> List[Position]:
        """Positions of all living cells, row ascending then column ascending."""
        rows, columns = np.nonzero(self._cells)
        return [(int(row), int(column)) for row, column in zip(rows, columns)]

    def reset(self) -> None:
        """Set every cell dead, keeping the dimensions."""
        self._cells.fill(Cell.DEAD.to_int())

    def count_live_neighbors(self, row: int, column: int) -> int:
        """Count living neighbors of a single cell.

        Offsets wrap modulo the grid size, so row 0 sees row ``height - 1``
        as the row above it.

        Returns:
            Number of living neighbors (0-8)
        """
        count = 0
        for delta_row in (-1, 0, 1):
            for delta_column in (-1, 0, 1):
                if delta_row == 0 and delta_column == 0:
                    continue

                neighbor_row = (row + delta_row) % self._height
                neighbor_column = (column + delta_column) % self._width
                count += Cell.from_int(self._cells[neighbor_row, neighbor_column]).to_int()

        return count

    def count_all_neighbors(self) -> np.ndarray:
        """Count neighbors for all cells using a PyTorch convolution.

        Returns:
            (height, width) array with the neighbor count of each cell
        """
        self._torch_input[0, 0] = torch.from_numpy(self._cells.astype(np.float32))

        # Circular padding gives the toroidal topology
        padded = F.pad(self._torch_input, (1, 1, 1, 1), mode="circular")
        neighbors = F.conv2d(padded, self._torch_kernel)

        return neighbors[0, 0].numpy().astype(np.int8)

    def tick(self) -> None:
        """Advance the grid by one generation."""
        neighbor_counts = self.count_all_neighbors()
        alive = self._cells == Cell.ALIVE.to_int()

        # Survival: live cell with 2 or 3 neighbors
        survive_mask = alive & ((neighbor_counts == 2) | (neighbor_counts == 3))

        # Birth: dead cell with exactly 3 neighbors
        birth_mask = ~alive & (neighbor_counts == 3)

        self._next_cells.fill(Cell.DEAD.to_int())
        self._next_cells[survive_mask | birth_mask] = Cell.ALIVE.to_int()

        self._cells, self._next_cells = self._next_cells, self._cells

    def state_bytes(self) -> bytes:
        """Snapshot of the current generation, suitable as a dict key."""
        return self._cells.tobytes()

    def __eq__(self, other: object) -> bool:
        """Check if two grids are equal."""
        if not isinstance(other, Grid):
            return False
        return self.shape == other.shape and np.array_equal(self._cells, other._cells)

    def __str__(self) -> str:
        """One line per row, '◼' for living cells and '◻' for dead ones."""
        dead, alive = Cell.DEAD.glyph, Cell.ALIVE.glyph
        return "\n".join("".join(alive if value else dead for value in row) for row in self._cells)

    def __repr__(self) -> str:
        return f"Grid(width={self._width}, height={self._height}, population={self.population})"
