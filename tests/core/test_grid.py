"""Tests for the Grid class."""

import numpy as np
import pytest
from lifegrid.core.cell import Cell
from lifegrid.core.grid import Grid


def _in_place_tick(grid: Grid) -> list:
    """Apply the rules row by row while overwriting cells, as a broken update would."""
    cells = grid.cells.reshape(grid.height, grid.width).copy()
    for row in range(grid.height):
        for column in range(grid.width):
            count = 0
            for dr in (-1, 0, 1):
                for dc in (-1, 0, 1):
                    if dr or dc:
                        count += int(cells[(row + dr) % grid.height, (column + dc) % grid.width])
            if cells[row, column]:
                cells[row, column] = 1 if count in (2, 3) else 0
            elif count == 3:
                cells[row, column] = 1
    rows, columns = np.nonzero(cells)
    return [(int(r), int(c)) for r, c in zip(rows, columns)]


class TestGridConstruction:
    """Test cases for creating grids."""

    def test_initialization(self):
        """Test grid initialization."""
        grid = Grid(10, 20)
        assert grid.width == 10
        assert grid.height == 20
        assert grid.shape == (10, 20)
        assert grid.population == 0

    @pytest.mark.parametrize("width,height", [(1, 1), (1, 7), (7, 1), (30, 30), (3, 8)])
    def test_all_cells_dead(self, width, height):
        """Test a fresh grid has width*height dead cells."""
        grid = Grid(width, height)
        assert len(grid.cells) == width * height
        assert all(Cell.from_int(value) is Cell.DEAD for value in grid.cells)

    def test_universe_size(self):
        """Test cell buffer size of a 30x30 grid."""
        grid = Grid(30, 30)
        assert len(grid.cells) == 900

    @pytest.mark.parametrize("width,height", [(0, 5), (5, 0), (0, 0), (-1, 3)])
    def test_invalid_dimensions(self, width, height):
        """Test construction rejects non-positive dimensions."""
        with pytest.raises(ValueError):
            Grid(width, height)

    def test_dimensions_are_read_only(self):
        """Test width and height can't be reassigned."""
        grid = Grid(4, 3)
        with pytest.raises(AttributeError):
            grid.width = 10
        with pytest.raises(AttributeError):
            grid.height = 10


class TestIndexing:
    """Test row-major addressing helpers."""

    def test_index(self):
        """Test flat index of a cell."""
        grid = Grid(7, 3)
        assert grid.index(0, 0) == 0
        assert grid.index(0, 6) == 6
        assert grid.index(1, 0) == 7
        assert grid.index(2, 4) == 18

    def test_position_is_inverse_of_index(self):
        """Test position() undoes index() for every cell."""
        grid = Grid(5, 4)
        for row in range(grid.height):
            for column in range(grid.width):
                assert grid.position(grid.index(row, column)) == (row, column)

    def test_cells_follow_row_major_order(self):
        """Test the flat view places cells at row * width + column."""
        grid = Grid(4, 3)
        grid.set_live_cells([(2, 1)])
        assert grid.cells[2 * 4 + 1] == Cell.ALIVE.to_int()
        assert grid.population == 1

    def test_cell_lookup(self):
        """Test single cell lookup."""
        grid = Grid(3, 3)
        grid.set_live_cells([(1, 2)])
        assert grid.cell(1, 2) is Cell.ALIVE
        assert grid.cell(2, 1) is Cell.DEAD

        with pytest.raises(IndexError):
            grid.cell(3, 0)
        with pytest.raises(IndexError):
            grid.cell(0, -1)


class TestSeeding:
    """Test set_live_cells and get_live_cells."""

    def test_empty_grid(self):
        """Test a fresh grid has no live cells."""
        grid = Grid(10, 10)
        assert grid.get_live_cells() == []

    def test_set_live_cells(self):
        """Test seeded cells are reported back."""
        grid = Grid(10, 10)
        grid.set_live_cells([(1, 2), (4, 5), (6, 2)])
        assert grid.get_live_cells() == [(1, 2), (4, 5), (6, 2)]

    def test_live_cells_are_sorted_row_major(self):
        """Test order of the input doesn't matter."""
        grid = Grid(10, 10)
        grid.set_live_cells([(6, 2), (1, 2), (4, 5), (1, 0)])
        assert grid.get_live_cells() == [(1, 0), (1, 2), (4, 5), (6, 2)]

    def test_duplicates_are_idempotent(self):
        """Test seeding the same cell twice."""
        grid = Grid(5, 5)
        grid.set_live_cells([(2, 2), (2, 2), (0, 4)])
        grid.set_live_cells([(2, 2)])
        assert grid.get_live_cells() == [(0, 4), (2, 2)]

    def test_seeding_is_additive(self):
        """Test earlier live cells survive a second seeding."""
        grid = Grid(5, 5)
        grid.set_live_cells([(0, 0)])
        grid.set_live_cells([(4, 4)])
        assert grid.get_live_cells() == [(0, 0), (4, 4)]

    def test_accepts_any_iterable(self):
        """Test seeding from a generator."""
        grid = Grid(5, 5)
        grid.set_live_cells((row, row) for row in range(3))
        assert grid.get_live_cells() == [(0, 0), (1, 1), (2, 2)]

    @pytest.mark.parametrize("position", [(5, 0), (0, 5), (-1, 0), (0, -1), (10, 10)])
    def test_out_of_bounds_rejected(self, position):
        """Test out-of-range coordinates raise IndexError."""
        grid = Grid(5, 5)
        with pytest.raises(IndexError):
            grid.set_live_cells([position])

    def test_rejected_call_leaves_grid_unchanged(self):
        """Test a bad coordinate anywhere in the list prevents every write."""
        grid = Grid(5, 5)
        grid.set_live_cells([(0, 0)])

        with pytest.raises(IndexError):
            grid.set_live_cells([(1, 1), (2, 2), (5, 1)])

        assert grid.get_live_cells() == [(0, 0)]

    def test_float_coordinate_leaves_grid_unchanged(self):
        """Test a non-integer coordinate is rejected before any write."""
        grid = Grid(5, 5)

        with pytest.raises(TypeError):
            grid.set_live_cells([(0, 0), (1.5, 2)])

        assert grid.get_live_cells() == []

    @pytest.mark.parametrize("position", [(0, True), (False, 1), (np.bool_(True), 0)])
    def test_bool_coordinate_rejected(self, position):
        """Test a bool coordinate doesn't act as a whole-row mask."""
        grid = Grid(5, 5)

        with pytest.raises(TypeError):
            grid.set_live_cells([position])

        assert grid.population == 0

    def test_numpy_integer_coordinates(self):
        """Test numpy integers are accepted and stored as plain positions."""
        grid = Grid(5, 5)
        grid.set_live_cells([(np.int64(2), np.uint8(3))])
        assert grid.get_live_cells() == [(2, 3)]
        assert grid.cell(np.int32(2), np.int32(3)) is Cell.ALIVE

    def test_cell_lookup_rejects_non_integers(self):
        """Test cell() applies the same coordinate checks."""
        grid = Grid(5, 5)
        with pytest.raises(TypeError):
            grid.cell(0, True)
        with pytest.raises(TypeError):
            grid.cell(1.0, 0)

    def test_non_square_bounds(self):
        """Test bounds use height for rows and width for columns."""
        grid = Grid(8, 2)
        grid.set_live_cells([(1, 7)])
        with pytest.raises(IndexError):
            grid.set_live_cells([(7, 1)])


class TestReset:
    """Test grid reset."""

    def test_reset(self):
        """Test reset kills every cell and keeps dimensions."""
        grid = Grid(10, 6)
        grid.set_live_cells([(1, 2), (3, 4)])
        grid.tick()
        grid.set_live_cells([(5, 9)])

        grid.reset()

        assert len(grid.get_live_cells()) == 0
        assert grid.width == 10
        assert grid.height == 6
        assert len(grid.cells) == 60


class TestReadOnlyViews:
    """Test the exported views of the cell buffer."""

    def test_cells_view_is_read_only(self):
        """Test writing through the cells view fails."""
        grid = Grid(3, 3)
        view = grid.cells
        with pytest.raises(ValueError):
            view[0] = 1
        assert grid.population == 0

    def test_grid_stays_writable_after_view(self):
        """Test taking a view doesn't lock the grid itself."""
        grid = Grid(3, 3)
        _ = grid.cells
        grid.set_live_cells([(1, 1)])
        grid.tick()
        grid.reset()
        assert grid.population == 0

    def test_raw_cells_pointer_matches_buffer(self):
        """Test the raw pointer addresses the current cell buffer."""
        grid = Grid(4, 4)
        grid.set_live_cells([(0, 1)])
        assert grid.raw_cells_pointer() == grid.cells.ctypes.data

    def test_raw_cells_pointer_changes_on_tick(self):
        """Test tick switches to the other buffer."""
        grid = Grid(4, 4)
        before = grid.raw_cells_pointer()
        grid.tick()
        after = grid.raw_cells_pointer()
        assert before != after
        assert after == grid.cells.ctypes.data


class TestNeighbors:
    """Test neighbor counting with wrap-around."""

    def test_empty_grid(self):
        """Test an empty grid has no neighbors anywhere."""
        grid = Grid(5, 5)
        assert grid.count_live_neighbors(2, 2) == 0
        assert not grid.count_all_neighbors().any()

    def test_interior_counts(self):
        """Test neighbor counts away from the edges."""
        grid = Grid(5, 5)
        grid.set_live_cells([(1, 1), (1, 2), (2, 1)])

        assert grid.count_live_neighbors(2, 2) == 3
        assert grid.count_live_neighbors(1, 1) == 2
        assert grid.count_live_neighbors(0, 0) == 1
        assert grid.count_live_neighbors(3, 3) == 0

    def test_corner_wraps_to_every_edge(self):
        """Test a live (0, 0) counts once for each of its wrapped neighbors."""
        n = 6
        grid = Grid(n, n)
        grid.set_live_cells([(0, 0)])
        counts = grid.count_all_neighbors()

        neighbors = [(n - 1, n - 1), (n - 1, 0), (n - 1, 1), (0, n - 1), (0, 1), (1, n - 1), (1, 0), (1, 1)]
        for row, column in neighbors:
            assert grid.count_live_neighbors(row, column) == 1
            assert counts[row, column] == 1

        assert counts[0, 0] == 0
        assert int(counts.sum()) == 8

    def test_opposite_corners_see_each_other(self):
        """Test corners touch across both edges."""
        grid = Grid(3, 3)
        grid.set_live_cells([(0, 0), (2, 2)])
        assert grid.count_live_neighbors(0, 0) == 1
        assert grid.count_live_neighbors(2, 2) == 1

    def test_scalar_and_vectorized_agree(self):
        """Test both counting paths give identical results."""
        rng = np.random.default_rng(7)
        grid = Grid(9, 6)
        rows, columns = np.nonzero(rng.random((6, 9)) < 0.4)
        grid.set_live_cells(zip(rows.tolist(), columns.tolist()))

        counts = grid.count_all_neighbors()
        assert counts.shape == (6, 9)
        for row in range(grid.height):
            for column in range(grid.width):
                assert counts[row, column] == grid.count_live_neighbors(row, column)

    def test_single_row_grid(self):
        """Test wrapping on a grid one cell tall."""
        grid = Grid(4, 1)
        grid.set_live_cells([(0, 1)])
        # (0, 1) is reached via the rows above and below as well as level
        assert grid.count_live_neighbors(0, 0) == 3
        assert grid.count_live_neighbors(0, 1) == 2
        assert grid.count_all_neighbors()[0, 0] == 3
        assert grid.count_all_neighbors()[0, 1] == 2


class TestTick:
    """Test generation advance."""

    def test_single_simple_tick(self):
        """Test a vertical bar turns horizontal."""
        grid = Grid(5, 5)
        grid.set_live_cells([(1, 2), (2, 2), (3, 2)])
        grid.tick()
        assert grid.get_live_cells() == [(2, 1), (2, 2), (2, 3)]

    def test_moving_shape_tick(self):
        """Test one generation of a glider."""
        grid = Grid(10, 10)
        grid.set_live_cells([(1, 2), (2, 3), (3, 1), (3, 2), (3, 3)])
        grid.tick()
        assert grid.get_live_cells() == [(2, 1), (2, 3), (3, 2), (3, 3), (4, 2)]

    def test_empty_grid_is_fixed_point(self):
        """Test an empty grid stays empty."""
        grid = Grid(8, 8)
        grid.tick()
        grid.tick()
        assert grid.get_live_cells() == []

    def test_underpopulation(self):
        """Test live cells with fewer than two neighbors die."""
        grid = Grid(6, 6)
        grid.set_live_cells([(2, 2), (2, 3)])
        grid.tick()
        assert grid.population == 0

    def test_overpopulation(self):
        """Test a live cell with more than three neighbors dies."""
        grid = Grid(7, 7)
        grid.set_live_cells([(3, 3), (2, 2), (2, 4), (4, 2), (4, 4)])
        grid.tick()
        assert grid.cell(3, 3) is Cell.DEAD

    def test_block_is_stable(self):
        """Test the 2x2 block survives unchanged."""
        grid = Grid(6, 6)
        block = [(2, 2), (2, 3), (3, 2), (3, 3)]
        grid.set_live_cells(block)
        for _ in range(4):
            grid.tick()
        assert grid.get_live_cells() == block

    def test_blinker_wraps_across_edge(self):
        """Test a blinker straddling the top/bottom edge oscillates on the torus."""
        grid = Grid(5, 5)
        grid.set_live_cells([(4, 2), (0, 2), (1, 2)])
        grid.tick()
        assert grid.get_live_cells() == [(0, 1), (0, 2), (0, 3)]
        grid.tick()
        assert grid.get_live_cells() == [(0, 2), (1, 2), (4, 2)]

    def test_glider_returns_after_crossing_torus(self):
        """Test a glider travels around a small torus back to its start."""
        grid = Grid(8, 8)
        glider = [(0, 1), (1, 2), (2, 0), (2, 1), (2, 2)]
        grid.set_live_cells(glider)
        # Moves one cell diagonally every four generations
        for _ in range(4 * 8):
            grid.tick()
        assert grid.get_live_cells() == glider

    def test_tick_uses_previous_generation_only(self):
        """Test the result differs from an update that overwrites cells as it goes."""
        grid = Grid(5, 5)
        grid.set_live_cells([(1, 2), (2, 2), (3, 2)])

        in_place = _in_place_tick(grid)
        grid.tick()

        assert grid.get_live_cells() == [(2, 1), (2, 2), (2, 3)]
        assert in_place != grid.get_live_cells()


class TestComparisonAndDisplay:
    """Test equality and string rendering."""

    def test_equality(self):
        """Test grid equality comparison."""
        grid1 = Grid(3, 3)
        grid2 = Grid(3, 3)
        assert grid1 == grid2

        grid1.set_live_cells([(1, 1)])
        grid2.set_live_cells([(1, 1)])
        assert grid1 == grid2

        grid2.set_live_cells([(2, 2)])
        assert grid1 != grid2

        assert Grid(3, 3) != Grid(4, 3)
        assert grid1 != "not a grid"

    def test_string_representation(self):
        """Test string rendering with glyphs."""
        grid = Grid(3, 2)
        assert str(grid) == "◻◻◻\n◻◻◻"

        grid.set_live_cells([(0, 0), (1, 2)])
        assert str(grid) == "◼◻◻\n◻◻◼"
