from flowlines.completion import connected_pairs, evaluate, fill_percent, is_full
from flowlines.grid import PATH
from flowlines.loader import load_grid

from conftest import TWO_COLOR, RED_ROUTE, BLUE_ROUTE


def paint(grid, route, color_idx):
    return grid.with_cells({cell: (PATH, color_idx) for cell in route[1:-1]})


def test_connected_but_not_full_is_not_solved():
    grid, pairs = load_grid(TWO_COLOR)
    grid = paint(grid, RED_ROUTE, 0)
    grid = grid.with_cells({(2, 0): (PATH, 1), (3, 0): (PATH, 1), (3, 1): (PATH, 1)})
    assert connected_pairs(grid, pairs) == 2
    assert not is_full(grid)
    assert not evaluate(grid, pairs)


def test_full_but_unconnected_is_not_solved():
    grid, pairs = load_grid(TWO_COLOR)
    empties = [(r, c) for r in range(4) for c in range(4) if grid.kind_at(r, c) == 0]
    grid = grid.with_cells({cell: (PATH, 1) for cell in empties})
    assert is_full(grid)
    assert connected_pairs(grid, pairs) == 1
    assert not evaluate(grid, pairs)


def test_connected_and_full_is_solved():
    grid, pairs = load_grid(TWO_COLOR)
    grid = paint(paint(grid, RED_ROUTE, 0), BLUE_ROUTE, 1)
    assert evaluate(grid, pairs)
    assert fill_percent(grid) == 100


def test_fill_percent_rounds():
    grid, _ = load_grid(TWO_COLOR)
    # 4 dots out of 16 cells
    assert fill_percent(grid) == 25
    grid = grid.with_cells({(1, 1): (PATH, 0)})
    assert fill_percent(grid) == 31


def test_fill_percent_rounds_halves_up():
    grid, _ = load_grid(TWO_COLOR)
    grid = grid.with_cells({(0, 1): (PATH, 0), (0, 2): (PATH, 0)})
    # 6 of 16 cells is 37.5%
    assert fill_percent(grid) == 38
    grid = grid.with_cells({(0, 3): (PATH, 0), (1, 1): (PATH, 1), (1, 2): (PATH, 1), (1, 3): (PATH, 0)})
    # 10 of 16 cells is 62.5%
    assert fill_percent(grid) == 63
