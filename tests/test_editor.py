import pytest

import flowlines
from flowlines.editor import PURGE_OWN, line_cells
from flowlines.grid import DOT, EMPTY, PATH, is_adjacent

from conftest import TWO_COLOR


def test_start_on_dot_begins_drawing(two_color):
    session = flowlines.on_cell_down(two_color, 0, 0)
    assert session.drawing == 0
    assert session.path == ((0, 0),)
    assert flowlines.drawing_color(session) == "red"
    assert session.grid == two_color.grid


@pytest.mark.parametrize("row, col", [(1, 1), (-1, 0), (0, 4), (9, 9)])
def test_start_off_a_dot_is_a_no_op(two_color, row, col):
    assert flowlines.on_cell_down(two_color, row, col) is two_color


def test_extend_into_adjacent_empty_cell(two_color):
    session = flowlines.on_cell_down(two_color, 0, 0)
    session = flowlines.on_cell_enter(session, 0, 1)
    assert session.path == ((0, 0), (0, 1))
    assert session.grid.kind_at(0, 1) == PATH
    assert session.grid.color_at(0, 1) == 0


def test_diagonal_move_is_a_no_op(open_board, draw):
    session = draw(open_board, [(0, 0), (0, 1), (1, 1)])
    assert flowlines.on_cell_enter(session, 2, 2) is session
    assert session.drawing == 0


def test_non_adjacent_move_is_a_no_op(open_board):
    session = flowlines.on_cell_down(open_board, 0, 0)
    assert flowlines.on_cell_enter(session, 0, 2) is session
    assert flowlines.on_cell_enter(session, 2, 0) is session


def test_move_without_drawing_is_a_no_op(two_color):
    assert flowlines.on_cell_enter(two_color, 0, 1) is two_color


def test_out_of_bounds_move_is_a_no_op(two_color):
    session = flowlines.on_cell_down(two_color, 0, 0)
    assert flowlines.on_cell_enter(session, -1, 0) is session
    assert flowlines.on_cell_enter(session, 0, 4) is session


def test_other_colors_dot_blocks_without_cancelling(two_color):
    session = flowlines.on_cell_down(two_color, 0, 0)
    # (1, 0) is blue's dot
    assert flowlines.on_cell_enter(session, 1, 0) is session
    assert session.drawing == 0
    session = flowlines.on_cell_enter(session, 0, 1)
    assert session.path == ((0, 0), (0, 1))


def test_other_colors_path_blocks(draw):
    session = flowlines.load_puzzle(TWO_COLOR, purge_policy=PURGE_OWN)
    session = draw(session, [(1, 0), (1, 1)], release=True)
    session = draw(session, [(0, 0), (0, 1)])
    assert flowlines.on_cell_enter(session, 1, 1) is session
    assert session.drawing == 0


def test_other_colors_completed_path_blocks(two_color, draw, red_route):
    session = draw(two_color, red_route)
    session = draw(session, [(1, 0), (1, 1), (1, 2)])
    # (1, 3) is red's finished path
    assert flowlines.on_cell_enter(session, 1, 3) is session
    assert session.drawing == 1


def test_backtrack_undoes_extend_exactly(open_board, draw):
    before = draw(open_board, [(0, 0), (0, 1), (1, 1)])
    after = flowlines.on_cell_enter(before, 2, 1)
    assert after.path[-1] == (2, 1)
    undone = flowlines.on_cell_enter(after, 1, 1)
    assert undone == before
    assert undone.grid.kind_at(2, 1) == EMPTY


def test_backtrack_onto_start_dot(open_board):
    session = flowlines.on_cell_down(open_board, 0, 0)
    session = flowlines.on_cell_enter(session, 1, 0)
    session = flowlines.on_cell_enter(session, 0, 0)
    assert session.path == ((0, 0),)
    assert session.grid.kind_at(1, 0) == EMPTY
    assert session.grid.kind_at(0, 0) == DOT
    assert session.drawing == 0


def test_returning_to_start_dot_from_elsewhere_is_a_no_op(open_board, draw):
    session = draw(open_board, [(0, 0), (0, 1), (1, 1), (1, 0)])
    assert flowlines.on_cell_enter(session, 0, 0) is session


def test_self_crossing_is_a_no_op(open_board, draw):
    session = draw(open_board, [(0, 0), (0, 1), (0, 2), (1, 2), (1, 1)])
    assert flowlines.on_cell_enter(session, 0, 1) is session


def test_reaching_partner_dot_closes_path(open_board, draw):
    route = [(0, 0), (0, 1), (0, 2), (0, 3), (1, 3), (2, 3), (3, 3)]
    session = draw(open_board, route)
    assert session.drawing is None
    assert session.path == ()
    assert session.grid.kind_at(3, 3) == DOT
    assert [session.grid.kind_at(*cell) for cell in route[1:-1]] == [PATH] * 5
    assert flowlines.progress(session)["connected"] == 1
    assert not session.solved


def test_partner_dot_closes_even_when_not_adjacent(open_board):
    session = flowlines.on_cell_down(open_board, 0, 0)
    session = flowlines.on_cell_enter(session, 3, 3)
    assert session.drawing is None
    assert flowlines.progress(session)["connected"] == 0


def test_end_keeps_partial_path(open_board, draw):
    session = draw(open_board, [(0, 0), (0, 1), (1, 1)], release=True)
    assert session.drawing is None
    assert session.path == ()
    assert session.grid.kind_at(0, 1) == PATH
    assert session.grid.kind_at(1, 1) == PATH
    assert flowlines.on_cell_enter(session, 1, 2) is session


def test_end_without_drawing_is_a_no_op(two_color):
    assert flowlines.on_cell_up(two_color) is two_color


def test_start_always_clears_own_color(two_color, draw, red_route):
    session = draw(two_color, red_route)
    assert flowlines.progress(session)["connected"] == 1
    session = flowlines.on_cell_down(session, 3, 3)
    assert session.grid.path_cells(0) == []
    assert session.path == ((3, 3),)


def test_start_keeps_connected_other_color(two_color, draw, red_route):
    session = draw(two_color, red_route)
    session = flowlines.on_cell_down(session, 1, 0)
    assert len(session.grid.path_cells(0)) == 5


def test_start_clears_unconnected_other_color(two_color, draw):
    session = draw(two_color, [(0, 0), (0, 1), (0, 2)], release=True)
    session = flowlines.on_cell_down(session, 1, 0)
    assert session.grid.path_cells(0) == []


def test_own_policy_keeps_unconnected_other_color(draw):
    session = flowlines.load_puzzle(TWO_COLOR, purge_policy=PURGE_OWN)
    session = draw(session, [(0, 0), (0, 1), (0, 2)], release=True)
    session = flowlines.on_cell_down(session, 1, 0)
    assert session.grid.path_cells(0) == [(0, 1), (0, 2)]
    session = flowlines.on_cell_down(session, 0, 0)
    assert session.grid.path_cells(0) == []


def test_starting_another_dot_cancels_current_drawing(two_color, draw):
    session = draw(two_color, [(0, 0), (0, 1), (0, 2)])
    session = flowlines.on_cell_down(session, 1, 0)
    assert session.drawing == 1
    assert session.path == ((1, 0),)
    assert session.grid.path_cells(0) == []


def test_solved_session_ignores_input(two_color, draw, red_route, blue_route):
    session = draw(draw(two_color, red_route), blue_route)
    assert session.solved
    assert flowlines.on_cell_down(session, 0, 0) is session
    assert flowlines.on_cell_enter(session, 0, 1) is session
    assert flowlines.on_cell_up(session) is session
    assert flowlines.on_cell_drag(session, 0, 3) is session


@pytest.mark.parametrize("start, end", [
    ((0, 0), (2, 2)),
    ((0, 0), (3, 1)),
    ((3, 3), (0, 1)),
    ((2, 0), (2, 3)),
    ((1, 1), (1, 1)),
])
def test_line_cells_are_edge_connected(start, end):
    cells = line_cells(start, end)
    assert cells[0] == start
    assert cells[-1] == end
    assert all(is_adjacent(a, b) for a, b in zip(cells, cells[1:]))
    assert len(set(cells)) == len(cells)


def test_trace_fills_skipped_cells(open_board):
    session = flowlines.on_cell_down(open_board, 0, 0)
    session = flowlines.on_cell_drag(session, 0, 3)
    assert session.path == ((0, 0), (0, 1), (0, 2), (0, 3))


def test_trace_can_close_a_path():
    session = flowlines.load_puzzle({
        "size": 3,
        "colors": [{"color": "red", "start": [0, 0], "end": [2, 2]}],
    })
    session = flowlines.on_cell_down(session, 0, 0)
    session = flowlines.on_cell_drag(session, 2, 2)
    assert session.drawing is None
    assert session.grid.path_cells(0) == [(0, 1), (1, 1), (1, 2)]
    assert flowlines.progress(session)["connected"] == 1


def test_trace_to_adjacent_cell_can_backtrack(open_board):
    session = flowlines.on_cell_down(open_board, 0, 0)
    session = flowlines.on_cell_drag(session, 0, 2)
    session = flowlines.on_cell_drag(session, 0, 1)
    assert session.path == ((0, 0), (0, 1))


def test_trace_runs_straight_lines(two_color):
    session = flowlines.on_cell_down(two_color, 1, 0)
    session = flowlines.on_cell_drag(session, 3, 0)
    assert session.path == ((1, 0), (2, 0), (3, 0))
    assert flowlines.on_cell_drag(session, -1, 0) is session


def test_trace_steps_over_other_colors(two_color, draw, red_route):
    session = draw(two_color, red_route)
    session = flowlines.on_cell_down(session, 1, 0)
    # (1, 3) belongs to red
    session = flowlines.on_cell_drag(session, 1, 3)
    assert session.path == ((1, 0), (1, 1), (1, 2))
    assert session.drawing == 1
