import pytest

import flowlines


# red (0,0)-(3,3) and blue (1,0)-(3,2) in (row, col)
TWO_COLOR = {
    "size": 4,
    "colors": [
        {"color": "red", "start": [0, 0], "end": [3, 3]},
        {"color": "blue", "start": [0, 1], "end": [2, 3]},
    ],
}

RED_ROUTE = [(0, 0), (0, 1), (0, 2), (0, 3), (1, 3), (2, 3), (3, 3)]
BLUE_ROUTE = [(1, 0), (1, 1), (1, 2), (2, 2), (2, 1), (2, 0), (3, 0), (3, 1), (3, 2)]


def draw_route(session, route, release=False):
    session = flowlines.on_cell_down(session, *route[0])
    for row, col in route[1:]:
        session = flowlines.on_cell_enter(session, row, col)
    if release:
        session = flowlines.on_cell_up(session)
    return session


@pytest.fixture
def draw():
    return draw_route


@pytest.fixture
def two_color():
    return flowlines.load_puzzle(TWO_COLOR)


@pytest.fixture
def open_board():
    """4x4 with a single red pair in opposite corners and nothing else."""
    return flowlines.load_puzzle({
        "size": 4,
        "colors": [{"color": "red", "start": [0, 0], "end": [3, 3]}],
    })


@pytest.fixture
def red_route():
    return list(RED_ROUTE)


@pytest.fixture
def blue_route():
    return list(BLUE_ROUTE)
