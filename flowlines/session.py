import logging
from collections import namedtuple

from flowlines import editor
from flowlines.completion import connected_pairs, evaluate, fill_percent
from flowlines.editor import PURGE_INCOMPLETE, PURGE_POLICIES
from flowlines.loader import load_grid


logger = logging.getLogger(__name__)


# grid: current Grid snapshot; initial: the Grid as loaded
# drawing: palette index of the color being drawn, or None
# path: (row, col) cells of the in-progress path, starting at a dot
# solved: latched by the completion check; a solved session ignores input
Session = namedtuple(
    "Session",
    ["grid", "initial", "pairs", "drawing", "path", "solved", "purge_policy"],
)


def load_puzzle(description, purge_policy=PURGE_INCOMPLETE):
    """
    Build a fresh Session from a puzzle description.

    Raises InvalidPuzzle when the description is malformed; no session is
    produced in that case.
    """
    if purge_policy not in PURGE_POLICIES:
        raise ValueError(f"unknown purge policy {purge_policy!r}, expected one of {PURGE_POLICIES}")
    grid, pairs = load_grid(description)
    return Session(grid, grid, pairs, None, (), False, purge_policy)


def load_next(session, description):
    """Replace the session with a new puzzle, keeping its purge policy."""
    return load_puzzle(description, purge_policy=session.purge_policy)


def on_cell_down(session, row, col):
    return editor.start(session, row, col)


def on_cell_enter(session, row, col):
    return editor.move(session, row, col)


def on_cell_drag(session, row, col):
    return editor.trace(session, row, col)


def on_cell_up(session):
    return editor.end(session)


def is_solved(session):
    """Every pair connected and no empty cell left, judged on the current grid."""
    return evaluate(session.grid, session.pairs)


def check_completion(session):
    """Run the completion check now and latch the result if solved."""
    if session.solved or not is_solved(session):
        return session
    logger.info("Puzzle solved on manual check")
    return session._replace(drawing=None, path=(), solved=True)


def reset_to_initial(session):
    logger.info("Puzzle reset to its loaded state")
    return session._replace(grid=session.initial, drawing=None, path=(), solved=False)


def drawing_color(session):
    if session.drawing is None:
        return None
    return session.grid.palette[session.drawing]


def progress(session):
    grid = session.grid
    return {
        "filled": grid.count_filled(),
        "total": grid.size * grid.size,
        "percent": fill_percent(grid),
        "connected": connected_pairs(grid, session.pairs),
        "pairs": len(session.pairs),
        "solved": session.solved,
    }
