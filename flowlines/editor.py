"""
Incremental path editing.

Each handler takes a Session and one cell event and returns the next
Session. A move the rules reject is not an error: the handler returns the
very same Session object, so `new is old` tells a caller nothing changed.
"""
import logging

from flowlines.completion import evaluate
from flowlines.connectivity import is_pair_connected
from flowlines.grid import EMPTY, DOT, PATH, is_adjacent


logger = logging.getLogger(__name__)

# Purge rules applied when a new path is started
PURGE_INCOMPLETE = "incomplete"  # other unconnected colors plus the started color
PURGE_OWN = "own"                # only the started color
PURGE_POLICIES = (PURGE_INCOMPLETE, PURGE_OWN)


def _purge_before_start(session, color_idx):
    grid = session.grid
    doomed = {color_idx}
    if session.purge_policy == PURGE_INCOMPLETE:
        for pair in session.pairs:
            if pair.index != color_idx and not is_pair_connected(grid, pair):
                doomed.add(pair.index)

    purged = grid.without_paths(doomed)
    if purged is not grid:
        names = sorted(grid.palette[i] for i in doomed)
        logger.debug(f"Purged paths for {', '.join(names)}")
    return purged


def start(session, row, col):
    """Begin drawing from the dot at (row, col)."""
    grid = session.grid
    if session.solved or not grid.in_bounds(row, col):
        return session
    if grid.kind_at(row, col) != DOT:
        return session

    color_idx = grid.color_at(row, col)
    return session._replace(
        grid=_purge_before_start(session, color_idx),
        drawing=color_idx,
        path=((row, col),),
    )


def move(session, row, col):
    """Apply one pointer-enter event while a path is being drawn."""
    if session.solved or session.drawing is None:
        return session
    grid = session.grid
    if not grid.in_bounds(row, col):
        return session

    target = (row, col)
    color_idx = session.drawing
    path = session.path
    kind = grid.kind_at(row, col)
    cell_color = grid.color_at(row, col)

    # 1. reached the partner dot
    if kind == DOT and cell_color == color_idx and target != path[0]:
        return _close(session)

    # 2. another color's dot or path
    if kind != EMPTY and cell_color != color_idx:
        logger.debug(f"Blocked at {target} by {grid.palette[cell_color]}")
        return session

    # 3. stepping back onto the previous cell retracts the last one
    if len(path) > 1 and target == path[-2]:
        last = path[-1]
        return session._replace(
            grid=grid.with_cells({last: (EMPTY, None)}),
            path=path[:-1],
        )

    # 4. extend
    if kind == DOT:
        return session
    if not is_adjacent(path[-1], target) or target in path:
        return session
    return session._replace(
        grid=grid.with_cells({target: (PATH, color_idx)}),
        path=path + (target,),
    )


def _close(session):
    color = session.grid.palette[session.drawing]
    solved = evaluate(session.grid, session.pairs)
    if solved:
        logger.info(f"Puzzle solved when {color} was closed")
    else:
        logger.debug(f"Closed {color}; puzzle not solved yet")
    return session._replace(drawing=None, path=(), solved=solved)


def end(session):
    """Release the pointer. Drawn cells stay on the grid."""
    if session.solved or session.drawing is None:
        return session
    return session._replace(drawing=None, path=())


def line_cells(start_cell, end_cell):
    """
    4-connected cells on the line between two cells, both ends included.

    Bresenham's walk with each diagonal step split into a column step and a
    row step, so consecutive cells are always edge-adjacent.
    """
    r, c = start_cell
    r1, c1 = end_cell
    dr, dc = abs(r1 - r), abs(c1 - c)
    sr = 1 if r < r1 else -1
    sc = 1 if c < c1 else -1
    err = dc - dr

    cells = [(r, c)]
    while (r, c) != (r1, c1):
        e2 = 2 * err
        if e2 > -dr:
            err -= dr
            c += sc
            cells.append((r, c))
        if e2 < dc:
            err += dc
            r += sr
            cells.append((r, c))
    return cells


def trace(session, row, col):
    """
    Feed every cell between the path's tail and (row, col) to `move`.

    Used when the pointer skips cells between two events. Cells already on
    the path and cells of other colors are stepped over.
    """
    if session.solved or session.drawing is None:
        return session
    if not session.grid.in_bounds(row, col):
        return session

    last = session.path[-1]
    target = (row, col)
    if target == last or is_adjacent(last, target):
        return move(session, row, col)

    for cell in line_cells(last, target)[1:]:
        if session.drawing is None:
            break
        if cell in session.path:
            continue
        kind = session.grid.kind_at(*cell)
        if kind != EMPTY and session.grid.color_at(*cell) != session.drawing:
            continue
        session = move(session, *cell)
    return session
