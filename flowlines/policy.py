from collections import deque

from flowlines.connectivity import is_pair_connected
from flowlines.grid import EMPTY


def policy(env):
    # Strategy: take the first unconnected pair, walk the cursor to its first dot with
    # Space released, press, then follow a shortest route through empty cells to the
    # partner dot with Space held. Release whenever no route is left.
    session = env.session
    grid = session.grid
    x, y = env.cursor_pos
    cursor = (y, x)

    if session.drawing is None:
        if env.prev_space_held:
            return [0, 0, 0]  # Let go after a finished line
        pair = next((p for p in session.pairs if not is_pair_connected(grid, p)), None)
        if pair is None:
            return [0, 0, 0]
        target = pair.endpoints[0]
        if cursor == target:
            return [0, 1, 0]  # Press on the dot
        return [_direction(cursor, target), 0, 0]

    tail = session.path[-1]
    if tail != cursor:
        return [0, 0, 0]
    pair = session.pairs[session.drawing]
    goal = pair.endpoints[1] if session.path[0] == pair.endpoints[0] else pair.endpoints[0]

    route = _route(grid, tail, goal)
    if route is None:
        return [0, 0, 0]
    return [_direction(tail, route[1]), 1, 0]


def _direction(src, dst):
    if dst[0] < src[0]:
        return 1  # Up
    if dst[0] > src[0]:
        return 2  # Down
    if dst[1] < src[1]:
        return 3  # Left
    return 4  # Right


def _route(grid, src, goal):
    parents = {src: None}
    q = deque([src])
    while q:
        cell = q.popleft()
        if cell == goal:
            route = []
            while cell is not None:
                route.append(cell)
                cell = parents[cell]
            return route[::-1]
        for nxt in grid.neighbors(*cell):
            if nxt in parents:
                continue
            if nxt == goal or grid.kind_at(*nxt) == EMPTY:
                parents[nxt] = cell
                q.append(nxt)
    return None
