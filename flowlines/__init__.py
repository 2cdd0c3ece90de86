from flowlines.editor import PURGE_INCOMPLETE, PURGE_OWN
from flowlines.grid import EMPTY, DOT, PATH, Cell, Grid
from flowlines.loader import ColorPair, InvalidPuzzle
from flowlines.session import (
    Session,
    check_completion,
    drawing_color,
    is_solved,
    load_next,
    load_puzzle,
    on_cell_down,
    on_cell_drag,
    on_cell_enter,
    on_cell_up,
    progress,
    reset_to_initial,
)
