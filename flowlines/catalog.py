import json
import logging
import os
from collections import namedtuple
from pathlib import Path

from flowlines.loader import InvalidPuzzle, parse_description
from flowlines.session import load_puzzle


logger = logging.getLogger(__name__)

PUZZLES_PATH = os.path.join(str(Path(__file__).parent), "puzzles")
DEFAULT_CATALOG_PATH = os.path.join(PUZZLES_PATH, "color_line_game.json")

Level = namedtuple("Level", ["level", "name", "size", "cost"])

# level N plays puzzle_id N
LEVELS = (
    Level(1, "Lv.1", "4×4", 10),
    Level(2, "Lv.2", "5×5", 15),
    Level(3, "Lv.3", "6×6", 20),
    Level(4, "Lv.4", "7×7", 25),
)


def level_info(level):
    for entry in LEVELS:
        if entry.level == level:
            return entry
    raise KeyError(f"no level {level}")


class PuzzleCatalog:
    """
    Puzzle configs keyed by `puzzle_id`, read from a JSON list.

    Entries that fail validation are skipped with a warning so one bad
    puzzle does not take the whole catalog down.
    """

    def __init__(self, configs):
        self.configs = {}
        for config in configs:
            if not isinstance(config, dict) or "puzzle_id" not in config:
                logger.warning(f"Skipping catalog entry without puzzle_id: {config!r}")
                continue
            try:
                parse_description(config)
            except InvalidPuzzle as e:
                logger.warning(f"Skipping puzzle {config['puzzle_id']}: {e}")
                continue
            if config["puzzle_id"] in self.configs:
                logger.warning(f"Skipping duplicate puzzle {config['puzzle_id']}; keeping the first entry")
                continue
            self.configs[config["puzzle_id"]] = config

        if not self.configs:
            raise InvalidPuzzle("catalog contains no valid puzzles")

    @classmethod
    def from_file(cls, path=DEFAULT_CATALOG_PATH):
        logger.info(f"Loading puzzle catalog from: {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidPuzzle(f"catalog {path} is not valid JSON: {e}") from e
        if not isinstance(data, list):
            raise InvalidPuzzle(f"catalog {path} must hold a list of puzzles")
        return cls(data)

    @property
    def ids(self):
        return sorted(self.configs)

    def __len__(self):
        return len(self.configs)

    def __contains__(self, puzzle_id):
        return puzzle_id in self.configs

    def get(self, puzzle_id):
        if puzzle_id not in self.configs:
            raise KeyError(f"no puzzle with id {puzzle_id}")
        return self.configs[puzzle_id]

    def random_id(self, np_random):
        ids = self.ids
        return ids[int(np_random.integers(0, len(ids)))]

    def random(self, np_random):
        return self.get(self.random_id(np_random))

    def next_after(self, puzzle_id):
        ids = self.ids
        if puzzle_id not in self.configs:
            raise KeyError(f"no puzzle with id {puzzle_id}")
        return ids[(ids.index(puzzle_id) + 1) % len(ids)]

    def load(self, puzzle_id, **kwargs):
        return load_puzzle(self.get(puzzle_id), **kwargs)

    def load_level(self, level, **kwargs):
        return self.load(level_info(level).level, **kwargs)
