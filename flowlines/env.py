import logging
import os

import gymnasium as gym
from gymnasium.spaces import MultiDiscrete
import numpy as np
import pygame
import pygame.gfxdraw
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

from flowlines.catalog import PuzzleCatalog
from flowlines.completion import connected_pairs
from flowlines.connectivity import connected_colors
from flowlines.editor import PURGE_INCOMPLETE
from flowlines.grid import EMPTY, DOT, PATH
from flowlines.session import (
    check_completion,
    drawing_color,
    is_solved,
    on_cell_down,
    on_cell_enter,
    on_cell_up,
    progress,
    reset_to_initial,
)


logger = logging.getLogger(__name__)


class GameEnv(gym.Env):
    """
    Cursor-driven host for the color-line puzzle engine.

    Holding Space is the pointer being down: pressing it on a dot starts a
    line, moving the cursor while it is held drags the line cell by cell,
    releasing it lets go. Shift restores the puzzle to its loaded state.
    """
    metadata = {"render_modes": ["rgb_array"]}

    # Must be a short, user-facing control string:
    user_guide = (
        "Controls: Use arrow keys to move the cursor. Hold Space on a dot and move to draw a line, "
        "release Space to let go. Press Shift to reset the puzzle."
    )

    # Must be a short, user-facing description of the game:
    game_description = (
        "Connect every pair of same-colored dots with lines that never cross, and fill every cell of the grid."
    )

    # Should frames auto-advance or wait for user input?
    auto_advance = False

    # --- Constants ---
    SCREEN_WIDTH, SCREEN_HEIGHT = 640, 400
    BOARD_PIXELS = 320
    MAX_CELL_SIZE = 64
    MAX_STEPS = 1000

    STEP_PENALTY = -0.01
    PAIR_REWARD = 1.0
    WIN_REWARD = 50.0

    COLOR_BG = (245, 241, 232)
    COLOR_BOARD = (30, 30, 40)
    COLOR_GRID = (60, 60, 75)
    COLOR_CURSOR = (255, 255, 255)
    COLOR_TEXT = (40, 40, 50)
    COLOR_UNKNOWN = (102, 102, 102)

    PALETTE = {
        "red": (255, 107, 107),
        "blue": (78, 205, 196),
        "green": (110, 173, 121),
        "yellow": (255, 167, 38),
        "purple": (171, 71, 188),
        "orange": (255, 112, 67),
        "cyan": (38, 198, 218),
        "magenta": (236, 64, 122),
        "lime": (156, 204, 101),
        "brown": (141, 110, 99),
    }

    def __init__(self, render_mode="rgb_array", catalog=None, purge_policy=PURGE_INCOMPLETE):
        super().__init__()
        self.render_mode = render_mode

        # EXACT spaces:
        self.observation_space = gym.spaces.Box(
            low=0, high=255, shape=(self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3), dtype=np.uint8
        )
        self.action_space = MultiDiscrete([5, 2, 2])

        # Pygame setup
        pygame.init()
        pygame.font.init()
        self.screen = pygame.Surface((self.SCREEN_WIDTH, self.SCREEN_HEIGHT))
        self.font_main = pygame.font.SysFont("Arial", 24, bold=True)
        self.font_small = pygame.font.SysFont("Arial", 18)

        self.catalog = catalog if catalog is not None else PuzzleCatalog.from_file()
        self.purge_policy = purge_policy

        # Game state variables
        self.steps = 0
        self.score = 0
        self.game_over = False
        self.puzzle_id = None
        self.session = None
        self.cursor_pos = [0, 0]
        self.prev_space_held = False
        self.prev_shift_held = False
        self.settled_pairs = 0

        self.reset()

        self.validate_implementation()

    def reset(self, seed=None, options=None):
        super().reset(seed=seed)
        options = options or {}

        puzzle_id = options.get("puzzle_id")
        if puzzle_id is None:
            puzzle_id = self.catalog.random_id(self.np_random)
        self.puzzle_id = puzzle_id
        self.session = self.catalog.load(puzzle_id, purge_policy=self.purge_policy)

        self.steps = 0
        self.score = 0
        self.game_over = False
        size = self.session.grid.size
        self.cursor_pos = [size // 2, size // 2]
        self.prev_space_held = False
        self.prev_shift_held = False
        self.settled_pairs = connected_pairs(self.session.grid, self.session.pairs)

        return self._get_observation(), self._get_info()

    def step(self, action):
        if self.game_over:
            return self._get_observation(), 0.0, True, False, self._get_info()

        reward = self.STEP_PENALTY
        movement, space_held, shift_held = int(action[0]), action[1] == 1, action[2] == 1
        assert 0 <= movement <= 4, f"invalid movement {movement}"

        space_pressed = space_held and not self.prev_space_held
        space_released = self.prev_space_held and not space_held
        shift_pressed = shift_held and not self.prev_shift_held
        self.prev_space_held = space_held
        self.prev_shift_held = shift_held

        if shift_pressed:
            self.session = reset_to_initial(self.session)
            # sfx: reset.wav
        else:
            if space_released:
                self.session = on_cell_up(self.session)
            moved = self._handle_movement(movement)
            row, col = self._cursor_cell()
            if space_pressed:
                self.session = on_cell_down(self.session, row, col)
                # sfx: pick.wav
            elif space_held and moved:
                self.session = on_cell_enter(self.session, row, col)

        # A line released next to its partner dot can finish the puzzle
        # without ever closing onto the dot.
        if not self.session.solved and self.session.drawing is None and is_solved(self.session):
            self.session = check_completion(self.session)

        # Pairs are paid once no line is in progress, so a line that passes
        # beside its partner dot earns nothing until it closes or is released.
        if self.session.drawing is None:
            connected = connected_pairs(self.session.grid, self.session.pairs)
            reward += (connected - self.settled_pairs) * self.PAIR_REWARD
            self.settled_pairs = connected

        self.steps += 1
        if self.session.solved:
            reward += self.WIN_REWARD
            self.game_over = True
            # sfx: win.wav
        elif self.steps >= self.MAX_STEPS:
            self.game_over = True

        self.score += reward
        terminated = self.game_over

        return self._get_observation(), reward, terminated, False, self._get_info()

    def _handle_movement(self, movement):
        x, y = self.cursor_pos
        if movement == 1: y -= 1  # Up
        elif movement == 2: y += 1  # Down
        elif movement == 3: x -= 1  # Left
        elif movement == 4: x += 1  # Right
        size = self.session.grid.size
        x = int(np.clip(x, 0, size - 1))
        y = int(np.clip(y, 0, size - 1))
        moved = [x, y] != self.cursor_pos
        self.cursor_pos = [x, y]
        return moved

    def _cursor_cell(self):
        # cursor is (x, y) on screen; the engine works in (row, col)
        x, y = self.cursor_pos
        return y, x

    # --- Rendering Methods ---

    def _layout(self):
        size = self.session.grid.size
        cell = min(self.MAX_CELL_SIZE, self.BOARD_PIXELS // size)
        board = cell * size
        left = (self.SCREEN_WIDTH - board) // 2
        top = (self.SCREEN_HEIGHT - board) // 2 + 20
        return cell, left, top

    def _rgb(self, color_idx):
        return self.PALETTE.get(self.session.grid.palette[color_idx], self.COLOR_UNKNOWN)

    def _cell_center(self, row, col):
        cell, left, top = self._layout()
        return left + col * cell + cell // 2, top + row * cell + cell // 2

    def _get_observation(self):
        self.screen.fill(self.COLOR_BG)
        self._render_game()
        self._render_ui()

        arr = pygame.surfarray.array3d(self.screen)
        return np.transpose(arr, (1, 0, 2)).astype(np.uint8)

    def _render_game(self):
        grid = self.session.grid
        size = grid.size
        cell, left, top = self._layout()

        pygame.draw.rect(self.screen, self.COLOR_BOARD, (left, top, cell * size, cell * size))
        for i in range(size + 1):
            pygame.draw.line(self.screen, self.COLOR_GRID, (left + i * cell, top), (left + i * cell, top + size * cell), 1)
            pygame.draw.line(self.screen, self.COLOR_GRID, (left, top + i * cell), (left + size * cell, top + i * cell), 1)

        # Line segments between same-colored neighbours
        width = max(4, cell // 3)
        for row in range(size):
            for col in range(size):
                kind = grid.kind_at(row, col)
                if kind == EMPTY:
                    continue
                color_idx = grid.color_at(row, col)
                for nr, nc in ((row + 1, col), (row, col + 1)):
                    if not grid.in_bounds(nr, nc):
                        continue
                    n_kind = grid.kind_at(nr, nc)
                    if n_kind == EMPTY or grid.color_at(nr, nc) != color_idx:
                        continue
                    if kind == DOT and n_kind == DOT:
                        continue
                    pygame.draw.line(
                        self.screen, self._rgb(color_idx),
                        self._cell_center(row, col), self._cell_center(nr, nc), width
                    )
                if kind == PATH:
                    cx, cy = self._cell_center(row, col)
                    pygame.gfxdraw.filled_circle(self.screen, cx, cy, width // 2, self._rgb(color_idx))

        # Dots, ringed once their pair is connected
        done = connected_colors(grid, self.session.pairs)
        radius = max(4, cell // 3)
        for pair in self.session.pairs:
            for row, col in pair.endpoints:
                cx, cy = self._cell_center(row, col)
                color = self._rgb(pair.index)
                pygame.gfxdraw.aacircle(self.screen, cx, cy, radius, color)
                pygame.gfxdraw.filled_circle(self.screen, cx, cy, radius, color)
                if pair.index in done:
                    pygame.gfxdraw.aacircle(self.screen, cx, cy, radius + 3, self.COLOR_CURSOR)

        # Cursor
        x, y = self.cursor_pos
        rect = pygame.Rect(left + x * cell + 2, top + y * cell + 2, cell - 4, cell - 4)
        pygame.draw.rect(self.screen, self.COLOR_CURSOR, rect, 2)

    def _render_ui(self):
        stats = progress(self.session)
        fill_text = self.font_main.render(f"Fill: {stats['percent']}%", True, self.COLOR_TEXT)
        self.screen.blit(fill_text, (15, 10))

        pairs_text = self.font_main.render(f"Flows: {stats['connected']}/{stats['pairs']}", True, self.COLOR_TEXT)
        pairs_rect = pairs_text.get_rect(topright=(self.SCREEN_WIDTH - 15, 10))
        self.screen.blit(pairs_text, pairs_rect)

        color = drawing_color(self.session)
        if color is not None:
            draw_text = self.font_small.render(f"Drawing: {color}", True, self.COLOR_TEXT)
            self.screen.blit(draw_text, draw_text.get_rect(midtop=(self.SCREEN_WIDTH / 2, 12)))

        if self.game_over:
            message = "PUZZLE COMPLETE!" if self.session.solved else "OUT OF STEPS"
            overlay = pygame.Surface((self.SCREEN_WIDTH, self.SCREEN_HEIGHT), pygame.SRCALPHA)
            overlay.fill((0, 0, 0, 180))
            end_text = self.font_main.render(message, True, (255, 255, 255))
            end_rect = end_text.get_rect(center=(self.SCREEN_WIDTH / 2, self.SCREEN_HEIGHT / 2))
            overlay.blit(end_text, end_rect)
            self.screen.blit(overlay, (0, 0))

    def _get_info(self):
        info = progress(self.session)
        info.update({
            "puzzle_id": self.puzzle_id,
            "steps": self.steps,
            "score": self.score,
            "drawing": drawing_color(self.session),
        })
        return info

    def render(self):
        if self.render_mode == "rgb_array":
            return self._get_observation()

    def close(self):
        pygame.quit()

    def validate_implementation(self):
        '''
        Call this at the end of __init__ to verify implementation:
        '''
        # Test action space
        assert self.action_space.shape == (3,)
        assert self.action_space.nvec.tolist() == [5, 2, 2]

        # Test observation space
        test_obs = self._get_observation()
        assert test_obs.shape == (self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3)
        assert test_obs.dtype == np.uint8

        # Test reset
        obs, info = self.reset()
        assert obs.shape == (self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3)
        assert isinstance(info, dict)

        # Test step
        test_action = self.action_space.sample()
        obs, reward, term, trunc, info = self.step(test_action)
        assert obs.shape == (self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3)
        assert isinstance(reward, (int, float))
        assert isinstance(term, bool)
        assert trunc == False
        assert isinstance(info, dict)

        # Leave the env on a fresh puzzle
        self.reset()
        logger.info("✓ Implementation validated successfully")


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)

    # This block allows you to play the game directly
    env = GameEnv()
    obs, info = env.reset()
    done = False

    # Pygame setup for human play
    screen = pygame.display.set_mode((env.SCREEN_WIDTH, env.SCREEN_HEIGHT))
    pygame.display.set_caption("Color Lines")
    clock = pygame.time.Clock()

    print(env.user_guide)

    space_held = 0
    while not done:
        movement, shift = 0, 0

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                done = True
            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_UP:
                    movement = 1
                elif event.key == pygame.K_DOWN:
                    movement = 2
                elif event.key == pygame.K_LEFT:
                    movement = 3
                elif event.key == pygame.K_RIGHT:
                    movement = 4
                elif event.key == pygame.K_SPACE:
                    space_held = 1
                elif event.key == pygame.K_LSHIFT or event.key == pygame.K_RSHIFT:
                    shift = 1
                elif event.key == pygame.K_n: # Next puzzle
                    obs, info = env.reset(options={"puzzle_id": env.catalog.next_after(env.puzzle_id)})
            if event.type == pygame.KEYUP and event.key == pygame.K_SPACE:
                space_held = 0

        # Only step if an action was taken
        if any([movement, shift]) or bool(space_held) != env.prev_space_held:
            action = [movement, space_held, shift]
            obs, reward, terminated, truncated, info = env.step(action)
            done = done or terminated or truncated
            print(f"Action: {action}, Reward: {reward:.2f}, Info: {info}")

        # Render the observation to the display
        frame = np.transpose(obs, (1, 0, 2))
        surf = pygame.surfarray.make_surface(frame)
        screen.blit(surf, (0, 0))

        pygame.display.flip()
        clock.tick(30) # Limit frame rate

    # Keep the window open for a bit after the game ends
    print("Game Over!")
    pygame.time.wait(2000)
    env.close()
