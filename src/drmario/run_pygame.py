"""Simple pygame front-end for the pill puzzle engine.

This module provides a playable desktop version of the game using the small
engine implemented in the surrounding modules.  It only glues the core
objects to ``pygame`` for rendering and input; all rules live in
:mod:`drmario.game_state`.
"""

from __future__ import annotations

import os
import asyncio
from typing import Optional

import pygame

from .board import Board, Color
from .game_state import GameState
from .utils import DEFAULT_LEVEL, Command, format_score, paint

# Size of a single bottle cell in pixels
CELL_SIZE = 30
# Size of a preview cell in pixels
PREVIEW_SIZE = 20
# Width of the side panel holding the preview and score
PANEL_WIDTH = 120
# Frames per second to run the game loop at
FPS = 60

COLOR_RGB = {
    Color.RED: (255, 45, 85),
    Color.BLUE: (0, 255, 221),
    Color.YELLOW: (255, 204, 0),
}
BACKGROUND = (0, 0, 0)
GRID_LINE = (30, 30, 30)
SHINE = (255, 255, 255, 51)

KEY_COMMANDS = {
    pygame.K_LEFT: Command.LEFT,
    pygame.K_a: Command.LEFT,
    pygame.K_RIGHT: Command.RIGHT,
    pygame.K_d: Command.RIGHT,
    pygame.K_DOWN: Command.DOWN,
    pygame.K_s: Command.DOWN,
    pygame.K_UP: Command.ROTATE,
    pygame.K_w: Command.ROTATE,
    pygame.K_SPACE: Command.ROTATE,
}


_LOG_BUFFER: list[str] = []


def log(msg: str) -> None:
    """Append a message to diagnostics on the web page if available.

    In non-web environments this becomes a no-op but messages are stored in an
    internal buffer for potential debugging.
    """

    _LOG_BUFFER.append(msg)
    try:  # Only available when running under PyScript (browser)
        from js import document, Date  # type: ignore
    except ImportError:
        return
    ts = Date().toLocaleTimeString()
    el = document.getElementById("diagnostics")
    if el:
        entry = document.createElement("div")
        entry.textContent = f"[{ts}] {msg}"
        el.prepend(entry)


def draw_block(
    screen: pygame.Surface,
    x: float,
    y: float,
    color: Color,
    size: int = CELL_SIZE,
    clearing: bool = False,
) -> None:
    """Draw one rounded pill half; clearing cells are drawn as plain orbs."""

    rect = pygame.Rect(int(x * size) + 1, int(y * size) + 1, size - 2, size - 2)
    radius = size // 2 if clearing else 6
    pygame.draw.rect(screen, COLOR_RGB[color], rect, border_radius=radius)
    if not clearing:
        shine = pygame.Surface((size // 4, size // 4), pygame.SRCALPHA)
        shine.fill(SHINE)
        screen.blit(shine, (int(x * size) + 5, int(y * size) + 5))


def draw_grid_lines(screen: pygame.Surface) -> None:
    for r in range(Board.height):
        for c in range(Board.width):
            rect = pygame.Rect(c * CELL_SIZE, r * CELL_SIZE, CELL_SIZE, CELL_SIZE)
            pygame.draw.rect(screen, GRID_LINE, rect, 1)


def draw_state(screen: pygame.Surface, state: GameState) -> None:
    """Render the bottle, the active pill and any popping cells."""

    paint(state, lambda x, y, color, clearing: draw_block(screen, x, y, color, clearing=clearing))


def draw_panel(screen: pygame.Surface, state: GameState, font: Optional[pygame.font.Font]) -> None:
    """Render the next-pill preview, score and speed beside the bottle."""

    left = Board.width * CELL_SIZE
    panel = screen.subsurface(pygame.Rect(left, 0, PANEL_WIDTH, Board.height * CELL_SIZE))
    panel.fill((15, 15, 15))
    if state.next_colors:
        for i, color in enumerate(state.next_colors):
            draw_block(panel, 0.5 + i, 0.5, color, size=PREVIEW_SIZE)
    if font is not None:
        lines = [
            "NEXT",
            f"SCORE {format_score(state.score)}",
            f"LEVEL {state.level}",
        ]
        for i, text in enumerate(lines):
            surf = font.render(text, True, (220, 220, 220))
            panel.blit(surf, (8, 50 + i * 24))


def handle_key(event: pygame.event.Event, state: GameState) -> None:
    """Process keyboard events for pill movement and speed changes."""

    if event.key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
        state.set_level(state.level + 1)
        log(f"Level {state.level}")
        return
    if event.key in (pygame.K_MINUS, pygame.K_KP_MINUS):
        state.set_level(state.level - 1)
        log(f"Level {state.level}")
        return
    command = KEY_COMMANDS.get(event.key)
    if command is not None:
        state.handle(command)


class GameRunner:
    """Manage the game loop with start/pause/resume/stop controls."""

    def __init__(self, *, speed: int = DEFAULT_LEVEL, seed: Optional[int] = None) -> None:
        self._running = False
        self._paused = False
        self._task: asyncio.Task | None = None
        self._screen: pygame.Surface | None = None
        self._state: GameState | None = None
        self._clock: pygame.time.Clock | None = None
        self._font: pygame.font.Font | None = None
        self._drop_timer = 0
        self._speed = speed
        self._seed = seed

    @property
    def running(self) -> bool:
        return self._running

    @property
    def paused(self) -> bool:
        return self._paused

    def _on_game_over(self, final_score: int) -> None:
        log(f"Game over. Final score: {final_score}")
        self._drop_timer = 0

    def _step(self, dt: int) -> None:
        """Advance timers by ``dt`` milliseconds, ticking the pill when due."""

        if self._paused or not self._state:
            return
        self._state.advance_animation(dt)
        self._drop_timer += dt
        if self._drop_timer > self._state.drop_interval_ms:
            self._drop_timer = 0
            self._state.tick()

    async def _run_loop(self) -> None:
        # Ensure SDL/pygame binds to the visible canvas in the page when running on Web.
        os.environ.setdefault("SDL_HINT_EMSCRIPTEN_CANVAS_ELEMENT_ID", "#canvas")
        os.environ.setdefault("SDL_HINT_EMSCRIPTEN_KEYBOARD_ELEMENT", "#canvas")
        pygame.init()
        board_px = Board.width * CELL_SIZE + PANEL_WIDTH
        board_py = Board.height * CELL_SIZE
        self._screen = pygame.display.set_mode((board_px, board_py))
        pygame.display.set_caption("Dr. Mario")
        self._clock = pygame.time.Clock()
        self._font = pygame.font.Font(None, 22)

        self._state = GameState(seed=self._seed, on_game_over=self._on_game_over)
        self._state.set_level(self._speed)
        self._state.reset_game()
        log("Game started")

        self._drop_timer = 0
        self._running = True
        while self._running:
            dt = self._clock.tick(FPS) if self._clock else 0
            # Even when paused, process events so the window remains responsive
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self._running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_p:
                    self._paused = not self._paused
                elif event.type == pygame.KEYDOWN and self._state and not self._paused:
                    handle_key(event, self._state)

            self._step(dt)

            if self._screen and self._state:
                self._screen.fill(BACKGROUND)
                draw_grid_lines(self._screen)
                draw_state(self._screen, self._state)
                draw_panel(self._screen, self._state, self._font)
                pygame.display.set_caption(
                    f"Dr. Mario - {'Paused - ' if self._paused else ''}"
                    f"Score: {format_score(self._state.score)}"
                )
                pygame.display.flip()

            # Yield to the browser/host event loop to keep UI responsive
            await asyncio.sleep(0)

        pygame.quit()
        log("Game stopped")

    def start(self) -> None:
        if self._task and not self._task.done():
            log("Game already running")
            return
        self._paused = False
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No running loop (e.g., plain Python); run synchronously
            asyncio.run(self._run_loop())
        else:
            self._task = loop.create_task(self._run_loop())

    def pause(self) -> None:
        if not self._running:
            log("Pause ignored: game not running")
            return
        self._paused = True
        log("Paused")

    def resume(self) -> None:
        if not self._running:
            log("Resume ignored: game not running")
            return
        self._paused = False
        log("Resumed")

    async def stop_async(self) -> None:
        if not self._running:
            return
        self._running = False
        if self._task:
            await self._task

    def stop(self) -> None:
        if not self._running:
            log("Stop ignored: game not running")
            return
        # Schedule graceful shutdown
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # If no loop, just set flag; loop exits promptly
            self._running = False
        else:
            loop.create_task(self.stop_async())


# Module-level runner instance for convenience from PyScript
runner = GameRunner()


def start() -> None:
    runner.start()


def pause() -> None:
    runner.pause()


def resume() -> None:
    runner.resume()


def stop() -> None:
    runner.stop()


def main(*, speed: int = DEFAULT_LEVEL, seed: Optional[int] = None) -> None:
    """Run a game immediately and block until the window is closed."""

    GameRunner(speed=speed, seed=seed).start()


if __name__ == "__main__":  # pragma: no cover - manual execution only
    main()
