"""Canvas-based web front-end for the pill puzzle.

This renderer draws directly to the HTML5 canvas via PyScript/pyodide's JS
bridge. It supports start/pause/resume/stop, the next-pill preview, the
score readout, the speed slider and keyboard controls.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from js import document, window  # type: ignore
from pyodide.ffi import create_proxy  # type: ignore

from .board import Board, Color
from .game_state import GameState
from .utils import DEFAULT_LEVEL, command_for_key, format_score, paint


CELL_SIZE = 30
PREVIEW_SIZE = 20

COLOR_HEX = {
    Color.RED: "#FF2D55",
    Color.BLUE: "#00FFDD",
    Color.YELLOW: "#FFCC00",
}


@dataclass
class Runner:
    state: Optional[GameState] = None
    running: bool = False
    paused: bool = False
    last_ts: float = 0.0
    drop_accum: float = 0.0
    raf_handle: Optional[int] = None
    key_proxy: Optional[object] = None

    def _ctx(self):
        canvas = document.getElementById("gameCanvas")
        return canvas.getContext("2d")

    def _log(self, msg: str) -> None:
        el = document.getElementById("diagnostics")
        if el:
            div = document.createElement("div")
            div.textContent = msg
            el.prepend(div)

    def _update_score(self) -> None:
        """Write the zero-padded score into the DOM if present."""
        if not self.state:
            return
        el = document.getElementById("score")
        if el:
            el.textContent = format_score(self.state.score)

    def _read_speed(self) -> None:
        """Pull the speed level from the slider and mirror it in its label."""
        if not self.state:
            return
        slider = document.getElementById("speedSlider")
        if not slider:
            return
        try:
            level = int(slider.value)
        except (TypeError, ValueError):
            return
        if level != self.state.level:
            self.state.set_level(level)
            self._update_speed_label()

    def _update_speed_label(self) -> None:
        if not self.state:
            return
        label = document.getElementById("speedValue")
        if label:
            label.textContent = f"Level {self.state.level}"

    def _on_game_over(self, final_score: int) -> None:
        self._log(f"Game over. Final score: {final_score}")
        # Reset timing accumulators so the next run starts cleanly instead of
        # dropping the freshly spawned pill on the first frame.
        self.last_ts = 0
        self.drop_accum = 0
        self._update_score()

    def _new_state(self) -> GameState:
        state = GameState(on_game_over=self._on_game_over)
        state.set_level(DEFAULT_LEVEL)
        state.reset_game()
        return state

    def _game_over(self) -> None:
        """Force the current run to end, e.g. after a crash."""
        if self.state:
            self.state.game_over()
        else:
            self.state = self._new_state()
        self.last_ts = 0
        self.drop_accum = 0

    def _draw_block(self, ctx, x: float, y: float, color: Color, size: int, clearing: bool) -> None:
        ctx.fillStyle = COLOR_HEX[color]
        ctx.beginPath()
        radius = size / 2 if clearing else 6
        ctx.roundRect(x * size + 1, y * size + 1, size - 2, size - 2, radius)
        ctx.fill()
        if not clearing:
            ctx.fillStyle = "rgba(255,255,255,0.2)"
            ctx.fillRect(x * size + 5, y * size + 5, size / 4, size / 4)

    def _draw_next(self) -> None:
        canvas = document.getElementById("nextCanvas")
        if not canvas or not self.state or not self.state.next_colors:
            return
        ctx = canvas.getContext("2d")
        ctx.clearRect(0, 0, 80, 40)
        for i, color in enumerate(self.state.next_colors):
            self._draw_block(ctx, 0.5 + i, 0.5, color, PREVIEW_SIZE, False)

    def _draw(self) -> None:
        ctx = self._ctx()
        w = Board.width * CELL_SIZE
        h = Board.height * CELL_SIZE
        ctx.clearRect(0, 0, w, h)
        if not self.state:
            return
        paint(
            self.state,
            lambda x, y, color, clearing: self._draw_block(ctx, x, y, color, CELL_SIZE, clearing),
        )
        self._draw_next()
        self._update_score()

    def _tick(self, ts: float) -> None:
        if not self.running:
            return
        try:
            if self.last_ts == 0:
                self.last_ts = ts
            dt = ts - self.last_ts
            self.last_ts = ts
            if not self.paused and self.state:
                self._read_speed()
                self.state.advance_animation(dt)
                self.drop_accum += dt
                if self.drop_accum > self.state.drop_interval_ms:
                    self.drop_accum = 0
                    self.state.tick()
            self._draw()
        except Exception as exc:  # pragma: no cover - defensive guard
            # If anything goes wrong during the animation frame, log the error
            # and reset the game so a fresh session can continue.
            self._log(f"Crash detected: {exc}")
            self._game_over()
        self.raf_handle = window.requestAnimationFrame(create_proxy(self._tick))

    def _on_key(self, evt) -> None:
        if not self.running or self.paused or not self.state:
            return
        command = command_for_key(evt.key)
        if command is None:
            return
        if hasattr(evt, "preventDefault"):
            evt.preventDefault()
        self.state.handle(command)
        self._draw()

    def start(self) -> None:
        if self.running:
            self._log("Already running")
            return
        # Focus canvas for keyboard input
        canvas = document.getElementById("gameCanvas")
        if canvas:
            canvas.focus()
        self.state = self._new_state()
        self.running = True
        self.paused = False
        self.last_ts = 0
        self.drop_accum = 0
        self._read_speed()
        self._update_speed_label()
        if self.key_proxy is None:
            self.key_proxy = create_proxy(self._on_key)
            document.addEventListener("keydown", self.key_proxy)
        self._draw()
        self.raf_handle = window.requestAnimationFrame(create_proxy(self._tick))
        self._log("Game started")

    def pause(self) -> None:
        if not self.running:
            self._log("Pause ignored: not running")
            return
        self.paused = True
        self._log("Paused")

    def resume(self) -> None:
        if not self.running:
            self._log("Resume ignored: not running")
            return
        self.paused = False
        self._log("Resumed")

    def stop(self) -> None:
        if not self.running:
            self._log("Stop ignored: not running")
            return
        self.running = False
        self.paused = False
        if self.raf_handle is not None:
            window.cancelAnimationFrame(self.raf_handle)
            self.raf_handle = None
        if self.key_proxy is not None:
            document.removeEventListener("keydown", self.key_proxy)
            self.key_proxy = None
        self._log("Game stopped")


runner = Runner()


def start() -> None:
    runner.start()


def pause() -> None:
    runner.pause()


def resume() -> None:
    runner.resume()


def stop() -> None:
    runner.stop()
