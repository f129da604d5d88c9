"""
Arcade front end for the survival game
--------------------------------------
- ArcadeScheduler: wall-clock scheduler for a Session (periodic timers via
  arcade.schedule, frame callbacks drained from on_update)
- SurvivalWindow: draws the frames a Session renders and turns mouse/key
  input into Session events

The simulation uses a top-left origin (y grows downward); arcade draws with
a bottom-left origin, so y is flipped on the way in and out.
"""

from __future__ import annotations

import time
from typing import Callable, List, Optional

import arcade

from .config import AMMO_COST, AMMO_PACK, HEALTH_PERK_COST, MEDKIT_COST
from .entities import Perk
from .scheduler import TimerHandle
from .session import GamePhase, Session
from .utils import clamp


class ArcadeScheduler:
    """Scheduler backed by arcade's clock"""

    def __init__(self):
        self._t0 = time.perf_counter()
        self._frame_callbacks: List[Callable[[], None]] = []

    def now(self) -> float:
        return (time.perf_counter() - self._t0) * 1000.0

    def schedule_periodic(self, interval_ms: float, callback: Callable[[], None]) -> TimerHandle:
        if interval_ms <= 0:
            raise ValueError(f"Timer interval must be positive, got {interval_ms}")

        # arcade.unschedule matches on the function object, so each timer
        # needs its own wrapper
        def _fire(delta_time: float):
            callback()

        arcade.schedule(_fire, interval_ms / 1000.0)
        return TimerHandle(on_cancel=lambda: arcade.unschedule(_fire))

    def schedule_next_tick(self, callback: Callable[[], None]):
        self._frame_callbacks.append(callback)

    def run_frame(self):
        pending, self._frame_callbacks = self._frame_callbacks, []
        for callback in pending:
            callback()


class SurvivalWindow(arcade.Window):
    """Arcade window rendering a Session and forwarding player input to it"""

    DIFFICULTY_KEYS = {
        arcade.key.KEY_1: "easy",
        arcade.key.KEY_2: "hard",
        arcade.key.KEY_3: "veteran",
    }

    def __init__(
        self,
        session: Session,
        width: int,
        height: int,
        scheduler: Optional[ArcadeScheduler] = None,
        interactive: bool = True,
        dev_mode: bool = False,
        title: str = "Zombie Survival",
    ):
        super().__init__(width, height, title)
        self.session = session
        self.scheduler = scheduler
        self.interactive = interactive
        self.dev_mode = dev_mode
        self._frame = None

        # Colors
        self.BG = (18, 18, 22)
        self.PLAYER_C = (60, 110, 240)
        self.ENEMY_C = (220, 60, 60)
        self.PROJECTILE_C = (250, 230, 60)
        self.HUD_C = (220, 220, 220)
        self.HEALTH_C = (80, 200, 120)
        self.OVERLAY_C = (0, 0, 0, 170)

        self.background_color = self.BG

    # ----------------------------
    # Session renderer
    # ----------------------------

    def render(self, player, projectiles, enemies, round_state):
        """Keep the latest frame; arcade draws it in on_draw"""
        self._frame = (player, list(projectiles), list(enemies), round_state)

    def _sy(self, y: float) -> float:
        return self.height - y

    # ----------------------------
    # Arcade callbacks
    # ----------------------------

    def on_update(self, delta_time: float):
        if self.scheduler is not None:
            self.scheduler.run_frame()

    def on_draw(self):
        self.clear()

        phase = self.session.phase
        if phase is GamePhase.IDLE:
            self._draw_menu()
            return
        if self._frame is None:
            # started, first session frame not run yet
            return

        player, projectiles, enemies, round_state = self._frame

        for e in enemies:
            arcade.draw_circle_filled(e.x, self._sy(e.y), e.radius, self.ENEMY_C)

        for p in projectiles:
            arcade.draw_circle_filled(p.x, self._sy(p.y), p.radius, self.PROJECTILE_C)

        arcade.draw_circle_filled(player.x, self._sy(player.y), player.radius, self.PLAYER_C)

        self._draw_hud(player, round_state)

        if phase is GamePhase.PAUSED:
            self._draw_shop(player)
        elif phase is GamePhase.GAME_OVER:
            self._draw_game_over(player, round_state)

    def _draw_hud(self, player, round_state):
        # Health bar
        bar_w, bar_h = 180, 10
        x0, y0 = 12, self.height - 22
        arcade.draw_lrbt_rectangle_filled(x0, x0 + bar_w, y0, y0 + bar_h, (60, 60, 60))
        fill = bar_w * clamp(player.health / max(1, player.max_health), 0, 1)
        if fill > 0:
            arcade.draw_lrbt_rectangle_filled(x0, x0 + fill, y0, y0 + bar_h, self.HEALTH_C)

        txt = (f"HP: {player.health}/{player.max_health}  "
               f"Ammo: {player.ammo}  "
               f"${player.currency}  "
               f"Round: {round_state.number}")
        if Perk.HEALTH_BOOST in player.perks:
            txt += "  [+HP]"
        if self.session.invincible:
            txt += "  [INVINCIBLE]"
        arcade.draw_text(txt, 12, self.height - 40, self.HUD_C, 14)

    def _draw_overlay(self, lines, color=None):
        arcade.draw_lrbt_rectangle_filled(0, self.width, 0, self.height, self.OVERLAY_C)
        y = self.height * 0.5 + 20 * len(lines) / 2
        for i, line in enumerate(lines):
            arcade.draw_text(
                line, self.width * 0.5, y - i * 32,
                color if (color and i == 0) else self.HUD_C,
                22 if i == 0 else 14,
                anchor_x="center",
            )

    def _draw_menu(self):
        self._draw_overlay([
            "ZOMBIE SURVIVAL",
            "Pick a difficulty:",
            "1 - Easy    2 - Hard    3 - Veteran",
        ], self.PLAYER_C)

    def _draw_shop(self, player):
        self._draw_overlay([
            "SHOP",
            f"A - {AMMO_PACK} ammo (${AMMO_COST})",
            f"H - Health upgrade (${HEALTH_PERK_COST})"
            + ("  owned" if Perk.HEALTH_BOOST in player.perks else ""),
            f"M - Medkit (${MEDKIT_COST})",
            "P - Back to the fight",
        ], self.PROJECTILE_C)

    def _draw_game_over(self, player, round_state):
        self._draw_overlay([
            "GAME OVER",
            f"You scored: ${player.currency} (round {round_state.number})",
            "R - Restart    D - Change difficulty",
        ], self.ENEMY_C)

    # ----------------------------
    # Input
    # ----------------------------

    def on_mouse_press(self, x: int, y: int, button: int, modifiers: int):
        if not self.interactive or button != arcade.MOUSE_BUTTON_LEFT:
            return
        self.session.start_rapid_fire(x, self._sy(y))

    def on_mouse_release(self, x: int, y: int, button: int, modifiers: int):
        if not self.interactive or button != arcade.MOUSE_BUTTON_LEFT:
            return
        self.session.stop_rapid_fire()

    def on_mouse_motion(self, x: int, y: int, dx: int, dy: int):
        if self.interactive:
            self.session.aim(x, self._sy(y))

    def on_mouse_drag(self, x: int, y: int, dx: int, dy: int, buttons: int, modifiers: int):
        if self.interactive:
            self.session.aim(x, self._sy(y))

    def on_key_press(self, symbol: int, modifiers: int):
        if symbol == arcade.key.ESCAPE:
            self.close()
            return
        if not self.interactive:
            return

        s = self.session
        if s.phase is GamePhase.IDLE:
            if symbol in self.DIFFICULTY_KEYS:
                s.start(self.DIFFICULTY_KEYS[symbol])
        elif s.phase is GamePhase.GAME_OVER:
            if symbol == arcade.key.R:
                s.restart()
            elif symbol == arcade.key.D:
                s.change_difficulty()
                self._frame = None
        else:
            if symbol == arcade.key.A:
                s.buy_ammo()
            elif symbol == arcade.key.H:
                s.buy_health_perk()
            elif symbol == arcade.key.M:
                s.buy_medkit()
            elif symbol == arcade.key.P:
                s.stop_rapid_fire()
                s.toggle_pause()

        if self.dev_mode:
            if symbol == arcade.key.I:
                s.toggle_invincibility()
            elif symbol == arcade.key.F2:
                s.set_ammo(999)
            elif symbol == arcade.key.F3:
                s.add_currency(1000)
