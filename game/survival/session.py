"""
Session - the simulation loop of the survival game
--------------------------------------------------
- One Session object owns all game state: player, entities, round state,
  timers. Resetting a game rebuilds that state in one place.
- Idle -> Running <-> Paused -> GameOver
- One frame callback in flight at a time; the next frame is requested only
  at the end of the current one.
- Spawn, round and rapid-fire timers belong to the session and are
  cancelled whenever the game stops running.

Inbound events from the presentation are plain method calls. None of them
raise: an action that is not allowed right now returns False and changes
nothing.

NO UI DEPENDENCIES.
"""

from __future__ import annotations

import math
import random
from enum import Enum, auto
from typing import Callable, Dict, List, Optional

from . import config
from .economy import (
    RoundState,
    apply_damage,
    award_kill,
    buy_ammo,
    buy_health_perk,
    buy_medkit,
    consume_ammo,
)
from .entities import (
    DifficultyProfile,
    Enemy,
    Player,
    Projectile,
    create_player,
    create_projectile,
    get_difficulty,
)
from .scheduler import TimerHandle
from .spawner import Spawner
from .utils import heading, intersects


class GamePhase(Enum):
    """Lifecycle of a session."""
    IDLE = auto()       # waiting for a difficulty to be picked
    RUNNING = auto()
    PAUSED = auto()     # shop overlay, nothing moves
    GAME_OVER = auto()


EVENT_KEYS = ("shot", "kill", "hit_taken", "damage", "spawned", "purchase", "round")


class Session:
    """
    The single owner of game state.

    Usage:
        scheduler = FrameScheduler()
        session = Session(scheduler, renderer=window)
        session.start("easy")
        while session.phase is not GamePhase.GAME_OVER:
            scheduler.run_frame()
    """

    def __init__(
        self,
        scheduler,
        renderer=None,
        width: int = config.SESSION_CONFIG["width"],
        height: int = config.SESSION_CONFIG["height"],
        spawn_interval_ms: float = config.SESSION_CONFIG["spawn_interval_ms"],
        round_interval_ms: float = config.SESSION_CONFIG["round_interval_ms"],
        rapid_fire_interval_ms: float = config.SESSION_CONFIG["rapid_fire_interval_ms"],
        projectile_speed: float = config.SESSION_CONFIG["projectile_speed"],
        rng: Optional[random.Random] = None,
        on_game_over: Optional[Callable[[int], None]] = None,
        verbose: bool = False,
    ):
        self.scheduler = scheduler
        self.renderer = renderer
        self.width = width
        self.height = height
        self.spawn_interval_ms = spawn_interval_ms
        self.round_interval_ms = round_interval_ms
        self.rapid_fire_interval_ms = rapid_fire_interval_ms
        self.projectile_speed = projectile_speed
        self.rng = rng or random.Random()
        self.on_game_over = on_game_over
        self.verbose = verbose

        self.spawner = Spawner(self.rng)
        self.phase = GamePhase.IDLE
        self.profile: Optional[DifficultyProfile] = None
        self.invincible = False

        # World state, rebuilt by _reset()
        self.player: Optional[Player] = None
        self.round: Optional[RoundState] = None
        self.projectiles: List[Projectile] = []
        self.enemies: List[Enemy] = []
        self.stats: Dict[str, float] = {}
        self._events: Dict[str, float] = {}

        self._timers: Dict[str, TimerHandle] = {}
        self._frame_pending = False
        self._aim = (0.0, 0.0)

    # ----------------------------
    # Lifecycle
    # ----------------------------

    def start(self, difficulty: str = "easy") -> bool:
        """Begin a fresh game with the named difficulty preset"""
        profile = get_difficulty(difficulty)
        if profile is None:
            return False

        self._cancel_timers()
        self._reset(profile)
        self.phase = GamePhase.RUNNING
        self._start_timers()
        self._request_frame()
        self._log(f"Started {profile.name} game "
                  f"(ammo={profile.ammo}, speed={profile.enemy_speed}, spawn={profile.spawn_count})")
        return True

    def restart(self) -> bool:
        """Start over with the current difficulty"""
        if self.profile is None:
            return False
        return self.start(self.profile.name)

    def change_difficulty(self) -> bool:
        """Drop the current game and go back to difficulty selection"""
        if self.phase is GamePhase.IDLE:
            return False
        self._cancel_timers()
        self.phase = GamePhase.IDLE
        self.projectiles = []
        self.enemies = []
        self._log("Back to difficulty selection")
        return True

    def pause(self) -> bool:
        if self.phase is not GamePhase.RUNNING:
            return False
        self._cancel_timers()
        self.phase = GamePhase.PAUSED
        self._log("Paused")
        return True

    def resume(self) -> bool:
        if self.phase is not GamePhase.PAUSED:
            return False
        self.phase = GamePhase.RUNNING
        self._start_timers()
        self._log("Resumed")
        return True

    def toggle_pause(self) -> bool:
        if self.phase is GamePhase.RUNNING:
            return self.pause()
        return self.resume()

    @property
    def is_over(self) -> bool:
        return self.phase is GamePhase.GAME_OVER

    @property
    def score(self) -> int:
        return self.player.currency if self.player else 0

    def _reset(self, profile: DifficultyProfile):
        self.profile = profile
        self.player = create_player(self.width, self.height, profile)
        self.round = RoundState.from_profile(profile)
        self.projectiles = []
        self.enemies = []
        self.invincible = False
        self._aim = (self.player.x, self.player.y)
        self.stats = {
            "shots": 0,
            "kills": 0,
            "hits_taken": 0,
            "damage_taken": 0,
            "spawned": 0,
            "ticks": 0,
        }
        self._events = {k: 0.0 for k in EVENT_KEYS}

    def _game_over(self):
        if self.phase is GamePhase.GAME_OVER:
            return
        self.phase = GamePhase.GAME_OVER
        self._cancel_timers()
        self._log(f"Game over in round {self.round.number}. Final score: ${self.player.currency}")
        if self.on_game_over is not None:
            self.on_game_over(self.player.currency)

    # ----------------------------
    # Timers
    # ----------------------------

    def _start_timers(self):
        self._timers["spawn"] = self.scheduler.schedule_periodic(self.spawn_interval_ms, self.spawn_wave)
        self._timers["round"] = self.scheduler.schedule_periodic(self.round_interval_ms, self.advance_round)

    def _cancel_timers(self, *names: str):
        for name in names or list(self._timers):
            timer = self._timers.pop(name, None)
            if timer is not None:
                timer.cancel()

    def timer_active(self, name: str) -> bool:
        timer = self._timers.get(name)
        return timer is not None and timer.active

    def spawn_wave(self):
        """Spawn timer callback"""
        if self.phase is not GamePhase.RUNNING:
            return
        wave = self.spawner.tick(self.round, self.width, self.height)
        self.enemies.extend(wave)
        self.stats["spawned"] += len(wave)
        self._events["spawned"] += len(wave)

    def advance_round(self):
        """Round timer callback"""
        if self.phase is not GamePhase.RUNNING:
            return
        self.round.advance()
        self._events["round"] += 1
        self._log(f"Round {self.round.number}: enemy speed {self.round.enemy_speed:.1f}, "
                  f"spawn count {self.round.spawn_count}")

    # ----------------------------
    # Frame loop
    # ----------------------------

    def _request_frame(self):
        if self._frame_pending:
            return
        self._frame_pending = True
        self.scheduler.schedule_next_tick(self._on_frame)

    def _on_frame(self):
        self._frame_pending = False
        if self.phase is GamePhase.IDLE:
            return

        self.tick()

        if self.renderer is not None:
            self.renderer.render(self.player, self.projectiles, self.enemies, self.round)

        if self.phase is not GamePhase.GAME_OVER:
            self._request_frame()

    def tick(self):
        """Advance the world by one step. Does nothing unless running."""
        if self.phase is not GamePhase.RUNNING:
            return
        self._update_projectiles()
        self._handle_projectile_hits()
        self._update_enemies()
        self.stats["ticks"] += 1

    def _update_projectiles(self):
        for p in self.projectiles:
            p.x += p.vx
            p.y += p.vy
            if p.x < 0 or p.x > self.width or p.y < 0 or p.y > self.height:
                p.alive = False

        self.projectiles = [p for p in self.projectiles if p.alive]

    def _handle_projectile_hits(self):
        # Enemies are tested in spawn order; a projectile stops at its first hit
        for p in self.projectiles:
            for e in self.enemies:
                if not e.alive:
                    continue
                if intersects(p, e):
                    e.alive = False
                    p.alive = False
                    award_kill(self.player)
                    self.stats["kills"] += 1
                    self._events["kill"] += 1.0
                    break

        self.enemies = [e for e in self.enemies if e.alive]
        self.projectiles = [p for p in self.projectiles if p.alive]

    def _update_enemies(self):
        px, py = self.player.x, self.player.y

        for e in self.enemies:
            angle = heading(e.x, e.y, px, py)
            e.vx = math.cos(angle) * e.speed
            e.vy = math.sin(angle) * e.speed
            e.x += e.vx
            e.y += e.vy

            if intersects(e, self.player):
                e.alive = False
                self._player_hit()
                if self.phase is GamePhase.GAME_OVER:
                    break

        self.enemies = [e for e in self.enemies if e.alive]

    def _player_hit(self):
        self.stats["hits_taken"] += 1
        self._events["hit_taken"] += 1.0
        if self.invincible:
            return
        before = self.player.health
        lethal = apply_damage(self.player, config.ENEMY_DAMAGE)
        self.stats["damage_taken"] += before - self.player.health
        self._events["damage"] += before - self.player.health
        if lethal:
            self._game_over()

    # ----------------------------
    # Player actions
    # ----------------------------

    def fire(self, x: float, y: float) -> bool:
        """Shoot one projectile from the player towards (x, y)"""
        if self.phase is not GamePhase.RUNNING:
            return False
        if not consume_ammo(self.player):
            return False
        self.projectiles.append(
            create_projectile(self.player.x, self.player.y, x, y, self.projectile_speed)
        )
        self.stats["shots"] += 1
        self._events["shot"] += 1.0
        return True

    def aim(self, x: float, y: float):
        """Update the point the rapid-fire timer shoots at"""
        self._aim = (x, y)

    def start_rapid_fire(self, x: float, y: float) -> bool:
        """Fire now and keep firing at the aim point until stopped"""
        if self.phase is not GamePhase.RUNNING:
            return False
        self.aim(x, y)
        fired = self.fire(x, y)
        if not self.timer_active("rapid_fire"):
            self._timers["rapid_fire"] = self.scheduler.schedule_periodic(
                self.rapid_fire_interval_ms, self._rapid_fire
            )
        return fired

    def stop_rapid_fire(self):
        self._cancel_timers("rapid_fire")

    def _rapid_fire(self):
        self.fire(*self._aim)

    def buy_ammo(self) -> bool:
        return self._purchase(buy_ammo)

    def buy_health_perk(self) -> bool:
        return self._purchase(buy_health_perk)

    def buy_medkit(self) -> bool:
        return self._purchase(buy_medkit)

    def _purchase(self, action: Callable[[Player], bool]) -> bool:
        if self.phase not in (GamePhase.RUNNING, GamePhase.PAUSED):
            return False
        if not action(self.player):
            return False
        self._events["purchase"] += 1.0
        return True

    # ----------------------------
    # Developer overrides (debug affordance only)
    # ----------------------------

    def toggle_invincibility(self) -> bool:
        if self.phase is GamePhase.IDLE:
            return False
        self.invincible = not self.invincible
        self._log(f"Invincibility {'on' if self.invincible else 'off'}")
        return self.invincible

    def set_ammo(self, n) -> bool:
        if self.player is None or self.phase is GamePhase.IDLE:
            return False
        try:
            self.player.ammo = max(0, int(n))
        except (TypeError, ValueError, OverflowError):
            return False
        return True

    def add_currency(self, n) -> bool:
        if self.player is None or self.phase is GamePhase.IDLE:
            return False
        try:
            self.player.currency = max(0, self.player.currency + int(n))
        except (TypeError, ValueError, OverflowError):
            return False
        return True

    # ----------------------------
    # Observers
    # ----------------------------

    def pop_events(self) -> Dict[str, float]:
        """Events since the last call (shots, kills, damage...), then reset"""
        events = self._events
        self._events = {k: 0.0 for k in EVENT_KEYS}
        return events

    def _log(self, message: str):
        if self.verbose:
            print(f"[Session] {message}")
