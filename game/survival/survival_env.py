"""
SurvivalEnv - the survival game as a Gymnasium environment
----------------------------------------------------------
- Wraps a Session driven by a deterministic FrameScheduler
- One env step = one 60 FPS frame (timers fire on game time, not wall time)
- Discrete MultiDiscrete action space: [shoot(2), aim(16), shop(4)]
- Vector observation: player state + top-K nearest enemies
- Arcade rendering in "human" mode through SurvivalWindow

Install:
    pip install gymnasium arcade numpy

Quick test:
    python -m game.survival.survival_env
"""

from __future__ import annotations

import math
import random
import time
from typing import Any, Dict, Optional

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .config import FRAME_MS, HEALTH_PERK_MAX_HEALTH, SESSION_CONFIG
from .scheduler import FrameScheduler
from .session import GamePhase, Session
from .utils import clamp, seed_everything

# shop action: 0 nothing, 1 ammo, 2 health perk, 3 medkit
SHOP_ACTIONS = (None, "buy_ammo", "buy_health_perk", "buy_medkit")

DEFAULT_REWARD_CONFIG = {
    "R_KILL": 1.0,
    "R_DAMAGE": 0.03,   # per health point lost
    "R_SHOT": 0.02,
    "R_PURCHASE": 0.05,
    "R_ALIVE": 0.001,
    "R_DEATH": 5.0,
}


class SurvivalEnv(gym.Env):
    """Zombie survival environment using a Session and Arcade"""

    metadata = {"render_modes": ["human"], "render_fps": 60}

    def __init__(
        self,
        render_mode: Optional[str] = None,
        obs_mode: str = "vector",
        difficulty: str = "easy",
        width: int = SESSION_CONFIG["width"],
        height: int = SESSION_CONFIG["height"],
        max_steps: int = 3600,  # 60s at 60 FPS
        k_enemies: int = 5,
        aim_directions: int = 16,
        ammo_scale: float = 50.0,
        currency_scale: float = 500.0,
        max_round: int = 10,
        reward_config: Optional[Dict[str, float]] = None,
    ):
        super().__init__()

        assert obs_mode in ("vector",), "Only 'vector' is implemented."
        self.render_mode = render_mode
        self.obs_mode = obs_mode
        self.difficulty = difficulty

        # Arena
        self.width = width
        self.height = height
        self.max_steps = max_steps

        # Observation config
        self.k_enemies = k_enemies
        self.ammo_scale = ammo_scale
        self.currency_scale = currency_scale
        self.max_round = max_round

        self.reward_config = dict(DEFAULT_REWARD_CONFIG)
        if reward_config:
            self.reward_config.update(reward_config)

        self.action_space = spaces.MultiDiscrete([2, aim_directions, len(SHOP_ACTIONS)])

        # Player: health(1) max_health(1) ammo(1) currency(1) round(1) invincible(1)
        # Each enemy: rel pos(2) rel vel(2)
        obs_dim = 6 + self.k_enemies * 4
        self.observation_space = spaces.Box(
            low=-1.0, high=1.0, shape=(obs_dim,), dtype=np.float32
        )

        # Aim points on a circle around the player
        self._aim_dirs = []
        for i in range(aim_directions):
            ang = (math.pi * 2) * (i / aim_directions)
            self._aim_dirs.append((math.cos(ang), math.sin(ang)))

        self._window = None

        self.scheduler: FrameScheduler = None  # type: ignore
        self.session: Session = None  # type: ignore
        self._step_count = 0
        self._events: Dict[str, float] = {}

    # ----------------------------
    # Gym API
    # ----------------------------

    def reset(self, seed: Optional[int] = None, options: Optional[dict] = None):
        super().reset(seed=seed)
        seed_everything(seed)

        difficulty = (options or {}).get("difficulty", self.difficulty)

        self._step_count = 0
        self.scheduler = FrameScheduler(frame_ms=FRAME_MS)
        self.session = Session(
            self.scheduler,
            width=self.width,
            height=self.height,
            rng=random.Random(seed),
        )
        if self._window is not None:
            self._window.session = self.session
            self.session.renderer = self._window
        if not self.session.start(difficulty):
            raise ValueError(f"Unknown difficulty: {difficulty}")

        obs = self._get_obs()
        info = self._get_info()
        return obs, info

    def step(self, action):
        shoot, aim, shop = int(action[0]), int(action[1]), int(action[2])

        self._apply_shop(shop)
        self._apply_shoot(shoot, aim)

        # Timers, then one simulation tick
        self.scheduler.run_frame()
        self._events = self.session.pop_events()

        reward = self._compute_reward()

        terminated = self.session.phase is GamePhase.GAME_OVER
        self._step_count += 1
        truncated = self._step_count >= self.max_steps

        obs = self._get_obs()
        info = self._get_info()

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    # ----------------------------
    # Actions
    # ----------------------------

    def _apply_shoot(self, shoot: int, aim: int):
        if shoot == 0:
            return
        dx, dy = self._aim_dirs[aim % len(self._aim_dirs)]
        player = self.session.player
        self.session.fire(player.x + dx * 100.0, player.y + dy * 100.0)

    def _apply_shop(self, shop: int):
        name = SHOP_ACTIONS[shop % len(SHOP_ACTIONS)]
        if name is not None:
            getattr(self.session, name)()

    # ----------------------------
    # Observation / reward / info
    # ----------------------------

    def _get_obs(self) -> np.ndarray:
        player = self.session.player
        round_state = self.session.round

        obs_parts = [
            (player.health / max(1, player.max_health)) * 2 - 1,
            (player.max_health / HEALTH_PERK_MAX_HEALTH) * 2 - 1,
            clamp(player.ammo / self.ammo_scale, 0, 1) * 2 - 1,
            clamp(player.currency / self.currency_scale, 0, 1) * 2 - 1,
            clamp(round_state.number / self.max_round, 0, 1) * 2 - 1,
            1.0 if self.session.invincible else -1.0,
        ]

        # Enemies: top-K nearest
        enemies_sorted = sorted(
            self.session.enemies,
            key=lambda e: (e.x - player.x) ** 2 + (e.y - player.y) ** 2
        )
        for i in range(self.k_enemies):
            if i < len(enemies_sorted):
                e = enemies_sorted[i]
                dx = (e.x - player.x) / self.width
                dy = (e.y - player.y) / self.height
                max_speed = max(1e-6, e.speed)
                obs_parts += [
                    clamp(dx, -1, 1),
                    clamp(dy, -1, 1),
                    clamp(e.vx / max_speed, -1, 1),
                    clamp(e.vy / max_speed, -1, 1),
                ]
            else:
                obs_parts += [0.0, 0.0, 0.0, 0.0]

        return np.array(obs_parts, dtype=np.float32)

    def _compute_reward(self) -> float:
        rc = self.reward_config
        reward = 0.0

        reward += rc["R_KILL"] * self._events.get("kill", 0.0)
        reward -= rc["R_DAMAGE"] * self._events.get("damage", 0.0)
        reward -= rc["R_SHOT"] * self._events.get("shot", 0.0)
        reward += rc["R_PURCHASE"] * self._events.get("purchase", 0.0)

        if self.session.phase is GamePhase.GAME_OVER:
            reward -= rc["R_DEATH"]
        else:
            reward += rc["R_ALIVE"]

        return float(reward)

    def _get_info(self) -> Dict[str, Any]:
        player = self.session.player
        stats = self.session.stats
        return {
            "health": player.health,
            "max_health": player.max_health,
            "ammo": player.ammo,
            "currency": player.currency,
            "round": self.session.round.number,
            "enemies_killed": stats["kills"],
            "damage_taken": stats["damage_taken"],
            "shots_fired": stats["shots"],
            "num_enemies": len(self.session.enemies),
            "num_projectiles": len(self.session.projectiles),
            "step": self._step_count,
        }

    # ----------------------------
    # Rendering with Arcade
    # ----------------------------

    def render(self):
        if self.render_mode is None:
            return None

        if self._window is None and self.render_mode == "human":
            # Imported here so headless training never touches a display
            from .window import SurvivalWindow

            self._window = SurvivalWindow(self.session, self.width, self.height, interactive=False)
            self.session.renderer = self._window
            self._window.render(
                self.session.player, self.session.projectiles,
                self.session.enemies, self.session.round,
            )

        if self._window:
            self._window.on_draw()
        return None

    def close(self):
        if self._window is not None:
            self._window.close()
            self._window = None


# ----------------------------
# Quick sanity test
# ----------------------------

def run_random_episode(render: bool = True, difficulty: str = "easy", seed: Optional[int] = 42):
    """Run a random episode for testing"""
    env = SurvivalEnv(render_mode="human" if render else None, difficulty=difficulty)
    obs, info = env.reset(seed=seed)

    terminated = False
    truncated = False
    total = 0.0

    print("Running episode... Press ESC or close window to exit early.")

    while not (terminated or truncated):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total += reward

        if render and env._window:
            env._window.dispatch_events()
            env._window.on_draw()
            env._window.flip()
            time.sleep(1 / 60)

    print(f"Random episode return: {total:.2f}")
    print(f"Round {info['round']}, kills {info['enemies_killed']}, score ${info['currency']}")

    env.close()
    return total, info


if __name__ == "__main__":
    run_random_episode(render=True)
