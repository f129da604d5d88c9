"""
Game entity dataclasses and spawn factories
"""

import math
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Set

from . import config


class Perk(Enum):
    """Purchasable upgrades a player can own"""
    HEALTH_BOOST = "health_boost"


@dataclass(frozen=True)
class DifficultyProfile:
    """Starting conditions picked once per game"""
    name: str
    ammo: int
    enemy_speed: float
    spawn_count: int


@dataclass
class Player:
    """Stationary player at the arena centre"""
    x: float
    y: float
    radius: float = config.PLAYER_RADIUS
    health: int = config.PLAYER_MAX_HEALTH
    max_health: int = config.PLAYER_MAX_HEALTH
    ammo: int = 0
    currency: int = 0
    perks: Set[Perk] = field(default_factory=set)


@dataclass
class Projectile:
    """Straight-flying projectile fired by the player"""
    x: float
    y: float
    vx: float
    vy: float
    radius: float = config.PROJECTILE_RADIUS
    alive: bool = True


@dataclass
class Enemy:
    """Enemy entity that homes in on the player"""
    x: float
    y: float
    speed: float
    vx: float = 0.0
    vy: float = 0.0
    radius: float = config.ENEMY_RADIUS
    alive: bool = True


def get_difficulty(name: str) -> Optional[DifficultyProfile]:
    """Look up a difficulty preset by name, None if unknown"""
    preset = config.DIFFICULTIES.get(name)
    if preset is None:
        return None
    return DifficultyProfile(name=name, **preset)


def create_player(width: float, height: float, profile: DifficultyProfile) -> Player:
    return Player(x=width * 0.5, y=height * 0.5, ammo=profile.ammo)


def create_projectile(
    origin_x: float,
    origin_y: float,
    target_x: float,
    target_y: float,
    speed: float = config.SESSION_CONFIG["projectile_speed"],
) -> Projectile:
    """Projectile leaving the origin towards the target point at a fixed speed"""
    angle = math.atan2(target_y - origin_y, target_x - origin_x)
    return Projectile(
        x=origin_x,
        y=origin_y,
        vx=math.cos(angle) * speed,
        vy=math.sin(angle) * speed,
    )


def create_enemy(
    width: float,
    height: float,
    speed: float,
    rng: Optional[random.Random] = None,
) -> Enemy:
    """Enemy on a random arena edge, moving at the given speed for its whole life"""
    rng = rng or random

    # 0: top, 1: right, 2: bottom, 3: left
    edge = rng.randrange(4)
    if edge == 0:
        x, y = rng.random() * width, 0.0
    elif edge == 1:
        x, y = float(width), rng.random() * height
    elif edge == 2:
        x, y = rng.random() * width, float(height)
    else:
        x, y = 0.0, rng.random() * height

    return Enemy(x=x, y=y, speed=speed)
