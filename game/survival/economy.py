"""
Economy and round progression rules.
NO UI DEPENDENCIES.

Every purchase returns True when it went through and False when it was
rejected; a rejected purchase leaves the player untouched.
"""

from dataclasses import dataclass

from . import config
from .entities import DifficultyProfile, Perk, Player


@dataclass
class RoundState:
    """Round counter plus the spawn parameters it drives"""
    number: int
    enemy_speed: float
    spawn_count: int
    base_spawn_count: int

    @classmethod
    def from_profile(cls, profile: DifficultyProfile) -> "RoundState":
        return cls(
            number=1,
            enemy_speed=profile.enemy_speed,
            spawn_count=profile.spawn_count,
            base_spawn_count=profile.spawn_count,
        )

    def advance(self):
        """Move to the next round: faster enemies, double spawns late in the game"""
        self.number += 1
        self.enemy_speed += config.ROUND_SPEED_STEP
        if self.number >= config.DOUBLE_SPAWN_ROUND:
            self.spawn_count = self.base_spawn_count * 2
        else:
            self.spawn_count = self.base_spawn_count


def consume_ammo(player: Player) -> bool:
    """Take one round of ammo for a shot"""
    if player.ammo <= 0:
        return False
    player.ammo -= 1
    return True


def award_kill(player: Player) -> int:
    player.currency += config.KILL_REWARD
    return config.KILL_REWARD


def _charge(player: Player, cost: int) -> bool:
    if player.currency < cost:
        return False
    player.currency -= cost
    return True


def buy_ammo(player: Player) -> bool:
    if not _charge(player, config.AMMO_COST):
        return False
    player.ammo += config.AMMO_PACK
    return True


def buy_health_perk(player: Player) -> bool:
    """One-shot max health upgrade, refills health to the new maximum"""
    if Perk.HEALTH_BOOST in player.perks:
        return False
    if not _charge(player, config.HEALTH_PERK_COST):
        return False
    player.perks.add(Perk.HEALTH_BOOST)
    player.max_health = config.HEALTH_PERK_MAX_HEALTH
    player.health = player.max_health
    return True


def buy_medkit(player: Player) -> bool:
    if not _charge(player, config.MEDKIT_COST):
        return False
    player.health = player.max_health
    return True


def apply_damage(player: Player, amount: int = config.ENEMY_DAMAGE) -> bool:
    """
    Subtract health, never below zero.

    Returns:
        True if the hit was lethal
    """
    player.health = max(0, player.health - amount)
    return player.health <= 0
