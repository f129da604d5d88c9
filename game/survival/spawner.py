"""
Periodic enemy creation along the arena edges
"""

import random
from typing import List, Optional

from .economy import RoundState
from .entities import Enemy, create_enemy


class Spawner:
    """Produces one wave of enemies per spawn tick, sized by the round state"""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self.total_spawned = 0

    def tick(self, round_state: RoundState, width: float, height: float) -> List[Enemy]:
        wave = [
            create_enemy(width, height, round_state.enemy_speed, self.rng)
            for _ in range(round_state.spawn_count)
        ]
        self.total_spawned += len(wave)
        return wave
