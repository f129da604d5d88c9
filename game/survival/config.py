"""
Gameplay constants and difficulty presets.
NO UI DEPENDENCIES.

Distances are pixels, speeds are pixels per tick, times are milliseconds.
"""

# ==============================================================================
# ARENA & CADENCE
# ==============================================================================

SESSION_CONFIG = {
    "width": 800,
    "height": 600,
    "spawn_interval_ms": 1000,      # one spawner tick per second
    "round_interval_ms": 85_000,    # round advance cadence
    "rapid_fire_interval_ms": 120,  # held-trigger repeat
    "projectile_speed": 7.0,
}

FRAME_MS = 1000 / 60

# ==============================================================================
# ENTITIES
# ==============================================================================

PLAYER_RADIUS = 15.0
PLAYER_MAX_HEALTH = 100
PROJECTILE_RADIUS = 5.0
ENEMY_RADIUS = 20.0

# ==============================================================================
# ECONOMY
# ==============================================================================

KILL_REWARD = 10
ENEMY_DAMAGE = 33

AMMO_COST = 20
AMMO_PACK = 5

HEALTH_PERK_COST = 200
HEALTH_PERK_MAX_HEALTH = 200

MEDKIT_COST = 300

# ==============================================================================
# ROUND PROGRESSION
# ==============================================================================

ROUND_SPEED_STEP = 0.2
DOUBLE_SPAWN_ROUND = 6   # from this round on, spawn count is doubled

# ==============================================================================
# DIFFICULTY PRESETS
# ==============================================================================

DIFFICULTIES = {
    "easy": {"ammo": 10, "enemy_speed": 1.5, "spawn_count": 1},
    "hard": {"ammo": 10, "enemy_speed": 2.0, "spawn_count": 2},
    "veteran": {"ammo": 5, "enemy_speed": 2.5, "spawn_count": 3},
}
