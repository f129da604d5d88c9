"""Survival game module - stationary shooter against homing zombie waves"""

from .session import Session, GamePhase
from .scheduler import FrameScheduler, TimerHandle
from .survival_env import SurvivalEnv, run_random_episode

__all__ = ['Session', 'GamePhase', 'FrameScheduler', 'TimerHandle', 'SurvivalEnv', 'run_random_episode']
