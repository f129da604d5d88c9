"""
Play the survival game in an arcade window, or watch a random agent.

Usage:
    python -m game.survival.play
    python -m game.survival.play --difficulty hard --dev
    python -m game.survival.play --random-agent --seed 7

Controls:
    1/2/3: Start easy / hard / veteran
    Left mouse: Shoot (hold for rapid fire)
    A: Buy ammo   H: Health upgrade   M: Medkit   P: Shop/pause
    R: Restart after game over   D: Change difficulty
    Dev mode: I invincibility, F2 ammo, F3 money
    Escape: Quit
"""

import argparse
import random

from .config import DIFFICULTIES, SESSION_CONFIG


def play(difficulty=None, width=SESSION_CONFIG["width"], height=SESSION_CONFIG["height"],
         dev_mode=False, verbose=False, seed=None):
    """Open the game window and run arcade's event loop"""
    import arcade

    from .session import Session
    from .window import ArcadeScheduler, SurvivalWindow

    scheduler = ArcadeScheduler()
    session = Session(
        scheduler,
        width=width,
        height=height,
        rng=random.Random(seed),
        verbose=verbose,
    )
    window = SurvivalWindow(session, width, height, scheduler=scheduler, dev_mode=dev_mode)
    session.renderer = window

    if difficulty is not None:
        session.start(difficulty)

    arcade.run()


def main():
    parser = argparse.ArgumentParser(description="Zombie survival arcade game")
    parser.add_argument(
        "--difficulty",
        type=str,
        default=None,
        choices=sorted(DIFFICULTIES),
        help="Skip the menu and start with this difficulty",
    )
    parser.add_argument("--width", type=int, default=SESSION_CONFIG["width"])
    parser.add_argument("--height", type=int, default=SESSION_CONFIG["height"])
    parser.add_argument("--dev", action="store_true", help="Enable developer keys")
    parser.add_argument("--verbose", action="store_true", help="Print session lifecycle events")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument(
        "--random-agent",
        action="store_true",
        help="Watch a random agent play one episode instead",
    )

    args = parser.parse_args()

    if args.random_agent:
        from .survival_env import run_random_episode
        run_random_episode(render=True, difficulty=args.difficulty or "easy", seed=args.seed)
        return

    play(
        difficulty=args.difficulty,
        width=args.width,
        height=args.height,
        dev_mode=args.dev,
        verbose=args.verbose,
        seed=args.seed,
    )


if __name__ == "__main__":
    main()
