"""
Evaluation script for trained survival agents
"""

import os
import argparse
import time
from typing import Optional

import numpy as np

from stable_baselines3 import PPO, DQN
from stable_baselines3.common.vec_env import DummyVecEnv, VecNormalize

from game.survival import SurvivalEnv
from rl.configs.survival_config import ENV_CONFIG
from rl.train import MultiDiscreteToDiscreteWrapper


def _summarize(title: str, rewards, lengths, kills, rounds):
    print("\n" + "="*50)
    print(f"{title} ({len(rewards)} episodes):")
    print(f"Mean Reward: {np.mean(rewards):.2f} ± {np.std(rewards):.2f}")
    print(f"Mean Episode Length: {np.mean(lengths):.1f}")
    print(f"Mean Kills: {np.mean(kills):.1f}")
    print(f"Mean Round Reached: {np.mean(rounds):.1f}")
    print("="*50)
    return {
        "mean_reward": float(np.mean(rewards)),
        "std_reward": float(np.std(rewards)),
        "mean_length": float(np.mean(lengths)),
        "mean_kills": float(np.mean(kills)),
        "mean_round": float(np.mean(rounds)),
        "episode_rewards": list(rewards),
    }


def evaluate_model(
    model_path: str,
    algo: str = "ppo",
    n_episodes: int = 10,
    render: bool = True,
    seed: Optional[int] = None,
    vec_normalize_path: Optional[str] = None,
):
    """
    Evaluate a trained model

    Args:
        model_path: Path to the saved model
        algo: Algorithm used ('ppo' or 'dqn')
        n_episodes: Number of episodes to evaluate
        render: Whether to render the environment
        seed: Random seed for evaluation
        vec_normalize_path: Path to VecNormalize stats (for PPO)
    """
    if not os.path.exists(model_path) and not os.path.exists(model_path + ".zip"):
        raise FileNotFoundError(f"Model not found: {model_path}")

    if algo == "ppo":
        model = PPO.load(model_path)
    elif algo == "dqn":
        model = DQN.load(model_path)
    else:
        raise ValueError(f"Unknown algorithm: {algo}")

    render_mode = "human" if render else None
    base_env = SurvivalEnv(render_mode=render_mode, **ENV_CONFIG)
    env = MultiDiscreteToDiscreteWrapper(base_env) if algo == "dqn" else base_env

    venv = DummyVecEnv([lambda: env])
    if vec_normalize_path:
        venv = VecNormalize.load(vec_normalize_path, venv)
        venv.training = False
        venv.norm_reward = False

    rewards, lengths, kills, rounds = [], [], [], []

    for episode in range(n_episodes):
        if seed is not None:
            venv.seed(seed + episode)
        obs = venv.reset()

        total_reward = 0.0
        steps = 0
        last_info = {}

        while True:
            action, _ = model.predict(obs, deterministic=True)
            obs, reward, done, info = venv.step(action)
            total_reward += float(reward[0])
            steps += 1
            last_info = info[0]

            if render and base_env._window:
                base_env._window.dispatch_events()
                base_env._window.on_draw()
                base_env._window.flip()
                time.sleep(1 / 60)

            if done[0]:
                break

        rewards.append(total_reward)
        lengths.append(steps)
        kills.append(last_info.get("enemies_killed", 0))
        rounds.append(last_info.get("round", 1))

        print(f"Episode {episode + 1}/{n_episodes}: "
              f"Reward = {total_reward:.2f}, Length = {steps}, "
              f"Kills = {kills[-1]}, Round = {rounds[-1]}")

    venv.close()
    return _summarize("Evaluation Results", rewards, lengths, kills, rounds)


def compare_with_random(n_episodes: int = 10, seed: Optional[int] = None):
    """Evaluate a random policy baseline"""
    print("Evaluating random policy baseline...")

    env = SurvivalEnv(render_mode=None, **ENV_CONFIG)
    rewards, lengths, kills, rounds = [], [], [], []

    for episode in range(n_episodes):
        obs, info = env.reset(seed=seed + episode if seed is not None else None)

        terminated = False
        truncated = False
        total_reward = 0.0
        steps = 0

        while not (terminated or truncated):
            action = env.action_space.sample()
            obs, reward, terminated, truncated, info = env.step(action)
            total_reward += reward
            steps += 1

        rewards.append(total_reward)
        lengths.append(steps)
        kills.append(info["enemies_killed"])
        rounds.append(info["round"])

    env.close()
    return _summarize("Random Policy Results", rewards, lengths, kills, rounds)


def main():
    parser = argparse.ArgumentParser(description="Evaluate trained survival agent")
    parser.add_argument("model_path", type=str, help="Path to the trained model")
    parser.add_argument(
        "--algo",
        type=str,
        default="ppo",
        choices=["ppo", "dqn"],
        help="Algorithm used to train the model (default: ppo)",
    )
    parser.add_argument("--n-episodes", type=int, default=10)
    parser.add_argument("--no-render", action="store_true", help="Disable rendering")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument(
        "--vec-normalize",
        type=str,
        default=None,
        help="Path to VecNormalize stats file (for PPO)",
    )
    parser.add_argument(
        "--compare-random",
        action="store_true",
        help="Also evaluate random policy for comparison",
    )

    args = parser.parse_args()

    results = evaluate_model(
        model_path=args.model_path,
        algo=args.algo,
        n_episodes=args.n_episodes,
        render=not args.no_render,
        seed=args.seed,
        vec_normalize_path=args.vec_normalize,
    )

    if args.compare_random:
        print("\n")
        random_results = compare_with_random(n_episodes=args.n_episodes, seed=args.seed)
        improvement = results["mean_reward"] - random_results["mean_reward"]
        print(f"\nImprovement over random: {improvement:.2f}")


if __name__ == "__main__":
    main()
