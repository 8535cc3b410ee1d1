#!/usr/bin/env python3
"""Play AddiKul in the console against a random opponent, with optional logging & replay."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np
import yaml

from addikul import AddiKulEnv, Player, RulesConfig
from addikul.core import Action, player_to_token

logger = logging.getLogger("addikul.console")


def load_yaml_config(path_str: Optional[str]) -> Dict:
    if not path_str:
        return {}
    path = Path(path_str)
    if not path.exists():
        logger.warning("Config %s not found, using defaults", path)
        return {}
    return yaml.safe_load(path.read_text(encoding="utf-8")) or {}


def build_rules_config(cfg: Dict) -> RulesConfig:
    return RulesConfig.from_dict(cfg.get("rules"))


def select_random_action(env: AddiKulEnv, rng: np.random.Generator) -> Action:
    legal = env.get_legal_actions()
    return legal[int(rng.integers(len(legal)))]


def prompt_human_move(env: AddiKulEnv) -> str:
    legal = sorted(env.to_console_string(action) for action in env.get_legal_actions())
    print("Legal moves: " + " ".join(legal))
    while True:
        raw = input("Your move (e.g. c3c4, q to quit): ").strip()
        if raw.lower() in {"q", "quit", "exit"}:
            print("Bye.")
            sys.exit(0)
        if env.is_legal_action(raw):
            return raw
        print("Illegal move, try again.")


def save_log(log: Dict, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(log, indent=2))
    print(f"Game log saved to {path}.")


def replay_logged_game(
    log_path: Path,
    *,
    config: Optional[RulesConfig] = None,
    verbose: bool = True,
) -> Dict[str, object]:
    data = json.loads(log_path.read_text())
    moves = data.get("moves", [])
    # rules recorded with the game win over the caller's fallback
    logged_rules = data.get("metadata", {}).get("rules")
    if logged_rules:
        rules = RulesConfig.from_dict(logged_rules)
    else:
        rules = config or RulesConfig()
    env = AddiKulEnv(rules)
    if verbose:
        print(env.to_string())
    for entry in moves:
        tokens = [entry["player"], entry["move"]]
        if not env.act(tokens):
            raise ValueError(f"Logged move {entry.get('move_index')} ({' '.join(tokens)}) was rejected.")
        if verbose:
            print(f"{entry.get('actor', 'unknown')} ({entry['player']}): {entry['move']}")
            print(env.to_string())
    outcome = env.outcome()
    summary = {
        "result": env.get_eval_score() if outcome.terminal else None,
        "reason": outcome.reason.value,
        "moves": len(moves),
        "board": env.state.board.tolist(),
    }
    if verbose:
        print(f"Result: {summary['result']} ({summary['reason']})")
    return summary


def play_interactive(args: argparse.Namespace) -> None:
    cfg = load_yaml_config(args.config)
    rules = build_rules_config(cfg)
    rng = np.random.default_rng(args.seed if args.seed is not None else cfg.get("seed"))
    env = AddiKulEnv(rules)
    human = Player.FIRST if args.human == "B" else Player.SECOND
    log_records: List[Dict] = []

    while not env.is_terminal():
        print(env.to_string())
        mover = env.turn
        if mover == human:
            move = prompt_human_move(env)
            actor = "human"
            env.act(move)
            move_text = env.to_console_string(env.actions[-1])
        else:
            action = select_random_action(env, rng)
            actor = "random"
            env.act(action)
            move_text = env.to_console_string(action)
            print(f"Random ({player_to_token(mover)}) plays {move_text}")
        log_records.append(
            {
                "move_index": len(log_records),
                "actor": actor,
                "player": player_to_token(mover),
                "move": move_text,
            }
        )

    print(env.to_string())
    score = env.get_eval_score()
    if score > 0:
        print("Black (O) wins!")
    elif score < 0:
        print("White (X) wins!")
    else:
        print("Draw.")

    if args.log_file:
        metadata = {
            "human": args.human,
            "rules": cfg.get("rules", {}),
            "result": score,
            "reason": env.outcome().reason.value,
        }
        save_log({"metadata": metadata, "moves": log_records}, Path(args.log_file))


def main() -> None:
    parser = argparse.ArgumentParser(description="Play AddiKul in the console against a random opponent.")
    parser.add_argument("--config", type=str, default="configs/default.yaml")
    parser.add_argument("--human", choices=["B", "W"], default="B")
    parser.add_argument("--seed", type=int)
    parser.add_argument("--log-file", type=str)
    parser.add_argument("--replay-log", type=str, help="Replay a logged game and exit")
    parser.add_argument("--replay-quiet", action="store_true")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.replay_log:
        rules = build_rules_config(load_yaml_config(args.config))
        replay_logged_game(Path(args.replay_log), config=rules, verbose=not args.replay_quiet)
        return

    play_interactive(args)


if __name__ == "__main__":
    main()
