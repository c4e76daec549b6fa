"""
Ship It CLI - Command-line interface for the engine and leaderboard.

Usage:
    shipit cards                          List the card catalog
    shipit simulate --games N --seed S    Play bot games and report results
    shipit serve --host H --port P        Run the leaderboard API
"""

import argparse
import logging
import os
import sys


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Ship It - Draw It, Play It, Ship It rules engine",
        prog="shipit",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Cards command
    subparsers.add_parser("cards", help="List the card catalog")

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Play bot games")
    simulate_parser.add_argument("--games", "-n", type=int, default=10, help="Number of games")
    simulate_parser.add_argument("--seed", help="Base seed; game i uses '<seed>-<i>'")
    simulate_parser.add_argument(
        "--policy", choices=["greedy", "random", "first"], default="greedy", help="Bot policy"
    )
    simulate_parser.add_argument("--max-rounds", type=int, default=100, help="Abandon games after this round")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the leaderboard API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else os.getenv("SHIPIT_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "cards":
        return cmd_cards(args)
    elif args.command == "simulate":
        return cmd_simulate(args)
    elif args.command == "serve":
        return cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_cards(args):
    """Print every card with its deck count, costs and effects."""
    from .cards import CARD_CATALOG, DECK_COMPOSITION
    from .cards.models import CoinFlipEffect

    for card in CARD_CATALOG:
        costs = ", ".join(f"{r.type.value} {r.value}" for r in card.requirements) or "free"
        effects = []
        for effect in card.effects:
            if isinstance(effect, CoinFlipEffect):
                effects.append(f"{effect.type.value} {effect.heads_value}/{effect.tails_value} (coin)")
            else:
                effects.append(f"{effect.type.value} {effect.value}")
        count = DECK_COMPOSITION.get(card.id, 0)
        print(f"{card.title} [{card.id}] x{count}")
        print(f"  costs:   {costs}")
        print(f"  effects: {', '.join(effects)}")

    print(f"\n{len(CARD_CATALOG)} designs, {sum(DECK_COMPOSITION.values())} cards per deck")
    return 0


def cmd_simulate(args):
    """Play bot games and summarize the results."""
    from .bots import POLICIES, run_bot_game
    from .engine_core import GameConfig

    if args.games < 1:
        print("Error: --games must be at least 1")
        sys.exit(1)

    results = []
    for i in range(args.games):
        seed = f"{args.seed}-{i}" if args.seed else None
        policy_cls = POLICIES[args.policy]
        policy = policy_cls(seed) if args.policy == "random" else policy_cls()
        result = run_bot_game(policy, GameConfig(seed=seed), max_rounds=args.max_rounds)
        results.append(result)

        summary = result.summary
        status = "abandoned" if result.abandoned else summary.end_state.value
        print(f"Game {i + 1}: {status} in {summary.rounds} rounds, score {summary.score}")

    wins = [r for r in results if r.won]
    print(f"\nPolicy: {args.policy}")
    print(f"Win rate: {len(wins)}/{len(results)} ({100 * len(wins) / len(results):.0f}%)")
    print(f"Average rounds: {sum(r.summary.rounds for r in results) / len(results):.1f}")
    if wins:
        print(f"Average winning score: {sum(r.summary.score for r in wins) / len(wins):.1f}")
    return 0


def cmd_serve(args):
    """Run the leaderboard API with uvicorn."""
    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn not installed. Install with: pip install uvicorn")
        sys.exit(1)

    uvicorn.run("shipit.api.app:app", host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
