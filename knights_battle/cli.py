"""Command-line interface for the Knight's Battle forge simulator."""
import argparse
import json
import sys
from typing import Optional

from .config import MAX_LEVEL
from .simulator import (
    EnhancementStrategy,
    ForgeSimulator,
    ScrollStrategy,
    battle_odds_table,
)
from .tiers import element_curve, weapon_curve
from .utils import format_gold, format_percent


# Predefined strategy presets
STRATEGY_PRESETS = {
    "no_scroll": EnhancementStrategy(
        scrolls=ScrollStrategy.NEVER,
    ),
    "scroll_always": EnhancementStrategy(
        scrolls=ScrollStrategy.ALWAYS,
    ),
    "scroll_from_10": EnhancementStrategy(
        scrolls=ScrollStrategy.FROM_LEVEL,
        scroll_from=10,
    ),
    "scroll_from_15": EnhancementStrategy(
        scrolls=ScrollStrategy.FROM_LEVEL,
        scroll_from=15,
    ),
    "top_winner": EnhancementStrategy(
        scrolls=ScrollStrategy.FROM_LEVEL,
        scroll_from=10,
        is_top_winner=True,
    ),
}

BATTLE_ODDS_LEVELS = [0, 2, 4, 6, 8, 10, 12, 14, 16, 18, 20]


def print_results(stats: dict) -> None:
    """Pretty print simulation results."""
    print("\n" + "=" * 60)
    print("  Knight's Battle Forge Simulation Results")
    print("=" * 60)

    print(f"\nTarget: +{stats['start_level']} -> +{stats['target_level']}")
    print(f"Simulations: {stats['num_simulations']:,} ({stats['reached']:,} reached the target)")
    strategy = stats["strategy"]
    print(f"Strategy: scrolls={strategy['scrolls']}, scroll_from=+{strategy['scroll_from']}, "
          f"top_winner={strategy['is_top_winner']}")

    print("\n" + "-" * 60)
    print("  ATTEMPTS REQUIRED")
    print("-" * 60)
    print(f"  Average:    {stats['attempts']['average']:.1f}")
    print(f"  Median:     {stats['attempts']['p50']:.0f}")
    print(f"  P90:        {stats['attempts']['p90']:.0f}")
    print(f"  P99:        {stats['attempts']['p99']:.0f}")
    print(f"  Worst:      {stats['attempts']['worst']:.0f}")

    print("\n" + "-" * 60)
    print("  GOLD COST (after refunds, scrolls at shop price)")
    print("-" * 60)
    print(f"  Average:    {format_gold(int(stats['gold']['average']))}")
    print(f"  Median:     {format_gold(stats['gold']['p50'])}")
    print(f"  P90:        {format_gold(stats['gold']['p90'])}")
    print(f"  P99:        {format_gold(stats['gold']['p99'])}")
    print(f"  Worst:      {format_gold(stats['gold']['worst'])}")

    print("\n" + "-" * 60)
    print("  DESTROYS, SCROLLS & BLESSINGS")
    print("-" * 60)
    print("  Destroys:")
    print(f"    Average:  {stats['destroys']['average']:.2f}")
    print(f"    P90:      {stats['destroys']['p90']:.0f}")
    print(f"    Worst:    {stats['destroys']['worst']:.0f}")
    print("  Scrolls used:")
    print(f"    Average:  {stats['scrolls']['average']:.1f}")
    print(f"    P90:      {stats['scrolls']['p90']:.0f}")
    print(f"    Worst:    {stats['scrolls']['worst']:.0f}")
    print("  Lucky Goddess blessings:")
    print(f"    Average:  {stats['blessings']['average']:.2f}")
    print(f"    P90:      {stats['blessings']['p90']:.0f}")

    print("\n" + "=" * 60)


def print_enhancement_table(element: bool = False) -> None:
    """Print the cost and odds table for the weapon (or element) track."""
    curve = element_curve() if element else weapon_curve()
    title = "Element Enhancement Rates" if element else "Weapon Enhancement Rates"

    print("\n" + "=" * 60)
    print(f"  {title}")
    print("=" * 60)
    print(f"{'Level':<10} {'Cost':<12} {'Success':<10} {'Maintain':<10} {'Destroy':<10}")
    print("-" * 60)

    for level, config in curve:
        step = f"+{level} -> +{level + 1}"
        print(
            f"{step:<10} {format_gold(config.cost):<12} "
            f"{format_percent(config.success_chance):<10} "
            f"{format_percent(config.maintain_chance):<10} "
            f"{format_percent(config.destroy_chance):<10}"
        )

    print("=" * 60)
    if element:
        print("Note: a destroyed element keeps its kind and drops to +0")
    else:
        print("Note: scrolls add +20% success, destroy refunds 20% of gold invested")
    print()


def print_battle_odds() -> None:
    """Print win chances for Sword vs Sword across level pairs."""
    table = battle_odds_table(BATTLE_ODDS_LEVELS)

    print("\n" + "=" * 70)
    print("  Battle Win Chance (Sword vs Sword, no elements)")
    print("=" * 70)
    print("me \\ foe " + "".join(f"{'+' + str(level):>6}" for level in BATTLE_ODDS_LEVELS))
    print("-" * 70)
    for my_level, row in table.items():
        cells = "".join(f"{row[level] * 100:>5.0f}%" for level in BATTLE_ODDS_LEVELS)
        print(f"{'+' + str(my_level):<9}{cells}")
    print("=" * 70)
    print()


def compare_strategies(
    target: int,
    num_simulations: int,
    seed: Optional[int] = None,
    start_level: int = 0,
) -> dict:
    """Compare the strategy presets on the same target."""
    simulator = ForgeSimulator(seed=seed)

    print("\n" + "=" * 70)
    print(f"  Strategy Comparison: +{start_level} -> +{target}")
    print(f"  Simulations per strategy: {num_simulations:,}")
    print("=" * 70)

    results = {}
    for name, strategy in STRATEGY_PRESETS.items():
        print(f"  Running '{name}'...", end="", flush=True)
        results[name] = simulator.run_monte_carlo(
            target_level=target,
            strategy=strategy,
            num_simulations=num_simulations,
            start_level=start_level,
        )
        print(" done")

    print("\n" + "-" * 70)
    print(f"{'Strategy':<18} {'Avg Gold':<12} {'P50 Gold':<12} {'P90 Gold':<12} {'Destroys':<10}")
    print("-" * 70)

    sorted_results = sorted(results.items(), key=lambda x: x[1]["gold"]["average"])

    for name, stats in sorted_results:
        avg = format_gold(int(stats["gold"]["average"]))
        p50 = format_gold(stats["gold"]["p50"])
        p90 = format_gold(stats["gold"]["p90"])
        destroys = f"{stats['destroys']['average']:.2f}"
        print(f"{name:<18} {avg:<12} {p50:<12} {p90:<12} {destroys:<10}")

    print("-" * 70)
    print(f"\nBest strategy by average gold: {sorted_results[0][0]}")
    print()
    return results


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Knight's Battle Forge Simulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --target 10                   # Simulate +0 to +10 with default strategy
  %(prog)s --target 20 --strategy scroll_from_15
  %(prog)s --compare --target 15         # Compare all strategies
  %(prog)s --show-rates                  # Show weapon rate table
  %(prog)s --show-rates --element        # Show element rate table
  %(prog)s --battle-odds                 # Show win chance by level

Strategy presets:
  no_scroll       Never use scrolls
  scroll_always   Use a scroll on every attempt
  scroll_from_10  Use scrolls at +10 and above
  scroll_from_15  Use scrolls at +15 and above
  top_winner      scroll_from_10 while holding first place (rank penalty)
        """,
    )

    parser.add_argument(
        "--target", "-t",
        type=int,
        default=10,
        help=f"Target weapon level (1-{MAX_LEVEL}, default: 10)",
    )
    parser.add_argument(
        "--simulations", "-n",
        type=int,
        default=10_000,
        help="Number of simulations (default: 10000)",
    )
    parser.add_argument(
        "--strategy", "-s",
        choices=list(STRATEGY_PRESETS.keys()),
        default="no_scroll",
        help="Enhancement strategy preset",
    )
    parser.add_argument(
        "--compare", "-c",
        action="store_true",
        help="Compare all strategy presets",
    )
    parser.add_argument(
        "--show-rates",
        action="store_true",
        help="Show enhancement cost and odds table",
    )
    parser.add_argument(
        "--element",
        action="store_true",
        help="With --show-rates, show the element table instead",
    )
    parser.add_argument(
        "--battle-odds",
        action="store_true",
        help="Show battle win chance by level",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for reproducibility",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output results as JSON",
    )
    parser.add_argument(
        "--start-level",
        type=int,
        default=0,
        help="Starting weapon level (default: 0)",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    if args.show_rates:
        print_enhancement_table(element=args.element)
        return

    if args.battle_odds:
        if args.json:
            print(json.dumps(battle_odds_table(BATTLE_ODDS_LEVELS), indent=2))
        else:
            print_battle_odds()
        return

    if args.target < 1 or args.target > MAX_LEVEL:
        print(f"Error: Target must be between 1 and {MAX_LEVEL}", file=sys.stderr)
        sys.exit(1)
    if args.start_level < 0 or args.start_level >= args.target:
        print("Error: Start level must be below the target", file=sys.stderr)
        sys.exit(1)

    if args.compare:
        compare_strategies(args.target, args.simulations, args.seed, args.start_level)
        return

    # Run single strategy simulation
    simulator = ForgeSimulator(seed=args.seed)
    strategy = STRATEGY_PRESETS[args.strategy]

    if not args.json:
        print(f"Running {args.simulations:,} simulations...")
    stats = simulator.run_monte_carlo(
        target_level=args.target,
        strategy=strategy,
        num_simulations=args.simulations,
        start_level=args.start_level,
    )

    if args.json:
        print(json.dumps(stats, indent=2))
    else:
        print_results(stats)


if __name__ == "__main__":
    main()
