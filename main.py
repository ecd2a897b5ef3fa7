"""Command-line entry point for the eternal garden.

Each invocation is one observation of the garden: it loads the save file,
catches the garden up to now, applies the requested action and saves.
"""

import argparse
import logging
import random
import sys
from datetime import datetime, timezone

from garden import GardenConfig, GardenError, GardenStore, Position
from garden.config.store import DEFAULT_SAVE_FILE
from garden.genetics import describe_genetics
from garden.logging_config import CLI_FORMAT, configure_logging
from garden.storage import JsonFileRepository
from garden.util.clock import ManualClock, SystemClock

logger = logging.getLogger(__name__)

SEPARATOR_WIDTH = 60


def _parse_now(raw: str) -> datetime:
    try:
        moment = datetime.fromisoformat(raw)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"not an ISO 8601 timestamp: {raw!r}") from e
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Eternal Garden - a garden that keeps growing while you are away",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Create a garden (or show the existing one)
  python main.py init

  # Plant the starter seed in the corner of the plot
  python main.py plant seed-1a2b3c4d5e6f 0 0

  # See how things look a week from now
  python main.py --now 2030-01-08T12:00:00 status
        """,
    )
    parser.add_argument(
        "--save-file",
        default=str(DEFAULT_SAVE_FILE),
        help=f"Garden save file (default: {DEFAULT_SAVE_FILE})",
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Random seed for deterministic behavior (optional)"
    )
    parser.add_argument(
        "--now",
        type=_parse_now,
        default=None,
        metavar="TIMESTAMP",
        help="Observe the garden at this ISO 8601 time instead of the wall clock",
    )
    parser.add_argument("--log-level", default=None, help="Log level (default: GARDEN_LOG_LEVEL or INFO)")

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("init", help="Create a new garden if none exists")
    commands.add_parser("status", help="Show the garden")
    commands.add_parser("seeds", help="List seeds in the inventory")

    plant = commands.add_parser("plant", help="Plant a seed")
    plant.add_argument("seed_id")
    plant.add_argument("x", type=int)
    plant.add_argument("y", type=int)
    plant.add_argument("--name", default=None)

    water = commands.add_parser("water", help="Water a plant")
    water.add_argument("plant_id")
    water.add_argument("--amount", type=float, default=None)

    fertilize = commands.add_parser("fertilize", help="Fertilize a plant")
    fertilize.add_argument("plant_id")

    cross = commands.add_parser("cross", help="Cross-breed two mature plants")
    cross.add_argument("parent1_id")
    cross.add_argument("parent2_id")

    harvest = commands.add_parser("harvest", help="Harvest a mature plant")
    harvest.add_argument("plant_id")

    details = commands.add_parser("details", help="Show one plant")
    details.add_argument("plant_id")

    memories = commands.add_parser("memories", help="Show the garden journal")
    memories.add_argument("--type", dest="memory_type", default=None)
    memories.add_argument("--limit", type=int, default=10)

    return parser


def run_command(store: GardenStore, args: argparse.Namespace) -> None:
    """Dispatch one parsed command against ``store``."""
    if args.command == "init":
        garden = store.initialize()
        logger.info("Garden %s (%s), %d seed(s) in inventory", garden.name, garden.id, len(garden.resources.seeds))
    elif args.command == "status":
        status = store.get_status()
        logger.info("=" * SEPARATOR_WIDTH)
        logger.info("%s - %s", status.garden.name, status.season.value)
        logger.info("Skill level %d (%s)", status.skill_level, status.skill_tier)
        logger.info(
            "Water %.0f, fertilizer %d, %d seed(s)",
            status.garden.resources.water,
            status.garden.resources.fertilizer,
            len(status.garden.resources.seeds),
        )
        logger.info("%d plant(s)", status.plant_count)
        for plant in status.garden.plants:
            logger.info(
                "  %s %-24s %-7s progress %.2f water %5.1f health %5.1f",
                plant.id,
                plant.name,
                plant.stage.label,
                plant.growth_progress,
                plant.water_level,
                plant.health,
            )
        logger.info("=" * SEPARATOR_WIDTH)
    elif args.command == "seeds":
        for seed in store.get_seeds():
            logger.info("%s %s (%s): %s", seed.id, seed.species, seed.rarity.value, describe_genetics(seed.genetics))
    elif args.command == "plant":
        result = store.plant_seed(args.seed_id, Position(args.x, args.y), name=args.name)
        logger.info("Planted %s as %s (+%d XP)", result.value.name, result.value.id, result.skill_gain.xp_gained)
    elif args.command == "water":
        result = store.water_plant(args.plant_id, args.amount)
        logger.info("Water level now %.1f (+%d XP)", result.value.water_level, result.skill_gain.xp_gained)
    elif args.command == "fertilize":
        result = store.fertilize_plant(args.plant_id)
        logger.info("Health now %.1f (+%d XP)", result.value.health, result.skill_gain.xp_gained)
    elif args.command == "cross":
        result = store.cross_breed(args.parent1_id, args.parent2_id)
        seed = result.value
        logger.info("New seed %s: %s (%s)", seed.id, seed.species, seed.rarity.value)
        logger.info("  %s", describe_genetics(seed.genetics))
    elif args.command == "harvest":
        result = store.harvest(args.plant_id)
        logger.info("Harvested; kept seed %s (%s)", result.value.id, result.value.species)
    elif args.command == "details":
        details = store.get_plant_details(args.plant_id)
        logger.info("%s (%s), %d day(s) old", details.plant.name, details.plant.stage.label, details.age_days)
        logger.info("  %s", details.genetic_description)
        logger.info("  %s%s", details.condition, ", needs water" if details.needs_water else "")
    elif args.command == "memories":
        for memory in store.get_memories(args.memory_type, args.limit):
            logger.info("%s [%s] %s", memory.occurred_at.isoformat(), memory.type.value, memory.description)


def main(argv=None) -> int:
    """Parse command-line arguments and run one garden command."""
    args = build_parser().parse_args(argv)

    try:
        configure_logging(level=args.log_level, format=CLI_FORMAT, extra_loggers=[__name__])
        store = GardenStore(
            JsonFileRepository(args.save_file),
            clock=ManualClock(args.now) if args.now else SystemClock(),
            rng=random.Random(args.seed),
            config=GardenConfig.from_env(),
        )
        run_command(store, args)
    except GardenError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
