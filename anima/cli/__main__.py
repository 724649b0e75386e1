"""
Anima CLI - drive the entity evolution engine from the command line.

Usage:
    anima simulate SCRIPT [--entity ID] [--seed N] [--json] [--dump]
    anima interact MESSAGE [--response TEXT] [--emotion E] [--intensity X]
                   [--valence X] [--arousal X] [--dominance X] [--json]
"""

import argparse
import logging
import sys

from pydantic import ValidationError

from anima.cli.commands import cmd_interact, cmd_simulate
from anima.config import get_settings
from anima.engine import EvolutionEngine
from anima.logging_config import setup_anima_logging
from anima.protocols import AnimaError

# Set up logging
logging.basicConfig(level=logging.WARNING)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="anima",
        description="Evolve living-token personalities from interactions",
    )
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log engine decisions to the console and log file")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # simulate
    p_simulate = subparsers.add_parser("simulate", help="Replay a JSON-lines interaction script")
    p_simulate.add_argument("script", help="Path to the script (one interaction per line)")
    p_simulate.add_argument("--entity", "-e", help="Entity ID (random when omitted)")
    p_simulate.add_argument("--seed", type=int, help="Seed for harmonic drift")
    p_simulate.add_argument("--json", "-j", action="store_true")
    p_simulate.add_argument("--dump", action="store_true",
                            help="Print the final entity state")

    # interact
    p_interact = subparsers.add_parser("interact", help="Run one interaction on a fresh entity")
    p_interact.add_argument("message", help="User message")
    p_interact.add_argument("--response", "-r", help="Entity reply text")
    p_interact.add_argument("--emotion", default="neutral", help="Primary emotion label")
    p_interact.add_argument("--intensity", type=float, default=0.5)
    p_interact.add_argument("--valence", type=float, default=0.0)
    p_interact.add_argument("--arousal", type=float, default=0.5)
    p_interact.add_argument("--dominance", type=float, default=0.5)
    p_interact.add_argument("--json", "-j", action="store_true")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = get_settings()
        setup_anima_logging(
            getattr(args, "entity", None) or "default",
            "DEBUG" if args.verbose else settings.log_level,
        )

        seed = getattr(args, "seed", None)
        if seed is not None:
            engine = EvolutionEngine.seeded(seed, settings=settings)
        else:
            engine = EvolutionEngine(settings=settings)

        if args.command == "simulate":
            cmd_simulate(args, engine)
        elif args.command == "interact":
            cmd_interact(args, engine)
    except (AnimaError, ValidationError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
