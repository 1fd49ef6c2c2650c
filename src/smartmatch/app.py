"""
CLI entrypoint for trying the matcher from a terminal.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import Config
from .logging_utils import log_error, setup_logger
from .matcher import TextMatcher


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Argument list, defaults to sys.argv[1:]

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="smartmatch",
        description="smartmatch - Typo and accent tolerant matching for food search",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s normalize "Crêpe au chocolat"
  %(prog)s variations tajine
  %(prog)s similar burguer burger
  %(prog)s best-match pizza PIZZA pizzza burger
  %(prog)s --config custom.json rank chiken "chicken wings" chicken
        """,
    )

    parser.add_argument(
        "--config", type=str, help="Path to configuration file (JSON format)"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Set logging level (default: from config, ERROR)",
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    normalize_parser = subparsers.add_parser("normalize", help="Print normalized forms")
    normalize_parser.add_argument("texts", nargs="+", help="Texts to normalize")

    variations_parser = subparsers.add_parser(
        "variations", help="Print search variations of a query"
    )
    variations_parser.add_argument("query", help="Search query")

    similar_parser = subparsers.add_parser("similar", help="Compare two texts")
    similar_parser.add_argument("first", help="First text")
    similar_parser.add_argument("second", help="Second text")

    best_parser = subparsers.add_parser(
        "best-match", help="Pick the candidate closest to a query"
    )
    best_parser.add_argument("query", help="Search query")
    best_parser.add_argument("candidates", nargs="+", help="Candidate texts")

    rank_parser = subparsers.add_parser("rank", help="Rank candidates by similarity")
    rank_parser.add_argument("query", help="Search query")
    rank_parser.add_argument("candidates", nargs="+", help="Candidate texts")
    rank_parser.add_argument(
        "--limit", type=int, default=None, help="Maximum number of results"
    )

    return parser.parse_args(argv)


def load_config(config_path: Optional[str] = None) -> Config:
    """Load configuration from file or use defaults.

    Args:
        config_path: Optional path to configuration file

    Returns:
        Configuration object

    Raises:
        RuntimeError: If config file cannot be loaded
    """
    if config_path:
        try:
            config_file = Path(config_path)
            if not config_file.exists():
                raise FileNotFoundError(f"Config file not found: {config_path}")

            with open(config_file, "r", encoding="utf-8") as f:
                config_data = json.load(f)

            return Config(**config_data)

        except Exception as e:
            raise RuntimeError(f"Failed to load config from {config_path}: {e}") from e

    return Config()


def run_command(args: argparse.Namespace, matcher: TextMatcher) -> int:
    """Execute the selected subcommand and print its result.

    Returns:
        Exit code (0 for success, 1 when best-match finds nothing)
    """
    if args.command == "normalize":
        for text in args.texts:
            print(matcher.normalize(text))
        return 0

    if args.command == "variations":
        for variation in matcher.generate_variations(args.query):
            print(variation)
        return 0

    if args.command == "similar":
        similar = matcher.is_similar(args.first, args.second)
        score = matcher.similarity(args.first, args.second)
        print(f"{str(similar).lower()}\t{score:.3f}")
        return 0

    if args.command == "best-match":
        match = matcher.find_best_match(args.query, args.candidates)
        if match is None:
            print("no match", file=sys.stderr)
            return 1
        print(match)
        return 0

    if args.command == "rank":
        for candidate, score in matcher.rank_matches(
            args.query, args.candidates, args.limit
        ):
            print(f"{score:.3f}\t{candidate}")
        return 0

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point.

    Returns:
        Exit code (0 for success, 1 for error or no match)
    """
    try:
        args = parse_arguments(argv)

        config = load_config(args.config)
        if args.log_level:
            config.log_level = args.log_level

        logger = setup_logger(config)
        logger.info(f"Running command: {args.command}")

        return run_command(args, TextMatcher(config))

    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 1

    except Exception as e:
        print(f"Error: {str(e)}", file=sys.stderr)

        try:
            log_error("Command failed", e)
        except Exception:
            pass  # Ignore logging errors during shutdown

        return 1


if __name__ == "__main__":
    sys.exit(main())
