"""
Command-line interface for the liverun live-reload orchestrator.

This module parses the command line, loads the configuration, sets up
logging and runs one LiveSession, exiting with its status.
"""

import argparse
import logging
import sys
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional

from .. import __version__
from ..config import load_config
from ..models.config import DEFAULT_BUILD_TEMPLATE, DEFAULT_MARKER_PATH, DEFAULT_RUN_TEMPLATE
from ..orchestration import LiveSession
from ..validation import ValidationError, handle_cli_error

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s"

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="liverun",
        description="Watch files, rebuild and restart an executable on every change.",
    )
    parser.add_argument(
        "action",
        nargs="?",
        choices=["version"],
        help="Print the version and exit.",
    )
    parser.add_argument(
        "-w",
        "--watch",
        type=str,
        help=(
            "Comma separated paths to watch. Use the 'dir/*' form to watch "
            f"every entry of a directory. Defaults to {DEFAULT_MARKER_PATH}."
        ),
    )
    parser.add_argument(
        "-b",
        "--build",
        type=str,
        help=f"Custom build command, $1 is the artifact path. Defaults to '{DEFAULT_BUILD_TEMPLATE}'.",
    )
    parser.add_argument(
        "-r",
        "--run",
        type=str,
        help=f"Custom run command, $1 is the artifact path. Defaults to '{DEFAULT_RUN_TEMPLATE}'.",
    )
    parser.add_argument(
        "-i",
        "--redirect-input",
        action="store_true",
        default=None,
        help="Redirect input to the executable.",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Configuration file with a [liverun] table. Defaults to ./liverun.toml when present.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument("--version", action="version", version=f"liverun version {__version__}")
    return parser


def collect_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Map parsed arguments onto configuration keys."""
    return {
        "watch": args.watch,
        "build": args.build,
        "run": args.run,
        "redirect_input": args.redirect_input,
    }


def main_cli(argv: Optional[List[str]] = None) -> None:
    """
    Main command-line entry point.

    Raises:
        SystemExit: Always; 0 after a normal quit, 1 on configuration,
            startup or fatal runtime errors.
    """
    args = build_parser().parse_args(argv)

    if args.action == "version":
        print(f"liverun version {__version__}")
        sys.exit(0)

    setup_logging(args.verbose)

    try:
        config = load_config(args.config, collect_overrides(args))
    except (OSError, KeyError, tomllib.TOMLDecodeError, ValidationError) as e:
        handle_cli_error(error=e, context="configuration loading", exit_code=1, logger=logger)

    session = LiveSession(config)
    sys.exit(session.run())


if __name__ == "__main__":
    main_cli()
