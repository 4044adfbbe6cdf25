"""Main entry point for the EnrollMe application.

Handles command-line argument parsing, resolves credentials and sections
from the arguments, the environment, or a sections file, and runs the
enrollment bot.
"""

import argparse
import asyncio
import sys

from loguru import logger

from enrollme.config import Config
from enrollme.error import ConfigError
from enrollme.error import EnrollMeError
from enrollme.model import load_sections
from enrollme.model import normalize_sections


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="EnrollMe WebReg Bot")
    parser.add_argument("-u", "--username", type=str, help="UCSD SSO username.")
    parser.add_argument("-p", "--password", type=str, help="UCSD SSO password.")
    parser.add_argument(
        "-s",
        "--sections",
        nargs="+",
        default=[],
        help="Section IDs to enroll in, in the order they should be attempted.",
    )
    parser.add_argument(
        "-m",
        "--max",
        type=int,
        dest="max_enroll",
        help="Maximum number of sections to enroll in. Defaults to all of them.",
    )
    parser.add_argument(
        "--headed",
        action="store_true",
        help="Show the browser window.",
    )
    return parser


def read_argv(argv: list[str] | None = None) -> list[str]:
    """Returns the CLI arguments, or a line read from stdin when none were given."""
    if argv is None:
        argv = sys.argv[1:]
    if not argv:
        argv = sys.stdin.readline().split()
    return argv


def resolve_sections(args: argparse.Namespace, conf: Config) -> list[str]:
    if args.sections:
        return args.sections
    if conf.sections:
        return conf.sections

    try:
        return load_sections()
    except FileNotFoundError as e:
        raise ConfigError(
            "No sections given. Use --sections, ENROLL_SECTIONS, or a sections.yaml file."
        ) from e


async def main(argv: list[str] | None = None):
    """Async entry point.

    Parses arguments, initializes configuration and logging, and runs the
    enrollment bot.
    """
    args = build_parser().parse_args(read_argv(argv))

    conf = Config()
    if args.headed:
        conf.headless = False

    logger.add("log/{time}.log", rotation="1 day")

    from enrollme.module.enroll_bot import EnrollBot
    from enrollme.webreg.webreg import WebReg

    try:
        username = args.username or conf.username
        password = args.password or conf.password
        if not username or not password:
            raise ConfigError("Username and password are required (--username/--password or .env).")

        sections = normalize_sections(resolve_sections(args, conf))
        if not sections:
            raise ConfigError("No sections to enroll in.")

        cap = args.max_enroll
        if cap is None:
            cap = conf.enroll_max if conf.enroll_max is not None else len(sections)
        if cap < 1:
            raise ConfigError(f"Maximum enrollments must be positive, got {cap}.")

        await EnrollBot(WebReg(conf), conf).start(username, password, sections, cap)
    except EnrollMeError as e:
        logger.error(e)
    except Exception:
        logger.exception("An unexpected error occurred.")


def main_sync():
    """Synchronous wrapper for the async main function."""
    asyncio.run(main())


if __name__ == "__main__":
    main_sync()
