"""Command-line flags for configuring the log level and format."""

from __future__ import annotations

import argparse
from collections.abc import Callable
from typing import Union

from .promlog import AllowedFormat, AllowedLevel, Config

__all__ = [
    "LEVEL_FLAG_NAME",
    "LEVEL_FLAG_HELP",
    "FORMAT_FLAG_NAME",
    "FORMAT_FLAG_HELP",
    "add_flags",
]

LEVEL_FLAG_NAME = "log.level"
LEVEL_FLAG_HELP = (
    "Only log messages with the given severity or above. "
    "One of: [debug, info, warn, error]"
)
FORMAT_FLAG_NAME = "log.format"
FORMAT_FLAG_HELP = "Output format of log messages. One of: [logfmt, json]"


def _setter(
    target: Union[AllowedLevel, AllowedFormat],
) -> Callable[[str], Union[AllowedLevel, AllowedFormat]]:
    def convert(text: str) -> Union[AllowedLevel, AllowedFormat]:
        try:
            target.set(text)
        except ValueError as err:
            raise argparse.ArgumentTypeError(str(err)) from err
        return target

    return convert


def add_flags(parser: argparse.ArgumentParser, config: Config) -> None:
    """Add --log.level and --log.format to parser, storing into config."""
    config.level = AllowedLevel("info")
    parser.add_argument(
        f"--{LEVEL_FLAG_NAME}",
        dest=LEVEL_FLAG_NAME,
        default=config.level,
        type=_setter(config.level),
        metavar="LEVEL",
        help=LEVEL_FLAG_HELP,
    )
    config.format = AllowedFormat("logfmt")
    parser.add_argument(
        f"--{FORMAT_FLAG_NAME}",
        dest=FORMAT_FLAG_NAME,
        default=config.format,
        type=_setter(config.format),
        metavar="FORMAT",
        help=FORMAT_FLAG_HELP,
    )