"""The command-line interface tgc."""

import logging
from typing import Optional

import click
import click_log

from .client import DEFAULT_SECTION, Client
from .exceptions import TelegrafError
from .point import Point
from .protocol import to_line
from .utils import parse_config, parse_field_value, parse_pairs

logger = logging.getLogger("telegraf_client")
logger.setLevel(logging.DEBUG)

console_formatter = click_log.ColorFormatter("%(message)s")
console_handler = click_log.ClickHandler()
console_handler.setLevel(logging.DEBUG)
console_handler.setFormatter(console_formatter)

logger.addHandler(console_handler)


def point_options(func):
    """Arguments and options shared by the commands that build a point."""
    func = click.option(
        "--timestamp", type=int, default=None, help="Timestamp in nanoseconds."
    )(func)
    func = click.option(
        "-f",
        "--field",
        "fields",
        multiple=True,
        required=True,
        help="Field key=value, e.g. usage=20.5, count=3i, ok=true or name=\"x\".",
    )(func)
    func = click.option(
        "-t", "--tag", "tags", multiple=True, help="Tag key=value, may be repeated."
    )(func)
    func = click.argument("measurement", type=str)(func)
    return func


def build_point(
    measurement: str, tags: tuple, fields: tuple, timestamp: Optional[int]
) -> Point:
    """Build a Point from the command line arguments."""
    try:
        tag_set = parse_pairs(tags)
        field_set = [
            (key, parse_field_value(value)) for key, value in parse_pairs(fields)
        ]
    except ValueError as error:
        raise click.BadParameter(str(error)) from error
    return Point(measurement, tags=tag_set, fields=field_set, timestamp=timestamp)


@click.group()
@click_log.simple_verbosity_option(logger)
@click.version_option(package_name="telegraf-client")
def tgc():
    """CLI tool for writing points to Telegraf."""
    pass


@tgc.command("encode")
@point_options
def encode(measurement: str, tags: tuple, fields: tuple, timestamp: Optional[int]):
    """
    Print MEASUREMENT with the given tags and fields as line protocol.
    """
    point = build_point(measurement, tags, fields, timestamp)
    try:
        click.echo(to_line(point))
    except TelegrafError as error:
        logger.error(str(error))
        raise SystemExit(1)


@tgc.command("send")
@click.option(
    "--address",
    default=None,
    help="Address of the socket listener, e.g. tcp://localhost:8094.",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True),
    help="Configuration file path.",
)
@click.option(
    "--section",
    default=DEFAULT_SECTION,
    show_default=True,
    help="Section of the configuration file.",
)
@click.option("--timeout", type=float, default=None, help="Socket timeout in seconds.")
@point_options
def send(
    address: Optional[str],
    config_file: Optional[str],
    section: str,
    timeout: Optional[float],
    measurement: str,
    tags: tuple,
    fields: tuple,
    timestamp: Optional[int],
):
    """
    Write MEASUREMENT with the given tags and fields to Telegraf.

    The address is given with --address or read from the configuration file.
    """
    # command line wins over the config file
    if config_file:
        try:
            config = parse_config(config_file, section)
        except KeyError as error:
            raise click.BadParameter(error.args[0], param_hint="--section") from error
        address = address or config.get("address")
        if timeout is None and config.get("timeout") is not None:
            try:
                timeout = float(config["timeout"])
            except ValueError as error:
                raise click.BadParameter(
                    f"Invalid timeout '{config['timeout']}' in [{section}].",
                    param_hint="--config",
                ) from error
    if not address:
        raise click.UsageError("No address given, use --address or --config.")

    point = build_point(measurement, tags, fields, timestamp)
    try:
        with Client(address, timeout=timeout) as client:
            client.write(point)
    except TelegrafError as error:
        logger.error(str(error))
        raise SystemExit(1)
    logger.info(f"Wrote '{point}' to {address}.")


if __name__ == "__main__":
    tgc()
