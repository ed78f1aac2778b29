"""
artwall every

This module defines the "every" command, which repeats the chained subcommands on an
interval. The most common use is a fresh wallpaper on a regular period:

    $ artwall refresh desktop every 3600

Chained commands don't accept options after their arguments, so --times goes before INTERVAL:

    $ artwall refresh desktop every --times 8 3600
"""

import click

from artwall.cli_utils.utils import ArtwallPipeline


@click.command(name="every")
@click.option(
    "--times",
    type=click.IntRange(min=1),
    default=None,
    help="Stop after repeating this many times (default: repeat forever). Goes before INTERVAL.",
)
@click.argument("interval", type=click.IntRange(min=1))
@click.pass_obj
def cli(pipeline: ArtwallPipeline, times: int, interval: int):
    """Repeat this action every INTERVAL seconds."""

    # set up the loop as soon as the command line is parsed, so that commands chained
    # before 'every' already know they are part of a repeating run
    pipeline.repeat = True
    pipeline.interval = interval
    pipeline.remaining = times

    def wrapper(pipeline: ArtwallPipeline):
        return pipeline

    return wrapper
