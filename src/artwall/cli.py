"""
artwall

Refresh your desktop wallpaper with public domain paintings from museum collections.

This module defines the entry point to the artwall CLI: a chained 'cli' command group. Every
subcommand invoked on the command line returns a callback; once click has parsed all of them,
process_pipeline runs the callbacks in order, passing the ArtwallPipeline object from one to the
next. If 'every' is part of the chain, the whole sequence repeats on an interval.
"""

from io import StringIO
from time import sleep

import click

from artwall import __version__
from artwall.cli_utils.console import ConsoleSurface
from artwall.cli_utils.console import console
from artwall.cli_utils.console import describe
from artwall.cli_utils.console import init_logging
from artwall.cli_utils.decorators import catch_errors
from artwall.cli_utils.utils import ArtwallPipeline
from artwall.cli_utils.utils import attach_commands
from artwall.cli_utils.utils import build_acquirer
from artwall.cli_utils.utils import import_commands
from artwall.cli_utils.utils import restore_source
from artwall.cli_utils.utils import settings_store
from artwall.config import init


@click.group(chain=True)
@click.pass_context
@click.option(
    "--quiet",
    is_flag=True,
    default=False,
    help="Silence all output printed to stdout. Errors are still reported.",
)
@click.option(
    "--verbose",
    is_flag=True,
    default=False,
    help="Log every step of the acquisition (attempts, retries, redirects).",
)
@click.version_option(version=__version__)
@catch_errors
def cli(ctx: click.Context, quiet: bool, verbose: bool):
    """
    artwall

    Fill your desktop with paintings from the Metropolitan Museum of Art and the
    Art Institute of Chicago.


    ====================
    Quickstart
    ====================

    Get a random painting and make it your wallpaper:

        $ artwall refresh desktop

    Switch to the Art Institute of Chicago (remembered for next time):

        $ artwall source artic refresh show

    New wallpaper every hour:

        $ artwall refresh desktop every 3600


    To see what's available add --help to the specified command, e.g.

        $ artwall refresh --help
    """

    config = init()
    init_logging("DEBUG" if verbose else config.LOG_LEVEL)

    # if quiet, capture everything written to stdout in a junk stream.
    if quiet:
        console.file = StringIO()

    acquirer = build_acquirer(config, surface=ConsoleSurface())
    settings = settings_store(config)
    restore_source(acquirer, settings)

    ctx.obj = ArtwallPipeline(acquirer=acquirer, settings=settings)
    return ctx.obj


@cli.result_callback()
@click.pass_obj
def process_pipeline(pipeline: ArtwallPipeline, callbacks, *args, **kwargs):
    """
    The result_callback decorator supplies this function with the return values (callbacks) of
    all invoked subcommands, in command line order. Run them once, then keep repeating while
    'every' asks for it.
    """

    def process(pipeline: ArtwallPipeline) -> ArtwallPipeline:
        for callback in callbacks:
            pipeline = callback(pipeline)
        return pipeline

    pipeline = process(pipeline)

    while pipeline.repeat:
        if pipeline.remaining is not None:
            if pipeline.remaining <= 0:
                break
            pipeline.remaining -= 1

        describe(f"Waiting {pipeline.interval}s for next action...")
        sleep(pipeline.interval)
        pipeline = process(pipeline)


attach_commands(cli, import_commands())


def main():
    cli()


if __name__ == "__main__":
    main()
