"""
artwall refresh

This module defines the 'refresh' subcommand, which acquires a new random painting from the
active source and stores it as the current image.
"""

import click

from artwall.cli_utils.decorators import callback
from artwall.cli_utils.decorators import catch_errors
from artwall.cli_utils.utils import ArtwallPipeline


@click.command(name="refresh")
@callback
@catch_errors
def cli(pipeline: ArtwallPipeline):
    """
    Fetch a new random painting from the active source.
    """

    # the acquirer reports progress and errors to the console itself
    image = pipeline.acquirer.refresh()

    # a failed refresh ends a one-off run, but an 'every' loop keeps going
    if image is None and not pipeline.repeat:
        raise SystemExit(1)

    pipeline.image = image or pipeline.image
    return pipeline
