"""
artwall desktop

This module defines the 'desktop' subcommand, which sets the current image as the desktop
wallpaper.
"""

import click

from artwall.cli_utils.console import fail
from artwall.cli_utils.decorators import callback
from artwall.cli_utils.decorators import catch_errors
from artwall.cli_utils.utils import ArtwallPipeline

NO_IMAGE = "No image loaded. Did you run 'refresh' to get a painting first?"


@click.command(name="desktop")
@callback
@catch_errors
def cli(pipeline: ArtwallPipeline):
    """
    Set the current painting as your desktop wallpaper.
    """

    acquirer = pipeline.acquirer
    image = pipeline.image or acquirer.load_current()

    if image is None:
        # inside an 'every' loop a later refresh may still succeed
        if pipeline.repeat:
            fail(NO_IMAGE)
            return pipeline

        raise Exception(NO_IMAGE)

    if acquirer.set_wallpaper() is None and not pipeline.repeat:
        raise SystemExit(1)

    pipeline.image = image
    return pipeline
