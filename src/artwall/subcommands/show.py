"""
artwall show

This module defines the 'show' subcommand, which describes the current painting and opens it
with the default image viewer of the OS.
"""

import click

from artwall.cli_utils.console import describe
from artwall.cli_utils.decorators import callback
from artwall.cli_utils.decorators import catch_errors
from artwall.cli_utils.utils import ArtwallPipeline


@click.command(name="show")
@click.option(
    "--launch/--no-launch",
    default=True,
    show_default=True,
    help="Open the image in the default image viewer.",
)
@callback
@catch_errors
def cli(pipeline: ArtwallPipeline, launch: bool):
    """Show the current painting."""

    image = pipeline.image or pipeline.acquirer.load_current()

    if image is None:
        raise Exception("No image loaded. Did you run 'refresh' to get a painting first?")

    describe(f":framed_picture-emoji:  [bold]{image.title}[/] by {image.author}")
    describe(f"{image.file_path}")

    if launch:
        click.launch(str(image.file_path))

    pipeline.image = image
    return pipeline
