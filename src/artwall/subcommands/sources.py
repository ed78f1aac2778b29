"""
artwall sources

This module defines the 'sources' subcommand, which lists the museum catalogs artwall can
fetch paintings from.
"""

import click

from artwall.cli_utils.console import describe
from artwall.cli_utils.decorators import callback
from artwall.cli_utils.utils import ArtwallPipeline


@click.command(name="sources")
@callback
def cli(pipeline: ArtwallPipeline):
    """List available sources. The active source is marked with '*'."""

    registry = pipeline.acquirer.registry

    for source in registry.list_all():
        marker = "*" if source.id == registry.get_active() else " "
        describe(f"{marker} {source.id:<8} {source.display_name}")

    return pipeline
