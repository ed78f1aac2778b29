"""
artwall source

This module defines the 'source' subcommand, which switches the active catalog and remembers
the choice for future runs.
"""

import click

from artwall.cli_utils.console import confirm_success
from artwall.cli_utils.decorators import callback
from artwall.cli_utils.decorators import catch_errors
from artwall.cli_utils.utils import ArtwallPipeline


@click.command(name="source")
@click.argument("source_id")
@callback
@catch_errors
def cli(pipeline: ArtwallPipeline, source_id: str):
    """
    Switch the active source, e.g. 'artwall source artic'. See 'artwall sources' for ids.
    """

    registry = pipeline.acquirer.registry
    registry.set_active(source_id)
    pipeline.settings.set({"source": source_id})

    name = next(s.display_name for s in registry.list_all() if s.id == source_id)
    confirm_success(f":classical_building-emoji:  'source' set to {name}")

    return pipeline
