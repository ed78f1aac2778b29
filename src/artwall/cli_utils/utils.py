"""
artwall CLI Utilities

This module contains utilities shared across click subcommands: the pipeline object passed
between subcommand callbacks, construction of the acquisition machinery from config, restoring
the persisted source choice, and importing subcommands from the subcommands package.
"""

import importlib
import pkgutil
from dataclasses import dataclass

import click

import artwall.subcommands
from artwall.acquisition import Acquirer
from artwall.acquisition import PresentationSurface
from artwall.acquisition import StoredImage
from artwall.cache import CatalogCache
from artwall.cli_utils.console import warn
from artwall.config import ArtwallConfig
from artwall.registry import UnknownSourceError
from artwall.registry import default_registry
from artwall.settings import SETTINGS_FILE
from artwall.settings import SettingsStore


@dataclass
class ArtwallPipeline:
    """
    Application data passed from one subcommand callback to the next. 'image' is the image the
    next command acts on; 'repeat', 'interval' and 'remaining' are set by 'every' to signal the
    callback processor that the callback sequence should run again (remaining None = forever).
    """

    acquirer: Acquirer
    settings: SettingsStore
    image: StoredImage = None
    repeat: bool = False
    interval: int = 0
    remaining: int = None


def build_acquirer(config: ArtwallConfig, surface: PresentationSurface) -> Acquirer:
    """Wire a registry, cache and acquirer according to config."""

    return Acquirer(
        registry=default_registry(config),
        storage_dir=config.ARTWALL_STORAGE_DIR,
        cache=CatalogCache(ttl=config.CACHE_TTL),
        surface=surface,
        max_retries=config.MAX_RETRIES,
        retry_delay=config.RETRY_DELAY,
        archive_limit=config.ARCHIVE_LIMIT,
        selector_options={
            "max_attempts": config.MAX_ATTEMPTS,
            "max_pages": config.MAX_PAGES,
        },
    )


def settings_store(config: ArtwallConfig) -> SettingsStore:
    return SettingsStore(config.ARTWALL_STORAGE_DIR / SETTINGS_FILE)


def restore_source(acquirer: Acquirer, settings: SettingsStore):
    """Activate the source saved in settings, if any. An unknown saved source only warns."""

    source_id = settings.get().get("source")

    if source_id is None:
        return

    try:
        acquirer.registry.set_active(source_id)

    except UnknownSourceError as error:
        warn(f"{error} Using {acquirer.registry.get_active()} instead.")


def import_commands(package=artwall.subcommands) -> list[click.Command]:
    """
    Retrieve the click Commands defined in the modules of package (default: the built in
    subcommands package).

    A valid artwall command module defines a "cli" function that is wrapped as a click Command
    object. Set the 'name' keyword argument in the @click.command decorator to set the name of
    the command the user sees.
    """

    commands = []

    for module_info in pkgutil.iter_modules(package.__path__):
        module = importlib.import_module(f"{package.__name__}.{module_info.name}")

        try:
            commands.append(getattr(module, "cli"))

        except AttributeError:
            warn(f"Cannot add command {module_info.name}: no 'cli' function found.")

    return commands


def attach_commands(group: click.Group, commands: list[click.Command]):
    """
    Attach each command in a list of click Command objects to a provided group. Useful when
    retrieving a dynamic list of subcommands with import_commands().
    """

    for command in commands:
        group.add_command(command)
