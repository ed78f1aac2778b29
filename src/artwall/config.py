"""
artwall Configuration Management

This file handles utilities related to generating and loading variables from a configuration file.
ArtwallConfig should be loaded at startup, before any command processing is done. Raise an
ArtwallConfigError for any issues that arise in processing or retrieving these configuration variables.

The configuration file is "config.json" and is saved at ~/.config/artwall/config.json unless the
ARTWALL_CONFIG_DIR environment variable points somewhere else. The storage directory (current image,
metadata, settings and archival copies) defaults to ~/.artwall.
"""

import json
import os
from dataclasses import asdict
from dataclasses import dataclass
from dataclasses import fields
from pathlib import Path, PurePath

from artwall import __version__


class ArtwallConfigError(Exception):
    """Raise when an issue occurs with handling artwall configuration."""

    pass


class PathEncoder(json.JSONEncoder):
    """
    custom encoder adds support for serializing pathlib objects as strings
    """

    def default(self, o):
        if isinstance(o, PurePath):
            return str(o)

        else:
            return json.JSONEncoder.default(self, o)


def default_config_dir() -> Path:
    """
    Return the config directory from the ARTWALL_CONFIG_DIR environment variable, or ~/.config/artwall.
    """

    try:
        return Path(os.environ["ARTWALL_CONFIG_DIR"]).expanduser()

    except KeyError:
        return Path("~/.config/artwall").expanduser().resolve()


@dataclass
class ArtwallConfig:
    """
    Dataclass to represent configuration variables for artwall. Provides a namespace and identifiers
    for directories and tunables of the acquisition pipeline.

    Instantiate an ArtwallConfig by supplying keyword arguments from a deserialized json object.
    Application code references the identifiers here without ever touching dictionary keys. Keep
    the json object flat.
    """

    ARTWALL_CONFIG_DIR: Path = Path("~/.config/artwall").expanduser().resolve()
    ARTWALL_STORAGE_DIR: Path = Path("~/.artwall").expanduser().resolve()
    DEFAULT_SOURCE: str = "met"
    REQUEST_TIMEOUT: float = 15
    MAX_RETRIES: int = 3
    RETRY_DELAY: float = 2.0
    ARCHIVE_LIMIT: int = 5
    CACHE_TTL: float = 60 * 60
    MAX_ATTEMPTS: int = 10
    MAX_PAGES: int = 10
    USER_AGENT: str = f"artwall/{__version__}"
    LOG_LEVEL: str = "WARNING"

    def __post_init__(self):
        """
        Handle the case where a new ArtwallConfig is created from JSON, which cannot
        deserialize a str into a Path.
        """

        self.ARTWALL_CONFIG_DIR = Path(self.ARTWALL_CONFIG_DIR).expanduser()
        self.ARTWALL_STORAGE_DIR = Path(self.ARTWALL_STORAGE_DIR).expanduser()

    def generate_config_json(self) -> Path:
        """
        Write the ArtwallConfig to file, serializing to JSON. Returns filepath of written
        config.json file located at ARTWALL_CONFIG_DIR.

        Warning: will overwrite any existing config file for artwall.
        """

        try:
            to_json = json.dumps(
                asdict(self), sort_keys=True, indent=4, cls=PathEncoder
            )

        except TypeError as error:
            raise ArtwallConfigError(
                f"There was an error trying to serialize config data to JSON: {error}"
            )

        try:
            self.ARTWALL_CONFIG_DIR.mkdir(parents=True, exist_ok=True)
            dest_file = self.ARTWALL_CONFIG_DIR / "config.json"
            with open(dest_file, "w") as file:
                file.write(to_json)

        except OSError as error:
            raise ArtwallConfigError(
                f"There was an error saving the configuration file: {error}."
            )

        return dest_file


def init() -> ArtwallConfig:
    """initialize artwall: load the config file, writing a default one if none can be loaded"""

    try:
        config: ArtwallConfig = load_config()

    except ArtwallConfigError:

        try:
            config = ArtwallConfig(ARTWALL_CONFIG_DIR=default_config_dir())
            config.generate_config_json()

        except ArtwallConfigError as error:
            raise ArtwallConfigError(
                f"There was an issue trying to load config file for artwall: {error}"
            )

    return config


def load_config() -> ArtwallConfig:
    """
    Load config.json from ARTWALL_CONFIG_DIR (environment) or alternatively ~/.config/artwall and
    instantiate variables as an ArtwallConfig dataclass. Raise ArtwallConfigError if a config file
    can't be found at that location or contains keys artwall does not know about.
    """

    config_src = default_config_dir() / "config.json"

    try:
        with config_src.open("r") as file:
            from_json = json.loads(file.read())

    except json.JSONDecodeError as error:
        raise ArtwallConfigError(f"There was an issue reading the config: {error}")

    except FileNotFoundError as error:
        raise ArtwallConfigError(f"There was an issue opening the config: {error}")

    if not isinstance(from_json, dict):
        raise ArtwallConfigError(f"Config at {config_src} is not a JSON object.")

    unknown = set(from_json) - {field.name for field in fields(ArtwallConfig)}
    if unknown:
        raise ArtwallConfigError(
            f"Unknown config keys in {config_src}: {', '.join(sorted(unknown))}"
        )

    return ArtwallConfig(**from_json)
