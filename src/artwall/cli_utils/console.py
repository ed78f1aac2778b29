"""
artwall console utilities

This module provides application-wide access to Rich Console objects for writing to stdout and
stderr, the logging setup (log records are rendered by rich on the error console), and
ConsoleSurface, the presentation surface used by the CLI.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

from artwall.acquisition import PresentationSurface

artwall_theme = Theme(
    {"warning": "orange_red1", "fail": "bold red", "confirm": "", "describe": ""}
)

console = Console(theme=artwall_theme)
error_console = Console(theme=artwall_theme, stderr=True)


"""
Formatting helpers
"""


def warn(msg: str):
    """
    Format msg and print to stderr.
    """

    error_console.print(
        f":exclamation_mark-emoji: [bold]warning: [/] {msg}", style="warning"
    )


def describe(msg: str, **kwargs):
    """
    Format descriptive msg and print to stdout.
    """

    console.print(f"{msg}", style="describe", **kwargs)


def confirm_success(msg: str, **kwargs):
    """
    Format confirmation msg and print to stdout. Accept any additional kwargs that console.print from
    rich module exposes.
    """

    console.print(f"{msg}", style="confirm", **kwargs)


def fail(msg: str):
    """
    Format failure msg and print to stderr.
    """

    error_console.print(f":x-emoji: failed. {msg}", style="fail")


def init_logging(level: str = "WARNING"):
    """
    Route records of the 'artwall' logger through rich on the error console. Safe to call more
    than once; the previous handler is replaced.
    """

    logger = logging.getLogger("artwall")

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(console=error_console, show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    logger.propagate = False


class ConsoleSurface(PresentationSurface):
    """
    Show acquisition progress on the terminal. While loading, a rich spinner animates on its own
    refresh thread so the terminal stays alive during downloads and retry backoff.
    """

    def __init__(self, status_message: str = "Finding a painting..."):
        self.status_message = status_message
        self._status = None

    def loading(self, is_loading: bool):
        if is_loading and self._status is None:
            self._status = console.status(self.status_message)
            self._status.start()

        elif not is_loading and self._status is not None:
            self._status.stop()
            self._status = None

    def image_ready(self, image, title: str, author: str):
        confirm_success(f":framed_picture-emoji:  [bold]{title}[/] by {author}")
        describe(f":floppy_disk-emoji: saved to {image}")

    def wallpaper_set(self, success: bool):
        if success:
            confirm_success(":white_check_mark-emoji: 'desktop' updated wallpaper")

    def error(self, message: str):
        fail(message)
