"""
Desktop Wallpaper Handler

This module sets the desktop background by shelling out to the tools each platform provides:

    darwin   osascript (System Events, every desktop)
    win32    PowerShell calling SystemParametersInfo from user32.dll
    linux    gsettings / qdbus / xfconf-query depending on XDG_CURRENT_DESKTOP, with feh as
             the catch-all and nitrogen as a last resort when the first command fails

Settings for Gnome desktop backgrounds are defined under the schema org.gnome.desktop.background:
https://github.com/GNOME/gsettings-desktop-schemas/blob/master/schemas/org.gnome.desktop.background.gschema.xml.in

subprocess.CalledProcessError is raised by run() if a non-zero exit status is returned. This
is the main way of determining if an issue was encountered. Commands are passed as argument
lists, never through a shell, so paths with spaces or quotes need no escaping.
"""

import logging
import os
import subprocess
import sys
from pathlib import Path

from artwall.image_handler import InvalidImageError
from artwall.image_handler import validate_image

logger = logging.getLogger(__name__)


class WallpaperUpdateError(Exception):
    """
    Raised when an attempt to update the desktop background fails.
    """

    pass


def _mac_commands(path: Path) -> list[list[str]]:
    # AppleScript string literal: backslashes and double quotes need escaping
    quoted = str(path).replace("\\", "\\\\").replace('"', '\\"')
    script = (
        'tell application "System Events"\n'
        "  tell every desktop\n"
        f'    set picture to "{quoted}"\n'
        "  end tell\n"
        "end tell"
    )
    return [["osascript", "-e", script]]


def _windows_commands(path: Path) -> list[list[str]]:
    # single-quoted PowerShell string: no variable expansion, quotes are doubled
    quoted = str(path).replace("'", "''")
    script = f"""
Add-Type -TypeDefinition @"
using System;
using System.Runtime.InteropServices;
public class Wallpaper {{
  [DllImport("user32.dll", CharSet = CharSet.Auto)]
  public static extern int SystemParametersInfo(int uAction, int uParam, string lpvParam, int fuWinIni);
}}
"@
[Wallpaper]::SystemParametersInfo(0x0014, 0, '{quoted}', 0x0001 -bor 0x0002)
"""
    return [["powershell", "-NoProfile", "-Command", script]]


def _linux_commands(path: Path, desktop: str) -> list[list[str]]:
    desktop = desktop.lower()
    uri = path.as_uri()

    if any(name in desktop for name in ("gnome", "unity", "budgie")):
        # newer Gnome releases read picture-uri-dark when the dark style is active
        return [
            ["gsettings", "set", "org.gnome.desktop.background", "picture-uri", uri],
            ["gsettings", "set", "org.gnome.desktop.background", "picture-uri-dark", uri],
        ]

    if "kde" in desktop or "plasma" in desktop:
        script = (
            "var allDesktops = desktops();"
            "for (var i = 0; i < allDesktops.length; i++) {"
            "  var d = allDesktops[i];"
            '  d.wallpaperPlugin = "org.kde.image";'
            '  d.currentConfigGroup = Array("Wallpaper", "org.kde.image", "General");'
            f'  d.writeConfig("Image", "{uri}");'
            "}"
        )
        return [
            [
                "qdbus",
                "org.kde.plasmashell",
                "/PlasmaShell",
                "org.kde.PlasmaShell.evaluateScript",
                script,
            ]
        ]

    if "xfce" in desktop:
        return [
            [
                "xfconf-query",
                "-c",
                "xfce4-desktop",
                "-p",
                "/backdrop/screen0/monitor0/workspace0/last-image",
                "-s",
                str(path),
            ]
        ]

    if "mate" in desktop:
        return [["gsettings", "set", "org.mate.background", "picture-filename", str(path)]]

    if "cinnamon" in desktop:
        return [
            ["gsettings", "set", "org.cinnamon.desktop.background", "picture-uri", uri]
        ]

    return [["feh", "--bg-fill", str(path)]]


def _run(commands: list[list[str]]):
    for command in commands:
        logger.debug("running %s", command[0])
        subprocess.run(
            command,
            check=True,
            stdin=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            stdout=subprocess.PIPE,
        )


def update_wallpaper(img_path: Path, platform: str = None) -> None:
    """
    Update the background image to the one specified by img_path. Raise WallpaperUpdateError if issues
    are encountered during the attempt to update the background.

    platform defaults to sys.platform and is one of 'darwin', 'win32' or 'linux'.
    """

    img_path = Path(str(img_path).removeprefix("file://"))
    wallpaper_location = img_path.expanduser().resolve().absolute()

    # subsequent operations will fail if path does not exist or is not a file, so catch this.
    if not wallpaper_location.exists() or not wallpaper_location.is_file():
        raise WallpaperUpdateError(
            f"Invalid path provided for image location: {img_path} does not exist."
        )

    try:
        validate_image(wallpaper_location)

    except InvalidImageError:
        raise WallpaperUpdateError(
            f"Invalid image type provided. {wallpaper_location.name} is not a valid"
            " image."
        )

    platform = platform or sys.platform

    if platform == "darwin":
        commands = _mac_commands(wallpaper_location)
    elif platform == "win32":
        commands = _windows_commands(wallpaper_location)
    elif platform.startswith("linux"):
        commands = _linux_commands(
            wallpaper_location, os.environ.get("XDG_CURRENT_DESKTOP", "")
        )
    else:
        raise WallpaperUpdateError(f"Unsupported platform: {platform}")

    try:
        _run(commands)

    except (subprocess.CalledProcessError, FileNotFoundError) as error:

        if not platform.startswith("linux"):
            raise WallpaperUpdateError(f"Could not set desktop background: {error}")

        # if the first attempt fails, try nitrogen as a fallback
        logger.info("setting wallpaper failed (%s), trying nitrogen", error)
        try:
            _run([["nitrogen", "--set-zoom-fill", str(wallpaper_location)]])

        except (subprocess.CalledProcessError, FileNotFoundError):
            raise WallpaperUpdateError(f"Could not set desktop background: {error}")
