"""
Acquisition

Drives "fetch one artwork end to end": ask the registry for the active catalog client, let the
selector pick an artwork, download it, make sure the bytes are an image and store them as the
current image. Failures anywhere in that sequence retry the whole sequence with a linear
backoff (retry_delay, 2 * retry_delay, ...) before giving up with AcquisitionError.

Storage layout (one directory):

    current-wallpaper.jpg   the current image, replaced atomically on every acquisition
    metadata.json           {"title": ..., "author": ...} of the current image
    wallpaper-<ns>.jpg      archival copies made when the current image becomes the wallpaper.
                            Some desktops cache wallpapers by file name, so every promotion gets a
                            fresh name. Only the archive_limit newest copies are kept.

Progress is reported to a PresentationSurface. The acquirer only ever calls its methods; the
base class here ignores every event.
"""

import enum
import io
import json
import logging
import os
import shutil
import tempfile
import threading
import time
from dataclasses import dataclass
from pathlib import Path

from artwall import image_handler
from artwall import selector
from artwall import wallpaper_handler
from artwall.cache import CatalogCache
from artwall.image_handler import InvalidImageError
from artwall.image_handler import NetworkError
from artwall.registry import SourceRegistry
from artwall.selector import ExhaustedError
from artwall.sources.base import NotFoundError
from artwall.sources.base import ParseError
from artwall.wallpaper_handler import WallpaperUpdateError

logger = logging.getLogger(__name__)

CURRENT_IMAGE_FILE = "current-wallpaper.jpg"
METADATA_FILE = "metadata.json"
ARCHIVE_PREFIX = "wallpaper-"
ARCHIVE_SUFFIX = ".jpg"

MAX_RETRIES = 3
RETRY_DELAY = 2.0
ARCHIVE_LIMIT = 5

RETRYABLE_ERRORS = (
    NetworkError,
    ParseError,
    NotFoundError,
    ExhaustedError,
    InvalidImageError,
    OSError,
)


class AcquisitionError(Exception):
    """
    Raised when an acquisition fails for good (all retries used) or can't start.
    """

    pass


class AcquisitionState(enum.Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class StoredImage:
    file_path: Path
    title: str
    author: str


class PresentationSurface:
    """
    Receives acquisition events. Subclass and override what you need to show; every event is
    ignored by default.
    """

    def loading(self, is_loading: bool):
        pass

    def image_ready(self, image, title: str, author: str):
        pass

    def wallpaper_set(self, success: bool):
        pass

    def error(self, message: str):
        pass


def stage(path: Path, data: bytes) -> Path:
    """Write data to a temporary file next to path and return the temporary path."""

    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}-", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as file:
            file.write(data)

    except BaseException:
        Path(tmp_path).unlink(missing_ok=True)
        raise

    return Path(tmp_path)


def atomic_write(files: dict[Path, bytes]):
    """
    Stage every file under a temporary name, then rename each over its target in the order
    given. If staging fails nothing is replaced and the old files stay as they were.

    Each rename is atomic, the set of renames is not: if a later rename fails, the files renamed
    before it keep their new content while the rest keep the old one. The temporary files that
    were not renamed are removed either way.
    """

    staged = []
    try:
        for path, data in files.items():
            staged.append((stage(path, data), path))

        while staged:
            tmp_path, path = staged[0]
            os.replace(tmp_path, path)
            staged.pop(0)

    except BaseException:
        for tmp_path, _ in staged:
            tmp_path.unlink(missing_ok=True)
        raise


class Acquirer:
    """
    Acquisition orchestrator. Only one acquisition runs at a time per acquirer; the current image
    slot is shared state and concurrent writers would race.
    """

    def __init__(
        self,
        registry: SourceRegistry,
        storage_dir: Path,
        cache: CatalogCache = None,
        surface: PresentationSurface = None,
        setter=None,
        sleep=time.sleep,
        max_retries: int = MAX_RETRIES,
        retry_delay: float = RETRY_DELAY,
        archive_limit: int = ARCHIVE_LIMIT,
        select=None,
        download=None,
        selector_options: dict = None,
    ):
        self.registry = registry
        self.storage_dir = Path(storage_dir)
        self.cache = cache if cache is not None else CatalogCache()
        self.surface = surface or PresentationSurface()
        self.setter = setter or wallpaper_handler.update_wallpaper
        self.sleep = sleep
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.archive_limit = archive_limit
        self.select = select or selector.select_random_eligible
        self.download = download or image_handler.download
        self.selector_options = selector_options or {}

        self.state = AcquisitionState.IDLE
        self._lock = threading.Lock()

    @property
    def current_image_path(self) -> Path:
        return self.storage_dir / CURRENT_IMAGE_FILE

    @property
    def metadata_path(self) -> Path:
        return self.storage_dir / METADATA_FILE

    def _fetch(self) -> StoredImage:
        """One pass of the pipeline, no retries."""

        client = self.registry.active_client()
        artwork = self.select(client, cache=self.cache, **self.selector_options)
        logger.info('selected "%s" by %s', artwork.title, artwork.author)

        data = self.download(
            artwork.image_url,
            session=client.session,
            timeout=getattr(client, "timeout", image_handler.DEFAULT_TIMEOUT),
        )
        image_handler.validate_image(io.BytesIO(data))

        return self.store(data, artwork.title, artwork.author)

    def acquire_one(self) -> StoredImage:
        """
        Fetch, validate and store one artwork from the active source. Retries the whole sequence
        up to max_retries times, sleeping i * retry_delay seconds before retry i. Raises
        AcquisitionError carrying the last error message once retries are used up.
        """

        if not self._lock.acquire(blocking=False):
            raise AcquisitionError("an acquisition is already in progress")

        try:
            self.state = AcquisitionState.FETCHING
            retry = 0

            while True:
                try:
                    stored = self._fetch()

                except RETRYABLE_ERRORS as error:
                    logger.warning("Failed to load image: %s", error)

                    if retry >= self.max_retries:
                        self.state = AcquisitionState.FAILED
                        raise AcquisitionError(str(error)) from error

                    retry += 1
                    delay = retry * self.retry_delay
                    logger.info(
                        "Retrying in %ss (attempt %d/%d)...",
                        delay,
                        retry,
                        self.max_retries,
                    )
                    self.sleep(delay)
                    continue

                self.state = AcquisitionState.SUCCEEDED
                return stored

        except BaseException:
            if self.state is AcquisitionState.FETCHING:
                self.state = AcquisitionState.FAILED
            raise

        finally:
            self._lock.release()

    def store(self, data: bytes, title: str, author: str) -> StoredImage:
        """
        Persist image bytes and metadata as the current image. Both files are staged under
        temporary names first; if staging fails the previous current image stays intact.
        """

        self.storage_dir.mkdir(parents=True, exist_ok=True)

        metadata = json.dumps({"title": title, "author": author}).encode("utf-8")

        atomic_write({self.current_image_path: data, self.metadata_path: metadata})

        return StoredImage(file_path=self.current_image_path, title=title, author=author)

    def load_current(self) -> StoredImage:
        """
        Return the last stored image, or None if there isn't one. Used at startup only; a failed
        acquisition never falls back to it.
        """

        if not self.current_image_path.is_file():
            return None

        metadata = {"title": "Saved Image", "author": "Unknown"}

        try:
            with self.metadata_path.open("r") as file:
                loaded = json.load(file)
            if isinstance(loaded, dict):
                metadata.update(loaded)

        except (OSError, json.JSONDecodeError) as error:
            logger.debug("ignoring unreadable metadata: %s", error)

        return StoredImage(
            file_path=self.current_image_path,
            title=metadata["title"],
            author=metadata["author"],
        )

    def archive_current(self) -> Path:
        """Copy the current image to a uniquely named archival path and return that path."""

        stamp = time.time_ns()
        archive = self.storage_dir / f"{ARCHIVE_PREFIX}{stamp}{ARCHIVE_SUFFIX}"

        while archive.exists():
            stamp += 1
            archive = self.storage_dir / f"{ARCHIVE_PREFIX}{stamp}{ARCHIVE_SUFFIX}"

        # copyfile rather than copy2: the archive's mtime should be the time it was made
        shutil.copyfile(self.current_image_path, archive)
        return archive

    def archived_images(self) -> list[Path]:
        """Archival copies, newest first."""

        def newest(path: Path):
            return (path.stat().st_mtime_ns, path.name)

        files = []
        for path in self.storage_dir.glob(f"{ARCHIVE_PREFIX}*{ARCHIVE_SUFFIX}"):
            try:
                files.append((newest(path), path))
            except OSError:
                continue

        return [path for _, path in sorted(files, reverse=True)]

    def prune_archive(self) -> list[Path]:
        """
        Delete all but the archive_limit newest archival copies. Best effort: a file that can't be
        removed is logged and skipped. Returns the files that were removed.
        """

        removed = []

        for path in self.archived_images()[self.archive_limit :]:
            try:
                path.unlink()
                removed.append(path)

            except OSError as error:
                logger.debug("could not remove old wallpaper %s: %s", path, error)

        return removed

    def promote(self) -> Path:
        """
        Make the current image the desktop wallpaper: archive it under a fresh name, prune old
        copies and hand the archival path to the background setter. Returns that path.
        """

        if not self.current_image_path.is_file():
            raise AcquisitionError("No image loaded")

        archive = self.archive_current()
        self.prune_archive()
        self.setter(archive.resolve())

        return archive

    # commands from the presentation surface

    def refresh(self) -> StoredImage:
        """Acquire a new artwork and report the outcome. Returns None on failure."""

        self.surface.loading(True)

        try:
            stored = self.acquire_one()

        except AcquisitionError as error:
            self.surface.error(str(error))
            return None

        else:
            self.surface.image_ready(stored.file_path, stored.title, stored.author)
            return stored

        finally:
            self.surface.loading(False)

    def set_wallpaper(self) -> Path:
        """Promote the current image to wallpaper and report the outcome. Returns None on failure."""

        try:
            archive = self.promote()

        except (AcquisitionError, WallpaperUpdateError, OSError) as error:
            logger.warning("Failed to set wallpaper: %s", error)
            self.surface.error(str(error))
            self.surface.wallpaper_set(False)
            return None

        self.surface.wallpaper_set(True)
        return archive
