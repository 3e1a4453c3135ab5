import logging
import time
from datetime import date
from pathlib import Path, PurePosixPath

from remember.errors import InvalidNameError, StorageError

logger = logging.getLogger(__name__)


def build_storage_path(original_name: str, today: date, millis: int) -> str:
    """Return ``YYYY/MM/DD/<millis>_<original_name>`` for a new upload."""
    suffix = PurePosixPath(original_name).suffix
    if not suffix or suffix == ".":
        raise InvalidNameError(f"File name has no extension: {original_name!r}")
    return f"{today.year:04d}/{today.month:02d}/{today.day:02d}/{millis}_{original_name}"


class MillisClock:
    """Hands out strictly increasing millisecond timestamps.

    Two uploads landing in the same millisecond still get distinct file names.
    """

    def __init__(self, now=time.time):
        self._now = now
        self._last = 0

    def next(self) -> int:
        stamp = int(self._now() * 1000)
        if stamp <= self._last:
            stamp = self._last + 1
        self._last = stamp
        return stamp


class LocalStorage:
    def __init__(self, root: str | Path):
        self.root = Path(root)

    def path_for(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if not path.is_relative_to(self.root.resolve()):
            raise StorageError(f"Storage key escapes upload root: {key}")
        return path

    def save(self, key: str, data: bytes) -> str:
        path = self.path_for(key)
        try:
            # Date shard directories are created on first write of the day
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "xb") as f:
                f.write(data)
        except OSError as exc:
            logger.error("Failed to write %s: %s", key, exc)
            raise StorageError(f"Failed to write {key}: {exc}") from exc
        return key

    def read(self, key: str) -> bytes:
        try:
            return self.path_for(key).read_bytes()
        except OSError as exc:
            raise StorageError(f"Failed to read {key}: {exc}") from exc

    def exists(self, key: str) -> bool:
        return self.path_for(key).exists()

    def delete(self, key: str) -> None:
        try:
            self.path_for(key).unlink(missing_ok=True)
        except OSError as exc:
            logger.error("Failed to delete %s: %s", key, exc)
            raise StorageError(f"Failed to delete {key}: {exc}") from exc

    def move_aside(self, key: str) -> str | None:
        """Rename a stored file to a hidden sibling key; None if it is already gone."""
        aside = str(PurePosixPath(key).with_name(f".{PurePosixPath(key).name}.deleting"))
        try:
            self.path_for(key).replace(self.path_for(aside))
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.error("Failed to move %s aside: %s", key, exc)
            raise StorageError(f"Failed to delete {key}: {exc}") from exc
        return aside

    def restore(self, aside: str, key: str) -> None:
        try:
            self.path_for(aside).replace(self.path_for(key))
        except OSError as exc:
            logger.error("Failed to restore %s from %s: %s", key, aside, exc)
            raise StorageError(f"Failed to restore {key}: {exc}") from exc
