from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from foodserver.errors import MealValidationError, PhotoStoreError

_LOG = logging.getLogger(__name__)

PHOTO_SUFFIX = ".jpg"
_FORBIDDEN = ("/", "\\", "\x00")
# Longest file name (in bytes) common filesystems accept.
NAME_MAX = 255


def check_photo_name(name: str) -> None:
    """Raise MealValidationError when `name` cannot be used as a file name."""
    if not name:
        raise MealValidationError("name must not be empty")
    if name in (".", "..") or any(ch in name for ch in _FORBIDDEN):
        raise MealValidationError(f"name {name!r} contains characters not allowed in a file name")
    try:
        encoded = f"{name}{PHOTO_SUFFIX}".encode("utf-8")
    except UnicodeEncodeError as exc:
        raise MealValidationError("name is not valid unicode") from exc
    if len(encoded) > NAME_MAX:
        raise MealValidationError(f"name is too long to be used as a file name (max {NAME_MAX} bytes)")


class PhotoStorage:
    """Photo files kept as `<root>/<meal-name>.jpg`."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def ensure_root(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    def path_for(self, name: str) -> Path:
        check_photo_name(name)
        return self.root / f"{name}{PHOTO_SUFFIX}"

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def read(self, name: str) -> bytes:
        return self.path_for(name).read_bytes()

    def write(self, name: str, data: bytes) -> Path:
        staged = self.stage(data)
        return self.commit(staged, name)

    def stage(self, data: bytes) -> Path:
        """Write `data` to a temporary file next to the final photos."""
        try:
            self.ensure_root()
            fd, tmp = tempfile.mkstemp(prefix=".upload-", suffix=PHOTO_SUFFIX, dir=self.root)
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
        except OSError as exc:
            raise PhotoStoreError(f"could not stage photo: {exc}") from exc
        return Path(tmp)

    def commit(self, staged: Path, name: str, record_saved: bool = False) -> Path:
        target = self.path_for(name)
        try:
            os.replace(staged, target)
        except OSError as exc:
            self.discard(staged)
            raise PhotoStoreError(
                f"could not store photo for {name!r}: {exc}",
                record_saved=record_saved,
                path=str(target),
            ) from exc
        return target

    def discard(self, staged: Path) -> None:
        try:
            staged.unlink(missing_ok=True)
        except OSError:
            _LOG.warning("could not remove staged photo %s", staged, exc_info=True)
