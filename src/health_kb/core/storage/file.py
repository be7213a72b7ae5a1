"""File storage backend: one JSON file per slot in a directory."""

import os
import tempfile
from pathlib import Path

from health_kb.core.storage.base import StorageBackend


class FileStorageBackend(StorageBackend):
    """Stores each slot as ``<directory>/<slot>.json``.

    Writes go to a temporary file in the same directory which then replaces
    the target, so a crash mid-write leaves the previous snapshot intact.
    """

    def __init__(self, directory: str | os.PathLike[str]) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, slot: str) -> Path:
        return self._directory / f"{slot}.json"

    def read(self, slot: str) -> str | None:
        path = self.path_for(slot)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def write(self, slot: str, data: str) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._directory, prefix=f".{slot}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(data)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self.path_for(slot))
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def delete(self, slot: str) -> bool:
        try:
            self.path_for(slot).unlink()
            return True
        except FileNotFoundError:
            return False
