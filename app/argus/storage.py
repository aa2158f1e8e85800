from __future__ import annotations

import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from werkzeug.utils import secure_filename

from app.argus.security import resolve_within


class StorageError(RuntimeError):
    pass


def generate_stored_name(original_name: str | None) -> str:
    """
    Collision-resistant name for an uploaded file: "<epoch-ms>-<8 hex>-<sanitized original>".
    The user-supplied part is only a readable suffix.
    """
    base = (secure_filename(original_name or "") or "file")[:80]
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}-{base}"


@dataclass(frozen=True)
class LocalStorage:
    """
    Files under a single root directory. Every access re-runs the containment
    check, so a tampered key raises InvalidPathError before any I/O.
    """

    root: Path

    def ensure_root(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        return resolve_within(self.root, key)

    def put_bytes(self, key: str, data: bytes) -> Path:
        p = self.path_for(key)
        p.parent.mkdir(parents=True, exist_ok=True)
        try:
            p.write_bytes(data)
        except OSError as e:
            raise StorageError(f"Failed to write {key!r}") from e
        return p

    def open(self, key: str) -> BinaryIO:
        return self.path_for(key).open("rb")

    def exists(self, key: str) -> bool:
        return self.path_for(key).is_file()

    def delete(self, key: str) -> bool:
        """Unlink `key`; returns False if it was already gone."""
        p = self.path_for(key)
        try:
            p.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(f"Failed to delete {key!r}") from e
        return True


def storage_from_config(config: dict) -> LocalStorage:
    return LocalStorage(root=Path(config["UPLOADS_PATH"]))
