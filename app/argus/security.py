"""
Path containment guards for uploaded documents and the static catch-all.

Both are pure functions over (root, candidate): they touch the filesystem
only to canonicalize (symlinks included) and never open or unlink anything.
"""
from __future__ import annotations

import os
import re
from pathlib import Path, PurePosixPath

ALLOWED_STATIC_EXTENSIONS = frozenset({".html", ".css", ".js", ".ico", ".svg", ".png", ".jpg", ".json"})

_DISPOSITION_UNSAFE = re.compile(r"[\x00-\x1f\x7f]")


class InvalidPathError(ValueError):
    """A resolved path escapes its configured root."""


def _canonical(path: str | os.PathLike[str]) -> Path:
    try:
        return Path(path).resolve()
    except (ValueError, OSError) as e:
        # NUL bytes, symlink loops
        raise InvalidPathError(f"Cannot canonicalize {os.fspath(path)!r}") from e


def resolve_within(root: str | os.PathLike[str], name: str) -> Path:
    """
    Join `name` onto `root`, canonicalize, and return the absolute path if it
    is `root` itself or lies below it. Raises InvalidPathError otherwise.

    Comparison is by path segments, so "/data/uploads-evil" is not inside
    "/data/uploads".
    """
    if "\x00" in name:
        raise InvalidPathError(f"{name!r} contains a NUL byte")
    base = _canonical(root)
    candidate = _canonical(base / name)
    if candidate != base and not candidate.is_relative_to(base):
        raise InvalidPathError(f"{name!r} resolves outside {str(base)!r}")
    return candidate


def resolve_static(root: str | os.PathLike[str], request_path: str) -> Path | None:
    """
    Map a request path onto a file under the static root.

    - no extension: "/features" -> "<root>/features.html"
    - extension not in ALLOWED_STATIC_EXTENSIONS: None (not served)
    - escapes the root, or is the root itself: InvalidPathError
    """
    rel = request_path.lstrip("/")
    ext = PurePosixPath(rel).suffix.lower()
    if not ext:
        rel = f"{rel}.html"
    elif ext not in ALLOWED_STATIC_EXTENSIONS:
        return None

    base = _canonical(root)
    resolved = resolve_within(base, rel)
    if resolved == base:
        raise InvalidPathError(f"{request_path!r} resolves to the static root")
    return resolved


def safe_disposition_filename(name: str | None) -> str:
    """Filename for Content-Disposition: no control characters, no double quotes, max 200 chars."""
    s = _DISPOSITION_UNSAFE.sub("", name or "").replace('"', "'").strip()
    return (s or "download")[:200]
