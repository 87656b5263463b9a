"""Filesystem helpers."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path


def ensure_parent(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def read_text(path: Path, *, encoding: str = "utf-8") -> str:
    with path.open("r", encoding=encoding) as fp:
        return fp.read()


def write_text(path: Path, data: str, *, encoding: str = "utf-8") -> None:
    ensure_parent(path)
    with path.open("w", encoding=encoding) as fp:
        fp.write(data)


def dated_path(directory: Path, suffix: str, *, now: datetime | None = None) -> Path:
    """Return ``directory/{YYYY-MM-DD}-article{suffix}`` without clobbering existing files."""
    stamp = (now or datetime.now()).strftime("%Y-%m-%d")
    candidate = directory / f"{stamp}-article{suffix}"
    counter = 2
    while candidate.exists():
        candidate = directory / f"{stamp}-article-{counter}{suffix}"
        counter += 1
    return candidate
