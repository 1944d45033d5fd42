"""Helpers for describing filesystem entries."""

import mimetypes
import os
import uuid
from datetime import datetime, timezone
from typing import Sequence, TypeVar

T = TypeVar("T")


def generate_id() -> str:
    """Random identifier for a tree node, unique per response."""
    return uuid.uuid4().hex


def get_extension(name: str) -> str:
    """Lowercased extension without the dot, empty when there is none."""
    return os.path.splitext(name)[1][1:].lower()


def get_mime_type(name: str) -> str:
    mime_type, _ = mimetypes.guess_type(name)
    if mime_type is None:
        return "application/octet-stream"
    return mime_type


def created_at(stats: os.stat_result) -> datetime:
    """Birth time where the platform records one, else the inode change time."""
    timestamp = getattr(stats, "st_birthtime", None)
    if timestamp is None:
        timestamp = stats.st_ctime
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def updated_at(stats: os.stat_result) -> datetime:
    return datetime.fromtimestamp(stats.st_mtime, tz=timezone.utc)


def sort_by_last_update(nodes: Sequence[T], descending: bool = True) -> list[T]:
    # sorted() is stable under reverse=True, so ties keep listing order
    return sorted(nodes, key=lambda node: node.updated_at, reverse=descending)
