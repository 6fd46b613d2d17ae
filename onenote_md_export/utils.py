"""Utility functions for the OneNote export tool."""

import os
import re
import shutil
from pathlib import Path


def sanitize_filename(name: str, max_length: int = 200) -> str:
    """Sanitize a string for use as a filename.

    Examples:
        'Meeting: 2/25' -> 'Meeting 2 25'
        'a   b__c'      -> 'a b c'
    """
    sanitized = re.sub(r'[<>:"/\\|?*\x00-\x1f]', "_", name)
    sanitized = re.sub(r"[_\s]+", " ", sanitized).strip()
    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length].rstrip()
    # Windows refuses names ending with a dot
    sanitized = sanitized.rstrip(".")
    return sanitized or "unnamed"


def normalize_path(path: str | os.PathLike) -> str:
    return os.path.normcase(os.path.normpath(os.path.abspath(os.fspath(path))))


def path_equals(a: str | os.PathLike, b: str | os.PathLike) -> bool:
    """Compare two paths the way the platform file system does."""
    return normalize_path(a) == normalize_path(b)


def clear_folder(path: str | os.PathLike) -> Path:
    """Remove a folder with all its content and recreate it empty."""
    folder = Path(path)
    if folder.exists():
        shutil.rmtree(folder)
    folder.mkdir(parents=True, exist_ok=True)
    return folder


def move_file(source: str | os.PathLike, destination: str | os.PathLike) -> None:
    """Copy a file to its destination, creating folders, then delete the source."""
    Path(destination).parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source, destination)
    os.remove(source)
