"""Filesystem helpers for project inspection.

Recursive search is an in-process directory walk with ``fnmatch`` name
patterns and an optional compiled content regex. Every helper degrades to
"not found" on I/O errors instead of raising.
"""

from __future__ import annotations

import fnmatch
import json
import logging
import os
from typing import Any, Dict, Iterable, Iterator, List, Optional, Pattern

logger = logging.getLogger(__name__)

MANIFEST_FILE = "package.json"
EXCLUDED_PATH_FRAGMENT = "node_modules"


def read_text(path: str) -> Optional[str]:
    """Read a text file, returning None if it cannot be read."""
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as fh:
            return fh.read()
    except OSError as e:
        logger.debug(f"Skipping unreadable file {path}: {e}")
        return None


def load_manifest(root: str) -> Optional[Dict[str, Any]]:
    """Load ``package.json`` from ``root``.

    Returns None when the manifest is missing, unreadable, not valid JSON,
    or not a JSON object.
    """
    text = read_text(os.path.join(root, MANIFEST_FILE))
    if text is None:
        return None
    try:
        data = json.loads(text)
    except ValueError as e:
        logger.warning(f"Ignoring unparseable {MANIFEST_FILE}: {e}")
        return None
    if not isinstance(data, dict):
        return None
    return data


def exists(root: str, *names: str) -> bool:
    """True if any of ``names`` exists directly under ``root``."""
    return any(os.path.exists(os.path.join(root, name)) for name in names)


def walk_files(
    root: str,
    start: str = ".",
    patterns: Iterable[str] = ("*",),
    exclude: Optional[str] = EXCLUDED_PATH_FRAGMENT,
) -> List[str]:
    """List files below ``root/start`` whose name matches any of ``patterns``.

    Paths are returned relative to ``root`` and prefixed with ``start``
    (``src/app.ts``, ``./src/app.ts``), the way ``find <start>`` prints them.
    Any path containing ``exclude`` is skipped; ``exclude=None`` walks
    everything. Walk errors yield whatever was collected so far.
    """
    patterns = tuple(patterns)
    base = os.path.join(root, start)
    if not os.path.isdir(base):
        return []

    found: List[str] = []
    for dirpath, dirnames, filenames in os.walk(base):
        # Prune excluded trees
        dirnames[:] = sorted(d for d in dirnames if not exclude or exclude not in d)
        rel_dir = os.path.relpath(dirpath, base)
        for filename in sorted(filenames):
            if not any(fnmatch.fnmatch(filename, p) for p in patterns):
                continue
            rel = filename if rel_dir == os.curdir else os.path.join(rel_dir, filename)
            display = os.path.join(start, rel)
            if exclude and exclude in display:
                continue
            found.append(display)
    return found


def iter_matching_files(
    root: str,
    pattern: str,
    content: Optional[Pattern[str]] = None,
) -> Iterator[str]:
    """Yield files matching a name pattern and, optionally, a content regex.

    Unlike the resource scan, nothing is excluded, ``node_modules`` included.
    """
    for path in walk_files(root, ".", (pattern,), exclude=None):
        if content is None:
            yield path
            continue
        text = read_text(os.path.join(root, path))
        if text is not None and content.search(text):
            yield path


def any_file_matches(root: str, pattern: str, content: Optional[Pattern[str]] = None) -> bool:
    """True if at least one file matches ``pattern`` (and ``content``, if given)."""
    return next(iter_matching_files(root, pattern, content), None) is not None
