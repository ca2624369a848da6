"""Project name and alert email resolution.

Both follow an ordered list of candidate sources; the first non-empty
candidate wins.
"""

from __future__ import annotations

import logging
import os
import re
import subprocess
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_ALERT_EMAIL = "admin@company.com"

REMOTE_NAME = re.compile(r"/([^/]+?)(\.git)?$")
AUTHOR_EMAIL = re.compile(r"<([^>]+@[^>]+)>")

GitConfigReader = Callable[[str], Optional[str]]


def make_git_config_reader(root: str) -> GitConfigReader:
    """Return a reader for ``git config --get <key>`` run inside ``root``."""

    def read(key: str) -> Optional[str]:
        try:
            out = subprocess.run(
                ["git", "config", "--get", key],
                cwd=root,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            logger.debug(f"git unavailable, skipping {key}: {e}")
            return None
        value = out.stdout.strip()
        return value or None

    return read


def project_name_from_remote(remote_url: Optional[str]) -> Optional[str]:
    """Extract the repository name from a git remote URL."""
    if not remote_url:
        return None
    match = REMOTE_NAME.search(remote_url.strip())
    return match.group(1) if match else None


def email_from_author(author: Any) -> Optional[str]:
    """Extract ``x@y`` from a ``Name <x@y>`` author string."""
    if not isinstance(author, str):
        return None
    match = AUTHOR_EMAIL.search(author)
    return match.group(1) if match else None


def _manifest_name(manifest: Optional[Dict[str, Any]]) -> Optional[str]:
    name = (manifest or {}).get("name")
    return name if isinstance(name, str) else None


def resolve_project_name(
    root: str,
    manifest: Optional[Dict[str, Any]],
    git_config: GitConfigReader,
) -> str:
    """Manifest ``name``, then git remote basename, then directory basename."""
    candidates = (
        lambda: _manifest_name(manifest),
        lambda: project_name_from_remote(git_config("remote.origin.url")),
        lambda: os.path.basename(os.path.abspath(root)),
    )
    for candidate in candidates:
        value = candidate()
        if value:
            return value
    return ""


def resolve_alert_email(
    manifest: Optional[Dict[str, Any]],
    git_config: GitConfigReader,
) -> str:
    """Git ``user.email``, then manifest author email, then the fallback address."""
    git_email = git_config("user.email")
    if git_email and "@" in git_email:
        return git_email

    author_email = email_from_author((manifest or {}).get("author"))
    if author_email:
        return author_email

    return DEFAULT_ALERT_EMAIL
