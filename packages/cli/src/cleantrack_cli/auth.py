"""Identity and credential resolution for the CLI.

The CLI is the only layer that knows where identity comes from. It builds a
Session once and passes it down; the workflow receives plain ids and names.

GitHub token resolution order (stops at first success), used by the Gist store:
  1. GITHUB_TOKEN environment variable
  2. `gh auth token` (GitHub CLI session, works after `gh auth login`)
"""

from __future__ import annotations

import logging
import os
import subprocess

from cleantrack_core.session import ROLE_ADMIN, ROLE_USER, Session

logger = logging.getLogger(__name__)


def resolve_session(config: dict) -> Session | None:
    """Build the caller's Session from merged config, or None when no user id is known."""
    user_id = config.get("user_id")
    if not user_id:
        return None
    role = ROLE_ADMIN if config.get("role") == ROLE_ADMIN else ROLE_USER
    return Session(
        user_id=str(user_id),
        user_name=config.get("user_name") or None,
        email=config.get("user_email") or None,
        role=role,
    )


def resolve_github_token() -> str | None:
    """Return a GitHub token or None if no source is available. Never raises."""
    token = os.environ.get("GITHUB_TOKEN")
    if token:
        return token

    try:
        result = subprocess.run(["gh", "auth", "token"], capture_output=True, text=True, timeout=5)
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None

    if result.returncode == 0 and result.stdout.strip():
        logger.debug("Resolved GitHub token via gh CLI session.")
        return result.stdout.strip()
    return None
