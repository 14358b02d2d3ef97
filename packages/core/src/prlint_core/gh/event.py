from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class EventContext:
    """The parts of the Actions event payload prlint reads. Any may be missing."""

    repository: str | None = None
    number: int | None = None
    title: str | None = None


def load_event_context(event_path: str | None = None) -> EventContext:
    """Read the PR number and title from the workflow's event payload.

    Falls back to GITHUB_EVENT_PATH / GITHUB_REPOSITORY. A missing or
    unreadable payload yields an empty context rather than an error.
    """
    ctx = EventContext(repository=os.environ.get("GITHUB_REPOSITORY") or None)

    event_path = event_path or os.environ.get("GITHUB_EVENT_PATH")
    if not event_path:
        return ctx
    path = Path(event_path)
    if not path.exists():
        logger.debug("Event payload %s does not exist", event_path)
        return ctx

    try:
        payload = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as e:
        logger.warning("Could not parse event payload %s: %s", event_path, e)
        return ctx

    pull_request = payload.get("pull_request") or {}
    issue = payload.get("issue") or {}
    number = pull_request.get("number") or issue.get("number") or payload.get("number")
    ctx.number = int(number) if number else None
    ctx.title = pull_request.get("title")

    repo_name = (payload.get("repository") or {}).get("full_name")
    if repo_name:
        ctx.repository = repo_name
    return ctx
