"""Best-effort step execution.

Cleanup steps (dismiss, minimize, node lookups) must never abort the run.
``attempt`` runs a primary action and, if it raises a recoverable platform
error, an optional fallback, and reports what happened as a StepResult.
"""

from __future__ import annotations

import logging
from typing import Callable

import requests
from github import GithubException

from prlint_core.models import Outcome, StepResult

logger = logging.getLogger(__name__)

# Permission denials, 404/422 responses, GraphQL errors and transport failures.
RECOVERABLE_ERRORS = (GithubException, requests.RequestException)


def describe_error(exc: BaseException) -> str:
    if isinstance(exc, GithubException):
        message = exc.data.get("message") if isinstance(exc.data, dict) else None
        return f"{exc.status} {message or exc.data}"
    return f"{type(exc).__name__}: {exc}"


def attempt(
    action: str,
    primary: Callable[[], str | None],
    fallback: Callable[[], str | None] | None = None,
    fallback_action: str | None = None,
) -> StepResult:
    """Run ``primary``; on a recoverable error run ``fallback`` once.

    Each callable returns an optional detail string for the report. No
    retries are made: a failed call is either replaced by the fallback or
    abandoned.
    """
    try:
        detail = primary()
        return StepResult(action, Outcome.SUCCESS, detail or "")
    except RECOVERABLE_ERRORS as e:
        logger.warning("%s failed: %s", action, describe_error(e))
        logger.debug("%s traceback", action, exc_info=True)
        if fallback is None:
            return StepResult(action, Outcome.ABANDONED, describe_error(e))

    label = fallback_action or f"{action} fallback"
    try:
        detail = fallback()
        logger.info("%s succeeded after %s failed", label, action)
        return StepResult(action, Outcome.FALLBACK, detail or label)
    except RECOVERABLE_ERRORS as e:
        logger.warning("%s also failed: %s", label, describe_error(e))
        logger.debug("%s traceback", label, exc_info=True)
        return StepResult(action, Outcome.ABANDONED, describe_error(e))
