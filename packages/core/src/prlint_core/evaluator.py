"""Title evaluation: a pure pattern test with no I/O."""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

REGEX_PLACEHOLDER = "%regex%"


def evaluate(pattern: re.Pattern, title: str | None) -> bool:
    """Return True if ``pattern`` matches anywhere in ``title``.

    A missing title is treated as the empty string. No case folding or
    trimming is applied.
    """
    title = title if title is not None else ""
    logger.debug("Title regex: %s", pattern.pattern)
    logger.debug("Title: %s", title)
    return pattern.search(title) is not None


def render_comment(template: str, pattern: re.Pattern) -> str:
    """Substitute the first ``%regex%`` in ``template`` with the pattern source."""
    return template.replace(REGEX_PLACEHOLDER, pattern.pattern, 1)
