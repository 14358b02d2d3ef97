"""Collapses old bot feedback once the title is valid.

Both sweeps are best-effort: every failure is logged and reported as a
StepResult, and nothing here raises.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from prlint_core.gh.lookup import filter_bot_comments, find_bot_review, resolve_comment_node_id, resolve_review_node_id
from prlint_core.models import Outcome, PullRequestRef, StepResult, TitlePolicy
from prlint_core.steps import RECOVERABLE_ERRORS, attempt, describe_error

if TYPE_CHECKING:
    from prlint_core.gh.client import GitHubClient

logger = logging.getLogger(__name__)


def _mutation_id(prefix: str, ref: PullRequestRef) -> str:
    return f"{prefix}-{ref.number}-{int(time.time() * 1000)}"


def _minimize_node(client: GitHubClient, node_id: str, policy: TitlePolicy, mutation_id: str) -> str:
    outcome = client.minimize(node_id, classifier=policy.minimize_reason, mutation_id=mutation_id)
    logger.debug("Minimize result for %s: minimized=%s reason=%s", node_id, outcome.is_minimized, outcome.reason)
    return f"{node_id} minimized={outcome.is_minimized}"


def _dismiss(client: GitHubClient, ref: PullRequestRef, review_id: int, policy: TitlePolicy) -> str:
    client.dismiss_review(ref, review_id, message=policy.dismiss_comment)
    return f"dismissed review {review_id}"


def minimize_review(client: GitHubClient, ref: PullRequestRef, policy: TitlePolicy) -> StepResult:
    """Minimize the bot review, falling back to dismissing that same review.

    The fallback never posts a replacement comment; the dismiss step has
    already run once for this PR.
    """
    try:
        review = find_bot_review(client.list_reviews(ref), policy.bot_login, include_dismissed=True)
    except RECOVERABLE_ERRORS as e:
        logger.warning("Could not list reviews for PR #%d: %s", ref.number, describe_error(e))
        return StepResult("minimize review", Outcome.ABANDONED, describe_error(e))

    if review is None:
        logger.info("No existing reviews found to minimize")
        return StepResult("minimize review", Outcome.SKIPPED, "no bot review")

    logger.info("Found existing review with ID: %d", review.id)
    review.node_id = resolve_review_node_id(client, ref, review.id)
    if not review.node_id:
        return StepResult("minimize review", Outcome.SKIPPED, f"no node ID for review {review.id}")

    logger.info("Minimizing review with node ID: %s", review.node_id)
    result = attempt(
        "minimize review",
        lambda: _minimize_node(client, review.node_id, policy, _mutation_id("prlint-review", ref)),
    )
    if result.outcome is not Outcome.ABANDONED:
        return result

    logger.info("Falling back to dismissing review %d", review.id)
    dismissed = attempt("dismiss review", lambda: _dismiss(client, ref, review.id, policy))
    if dismissed.outcome is Outcome.SUCCESS:
        return StepResult("minimize review", Outcome.FALLBACK, dismissed.detail)
    return StepResult("minimize review", Outcome.ABANDONED, dismissed.detail or result.detail)


def minimize_comments(client: GitHubClient, ref: PullRequestRef, policy: TitlePolicy) -> list[StepResult]:
    """Minimize every bot-authored review and issue comment, one at a time.

    Review comments come first, then issue comments, each in listing order.
    One comment failing doesn't stop the others and there is no fallback.
    """
    try:
        comments = client.list_review_comments(ref) + client.list_issue_comments(ref)
    except RECOVERABLE_ERRORS as e:
        logger.warning("Could not list comments for PR #%d: %s", ref.number, describe_error(e))
        return [StepResult("minimize comments", Outcome.ABANDONED, describe_error(e))]

    bot_comments = filter_bot_comments(comments, policy.bot_login)
    logger.info("Found %d bot comment(s) out of %d on PR #%d", len(bot_comments), len(comments), ref.number)
    if not bot_comments:
        return [StepResult("minimize comments", Outcome.SKIPPED, "no bot comments")]

    results = []
    for comment in bot_comments:
        action = f"minimize comment {comment.database_id}"
        logger.debug("Processing comment with database ID: %d", comment.database_id)
        node_id = resolve_comment_node_id(client, ref, comment)
        if not node_id:
            logger.debug("Could not find node ID for comment %d", comment.database_id)
            results.append(StepResult(action, Outcome.SKIPPED, "no node ID"))
            continue
        results.append(
            attempt(action, lambda: _minimize_node(client, node_id, policy, _mutation_id("prlint", ref)))
        )
    return results


def minimize_existing_feedback(client: GitHubClient, ref: PullRequestRef, policy: TitlePolicy) -> list[StepResult]:
    """Run the review and comment sweeps allowed by ``policy.minimize_scope``."""
    logger.info("Minimizing existing content on PR #%d (scope: %s)", ref.number, policy.minimize_scope)
    results: list[StepResult] = []
    if policy.minimize_scope in ("all", "reviews"):
        results.append(minimize_review(client, ref, policy))
    if policy.minimize_scope in ("all", "comments"):
        results.extend(minimize_comments(client, ref, policy))
    return results
