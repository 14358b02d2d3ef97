"""Keeps exactly one up-to-date bot review on the pull request."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from prlint_core.gh.lookup import find_bot_review
from prlint_core.models import Outcome, PullRequestRef, ReviewState, StepResult, TitlePolicy
from prlint_core.steps import RECOVERABLE_ERRORS, attempt, describe_error

if TYPE_CHECKING:
    from prlint_core.gh.client import GitHubClient

logger = logging.getLogger(__name__)

# The platform only lets these states be dismissed.
DISMISSIBLE_STATES = (ReviewState.APPROVED, ReviewState.CHANGES_REQUESTED)


def _review_event(policy: TitlePolicy) -> str:
    return "REQUEST_CHANGES" if policy.request_changes else "COMMENT"


def create_or_update_review(client: GitHubClient, ref: PullRequestRef, policy: TitlePolicy) -> StepResult:
    """Post the failure comment as the bot review, reusing an existing one.

    Looking up before creating keeps the PR at a single active bot review no
    matter how many times the check fails. Errors propagate.
    """
    body = policy.rendered_comment
    review = find_bot_review(client.list_reviews(ref), policy.bot_login)

    if review is None:
        event = _review_event(policy)
        review_id = client.create_review(ref, body=body, event=event)
        logger.info("Created %s review %s on PR #%d", event, review_id, ref.number)
        return StepResult("create review", Outcome.SUCCESS, f"{event} review {review_id}")

    # Updating never changes the review's event/state.
    client.update_review(ref, review.id, body=body)
    logger.info("Updated existing review %d on PR #%d", review.id, ref.number)
    return StepResult("update review", Outcome.SUCCESS, f"review {review.id}")


def _post_dismiss_comment(client: GitHubClient, ref: PullRequestRef, policy: TitlePolicy) -> str:
    review_id = client.create_review(ref, body=policy.dismiss_comment, event="COMMENT")
    return f"posted COMMENT review {review_id}"


def dismiss_review(client: GitHubClient, ref: PullRequestRef, policy: TitlePolicy) -> StepResult:
    """Retire the bot review now that the title is valid. Never raises.

    APPROVED / CHANGES_REQUESTED reviews are dismissed, falling back to a new
    COMMENT review carrying the dismiss message if the dismissal is refused.
    COMMENTED reviews can't be dismissed, so the COMMENT review is posted
    straight away. Anything else is left alone.
    """
    try:
        review = find_bot_review(client.list_reviews(ref), policy.bot_login)
    except RECOVERABLE_ERRORS as e:
        logger.warning("Could not list reviews for PR #%d: %s", ref.number, describe_error(e))
        return StepResult("dismiss review", Outcome.ABANDONED, describe_error(e))

    if review is None:
        logger.info("No review found to dismiss for PR #%d", ref.number)
        return StepResult("dismiss review", Outcome.SKIPPED, "no bot review")

    logger.info("Found existing review with ID: %d, state: %s", review.id, review.state.value)

    if review.state in DISMISSIBLE_STATES:

        def dismiss() -> str:
            client.dismiss_review(ref, review.id, message=policy.dismiss_comment)
            logger.info("Dismissed review %d", review.id)
            return f"dismissed review {review.id}"

        return attempt(
            "dismiss review",
            dismiss,
            fallback=lambda: _post_dismiss_comment(client, ref, policy),
            fallback_action="post dismiss comment",
        )

    if review.state is ReviewState.COMMENTED:
        logger.info("Review state is COMMENTED, creating a new comment instead of dismissing")
        return attempt("dismiss review", lambda: _post_dismiss_comment(client, ref, policy))

    logger.info("Review %d is in state %s; nothing to dismiss", review.id, review.state.value)
    return StepResult("dismiss review", Outcome.SKIPPED, f"review state {review.state.value}")
