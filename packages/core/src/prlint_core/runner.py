"""Title check orchestration: evaluate, then reconcile, then minimize."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from prlint_core.evaluator import evaluate
from prlint_core.minimizer import minimize_existing_feedback
from prlint_core.models import Outcome, PullRequestRef, RunReport, StepResult, TitlePolicy
from prlint_core.reconciler import create_or_update_review, dismiss_review
from prlint_core.steps import RECOVERABLE_ERRORS, describe_error

if TYPE_CHECKING:
    from prlint_core.gh.client import GitHubClient

logger = logging.getLogger(__name__)


def run_check(client: GitHubClient, ref: PullRequestRef, title: str | None, policy: TitlePolicy) -> RunReport:
    """Check the PR title and bring the bot's feedback in line with the result.

    Returns a RunReport. ``failure_message`` is set when the title doesn't
    match and ``fail_action`` is on; turning that into a failed step is left
    to the caller.
    """
    title = title if title is not None else ""
    matched = evaluate(policy.pattern, title)
    report = RunReport(ref=ref, title=title, matched=matched)

    if not matched:
        logger.info("PR #%d title does not match %s", ref.number, policy.pattern.pattern)
        if policy.fail_action:
            report.failure_message = policy.rendered_comment
        if policy.create_review:
            try:
                report.steps.append(create_or_update_review(client, ref, policy))
            except RECOVERABLE_ERRORS as e:
                # With fail_action the step fails anyway; keep its message.
                if not policy.fail_action:
                    raise
                logger.error("Could not post the title review on PR #%d: %s", ref.number, describe_error(e))
                report.steps.append(StepResult("create review", Outcome.ABANDONED, describe_error(e)))
        return report

    logger.info("PR #%d title matches %s", ref.number, policy.pattern.pattern)
    if policy.create_review:
        logger.info("Dismissing any existing reviews")
        report.steps.append(dismiss_review(client, ref, policy))
        if policy.minimize_on_success:
            report.steps.extend(minimize_existing_feedback(client, ref, policy))
    return report
