"""Shared fixtures for prlint_core tests."""

import re
from unittest.mock import MagicMock

import pytest

from prlint_core.gh.client import GitHubClient
from prlint_core.models import BotComment, BotReview, CommentSource, MinimizeOutcome, PullRequestRef, ReviewState, TitlePolicy

BOT = "github-actions[bot]"
PATTERN = r"^(feat|fix|chore):"


def make_policy(**overrides) -> TitlePolicy:
    fields = {
        "pattern": re.compile(PATTERN),
        "failure_comment": "Title must match `%regex%`",
        "fail_action": False,
        "create_review": True,
        "request_changes": False,
        "dismiss_comment": "All good!",
        "minimize_on_success": True,
        "minimize_reason": "RESOLVED",
        "minimize_scope": "all",
        "bot_login": BOT,
    }
    fields.update(overrides)
    return TitlePolicy(**fields)


def review(id, state="COMMENTED", login=BOT) -> BotReview:
    return BotReview(id=id, state=ReviewState(state), author_login=login)


def comment(id, login=BOT, source=CommentSource.ISSUE_COMMENT) -> BotComment:
    return BotComment(database_id=id, author_login=login, source=source)


@pytest.fixture
def ref():
    return PullRequestRef(owner="octo", repo="widgets", number=7)


@pytest.fixture
def policy():
    return make_policy()


@pytest.fixture
def client():
    mock = MagicMock(spec=GitHubClient)
    mock.list_reviews.return_value = []
    mock.list_issue_comments.return_value = []
    mock.list_review_comments.return_value = []
    mock.create_review.return_value = 999
    mock.minimize.return_value = MinimizeOutcome(is_minimized=True, reason="RESOLVED")
    return mock
