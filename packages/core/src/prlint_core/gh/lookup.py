"""Bot identity filtering and database-id to node-id resolution.

The REST API hands out integer database ids while the minimize mutation
wants GraphQL node ids. Node ids are resolved fresh on every run.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from prlint_core.models import BotComment, BotReview, CommentSource, PullRequestRef, ReviewState
from prlint_core.steps import RECOVERABLE_ERRORS, describe_error

if TYPE_CHECKING:
    from prlint_core.gh.client import GitHubClient

logger = logging.getLogger(__name__)

# GitHub's page-size ceiling. PRs with more reviews or comments than this may not resolve.
PAGE_SIZE = 100

REVIEW_NODE_ID_QUERY = """
query GetReviewNodeId($owner: String!, $repo: String!, $prNumber: Int!, $pageSize: Int!) {
  repository(owner: $owner, name: $repo) {
    pullRequest(number: $prNumber) {
      reviews(first: $pageSize) {
        nodes {
          id
          databaseId
        }
      }
    }
  }
}
"""

ISSUE_COMMENT_NODE_ID_QUERY = """
query GetCommentNodeId($owner: String!, $repo: String!, $prNumber: Int!, $pageSize: Int!) {
  repository(owner: $owner, name: $repo) {
    issueOrPullRequest(number: $prNumber) {
      ... on Issue {
        comments(first: $pageSize) {
          nodes {
            id
            databaseId
          }
        }
      }
      ... on PullRequest {
        comments(first: $pageSize) {
          nodes {
            id
            databaseId
          }
        }
      }
    }
  }
}
"""

REVIEW_COMMENT_NODE_ID_QUERY = """
query GetReviewCommentNodeId($owner: String!, $repo: String!, $prNumber: Int!, $pageSize: Int!) {
  repository(owner: $owner, name: $repo) {
    pullRequest(number: $prNumber) {
      reviewThreads(first: $pageSize) {
        nodes {
          comments(first: $pageSize) {
            nodes {
              id
              databaseId
            }
          }
        }
      }
    }
  }
}
"""


def is_bot(login: str | None, bot_login: str) -> bool:
    return bool(login) and login == bot_login


def find_bot_review(reviews: list[BotReview], bot_login: str, include_dismissed: bool = False) -> BotReview | None:
    """Return the first review authored by the bot, or None.

    Dismissed reviews have ended their lifecycle and are ignored unless
    ``include_dismissed`` is set (minimization still wants them).
    """
    for review in reviews:
        if not is_bot(review.author_login, bot_login):
            continue
        if review.state is ReviewState.DISMISSED and not include_dismissed:
            continue
        return review
    return None


def filter_bot_comments(comments: list[BotComment], bot_login: str) -> list[BotComment]:
    return [c for c in comments if is_bot(c.author_login, bot_login)]


def _variables(ref: PullRequestRef) -> dict:
    return {"owner": ref.owner, "repo": ref.repo, "prNumber": ref.number, "pageSize": PAGE_SIZE}


def _match_node_id(nodes: list[dict], database_id: int, kind: str) -> str | None:
    matches = [n.get("id") for n in nodes if n and n.get("databaseId") == database_id]
    if not matches:
        logger.info("No %s found with database ID %d", kind, database_id)
        return None
    if len(matches) > 1:
        logger.warning(
            "Found %d %ss sharing database ID %d; using the first (%s)", len(matches), kind, database_id, matches[0]
        )
    return matches[0]


def resolve_review_node_id(client: GitHubClient, ref: PullRequestRef, database_id: int) -> str | None:
    """Return the node id of review ``database_id``, or None if it can't be found."""
    try:
        data = client.graphql(REVIEW_NODE_ID_QUERY, _variables(ref))
    except RECOVERABLE_ERRORS as e:
        logger.warning("Error fetching review node ID for %d: %s", database_id, describe_error(e))
        return None

    pull = (data.get("repository") or {}).get("pullRequest")
    if not pull:
        logger.info("No PR found for number %d", ref.number)
        return None
    nodes = (pull.get("reviews") or {}).get("nodes") or []
    node_id = _match_node_id(nodes, database_id, "review")
    if node_id:
        logger.debug("Review %d has node ID %s", database_id, node_id)
    return node_id


def resolve_comment_node_id(client: GitHubClient, ref: PullRequestRef, comment: BotComment) -> str | None:
    """Return the node id of ``comment``, or None if it can't be found."""
    if comment.source is CommentSource.REVIEW_COMMENT:
        query = REVIEW_COMMENT_NODE_ID_QUERY
    else:
        query = ISSUE_COMMENT_NODE_ID_QUERY

    try:
        data = client.graphql(query, _variables(ref))
    except RECOVERABLE_ERRORS as e:
        logger.warning("Error fetching comment node ID for %d: %s", comment.database_id, describe_error(e))
        return None

    repository = data.get("repository") or {}
    if comment.source is CommentSource.REVIEW_COMMENT:
        pull = repository.get("pullRequest")
        if not pull:
            logger.info("No PR found for number %d", ref.number)
            return None
        nodes = []
        for thread in (pull.get("reviewThreads") or {}).get("nodes") or []:
            nodes.extend(((thread or {}).get("comments") or {}).get("nodes") or [])
    else:
        issue = repository.get("issueOrPullRequest")
        if not issue:
            logger.info("No issue or PR found for number %d", ref.number)
            return None
        nodes = (issue.get("comments") or {}).get("nodes") or []

    node_id = _match_node_id(nodes, comment.database_id, "comment")
    if node_id:
        comment.node_id = node_id
    return node_id
