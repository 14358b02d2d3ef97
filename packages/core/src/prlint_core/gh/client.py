"""Thin wrapper over PyGithub for the REST and GraphQL calls prlint needs.

Every method maps the platform payload into prlint_core.models types and
lets PyGithub errors propagate; deciding which failures are recoverable is
the caller's job.
"""

from __future__ import annotations

import logging

from github import Auth, Github

from prlint_core.models import BotComment, BotReview, CommentSource, MinimizeOutcome, PullRequestRef, ReviewState

logger = logging.getLogger(__name__)

MINIMIZE_MUTATION = """
mutation MinimizeComment($input: MinimizeCommentInput!) {
  minimizeComment(input: $input) {
    minimizedComment {
      isMinimized
      minimizedReason
    }
  }
}
"""


def _login(user) -> str:
    return user.login if user is not None else ""


class GitHubClient:
    """REST and GraphQL operations scoped to a single pull request at a time."""

    def __init__(self, gh: Github):
        self._gh = gh
        self._pulls: dict[PullRequestRef, object] = {}

    @classmethod
    def from_token(cls, token: str, base_url: str | None = None) -> GitHubClient:
        # retry=None: a failed call is attempted once, then falls back or is abandoned.
        kwargs = {"auth": Auth.Token(token), "retry": None}
        if base_url:
            kwargs["base_url"] = base_url
        return cls(Github(**kwargs))

    def _pull(self, ref: PullRequestRef):
        if ref not in self._pulls:
            repo = self._gh.get_repo(ref.full_name, lazy=True)
            self._pulls[ref] = repo.get_pull(ref.number)
        return self._pulls[ref]

    def _reviews_url(self, ref: PullRequestRef) -> str:
        return f"/repos/{ref.full_name}/pulls/{ref.number}/reviews"

    # --- Pull request ---

    def get_title(self, ref: PullRequestRef) -> str:
        return self._pull(ref).title or ""

    # --- Reviews ---

    def list_reviews(self, ref: PullRequestRef) -> list[BotReview]:
        """Return every review on the PR in the platform's listing order."""
        reviews = [
            BotReview(id=r.id, state=ReviewState.from_api(r.state), author_login=_login(r.user))
            for r in self._pull(ref).get_reviews()
        ]
        logger.debug("list_reviews(#%d) returned %d review(s)", ref.number, len(reviews))
        return reviews

    def create_review(self, ref: PullRequestRef, body: str, event: str) -> int:
        review = self._pull(ref).create_review(body=body, event=event)
        logger.debug("create_review(#%d, event=%s) -> %s", ref.number, event, review.id)
        return review.id

    def update_review(self, ref: PullRequestRef, review_id: int, body: str) -> None:
        """Replace a review's body. The review's state is left as it is."""
        self._gh.requester.requestJsonAndCheck("PUT", f"{self._reviews_url(ref)}/{review_id}", input={"body": body})
        logger.debug("update_review(#%d, %d) succeeded", ref.number, review_id)

    def dismiss_review(self, ref: PullRequestRef, review_id: int, message: str) -> None:
        self._gh.requester.requestJsonAndCheck(
            "PUT",
            f"{self._reviews_url(ref)}/{review_id}/dismissals",
            input={"message": message, "event": "DISMISS"},
        )
        logger.debug("dismiss_review(#%d, %d) succeeded", ref.number, review_id)

    # --- Comments ---

    def list_issue_comments(self, ref: PullRequestRef) -> list[BotComment]:
        comments = [
            BotComment(database_id=c.id, author_login=_login(c.user), source=CommentSource.ISSUE_COMMENT)
            for c in self._pull(ref).get_issue_comments()
        ]
        logger.debug("list_issue_comments(#%d) returned %d comment(s)", ref.number, len(comments))
        return comments

    def list_review_comments(self, ref: PullRequestRef) -> list[BotComment]:
        comments = [
            BotComment(database_id=c.id, author_login=_login(c.user), source=CommentSource.REVIEW_COMMENT)
            for c in self._pull(ref).get_review_comments()
        ]
        logger.debug("list_review_comments(#%d) returned %d comment(s)", ref.number, len(comments))
        return comments

    # --- GraphQL ---

    def graphql(self, query: str, variables: dict) -> dict:
        """Run a GraphQL query and return its ``data`` object ({} when absent)."""
        _, response = self._gh.requester.graphql_query(query, variables)
        return (response or {}).get("data") or {}

    def minimize(self, node_id: str, classifier: str, mutation_id: str) -> MinimizeOutcome:
        data = self.graphql(
            MINIMIZE_MUTATION,
            {"input": {"subjectId": node_id, "classifier": classifier, "clientMutationId": mutation_id}},
        )
        minimized = (data.get("minimizeComment") or {}).get("minimizedComment") or {}
        return MinimizeOutcome(
            is_minimized=bool(minimized.get("isMinimized")),
            reason=minimized.get("minimizedReason"),
        )
