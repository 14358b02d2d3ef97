"""Tests for the review and comment minimization sweeps."""

import requests
from github import GithubException

from conftest import make_policy, review
from conftest import comment as bot_comment
from prlint_core.minimizer import minimize_comments, minimize_existing_feedback, minimize_review
from prlint_core.models import CommentSource, Outcome

REVIEW = CommentSource.REVIEW_COMMENT

# ---------------------------------------------------------------------------
# minimize_review
# ---------------------------------------------------------------------------


class TestMinimizeReview:
    def test_no_bot_review_skips(self, client, ref, policy, mocker):
        resolve = mocker.patch("prlint_core.minimizer.resolve_review_node_id")

        result = minimize_review(client, ref, policy)

        assert result.outcome is Outcome.SKIPPED
        resolve.assert_not_called()
        client.minimize.assert_not_called()

    def test_minimizes_resolved_review(self, client, ref, policy, mocker):
        client.list_reviews.return_value = [review(21, "COMMENTED")]
        mocker.patch("prlint_core.minimizer.resolve_review_node_id", return_value="PRR_node21")

        result = minimize_review(client, ref, policy)

        assert result.outcome is Outcome.SUCCESS
        args, kwargs = client.minimize.call_args
        assert args == ("PRR_node21",)
        assert kwargs["classifier"] == "RESOLVED"
        assert kwargs["mutation_id"].startswith("prlint-review-7-")

    def test_dismissed_review_still_minimized(self, client, ref, policy, mocker):
        client.list_reviews.return_value = [review(22, "DISMISSED")]
        resolve = mocker.patch("prlint_core.minimizer.resolve_review_node_id", return_value="PRR_node22")

        minimize_review(client, ref, policy)

        resolve.assert_called_once_with(client, ref, 22)
        client.minimize.assert_called_once()

    def test_unresolved_node_id_skips_mutation(self, client, ref, policy, mocker):
        client.list_reviews.return_value = [review(23)]
        mocker.patch("prlint_core.minimizer.resolve_review_node_id", return_value=None)

        result = minimize_review(client, ref, policy)

        assert result.outcome is Outcome.SKIPPED
        client.minimize.assert_not_called()

    def test_mutation_failure_falls_back_to_dismiss(self, client, ref, policy, mocker):
        client.list_reviews.return_value = [review(24, "CHANGES_REQUESTED")]
        mocker.patch("prlint_core.minimizer.resolve_review_node_id", return_value="PRR_node24")
        client.minimize.side_effect = GithubException(400, {"message": "Could not resolve to a node"})

        result = minimize_review(client, ref, policy)

        client.dismiss_review.assert_called_once_with(ref, 24, message="All good!")
        assert result.outcome is Outcome.FALLBACK

    def test_mutation_and_dismiss_failure_abandoned(self, client, ref, policy, mocker):
        client.list_reviews.return_value = [review(25, "APPROVED")]
        mocker.patch("prlint_core.minimizer.resolve_review_node_id", return_value="PRR_node25")
        client.minimize.side_effect = requests.ConnectionError("reset")
        client.dismiss_review.side_effect = GithubException(403, {"message": "Forbidden"})

        result = minimize_review(client, ref, policy)

        assert result.outcome is Outcome.ABANDONED
        client.create_review.assert_not_called()

    def test_fallback_dismisses_the_review_it_tried_to_minimize(self, client, ref, policy, mocker):
        client.list_reviews.return_value = [review(26, "DISMISSED"), review(27, "COMMENTED")]
        mocker.patch("prlint_core.minimizer.resolve_review_node_id", return_value="PRR_node26")
        client.minimize.side_effect = GithubException(403, {"message": "Forbidden"})

        minimize_review(client, ref, policy)

        client.dismiss_review.assert_called_once_with(ref, 26, message="All good!")
        client.create_review.assert_not_called()


# ---------------------------------------------------------------------------
# minimize_comments
# ---------------------------------------------------------------------------


class TestMinimizeComments:
    def test_only_bot_comments_resolved_and_minimized(self, client, ref, policy, mocker):
        client.list_review_comments.return_value = [
            bot_comment(1, source=REVIEW),
            bot_comment(2, login="alice", source=REVIEW),
        ]
        client.list_issue_comments.return_value = [
            bot_comment(3, login="bob"),
            bot_comment(4),
            bot_comment(5, login="carol"),
        ]
        resolve = mocker.patch(
            "prlint_core.minimizer.resolve_comment_node_id", side_effect=lambda c, r, cm: f"NODE_{cm.database_id}"
        )

        results = minimize_comments(client, ref, policy)

        looked_up = [call.args[2].database_id for call in resolve.call_args_list]
        assert looked_up == [1, 4]
        assert [call.args[0] for call in client.minimize.call_args_list] == ["NODE_1", "NODE_4"]
        assert all(r.outcome is Outcome.SUCCESS for r in results)

    def test_comment_mutation_ids_use_pr_number(self, client, ref, policy, mocker):
        client.list_issue_comments.return_value = [bot_comment(8)]
        mocker.patch("prlint_core.minimizer.resolve_comment_node_id", return_value="IC_8")

        minimize_comments(client, ref, policy)

        assert client.minimize.call_args.kwargs["mutation_id"].startswith("prlint-7-")

    def test_unresolved_comment_skipped_without_error(self, client, ref, policy, mocker):
        client.list_issue_comments.return_value = [bot_comment(9)]
        mocker.patch("prlint_core.minimizer.resolve_comment_node_id", return_value=None)

        results = minimize_comments(client, ref, policy)

        client.minimize.assert_not_called()
        assert [r.outcome for r in results] == [Outcome.SKIPPED]

    def test_one_failure_does_not_block_others(self, client, ref, policy, mocker):
        client.list_issue_comments.return_value = [bot_comment(10), bot_comment(11)]
        mocker.patch("prlint_core.minimizer.resolve_comment_node_id", side_effect=["IC_10", "IC_11"])
        client.minimize.side_effect = [GithubException(403, {"message": "Forbidden"}), client.minimize.return_value]

        results = minimize_comments(client, ref, policy)

        assert [r.outcome for r in results] == [Outcome.ABANDONED, Outcome.SUCCESS]
        client.dismiss_review.assert_not_called()

    def test_no_bot_comments(self, client, ref, policy):
        client.list_issue_comments.return_value = [bot_comment(12, login="alice")]

        results = minimize_comments(client, ref, policy)

        assert [r.outcome for r in results] == [Outcome.SKIPPED]
        client.minimize.assert_not_called()

    def test_listing_failure_abandons_sweep(self, client, ref, policy):
        client.list_review_comments.side_effect = GithubException(500, "boom")

        results = minimize_comments(client, ref, policy)

        assert [r.outcome for r in results] == [Outcome.ABANDONED]


# ---------------------------------------------------------------------------
# minimize_existing_feedback
# ---------------------------------------------------------------------------


class TestMinimizeExistingFeedback:
    def _patch(self, mocker):
        reviews = mocker.patch("prlint_core.minimizer.minimize_review")
        comments = mocker.patch("prlint_core.minimizer.minimize_comments", return_value=[])
        return reviews, comments

    def test_all_scope_runs_both_sweeps_once(self, client, ref, policy, mocker):
        reviews, comments = self._patch(mocker)

        minimize_existing_feedback(client, ref, policy)

        reviews.assert_called_once_with(client, ref, policy)
        comments.assert_called_once_with(client, ref, policy)

    def test_reviews_scope(self, client, ref, mocker):
        reviews, comments = self._patch(mocker)

        minimize_existing_feedback(client, ref, make_policy(minimize_scope="reviews"))

        reviews.assert_called_once()
        comments.assert_not_called()

    def test_comments_scope(self, client, ref, mocker):
        reviews, comments = self._patch(mocker)

        minimize_existing_feedback(client, ref, make_policy(minimize_scope="comments"))

        reviews.assert_not_called()
        comments.assert_called_once()
