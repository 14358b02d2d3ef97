"""Tests for best-effort step execution."""

from unittest.mock import MagicMock

import pytest
import requests
from github import GithubException

from prlint_core.models import Outcome
from prlint_core.steps import attempt, describe_error


class TestAttempt:
    def test_success(self):
        result = attempt("do thing", lambda: "done")
        assert result.outcome is Outcome.SUCCESS
        assert result.detail == "done"

    def test_failure_without_fallback_abandoned(self):
        def boom():
            raise GithubException(403, {"message": "Forbidden"})

        result = attempt("do thing", boom)

        assert result.outcome is Outcome.ABANDONED
        assert result.detail == "403 Forbidden"

    def test_fallback_runs_once_after_failure(self):
        primary = MagicMock(side_effect=requests.ConnectionError("reset"))
        fallback = MagicMock(return_value="plan b")

        result = attempt("do thing", primary, fallback=fallback)

        primary.assert_called_once()
        fallback.assert_called_once()
        assert result.outcome is Outcome.FALLBACK
        assert result.detail == "plan b"

    def test_fallback_not_run_on_success(self):
        fallback = MagicMock()

        attempt("do thing", lambda: None, fallback=fallback)

        fallback.assert_not_called()

    def test_both_fail_abandoned(self):
        primary = MagicMock(side_effect=GithubException(422, {"message": "no"}))
        fallback = MagicMock(side_effect=GithubException(500, {"message": "also no"}))

        result = attempt("do thing", primary, fallback=fallback)

        assert result.outcome is Outcome.ABANDONED
        assert "500" in result.detail

    def test_programming_errors_propagate(self):
        def broken():
            raise TypeError("bug")

        with pytest.raises(TypeError):
            attempt("do thing", broken, fallback=lambda: "never")


class TestDescribeError:
    def test_github_exception_with_message(self):
        assert describe_error(GithubException(404, {"message": "Not Found"})) == "404 Not Found"

    def test_github_exception_with_string_data(self):
        assert describe_error(GithubException(502, "Bad gateway")) == "502 Bad gateway"

    def test_other_exception(self):
        assert describe_error(requests.Timeout("slow")) == "Timeout: slow"
