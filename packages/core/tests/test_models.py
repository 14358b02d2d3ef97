"""Tests for the shared data models."""

import pytest

from prlint_core.models import Outcome, PullRequestRef, ReviewState, RunReport, StepResult


class TestPullRequestRef:
    def test_parse(self):
        ref = PullRequestRef.parse("octo/widgets", 7)
        assert ref == PullRequestRef(owner="octo", repo="widgets", number=7)
        assert ref.full_name == "octo/widgets"

    @pytest.mark.parametrize("name", ["widgets", "/widgets", "octo/", "a/b/c"])
    def test_parse_rejects_bad_names(self, name):
        with pytest.raises(ValueError):
            PullRequestRef.parse(name, 1)

    def test_is_hashable(self):
        assert len({PullRequestRef("o", "r", 1), PullRequestRef("o", "r", 1)}) == 1


class TestReviewState:
    @pytest.mark.parametrize("value", ["APPROVED", "approved", "CHANGES_REQUESTED", "DISMISSED"])
    def test_known_values(self, value):
        assert ReviewState.from_api(value).value == value.upper()

    def test_unknown_and_missing(self):
        assert ReviewState.from_api("BRAND_NEW") is ReviewState.UNKNOWN
        assert ReviewState.from_api(None) is ReviewState.UNKNOWN


def test_run_report_failed():
    ref = PullRequestRef("o", "r", 1)
    assert RunReport(ref=ref, title="t", matched=True).failed is False
    assert RunReport(ref=ref, title="t", matched=False, failure_message="").failed is True


def test_step_result_defaults():
    assert StepResult("x", Outcome.SKIPPED).detail == ""
