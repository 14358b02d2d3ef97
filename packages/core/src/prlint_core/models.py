"""Data models shared by the evaluator, reconciler and minimizer.

Platform payloads are mapped into these types at the client boundary so the
rest of the package never touches PyGithub objects or raw GraphQL dicts.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

from prlint_core.evaluator import render_comment


@dataclass(frozen=True)
class PullRequestRef:
    """Identifies the pull request every operation targets."""

    owner: str
    repo: str
    number: int

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @classmethod
    def parse(cls, full_name: str, number: int) -> PullRequestRef:
        """Build a ref from an ``owner/name`` string."""
        owner, sep, repo = full_name.partition("/")
        if not sep or not owner or not repo or "/" in repo:
            raise ValueError(f"Repository must be in owner/name format, got {full_name!r}.")
        return cls(owner=owner, repo=repo, number=int(number))


@dataclass(frozen=True)
class TitlePolicy:
    """Everything the run needs to know about how to react to a title.

    Built once by ``prlint_core.config.build_policy`` and passed to every
    component.
    """

    pattern: re.Pattern
    failure_comment: str = ""
    fail_action: bool = False
    create_review: bool = False
    request_changes: bool = False
    dismiss_comment: str = ""
    minimize_on_success: bool = False
    minimize_reason: str = "RESOLVED"
    minimize_scope: str = "all"  # "all" | "reviews" | "comments"
    bot_login: str = "github-actions[bot]"

    @property
    def rendered_comment(self) -> str:
        return render_comment(self.failure_comment, self.pattern)


class ReviewState(str, Enum):
    PENDING = "PENDING"
    COMMENTED = "COMMENTED"
    APPROVED = "APPROVED"
    CHANGES_REQUESTED = "CHANGES_REQUESTED"
    DISMISSED = "DISMISSED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_api(cls, value: str | None) -> ReviewState:
        try:
            return cls((value or "").upper())
        except ValueError:
            return cls.UNKNOWN


@dataclass
class BotReview:
    id: int
    state: ReviewState
    author_login: str
    node_id: str | None = None


class CommentSource(str, Enum):
    ISSUE_COMMENT = "ISSUE_COMMENT"
    REVIEW_COMMENT = "REVIEW_COMMENT"


@dataclass
class BotComment:
    database_id: int
    author_login: str
    source: CommentSource
    node_id: str | None = None


@dataclass(frozen=True)
class MinimizeOutcome:
    """What the minimize mutation reported back. Logged, never branched on."""

    is_minimized: bool
    reason: str | None = None


class Outcome(str, Enum):
    SUCCESS = "success"
    FALLBACK = "fallback"  # primary action failed, the alternate one went through
    ABANDONED = "abandoned"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class StepResult:
    action: str
    outcome: Outcome
    detail: str = ""


@dataclass
class RunReport:
    """Result of one run of the title check."""

    ref: PullRequestRef
    title: str
    matched: bool
    steps: list[StepResult] = field(default_factory=list)
    failure_message: str | None = None

    @property
    def failed(self) -> bool:
        return self.failure_message is not None
