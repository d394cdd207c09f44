from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional

from dependabot_approve.utils.utils import parse_github_timestamp


class StatusState(Enum):
    """Commit status as reported by a status context"""

    SUCCESS = "success"
    PENDING = "pending"
    FAILURE = "failure"
    UNKNOWN = "unknown"

    @classmethod
    def from_github(cls, state: Optional[str]) -> 'StatusState':
        """Map a GitHub status ``state`` string. ``error`` counts as a failure."""
        if not state:
            return cls.UNKNOWN
        state = state.lower()
        if state == "error":
            return cls.FAILURE
        try:
            return cls(state)
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class PullRequest:
    """Raw open pull request record as returned by the hosting API"""

    number: int
    title: str
    author: str
    head_sha: str
    head_ref: str = ""
    html_url: str = ""

    @classmethod
    def from_github_response(cls, pr_data: Dict[str, Any]) -> 'PullRequest':
        """Create PullRequest from a REST ``/pulls`` list entry"""
        head = pr_data.get('head') or {}
        user = pr_data.get('user') or {}
        return cls(
            number=pr_data['number'],
            title=pr_data.get('title') or '',
            author=user.get('login') or '',
            head_sha=head.get('sha') or '',
            head_ref=head.get('ref') or '',
            html_url=pr_data.get('html_url') or '',
        )


@dataclass(frozen=True)
class CommitStatus:
    """A single status posted against a commit"""

    state: StatusState
    context: str
    creator: str
    created_at: datetime

    @classmethod
    def from_github_response(cls, status_data: Dict[str, Any]) -> 'CommitStatus':
        creator = status_data.get('creator') or {}
        return cls(
            state=StatusState.from_github(status_data.get('state')),
            context=status_data.get('context') or '',
            creator=creator.get('login') or '',
            created_at=parse_github_timestamp(status_data.get('created_at')),
        )


@dataclass(frozen=True)
class PullRequestCandidate:
    """A pull request that passed author filtering and is eligible for approval.

    ``index`` is the 1-based position in the filtered list, stable for the run.
    ``status_state`` is None when no status criterion was requested.
    """

    index: int
    number: int
    title: str
    author: str
    head_sha: str = ""
    status_state: Optional[StatusState] = None

    @property
    def status_label(self) -> str:
        return self.status_state.value if self.status_state is not None else "-"


@dataclass(frozen=True)
class SelectionSet:
    """Indices chosen by the operator. ``is_all`` marks the "all" sentinel."""

    indices: FrozenSet[int] = field(default_factory=frozenset)
    is_all: bool = False

    @classmethod
    def everything(cls, candidate_count: int) -> 'SelectionSet':
        return cls(indices=frozenset(range(1, candidate_count + 1)), is_all=True)

    def resolve(self, candidates: List[PullRequestCandidate]) -> List[PullRequestCandidate]:
        """Return the selected candidates in ascending index order"""
        by_index = {c.index: c for c in candidates}
        return [by_index[i] for i in sorted(self.indices) if i in by_index]


@dataclass(frozen=True)
class ApprovalOutcome:
    """Result of one approval attempt"""

    candidate: PullRequestCandidate
    succeeded: bool
    failure_detail: Optional[str] = None
    dry_run: bool = False


@dataclass(frozen=True)
class Review:
    """A review left on a pull request"""

    id: int
    pr_number: int
    author: str
    body: str
    state: str = ""

    @classmethod
    def from_github_response(cls, pr_number: int, review_data: Dict[str, Any]) -> 'Review':
        user = review_data.get('user') or {}
        return cls(
            id=review_data['id'],
            pr_number=pr_number,
            author=user.get('login') or '',
            body=review_data.get('body') or '',
            state=review_data.get('state') or '',
        )

    def is_junk(self, login: Optional[str] = None, text: Optional[str] = None) -> bool:
        """True when the review matches every criterion given"""
        if login is not None and login != self.author:
            return False
        if text is not None and text not in self.body:
            return False
        return True


@dataclass(frozen=True)
class DismissalOutcome:
    """Result of one review dismissal attempt"""

    review: Review
    succeeded: bool
    failure_detail: Optional[str] = None
    dry_run: bool = False
