# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
The approval run as an explicit state machine.

    FETCHING -> FILTERING -> DONE                       (no candidates)
                          -> LISTING -> APPROVING        (forced)
                                     -> PROMPTING -> APPROVING | ABORTED
    APPROVING -> REPORTING -> DONE

Fetch failures, exhausted selection attempts and interrupts end in ABORTED;
the error is re-raised for the caller to turn into an exit code.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, FrozenSet, List, Optional, Tuple

import bittensor as bt

from dependabot_approve.approvals.candidates import filter_candidates, is_authored_by
from dependabot_approve.approvals.executor import iter_approvals
from dependabot_approve.approvals.fetch import correlate_statuses, fetch_open_pull_requests
from dependabot_approve.approvals.selection import prompt_for_selection
from dependabot_approve.classes import ApprovalOutcome, PullRequestCandidate, SelectionSet, StatusState
from dependabot_approve.constants import DEFAULT_BOT_AUTHORS, MAX_SELECTION_ATTEMPTS
from dependabot_approve.exceptions import DependabotApproveError
from dependabot_approve.utils.github_api_tools import GitHubClient
from dependabot_approve.utils.logging import log_outcome_event

if TYPE_CHECKING:
    from dependabot_approve.cli.reporter import ResultReporter


class RunState(Enum):
    FETCHING = "fetching"
    FILTERING = "filtering"
    LISTING = "listing"
    PROMPTING = "prompting"
    APPROVING = "approving"
    REPORTING = "reporting"
    DONE = "done"
    ABORTED = "aborted"


@dataclass(frozen=True)
class RunOptions:
    """What to look for and how to approve it"""

    owner: str
    repo: str
    authors: Tuple[str, ...] = DEFAULT_BOT_AUTHORS
    status_context: Optional[str] = None
    status_user: Optional[str] = None
    allowed_states: Optional[FrozenSet[StatusState]] = None
    force: bool = False
    dry_run: bool = False
    max_selection_attempts: int = MAX_SELECTION_ATTEMPTS

    @property
    def wants_status(self) -> bool:
        return self.status_context is not None or self.status_user is not None

    @property
    def repository(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass
class RunResult:
    state: RunState
    candidates: List[PullRequestCandidate] = field(default_factory=list)
    selection: Optional[SelectionSet] = None
    outcomes: List[ApprovalOutcome] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    transitions: List[RunState] = field(default_factory=list)

    @property
    def failed(self) -> List[ApprovalOutcome]:
        return [o for o in self.outcomes if not o.succeeded]


class ApprovalRun:
    """Drives one invocation from fetching to reporting.

    ``read_selection`` supplies one line of operator input per call and is
    never called in forced mode.
    """

    def __init__(
        self,
        client: GitHubClient,
        options: RunOptions,
        reporter: 'ResultReporter',
        read_selection: Callable[[], str],
        events_logger: Optional[logging.Logger] = None,
    ):
        self.client = client
        self.options = options
        self.reporter = reporter
        self.read_selection = read_selection
        self.events_logger = events_logger
        self.result = RunResult(state=RunState.FETCHING, transitions=[RunState.FETCHING])

    def _enter(self, state: RunState) -> None:
        bt.logging.debug(f"Run state: {self.result.state.value} -> {state.value}")
        self.result.state = state
        self.result.transitions.append(state)

    def run(self) -> RunResult:
        try:
            candidates = self._collect_candidates()
            if not candidates:
                self.reporter.render_no_candidates()
                self._enter(RunState.DONE)
                return self.result

            self._enter(RunState.LISTING)
            self.reporter.render_candidates(candidates)

            selection = self._choose(candidates)
        except (DependabotApproveError, KeyboardInterrupt):
            self._enter(RunState.ABORTED)
            raise

        self._enter(RunState.APPROVING)
        try:
            for outcome in iter_approvals(
                self.client,
                self.options.owner,
                self.options.repo,
                candidates,
                selection,
                dry_run=self.options.dry_run,
            ):
                self.result.outcomes.append(outcome)
                log_outcome_event(self.events_logger, self.options.repository, outcome)
        except KeyboardInterrupt:
            # Outcomes gathered so far are still reported
            self._enter(RunState.ABORTED)
            self.reporter.render_outcomes(self.result.outcomes)
            raise

        self._enter(RunState.REPORTING)
        self.reporter.render_outcomes(self.result.outcomes)
        self.reporter.render_summary(self.result.outcomes)
        self._enter(RunState.DONE)
        return self.result

    def _collect_candidates(self) -> List[PullRequestCandidate]:
        options = self.options
        pull_requests = fetch_open_pull_requests(self.client, options.owner, options.repo)

        self._enter(RunState.FILTERING)
        authored = [pr for pr in pull_requests if is_authored_by(pr, options.authors)]

        statuses = None
        if options.wants_status:
            statuses, warnings = correlate_statuses(
                self.client,
                options.owner,
                options.repo,
                authored,
                context=options.status_context,
                creator=options.status_user,
            )
            self.result.warnings.extend(warnings)
            self.reporter.render_warnings(warnings)

        candidates = filter_candidates(
            authored,
            options.authors,
            statuses=statuses,
            allowed_states=options.allowed_states,
        )
        bt.logging.info(
            f"{len(candidates)} of {len(pull_requests)} open pull requests in {options.repository} are candidates"
        )
        self.result.candidates = candidates
        return candidates

    def _choose(self, candidates: List[PullRequestCandidate]) -> SelectionSet:
        if self.options.force:
            selection = SelectionSet.everything(len(candidates))
        else:
            self._enter(RunState.PROMPTING)
            self.reporter.render_prompt_help()
            selection = prompt_for_selection(
                len(candidates),
                self.read_selection,
                on_error=self.reporter.render_selection_error,
                max_attempts=self.options.max_selection_attempts,
            )
        self.result.selection = selection
        return selection
