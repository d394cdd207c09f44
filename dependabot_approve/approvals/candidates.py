# The MIT License (MIT)
# Copyright © 2025 Entrius

"""Narrowing fetched pull requests to approval candidates."""

from typing import Collection, Dict, List, Optional

from dependabot_approve.classes import PullRequest, PullRequestCandidate, StatusState


def is_authored_by(pull_request: PullRequest, authors: Collection[str]) -> bool:
    """Exact, case-sensitive match of the PR author against the target accounts."""
    return pull_request.author in authors


def filter_candidates(
    pull_requests: List[PullRequest],
    authors: Collection[str],
    statuses: Optional[Dict[int, StatusState]] = None,
    allowed_states: Optional[Collection[StatusState]] = None,
) -> List[PullRequestCandidate]:
    """
    Keep pull requests opened by ``authors`` and number them 1..N in fetch order.

    Args:
        pull_requests: Pull requests in fetch order
        authors: Target automation account names
        statuses: Correlated status by PR number. None when no status was requested.
        allowed_states: When given, only candidates whose status is in it are kept

    Returns:
        List[PullRequestCandidate]: Candidates with contiguous 1-based indices
    """
    candidates: List[PullRequestCandidate] = []

    for pr in pull_requests:
        if not is_authored_by(pr, authors):
            continue

        status_state = None
        if statuses is not None:
            status_state = statuses.get(pr.number, StatusState.UNKNOWN)

        if allowed_states is not None and status_state not in allowed_states:
            continue

        candidates.append(
            PullRequestCandidate(
                index=len(candidates) + 1,
                number=pr.number,
                title=pr.title,
                author=pr.author,
                head_sha=pr.head_sha,
                status_state=status_state,
            )
        )

    return candidates
