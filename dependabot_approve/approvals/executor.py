# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Submitting approval reviews and dismissing junk reviews.

Every submission is independent: a failure is captured as an outcome and the
remaining items are still attempted. Nothing is retried.
"""

from typing import Iterator, List

import bittensor as bt

from dependabot_approve.classes import (
    ApprovalOutcome,
    DismissalOutcome,
    PullRequestCandidate,
    Review,
    SelectionSet,
)
from dependabot_approve.constants import APPROVAL_BODY, APPROVAL_EVENT, DISMISSAL_MESSAGE
from dependabot_approve.exceptions import ApiError, ApprovalFailure
from dependabot_approve.utils.github_api_tools import GitHubClient


def build_approval_payload(candidate: PullRequestCandidate) -> dict:
    """Review payload pinned to the head commit that was listed to the operator."""
    payload = {
        'body': APPROVAL_BODY,
        'event': APPROVAL_EVENT,
        'comments': [],
    }
    if candidate.head_sha:
        payload['commit_id'] = candidate.head_sha
    return payload


def submit_approval(client: GitHubClient, owner: str, repo: str, candidate: PullRequestCandidate) -> None:
    """
    Submit one approval review.

    Raises:
        ApprovalFailure: If the API rejects the review or cannot be reached
    """
    path = f'/repos/{owner}/{repo}/pulls/{candidate.number}/reviews'
    try:
        client.post_json(path, build_approval_payload(candidate))
    except ApiError as e:
        raise ApprovalFailure(candidate.number, str(e)) from e


def iter_approvals(
    client: GitHubClient,
    owner: str,
    repo: str,
    candidates: List[PullRequestCandidate],
    selection: SelectionSet,
    dry_run: bool = False,
) -> Iterator[ApprovalOutcome]:
    """Yield one ApprovalOutcome per selected candidate, in ascending index order."""
    for candidate in selection.resolve(candidates):
        if dry_run:
            bt.logging.info(f"Dry run approval for PR #{candidate.number} ({candidate.title})")
            yield ApprovalOutcome(candidate=candidate, succeeded=True, dry_run=True)
            continue

        try:
            submit_approval(client, owner, repo, candidate)
        except ApprovalFailure as e:
            bt.logging.warning(f"Failed to approve PR #{candidate.number}: {e.detail}")
            yield ApprovalOutcome(candidate=candidate, succeeded=False, failure_detail=e.detail)
        else:
            bt.logging.success(f"Approved PR #{candidate.number} ({candidate.title})")
            yield ApprovalOutcome(candidate=candidate, succeeded=True)


def approve_selected(
    client: GitHubClient,
    owner: str,
    repo: str,
    candidates: List[PullRequestCandidate],
    selection: SelectionSet,
    dry_run: bool = False,
) -> List[ApprovalOutcome]:
    """Approve every selected candidate and return the outcomes in selection order."""
    return list(iter_approvals(client, owner, repo, candidates, selection, dry_run=dry_run))


def iter_dismissals(
    client: GitHubClient,
    owner: str,
    repo: str,
    reviews: List[Review],
    dry_run: bool = False,
) -> Iterator[DismissalOutcome]:
    """Yield one DismissalOutcome per review; failures never stop the batch."""
    for review in reviews:
        if dry_run:
            yield DismissalOutcome(review=review, succeeded=True, dry_run=True)
            continue

        path = f'/repos/{owner}/{repo}/pulls/{review.pr_number}/reviews/{review.id}/dismissals'
        try:
            client.put_json(path, {'message': DISMISSAL_MESSAGE})
        except ApiError as e:
            bt.logging.warning(f"Failed to dismiss review {review.id} on PR #{review.pr_number}: {e}")
            yield DismissalOutcome(review=review, succeeded=False, failure_detail=str(e))
        else:
            yield DismissalOutcome(review=review, succeeded=True)
