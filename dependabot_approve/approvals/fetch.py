# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Fetching open pull requests and correlating their commit statuses.
"""

import json
import os
from typing import Dict, List, Optional, Tuple

import bittensor as bt

from dependabot_approve.classes import CommitStatus, PullRequest, Review, StatusState
from dependabot_approve.constants import DUMP_PRS_ENV_VAR, DUMP_STATUSES_ENV_VAR
from dependabot_approve.exceptions import ApiError
from dependabot_approve.utils.github_api_tools import GitHubClient


def _write_debug_dump(env_var: str, filename: str, raw_json: str) -> None:
    """Write a raw API payload to the working directory when ``env_var`` is set to 1."""
    if os.environ.get(env_var) != '1':
        return
    try:
        with open(filename, 'w') as f:
            f.write(raw_json)
    except OSError as e:
        bt.logging.warning(f"Could not write debug dump {filename}: {e}")


def _ensure_list(data, operation: str) -> List[dict]:
    if not isinstance(data, list):
        raise ApiError(operation, "expected a JSON list")
    return data


def _parse_json_list(raw_json: str, operation: str) -> List[dict]:
    try:
        data = json.loads(raw_json)
    except ValueError as e:
        raise ApiError(operation, f"invalid JSON response: {e}")
    return _ensure_list(data, operation)


def fetch_open_pull_requests(client: GitHubClient, owner: str, repo: str) -> List[PullRequest]:
    """
    Get the open pull requests of a repository, in API order.

    Only the API's default page is read.

    Args:
        client (GitHubClient): Authenticated client
        owner (str): Repository owner
        repo (str): Repository name

    Returns:
        List[PullRequest]: Open pull requests

    Raises:
        ApiError: On any non-success response (auth rejected, not found, rate limited)
    """
    path = f'/repos/{owner}/{repo}/pulls'
    raw_json = client.get_text(path, params={'state': 'open'})
    _write_debug_dump(DUMP_PRS_ENV_VAR, f'PRS.{owner}.{repo}.json', raw_json)

    pull_requests = [PullRequest.from_github_response(pr) for pr in _parse_json_list(raw_json, f'GET {path}')]
    bt.logging.info(f"Fetched {len(pull_requests)} open pull requests from {owner}/{repo}")
    return pull_requests


def get_latest_status(
    client: GitHubClient,
    owner: str,
    repo: str,
    ref: str,
    context: Optional[str] = None,
    creator: Optional[str] = None,
    pr_number: Optional[int] = None,
) -> StatusState:
    """
    Get the most recent status matching ``context`` and/or ``creator`` for a commit.

    Returns UNKNOWN without calling the API when neither criterion is given,
    and UNKNOWN when no status matches.

    Raises:
        ApiError: On transport or authorization failure only
    """
    if context is None and creator is None:
        return StatusState.UNKNOWN

    path = f'/repos/{owner}/{repo}/commits/{ref}/statuses'
    raw_json = client.get_text(path)
    _write_debug_dump(DUMP_STATUSES_ENV_VAR, f'statuses.{pr_number or ref}.json', raw_json)

    statuses = [CommitStatus.from_github_response(s) for s in _parse_json_list(raw_json, f'GET {path}')]
    matching = [
        s for s in statuses
        if (context is None or s.context == context) and (creator is None or s.creator == creator)
    ]
    if not matching:
        return StatusState.UNKNOWN

    # Most recent wins; ties keep the first listed, GitHub lists newest first
    latest = max(matching, key=lambda s: s.created_at)
    return latest.state


def correlate_statuses(
    client: GitHubClient,
    owner: str,
    repo: str,
    pull_requests: List[PullRequest],
    context: Optional[str] = None,
    creator: Optional[str] = None,
) -> Tuple[Dict[int, StatusState], List[str]]:
    """
    Correlate every pull request with its latest status.

    A failing call degrades that PR to UNKNOWN and yields a warning. When
    there are several PRs and every call fails, the last ApiError is raised.
    A lone PR whose call fails is kept as UNKNOWN.

    Returns:
        Tuple of (status by PR number, warnings)
    """
    statuses: Dict[int, StatusState] = {}
    warnings: List[str] = []
    last_error: Optional[ApiError] = None

    for pr in pull_requests:
        try:
            statuses[pr.number] = get_latest_status(
                client, owner, repo, pr.head_sha, context=context, creator=creator, pr_number=pr.number
            )
        except ApiError as e:
            last_error = e
            statuses[pr.number] = StatusState.UNKNOWN
            warning = f"Could not read status for PR #{pr.number} ({pr.title}): {e}"
            bt.logging.warning(warning)
            warnings.append(warning)

    if len(pull_requests) > 1 and last_error is not None and len(warnings) == len(pull_requests):
        raise last_error

    return statuses, warnings


def fetch_reviews(client: GitHubClient, owner: str, repo: str, pr_number: int) -> List[Review]:
    """Get the reviews left on a pull request."""
    path = f'/repos/{owner}/{repo}/pulls/{pr_number}/reviews'
    data = client.get_json(path)
    return [Review.from_github_response(pr_number, r) for r in _ensure_list(data, f'GET {path}')]
