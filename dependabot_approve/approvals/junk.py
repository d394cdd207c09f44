# The MIT License (MIT)
# Copyright © 2025 Entrius

"""Finding unwanted reviews on the operator's own pull requests."""

from typing import List, Optional, Tuple

import bittensor as bt

from dependabot_approve.approvals.candidates import is_authored_by
from dependabot_approve.approvals.fetch import fetch_open_pull_requests, fetch_reviews
from dependabot_approve.classes import Review
from dependabot_approve.exceptions import ApiError
from dependabot_approve.utils.github_api_tools import GitHubClient


def find_junk_reviews(
    client: GitHubClient,
    owner: str,
    repo: str,
    user: str,
    login: Optional[str] = None,
    text: Optional[str] = None,
) -> Tuple[List[Review], List[str]]:
    """
    Collect reviews on ``user``'s open PRs that match ``login`` and/or ``text``.

    A PR whose reviews cannot be listed is skipped with a warning. Listing
    the open PRs themselves failing is fatal and raises ApiError.

    Returns:
        Tuple of (junk reviews in PR order, warnings)
    """
    if login is None and text is None:
        raise ValueError("at least one of login or text is required")

    pull_requests = [pr for pr in fetch_open_pull_requests(client, owner, repo) if is_authored_by(pr, (user,))]
    bt.logging.info(f"{len(pull_requests)} open pull requests in {owner}/{repo} belong to {user}")

    junk: List[Review] = []
    warnings: List[str] = []
    for pr in pull_requests:
        try:
            reviews = fetch_reviews(client, owner, repo, pr.number)
        except ApiError as e:
            warning = f"Could not list reviews for PR #{pr.number}: {e}"
            bt.logging.warning(warning)
            warnings.append(warning)
            continue
        junk.extend(r for r in reviews if r.is_junk(login, text))

    return junk, warnings
