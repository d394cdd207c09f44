"""
dependabot-approve Utilities
"""

import hashlib
from datetime import datetime, timezone
from typing import Optional, Tuple

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def mask_secret(secret: str, length: int = 5) -> str:
    """Return a short SHA-256 hash of a secret for logging."""
    h = hashlib.sha256(str(secret).encode("utf-8")).hexdigest()
    return f"<masked:{h[:length]}>"


def parse_repo_name(repo: str, owner: Optional[str] = None) -> Tuple[str, str]:
    """Split ``owner/name`` or combine a bare name with ``owner``.

    Raises:
        ValueError: if no owner can be determined or a part is empty
    """
    repo = repo.strip().strip("/")
    if "/" in repo:
        repo_owner, name = repo.split("/", 1)
    else:
        repo_owner, name = (owner or "").strip(), repo
    if not repo_owner or not name or "/" in name:
        raise ValueError(f"expected owner/repo, got '{repo}'")
    return repo_owner, name


def parse_github_timestamp(value: Optional[str]) -> datetime:
    """Parse an ISO-8601 GitHub timestamp; missing or invalid values sort first."""
    if not value:
        return _EPOCH
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return _EPOCH
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
