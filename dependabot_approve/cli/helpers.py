# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Shared helper functions for CLI commands
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional, Sequence, Tuple

import click
from rich.console import Console
from rich.markup import escape

from dependabot_approve.classes import StatusState
from dependabot_approve.constants import (
    BASE_GITHUB_API_URL,
    BASE_URL_ENV_VAR,
    DEFAULT_BOT_AUTHORS,
    DEFAULT_TIMEOUT_SECONDS,
    TOKEN_ENV_VAR,
)
from dependabot_approve.utils.utils import parse_repo_name

# Default paths
APP_DIR = Path.home() / '.dependabot-approve'
CONFIG_FILE = APP_DIR / 'config.json'

console = Console()


class CredentialError(click.ClickException):
    """No usable API token could be resolved."""


def print_error(message: str) -> None:
    """Print a standardized error message."""
    console.print(f'\n  [red]✗[/red] {escape(message)}\n')


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


def load_config() -> Dict[str, Any]:
    """
    Load configuration from ~/.dependabot-approve/config.json.

    Priority:
    1. CLI arguments (highest - handled by callers)
    2. Environment variables (GITHUB_BASE_URL, GITHUB_TOKEN)
    3. ~/.dependabot-approve/config.json
    4. Defaults

    Config file format:
        {
            "user": "octocat",
            "owner": "octo-org",
            "key_path": "~/.github-token",
            "status_context": "ci/circleci",
            "authors": ["dependabot[bot]"],
            "timeout": 30
        }

    Manage via: dependabot-approve config set <key> <value>

    Returns:
        Dict with all config keys
    """
    if CONFIG_FILE.exists():
        try:
            with open(CONFIG_FILE, 'r') as f:
                data = json.load(f)
            if isinstance(data, dict):
                return data
        except (json.JSONDecodeError, IOError):
            pass
    return {}


def resolve_token(api_key: Optional[str], key_path: Optional[str], config: Dict[str, Any]) -> Tuple[str, str]:
    """
    Resolve the API token. --api-key > --key-path > config key_path > GITHUB_TOKEN.

    Returns:
        Tuple of (token, description of its source)

    Raises:
        CredentialError: if no source yields a non-empty token
    """
    if api_key:
        token = api_key.strip()
        if token:
            return token, 'api key'

    path = key_path or config.get('key_path')
    if path:
        expanded = Path(str(path)).expanduser()
        try:
            token = expanded.read_text().strip()
        except OSError as e:
            raise CredentialError(f'Could not read api key file {expanded}: {e}')
        if not token:
            raise CredentialError(f'Api key file {expanded} is empty')
        return token, f'key path {expanded}'

    env_token = os.environ.get(TOKEN_ENV_VAR, '').strip()
    if env_token:
        return env_token, f'${TOKEN_ENV_VAR}'

    raise CredentialError('either api key (-a) or api key file path (-k) is required')


def resolve_repository(repo: Optional[str], owner: Optional[str], config: Dict[str, Any]) -> Tuple[str, str]:
    """Resolve (owner, repo) from ``--repo owner/name`` or ``--owner`` + ``--repo``."""
    if not repo:
        raise click.BadParameter('Repository is required', param_hint='--repo')
    try:
        return parse_repo_name(repo, owner or config.get('owner'))
    except ValueError:
        raise click.BadParameter(
            f"Repository must be 'owner/name' or used with --owner (got '{repo}')",
            param_hint='--repo',
        )


def resolve_base_url(cli_value: Optional[str], config: Dict[str, Any]) -> str:
    """Base API URL. CLI arg > GITHUB_BASE_URL env var > config > api.github.com"""
    return cli_value or os.environ.get(BASE_URL_ENV_VAR) or config.get('base_url') or BASE_GITHUB_API_URL


def resolve_timeout(cli_value: Optional[float], config: Dict[str, Any]) -> float:
    if cli_value is not None:
        return cli_value
    try:
        timeout = float(config.get('timeout', DEFAULT_TIMEOUT_SECONDS))
    except (TypeError, ValueError):
        return DEFAULT_TIMEOUT_SECONDS
    return timeout if timeout > 0 else DEFAULT_TIMEOUT_SECONDS


def resolve_authors(cli_values: Sequence[str], config: Dict[str, Any]) -> Tuple[str, ...]:
    if cli_values:
        return tuple(cli_values)
    configured = config.get('authors')
    if isinstance(configured, str):
        configured = [a.strip() for a in configured.split(',') if a.strip()]
    if configured:
        return tuple(configured)
    return DEFAULT_BOT_AUTHORS


def parse_status_filter(values: Sequence[str], wants_status: bool) -> Optional[FrozenSet[StatusState]]:
    """Convert --filter values to StatusStates. A filter needs a status criterion to act on."""
    if not values:
        return None
    if not wants_status:
        raise click.BadParameter(
            '--filter needs --status-context or --status-user',
            param_hint='--filter',
        )

    states = set()
    for value in values:
        for part in value.split(','):
            part = part.strip().lower()
            if not part:
                continue
            try:
                states.add(StatusState(part))
            except ValueError:
                choices = ', '.join(s.value for s in StatusState)
                raise click.BadParameter(f"Unknown status '{part}' (choose from {choices})", param_hint='--filter')
    return frozenset(states)
