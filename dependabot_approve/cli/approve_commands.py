# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Approval commands (`dependabot-approve approve`, `dependabot-approve clear-junk`).
"""

import sys
from typing import Optional, Tuple

import bittensor as bt
import click

from dependabot_approve.approvals.executor import iter_dismissals
from dependabot_approve.approvals.junk import find_junk_reviews
from dependabot_approve.approvals.pipeline import ApprovalRun, RunOptions
from dependabot_approve.cli.helpers import (
    CredentialError,
    console,
    load_config,
    parse_status_filter,
    print_error,
    resolve_authors,
    resolve_base_url,
    resolve_repository,
    resolve_timeout,
    resolve_token,
)
from dependabot_approve.cli.reporter import ResultReporter
from dependabot_approve.constants import (
    DEFAULT_USER_AGENT,
    EXIT_API_ERROR,
    EXIT_INTERRUPTED,
    EXIT_USAGE_ERROR,
)
from dependabot_approve.exceptions import ApiError, SelectionError
from dependabot_approve.utils.github_api_tools import GitHubClient
from dependabot_approve.utils.logging import log_outcome_event, setup_events_logger, setup_logging


def _connection_options(func):
    """Options shared by every command that talks to GitHub."""
    options = [
        click.option('--user', '-u', default=None, help='The username tied to the api key'),
        click.option('--owner', '-o', default=None, help='Owner of the repository to check'),
        click.option('--repo', '-r', required=True, help='Repository name, or owner/name'),
        click.option('--api-key', '-a', default=None, help='Your api key from GitHub'),
        click.option('--key-path', '-k', default=None, help='Path to a file containing your api key'),
        click.option('--base-url', default=None, help='GitHub API base URL (env: GITHUB_BASE_URL)'),
        click.option('--timeout', default=None, type=click.FloatRange(min=0, min_open=True), help='HTTP timeout in seconds'),
        click.option('--dry-run', is_flag=True, help="Print the actions that would be taken, don't change anything"),
        click.option('--quiet', '-q', is_flag=True, help="Don't print the options table or results"),
        click.option('--verbose', '-v', is_flag=True, help='Show debug output'),
        click.option('--events-log', default=None, type=click.Path(file_okay=False), help='Directory for an audit events.log'),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _resolve_connection(repo: str, owner: Optional[str], api_key: Optional[str], key_path: Optional[str], config: dict):
    """Resolve (owner, repo, token, token source) or exit with a usage error."""
    owner, repo = resolve_repository(repo, owner, config)
    try:
        token, source = resolve_token(api_key, key_path, config)
    except CredentialError as e:
        print_error(e.message)
        sys.exit(EXIT_USAGE_ERROR)
    return owner, repo, token, source


@click.command('approve')
@_connection_options
@click.option(
    '--author',
    'authors',
    multiple=True,
    help='Bot account whose PRs are candidates (repeatable, default: dependabot[bot], dependabot-preview[bot])',
)
@click.option('--status-context', '-c', default=None, help='Status context to check (e.g. ci/circleci)')
@click.option('--status-user', '-s', default=None, help='The username of the status provider')
@click.option('--filter', '-f', 'status_filter', multiple=True, help='Acceptable statuses (success, pending, failure, unknown)')
@click.option('--force', is_flag=True, help="Don't confirm PR approvals, just approve them all")
def approve(
    user: Optional[str],
    owner: Optional[str],
    repo: str,
    api_key: Optional[str],
    key_path: Optional[str],
    base_url: Optional[str],
    timeout: Optional[float],
    dry_run: bool,
    quiet: bool,
    verbose: bool,
    events_log: Optional[str],
    authors: Tuple[str, ...],
    status_context: Optional[str],
    status_user: Optional[str],
    status_filter: Tuple[str, ...],
    force: bool,
):
    """Approve open dependency-upgrade pull requests.

    Lists the open PRs opened by the bot accounts, optionally with the latest
    status from a status context or status provider, then asks which to
    approve. Each approval is submitted independently; failures are listed
    at the end.

    \b
    Examples:
        dependabot-approve approve -u octocat -r octo-org/website -k ~/.gh-token
        dependabot-approve approve -u octocat -o octo-org -r website -c ci/circleci -f success
        dependabot-approve approve -r octo-org/website --force --dry-run
    """
    setup_logging(verbose)
    config = load_config()

    owner, repo, token, token_source = _resolve_connection(repo, owner, api_key, key_path, config)
    user = user or config.get('user') or DEFAULT_USER_AGENT
    status_context = status_context or config.get('status_context')
    status_user = status_user or config.get('status_user')
    wants_status = status_context is not None or status_user is not None

    options = RunOptions(
        owner=owner,
        repo=repo,
        authors=resolve_authors(authors, config),
        status_context=status_context,
        status_user=status_user,
        allowed_states=parse_status_filter(status_filter, wants_status),
        force=force,
        dry_run=dry_run,
    )

    reporter = ResultReporter(console, quiet=quiet, show_status=wants_status)
    rows = [
        ('Username', user),
        ('Repo', options.repository),
        ('Authors', ', '.join(options.authors)),
    ]
    if status_context:
        rows.append(('Status context', status_context))
    if status_user:
        rows.append(('Status posted by', status_user))
    if options.allowed_states:
        rows.append(('Acceptable statuses', ', '.join(sorted(s.value for s in options.allowed_states))))
    rows.append(('Api key', token_source))
    if dry_run:
        rows.append(('Dry run', 'yes'))
    if force:
        rows.append(('Forced', 'yes'))
    reporter.render_options('Running approvals', rows)

    events_logger = setup_events_logger(events_log) if events_log else None

    def read_selection() -> str:
        # Closed stdin reads as an empty entry and uses up an attempt
        click.echo('Selection: ', nl=False)
        return sys.stdin.readline()

    with GitHubClient(
        token,
        user_agent=user,
        base_url=resolve_base_url(base_url, config),
        timeout=resolve_timeout(timeout, config),
    ) as client:
        run = ApprovalRun(client, options, reporter, read_selection, events_logger=events_logger)
        try:
            run.run()
        except ApiError as e:
            bt.logging.error(str(e))
            print_error(f'Run on {options.repository} aborted: {e}')
            sys.exit(EXIT_API_ERROR)
        except SelectionError as e:
            print_error(f'{e} Exiting.')
            sys.exit(EXIT_USAGE_ERROR)
        except KeyboardInterrupt:
            print_error('Interrupted; remaining approvals were not attempted.')
            sys.exit(EXIT_INTERRUPTED)


@click.command('clear-junk')
@_connection_options
@click.option('--login', '-l', default=None, help='Reviewer login that marks a review as junk')
@click.option('--text', '-t', default=None, help='Text in a review body that marks it as junk')
def clear_junk(
    user: Optional[str],
    owner: Optional[str],
    repo: str,
    api_key: Optional[str],
    key_path: Optional[str],
    base_url: Optional[str],
    timeout: Optional[float],
    dry_run: bool,
    quiet: bool,
    verbose: bool,
    events_log: Optional[str],
    login: Optional[str],
    text: Optional[str],
):
    """Dismiss junk reviews left on your own open pull requests.

    A review is junk when it was left by --login and/or contains --text.
    At least one of the two is required.

    \b
    Examples:
        dependabot-approve clear-junk -u octocat -r octo-org/website -l some-bot
        dependabot-approve clear-junk -u octocat -r octo-org/website -t "LGTM!!" --dry-run
    """
    setup_logging(verbose)
    config = load_config()

    if login is None and text is None:
        raise click.UsageError('Provide --login and/or --text to identify junk reviews.')

    user = user or config.get('user')
    if not user:
        raise click.BadParameter('The user owning the pull requests is required', param_hint='--user')

    owner, repo, token, token_source = _resolve_connection(repo, owner, api_key, key_path, config)
    repository = f'{owner}/{repo}'

    reporter = ResultReporter(console, quiet=quiet)
    rows = [('Username', user), ('Repo', repository)]
    if login:
        rows.append(('Reviewer login', login))
    if text:
        rows.append(('Review text', text))
    rows.append(('Api key', token_source))
    if dry_run:
        rows.append(('Dry run', 'yes'))
    reporter.render_options('Clearing junk reviews', rows)

    events_logger = setup_events_logger(events_log) if events_log else None

    with GitHubClient(
        token,
        user_agent=user,
        base_url=resolve_base_url(base_url, config),
        timeout=resolve_timeout(timeout, config),
    ) as client:
        try:
            reviews, warnings = find_junk_reviews(client, owner, repo, user, login=login, text=text)
        except ApiError as e:
            bt.logging.error(str(e))
            print_error(f'Failed to get pull requests for {repository}: {e}')
            sys.exit(EXIT_API_ERROR)
        reporter.render_warnings(warnings)

        outcomes = []
        try:
            for outcome in iter_dismissals(client, owner, repo, reviews, dry_run=dry_run):
                outcomes.append(outcome)
                log_outcome_event(events_logger, repository, outcome)
        except KeyboardInterrupt:
            reporter.render_dismissals(outcomes)
            print_error('Interrupted; remaining dismissals were not attempted.')
            sys.exit(EXIT_INTERRUPTED)

    reporter.render_dismissals(outcomes)
