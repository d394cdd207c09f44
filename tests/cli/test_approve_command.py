# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
CLI tests for `dependabot-approve approve`.

The requests.Session used by GitHubClient is replaced by the in-memory fake,
so these run the whole command end to end without network access.
"""

from unittest.mock import patch

import pytest

PULLS = '/repos/octo-org/website/pulls'
BASE_ARGS = ['approve', '-u', 'octocat', '-r', 'octo-org/website', '-a', 'ghp_test']


def reviews_path(number):
    return f'{PULLS}/{number}/reviews'


@pytest.fixture
def fake_session(github):
    with patch('dependabot_approve.utils.github_api_tools.requests.Session', return_value=github):
        yield github


@pytest.fixture
def repo(fake_session, sample_pulls):
    fake_session.add('GET', PULLS, body=sample_pulls)
    for number in (11, 13, 14):
        fake_session.add('POST', reviews_path(number), body={'id': number, 'state': 'APPROVED'})
    return fake_session


class TestInteractive:
    def test_approves_selected_pull_requests(self, runner, cli_root, config_file, repo):
        result = runner.invoke(cli_root, BASE_ARGS, input='1,3\n')

        assert result.exit_code == 0, result.output
        assert 'Dependabot PRs found' in result.output
        assert 'Approved #11 Bump lodash' in result.output
        assert 'Approved #14 Bump acorn' in result.output
        assert '2 of 2 approved' in result.output
        assert repo.paths('POST') == [reviews_path(11), reviews_path(14)]
        assert repo.headers['User-Agent'] == 'octocat'
        assert repo.headers['Authorization'] == 'Bearer ghp_test'
        assert repo.closed

    def test_reprompts_then_exits_after_five_bad_entries(self, runner, cli_root, config_file, repo):
        result = runner.invoke(cli_root, BASE_ARGS, input='x\n0\n9\n1,,2\nall of them\n')

        assert result.exit_code == 67
        assert result.output.count('Unable to parse input') == 5
        assert 'Failed to parse input 5 times. Exiting.' in result.output
        assert repo.paths('POST') == []

    def test_closed_stdin_uses_up_attempts(self, runner, cli_root, config_file, repo):
        result = runner.invoke(cli_root, BASE_ARGS, input='')

        assert result.exit_code == 67
        assert result.output.count('Unable to parse input') == 5
        assert repo.paths('POST') == []

    def test_alias(self, runner, cli_root, config_file, repo):
        result = runner.invoke(cli_root, ['a'] + BASE_ARGS[1:], input='all\n')

        assert result.exit_code == 0, result.output
        assert '3 of 3 approved' in result.output


class TestForced:
    def test_force_approves_everything_without_prompting(self, runner, cli_root, config_file, repo):
        result = runner.invoke(cli_root, BASE_ARGS + ['--force'])

        assert result.exit_code == 0, result.output
        assert 'Selection' not in result.output
        assert len(repo.paths('POST')) == 3

    def test_failed_approval_is_listed(self, runner, cli_root, config_file, repo):
        repo.routes[('POST', reviews_path(13))] = []
        repo.add('POST', reviews_path(13), status=422, body={'message': 'Pull request is closed'})

        result = runner.invoke(cli_root, BASE_ARGS + ['--force'])

        assert result.exit_code == 0, result.output
        assert 'Failed to approve #13' in result.output
        assert 'Pull request is closed' in result.output
        assert 'needs manual attention: #13' in result.output

    def test_dry_run(self, runner, cli_root, config_file, repo):
        result = runner.invoke(cli_root, BASE_ARGS + ['--force', '--dry-run'])

        assert result.exit_code == 0, result.output
        assert 'Dry run approval for #11' in result.output
        assert repo.paths('POST') == []

    def test_quiet_hides_options_and_outcomes(self, runner, cli_root, config_file, repo):
        result = runner.invoke(cli_root, BASE_ARGS + ['--force', '--quiet'])

        assert result.exit_code == 0, result.output
        assert 'Running approvals' not in result.output
        assert 'Approved #11' not in result.output

    def test_interrupt_exits_130(self, runner, cli_root, config_file, repo):
        repo.routes[('POST', reviews_path(13))] = [KeyboardInterrupt()]

        result = runner.invoke(cli_root, BASE_ARGS + ['--force'])

        assert result.exit_code == 130
        assert 'Approved #11' in result.output
        assert 'remaining approvals were not attempted' in result.output

    def test_events_log(self, runner, cli_root, config_file, repo, tmp_path):
        log_dir = tmp_path / 'logs'

        result = runner.invoke(cli_root, BASE_ARGS + ['--force', '--events-log', str(log_dir)])

        assert result.exit_code == 0, result.output
        events = (log_dir / 'events.log').read_text()
        assert 'EVENT | approve | octo-org/website#11 | ok' in events
        assert 'approve | octo-org/website#14 | ok' in events


class TestStatusOptions:
    def test_filter_by_status_context(self, runner, cli_root, config_file, repo, make_status):
        for sha, state in (('sha11', 'success'), ('sha13', 'failure'), ('sha14', 'success')):
            repo.add('GET', f'/repos/octo-org/website/commits/{sha}/statuses', body=[make_status(state)])

        result = runner.invoke(cli_root, BASE_ARGS + ['-c', 'ci/circleci', '-f', 'success', '--force'])

        assert result.exit_code == 0, result.output
        assert 'Acceptable statuses' in result.output
        assert repo.paths('POST') == [reviews_path(11), reviews_path(14)]

    def test_status_failures_name_the_status_call(self, runner, cli_root, config_file, repo):
        result = runner.invoke(cli_root, BASE_ARGS + ['-c', 'ci/circleci', '--force'])

        assert result.exit_code == 1
        assert 'Run on octo-org/website aborted' in result.output
        assert '/commits/sha14/statuses failed (HTTP 404)' in result.output
        assert 'Failed to get pull requests' not in result.output
        assert repo.paths('POST') == []

    def test_filter_without_criterion_is_rejected(self, runner, cli_root, config_file, repo):
        result = runner.invoke(cli_root, BASE_ARGS + ['-f', 'success'])

        assert result.exit_code == 2
        assert '--status-context or --status-user' in result.output
        assert repo.calls == []


class TestFailures:
    def test_missing_credentials(self, runner, cli_root, config_file, fake_session):
        result = runner.invoke(cli_root, ['approve', '-r', 'octo-org/website'])

        assert result.exit_code == 67
        assert 'either api key (-a) or api key file path (-k) is required' in result.output
        assert fake_session.calls == []

    def test_bad_credentials(self, runner, cli_root, config_file, fake_session):
        fake_session.add('GET', PULLS, status=401, body={'message': 'Bad credentials'})

        result = runner.invoke(cli_root, BASE_ARGS)

        assert result.exit_code == 1
        assert 'Run on octo-org/website aborted' in result.output
        assert 'GET /repos/octo-org/website/pulls failed (HTTP 401)' in result.output
        assert 'authentication rejected' in result.output

    def test_repository_not_found(self, runner, cli_root, config_file, fake_session):
        result = runner.invoke(cli_root, BASE_ARGS)

        assert result.exit_code == 1
        assert 'not found' in result.output

    def test_no_candidates(self, runner, cli_root, config_file, fake_session, make_pr):
        fake_session.add('GET', PULLS, body=[make_pr(12, 'Add dark mode', author='alice')])

        result = runner.invoke(cli_root, BASE_ARGS)

        assert result.exit_code == 0
        assert 'No candidates found.' in result.output

    def test_repository_needs_owner(self, runner, cli_root, config_file, fake_session):
        result = runner.invoke(cli_root, ['approve', '-r', 'website', '-a', 'ghp_test'])
        assert result.exit_code == 2


class TestConfiguredDefaults:
    def test_token_from_key_path(self, runner, cli_root, config_file, repo, tmp_path):
        key = tmp_path / 'token'
        key.write_text('ghp_from_file\n')

        result = runner.invoke(cli_root, ['approve', '-r', 'octo-org/website', '-k', str(key), '--force'])

        assert result.exit_code == 0, result.output
        assert repo.headers['Authorization'] == 'Bearer ghp_from_file'

    def test_owner_and_user_from_config(self, runner, cli_root, config_file, repo):
        runner.invoke(cli_root, ['config', 'set', 'owner', 'octo-org'])
        runner.invoke(cli_root, ['config', 'set', 'user', 'octocat'])

        result = runner.invoke(cli_root, ['approve', '-r', 'website', '-a', 'ghp_test', '--force'])

        assert result.exit_code == 0, result.output
        assert repo.headers['User-Agent'] == 'octocat'

    def test_base_url_from_environment(self, runner, cli_root, config_file, fake_session, sample_pulls, monkeypatch):
        base = 'https://ghe.example.com/api/v3'
        monkeypatch.setenv('GITHUB_BASE_URL', base)
        fake_session.add('GET', f'{base}{PULLS}', body=sample_pulls[:1])
        fake_session.add('POST', f'{base}{reviews_path(11)}', body={'id': 1})

        result = runner.invoke(cli_root, BASE_ARGS + ['--force'])

        assert result.exit_code == 0, result.output
        assert fake_session.paths('POST') == [f'{base}{reviews_path(11)}']


def test_version(runner, cli_root):
    result = runner.invoke(cli_root, ['--version'])
    assert result.exit_code == 0
    assert 'dependabot-approve' in result.output


def test_help_lists_aliases(runner, cli_root):
    result = runner.invoke(cli_root, ['--help'])
    assert result.exit_code == 0
    assert 'approve, a' in result.output
    assert 'clear-junk, cj' in result.output
