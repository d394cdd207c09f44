# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Shared fixtures: an in-memory stand-in for the GitHub REST API.

``FakeGitHub`` plays the role of a ``requests.Session``. Routes are keyed by
(method, path); each route holds a queue of real ``requests.Response``
objects or exceptions, and the last entry repeats once the queue drains.
"""

import json
from typing import Any, Dict, List, Optional, Tuple

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from dependabot_approve.constants import BASE_GITHUB_API_URL


def make_response(status: int = 200, body: Any = None, headers: Optional[Dict[str, str]] = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response._content = b'' if body is None else json.dumps(body).encode('utf-8')
    response.headers = CaseInsensitiveDict(headers or {})
    response.encoding = 'utf-8'
    response.reason = 'OK' if status < 400 else 'Error'
    return response


class FakeGitHub:
    def __init__(self, base_url: str = BASE_GITHUB_API_URL):
        self.base_url = base_url
        self.headers: Dict[str, str] = {}
        self.routes: Dict[Tuple[str, str], List[Any]] = {}
        self.calls: List[Tuple[str, str, Dict[str, Any]]] = []
        self.closed = False

    def add(self, method: str, path: str, status: int = 200, body: Any = None, headers=None, exc=None):
        entry = exc if exc is not None else make_response(status, body, headers)
        self.routes.setdefault((method, path), []).append(entry)
        return self

    def request(self, method, url, timeout=None, **kwargs):
        assert timeout is not None, 'every request must carry a timeout'
        path = url[len(self.base_url):] if url.startswith(self.base_url) else url
        self.calls.append((method, path, kwargs))

        queue = self.routes.get((method, path))
        if not queue:
            return make_response(404, {'message': 'Not Found'})
        entry = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(entry, BaseException):
            raise entry
        return entry

    def close(self):
        self.closed = True

    def paths(self, method: Optional[str] = None) -> List[str]:
        return [p for m, p, _ in self.calls if method is None or m == method]


def pr_json(number: int, title: str, author: str = 'dependabot[bot]', sha: Optional[str] = None) -> Dict[str, Any]:
    return {
        'number': number,
        'title': title,
        'user': {'login': author},
        'head': {'sha': sha or f'sha{number}', 'ref': f'dependabot/npm/{number}'},
        'html_url': f'https://github.com/octo-org/website/pull/{number}',
    }


def status_json(state: str, context: str = 'ci/circleci', creator: str = 'circleci', created_at: str = '2024-05-01T10:00:00Z'):
    return {'state': state, 'context': context, 'creator': {'login': creator}, 'created_at': created_at}


@pytest.fixture
def github():
    return FakeGitHub()


@pytest.fixture
def client(github):
    from dependabot_approve.utils.github_api_tools import GitHubClient

    return GitHubClient('fake_github_token', user_agent='octocat', session=github, timeout=5)


@pytest.fixture
def sample_pulls():
    """Open PRs in API order; two of them are not from dependabot."""
    return [
        pr_json(11, 'Bump lodash from 4.17.15 to 4.17.21'),
        pr_json(12, 'Add dark mode', author='alice'),
        pr_json(13, 'Bump elliptic from 6.5.3 to 6.5.4'),
        pr_json(14, 'Bump acorn from 7.1.0 to 7.1.1', author='dependabot-preview[bot]'),
        pr_json(15, 'Fix typo', author='Dependabot[bot]'),
    ]


@pytest.fixture
def make_pr():
    return pr_json


@pytest.fixture
def make_status():
    return status_json


@pytest.fixture
def runner():
    from click.testing import CliRunner

    # Wide enough that rich never wraps a message line
    return CliRunner(env={'COLUMNS': '200'})


@pytest.fixture
def cli_root():
    from dependabot_approve.cli.main import cli

    return cli


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    """Point the CLI config at a temporary file."""
    path = tmp_path / 'dependabot-approve' / 'config.json'
    monkeypatch.setattr('dependabot_approve.cli.helpers.CONFIG_FILE', path)
    monkeypatch.setattr('dependabot_approve.cli.config_commands.CONFIG_FILE', path)
    monkeypatch.delenv('GITHUB_TOKEN', raising=False)
    monkeypatch.delenv('GITHUB_BASE_URL', raising=False)
    return path


@pytest.fixture
def http_response():
    return make_response
