# The MIT License (MIT)
# Copyright © 2025 Entrius

"""Tests for submitting approvals and dismissing reviews."""

import pytest
import requests

from dependabot_approve.approvals.executor import (
    approve_selected,
    build_approval_payload,
    iter_approvals,
    iter_dismissals,
    submit_approval,
)
from dependabot_approve.classes import PullRequestCandidate, Review, SelectionSet
from dependabot_approve.exceptions import ApprovalFailure


def reviews_path(number):
    return f'/repos/octo-org/website/pulls/{number}/reviews'


@pytest.fixture
def candidates():
    return [
        PullRequestCandidate(index=i, number=100 + i, title=f'Bump dep{i}', author='dependabot[bot]', head_sha=f'sha{i}')
        for i in range(1, 6)
    ]


class TestBuildApprovalPayload:
    def test_pinned_to_head_commit(self, candidates):
        payload = build_approval_payload(candidates[0])
        assert payload['event'] == 'APPROVE'
        assert payload['commit_id'] == 'sha1'
        assert payload['comments'] == []
        assert payload['body']

    def test_no_commit_id_without_sha(self):
        candidate = PullRequestCandidate(index=1, number=9, title='Bump x', author='dependabot[bot]')
        assert 'commit_id' not in build_approval_payload(candidate)


class TestSubmitApproval:
    def test_posts_review(self, github, client, candidates):
        github.add('POST', reviews_path(101), body={'id': 1, 'state': 'APPROVED'})

        submit_approval(client, 'octo-org', 'website', candidates[0])

        method, path, kwargs = github.calls[0]
        assert (method, path) == ('POST', reviews_path(101))
        assert kwargs['json']['event'] == 'APPROVE'

    def test_rejection_becomes_approval_failure(self, github, client, candidates):
        github.add('POST', reviews_path(101), status=422, body={'message': 'Can not approve your own pull request'})

        with pytest.raises(ApprovalFailure) as exc_info:
            submit_approval(client, 'octo-org', 'website', candidates[0])

        assert exc_info.value.number == 101
        assert 'Can not approve your own pull request' in exc_info.value.detail


class TestIterApprovals:
    def test_forced_run_isolates_one_failure(self, github, client, candidates):
        for c in candidates:
            github.add('POST', reviews_path(c.number), body={'id': c.index})
        github.routes[('POST', reviews_path(102))] = []
        github.add('POST', reviews_path(102), status=403, body={'message': 'Resource not accessible by integration'})

        outcomes = approve_selected(client, 'octo-org', 'website', candidates, SelectionSet.everything(5))

        assert [o.succeeded for o in outcomes] == [True, False, True, True, True]
        assert [o.candidate.number for o in outcomes] == [101, 102, 103, 104, 105]
        assert 'Resource not accessible' in outcomes[1].failure_detail
        assert len(github.paths('POST')) == 5

    def test_connection_error_on_one_approval_is_isolated(self, github, client, candidates):
        for c in candidates:
            github.add('POST', reviews_path(c.number), body={'id': c.index})
        github.routes[('POST', reviews_path(102))] = [requests.exceptions.ConnectionError('reset')]

        outcomes = list(iter_approvals(client, 'octo-org', 'website', candidates, SelectionSet.everything(5)))

        assert [o.succeeded for o in outcomes] == [True, False, True, True, True]
        assert 'connection error: reset' in outcomes[1].failure_detail
        assert github.paths('POST').count(reviews_path(102)) == 1

    def test_selection_subset_in_index_order(self, github, client, candidates):
        github.add('POST', reviews_path(101), body={'id': 1})
        github.add('POST', reviews_path(103), body={'id': 3})

        outcomes = approve_selected(
            client, 'octo-org', 'website', candidates, SelectionSet(indices=frozenset({3, 1}))
        )

        assert [o.candidate.index for o in outcomes] == [1, 3]
        assert github.paths('POST') == [reviews_path(101), reviews_path(103)]

    def test_dry_run_makes_no_calls(self, github, client, candidates):
        outcomes = approve_selected(
            client, 'octo-org', 'website', candidates, SelectionSet.everything(5), dry_run=True
        )

        assert all(o.succeeded and o.dry_run for o in outcomes)
        assert github.calls == []

    def test_outcomes_are_yielded_as_they_happen(self, github, client, candidates):
        github.add('POST', reviews_path(101), body={'id': 1})

        outcomes = iter_approvals(client, 'octo-org', 'website', candidates, SelectionSet.everything(5))
        first = next(outcomes)

        assert first.succeeded
        assert len(github.calls) == 1


class TestIterDismissals:
    @pytest.fixture
    def reviews(self):
        return [
            Review(id=70, pr_number=7, author='spam-bot', body='LGTM!!'),
            Review(id=80, pr_number=8, author='spam-bot', body='LGTM!!'),
        ]

    def test_dismisses_each_review(self, github, client, reviews):
        github.add('PUT', f'{reviews_path(7)}/70/dismissals', body={'id': 70, 'state': 'DISMISSED'})
        github.add('PUT', f'{reviews_path(8)}/80/dismissals', status=422, body={'message': 'Can not dismiss a commented pull request review'})

        outcomes = list(iter_dismissals(client, 'octo-org', 'website', reviews))

        assert [o.succeeded for o in outcomes] == [True, False]
        assert 'Can not dismiss' in outcomes[1].failure_detail
        assert github.calls[0][2]['json'] == {'message': 'junk'}

    def test_dry_run(self, github, client, reviews):
        outcomes = list(iter_dismissals(client, 'octo-org', 'website', reviews, dry_run=True))
        assert all(o.dry_run for o in outcomes)
        assert github.calls == []
