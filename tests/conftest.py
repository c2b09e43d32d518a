"""Shared fixtures for the test suite."""

import pytest

from review_comments.models import PullRequest


@pytest.fixture
def pull_request():
    """An open pull request on test/repo."""
    return PullRequest(
        number=42,
        title='Add feature',
        head_ref_name='feature',
        base_ref_name='main',
        url='https://github.com/test/repo/pull/42',
    )
