"""
Unit tests for the command line entry point
"""

import json
import pytest
from unittest.mock import Mock, patch

from review_comments import cli
from review_comments.config import AppConfig
from review_comments.errors import ServiceError
from review_comments.github_service import GitHubQueryClient
from review_comments.models import RepoBranch
from review_comments.parser import CommentParser

from helpers import make_comment


@pytest.fixture
def query_client(pull_request):
    client = Mock(spec=GitHubQueryClient)
    client.get_pull_request_for_branch.return_value = pull_request
    client.get_pull_request_by_url.return_value = pull_request
    client.get_review_comments_for_pull_request.return_value = [
        make_comment(body='**Bot finding**', comment_id=1),
        make_comment(body='I disagree', comment_id=2, login='octocat'),
        make_comment(body='**Resolved finding**', comment_id=3, is_resolved=True),
    ]
    return client


class TestResolvePullRequest:
    """Test cases for choosing the PR to inspect."""

    def test_uses_pr_url(self, query_client, pull_request):
        config = AppConfig(github_token='t', pr_url=pull_request.url)

        assert cli.resolve_pull_request(config, query_client) is pull_request
        query_client.get_pull_request_by_url.assert_called_once_with(pull_request.url)
        query_client.get_pull_request_for_branch.assert_not_called()

    @patch('review_comments.cli.get_current_repo_and_branch')
    def test_uses_configured_repo_and_branch(self, mock_detect, query_client):
        config = AppConfig(github_token='t', owner='octo', repo_name='hello', branch='feature')

        cli.resolve_pull_request(config, query_client)

        mock_detect.assert_not_called()
        query_client.get_pull_request_for_branch.assert_called_once_with('octo', 'hello', 'feature')

    @patch('review_comments.cli.get_current_repo_and_branch')
    def test_detects_missing_values_from_git(self, mock_detect, query_client):
        mock_detect.return_value = RepoBranch(owner='octo', repo_name='hello', branch='local-branch')
        config = AppConfig(github_token='t', branch='feature')

        cli.resolve_pull_request(config, query_client)

        query_client.get_pull_request_for_branch.assert_called_once_with('octo', 'hello', 'feature')


class TestFetchParsedComments:
    """Test cases for fetching and filtering bot comments."""

    def test_only_bot_comments_are_parsed(self, query_client, pull_request):
        config = AppConfig(github_token='t')

        parsed = cli.fetch_parsed_comments(config, query_client, CommentParser(), pull_request)

        assert [c.comment_id for c in parsed] == [1, 3]
        assert parsed[0].summary == 'Bot finding'

    def test_only_unresolved(self, query_client, pull_request):
        config = AppConfig(github_token='t', only_unresolved=True)

        parsed = cli.fetch_parsed_comments(config, query_client, CommentParser(), pull_request)

        assert [c.comment_id for c in parsed] == [1]


class TestMain:
    """Test cases for the main entry point."""

    @pytest.fixture(autouse=True)
    def no_side_effects(self):
        with patch('review_comments.cli.load_dotenv'), patch('review_comments.cli.configure_logging'):
            yield

    def test_missing_token(self):
        with patch('review_comments.cli.load_config', return_value=AppConfig(github_token=None)):
            assert cli.main() == 1

    def test_success_writes_json(self, query_client, tmp_path, capsys):
        output_file = tmp_path / 'out.json'
        config = AppConfig(github_token='t', owner='octo', repo_name='hello', branch='feature',
                           output_file=str(output_file))

        with patch('review_comments.cli.load_config', return_value=config), \
                patch('review_comments.cli.GitHubQueryClient', return_value=query_client):
            assert cli.main() == 0

        assert 'Total comments: 2' in capsys.readouterr().out
        data = json.loads(output_file.read_text(encoding='utf-8'))
        assert [c['commentId'] for c in data['comments']] == [1, 3]

    def test_service_error_exits_with_failure(self, query_client):
        query_client.get_pull_request_for_branch.side_effect = ServiceError('No PR found', {'branch': 'feature'})
        config = AppConfig(github_token='t', owner='octo', repo_name='hello', branch='feature')

        with patch('review_comments.cli.load_config', return_value=config), \
                patch('review_comments.cli.GitHubQueryClient', return_value=query_client):
            assert cli.main() == 1

        query_client.get_review_comments_for_pull_request.assert_not_called()


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
