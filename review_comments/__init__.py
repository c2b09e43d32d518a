"""Review Comments - fetch PR review threads and parse CodeRabbit comments."""

from .errors import AppError, ErrorKind, ParsingError, ServiceError
from .models import RepoBranch, PullRequest, CommentAuthor, Comment, CodeRabbitComment
from .api_client import GitHubAPIClient, GraphQLError
from .github_service import GitHubQueryClient, parse_pull_request_url
from .parser import CommentParser, is_bot_comment
from .output import OutputFormatter

__all__ = [
    'AppError',
    'ErrorKind',
    'ParsingError',
    'ServiceError',
    'RepoBranch',
    'PullRequest',
    'CommentAuthor',
    'Comment',
    'CodeRabbitComment',
    'GitHubAPIClient',
    'GraphQLError',
    'GitHubQueryClient',
    'parse_pull_request_url',
    'CommentParser',
    'is_bot_comment',
    'OutputFormatter',
]
