"""Builders for GitHub payloads and review comments used across tests."""

from review_comments.models import Comment, CommentAuthor


def make_comment(body='Just a comment', comment_id=1, login='coderabbitai[bot]', **overrides):
    """Build a review comment with sensible defaults."""
    values = dict(
        comment_id=comment_id,
        body=body,
        author=CommentAuthor(login=login),
        created_at='2023-01-01T00:00:00Z',
        url=f'https://github.com/test/repo/pull/1#discussion_r{comment_id}',
        path='src/test.py',
        position=1,
        is_resolved=False,
        is_outdated=False,
        is_minimized=False,
    )
    values.update(overrides)
    return Comment(**values)


def make_comment_node(comment_id, body='body', login='coderabbitai[bot]'):
    """Build a GraphQL comment node as returned by GitHub."""
    return {
        'databaseId': comment_id,
        'author': {'login': login},
        'body': body,
        'createdAt': '2023-01-01T00:00:00Z',
        'url': f'https://github.com/test/repo/pull/1#discussion_r{comment_id}',
        'path': 'src/test.py',
        'position': 3,
        'isMinimized': False,
    }


def make_thread(comment_ids, is_resolved=False, is_outdated=False, has_more_comments=False):
    """Build a GraphQL review thread node."""
    return {
        'isResolved': is_resolved,
        'isOutdated': is_outdated,
        'comments': {
            'nodes': [make_comment_node(i) for i in comment_ids],
            'pageInfo': {'hasNextPage': has_more_comments, 'endCursor': 'inner' if has_more_comments else None},
        },
    }


def make_threads_page(threads, has_next_page=False, end_cursor=None):
    """Build the ``data`` payload of one review-threads GraphQL response."""
    return {
        'repository': {
            'pullRequest': {
                'reviewThreads': {
                    'nodes': threads,
                    'pageInfo': {'hasNextPage': has_next_page, 'endCursor': end_cursor},
                }
            }
        }
    }
