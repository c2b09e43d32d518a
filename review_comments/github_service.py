"""Pull request lookup and review comment retrieval."""

import re
import logging
from typing import Dict, List, Optional, Tuple

from .api_client import GitHubAPIClient
from .errors import ParsingError, ServiceError, is_domain_error
from .models import Comment, CommentAuthor, PullRequest

PAGE_SIZE = 100

_PR_URL_RE = re.compile(r'^https://github\.com/([^/?#]+)/([^/?#]+)/pull/(\d+)(?=[/?#]|$)')

REVIEW_THREADS_QUERY = """
query($owner: String!, $repo: String!, $pr: Int!, $cursor: String) {
  repository(owner: $owner, name: $repo) {
    pullRequest(number: $pr) {
      reviewThreads(first: %(page_size)d, after: $cursor) {
        nodes {
          isResolved
          isOutdated
          comments(first: %(page_size)d) {
            nodes {
              databaseId
              author { login }
              body
              createdAt
              url
              path
              position
              isMinimized
            }
            pageInfo {
              hasNextPage
              endCursor
            }
          }
        }
        pageInfo {
          hasNextPage
          endCursor
        }
      }
    }
  }
}
""" % {'page_size': PAGE_SIZE}


def parse_pull_request_url(url: str) -> Tuple[str, str, int]:
    """Split a PR URL of the form ``https://github.com/<owner>/<repo>/pull/<number>``.

    Anything after the number (``/files``, ``?query``, ``#fragment``) is ignored.

    Returns:
        Tuple of (owner, repo, pr_number)

    Raises:
        ParsingError: If the URL does not have that shape
    """
    match = _PR_URL_RE.match(url or '')
    if not match:
        raise ParsingError('pull request URL', {'url': url})

    owner, repo, number = match.groups()
    return owner, repo, int(number)


def _to_pull_request(pr: Dict) -> PullRequest:
    """Map a REST pull request object onto ``PullRequest``."""
    return PullRequest(
        number=pr['number'],
        title=pr['title'],
        head_ref_name=pr['head']['ref'],
        base_ref_name=pr['base']['ref'],
        url=pr['html_url'],
    )


class GitHubQueryClient:
    """Finds the open PR for a branch and fetches all of its review comments."""

    def __init__(self, api_client: GitHubAPIClient):
        self.api_client = api_client

    def get_pull_request_for_branch(self, owner: str, repo_name: str, branch: str) -> PullRequest:
        """Return the open pull request whose head is ``owner:branch``.

        If several open PRs share that head, the first one in GitHub's response
        order is returned; no client-side sorting is applied.

        Raises:
            ServiceError: If no PR is open for the branch or the request fails
        """
        head = f"{owner}:{branch}"
        logging.debug(f"Getting pull request for {owner}/{repo_name} head={head}")

        try:
            pulls = self.api_client.get_json(
                f"/repos/{owner}/{repo_name}/pulls",
                params={'head': head, 'state': 'open'}
            )
            logging.debug(f"Found {len(pulls)} open pull request(s) for {head}")

            if not pulls:
                raise ServiceError('No PR found', {'owner': owner, 'repoName': repo_name, 'branch': branch})

            pull_request = _to_pull_request(pulls[0])
        except Exception as e:
            if is_domain_error(e):
                logging.error(str(e))
                raise
            error = ServiceError(
                'Failed to get pull request for branch',
                {'owner': owner, 'repoName': repo_name, 'branch': branch},
                e
            )
            logging.error(str(error))
            raise error from e

        logging.debug(f"Retrieved PR #{pull_request.number} '{pull_request.title}' "
                      f"({pull_request.head_ref_name} -> {pull_request.base_ref_name})")
        return pull_request

    def get_pull_request_by_url(self, url: str) -> PullRequest:
        """Look up a pull request from its URL.

        Raises:
            ParsingError: If the URL is not a GitHub PR URL (before any request)
            ServiceError: If the request fails
        """
        owner, repo, pr_number = parse_pull_request_url(url)
        logging.debug(f"Getting pull request {owner}/{repo}#{pr_number}")

        try:
            return _to_pull_request(self.api_client.get_json(f"/repos/{owner}/{repo}/pulls/{pr_number}"))
        except Exception as e:
            if is_domain_error(e):
                raise
            error = ServiceError('Failed to get pull request', {'owner': owner, 'repo': repo, 'prNumber': pr_number}, e)
            logging.error(str(error))
            raise error from e

    def get_review_comments_for_pull_request(self, pr: PullRequest) -> List[Comment]:
        """Fetch every review comment of a pull request, thread by thread.

        Review threads are paginated with a cursor. Comments inside a thread are
        read from the first page only; threads with more than ``PAGE_SIZE``
        comments lose the excess and a warning is logged.

        Returns:
            Comments in page, then thread, then comment order

        Raises:
            ParsingError: If ``pr.url`` is not a GitHub PR URL (before any request)
            ServiceError: If any page request fails; nothing is returned then
        """
        try:
            owner, repo, pr_number = parse_pull_request_url(pr.url)
        except ParsingError as e:
            logging.error(str(e))
            raise

        logging.debug(f"Fetching review threads for {owner}/{repo}#{pr_number}")

        try:
            all_comments: List[Comment] = []
            cursor: Optional[str] = None
            has_next_page = True
            threads_processed = 0

            while has_next_page:
                review_threads = self._fetch_review_threads_page(owner, repo, pr_number, cursor)
                threads = review_threads.get('nodes') or []
                page_info = review_threads['pageInfo']

                threads_processed += len(threads)
                logging.debug(f"Processing {len(threads)} thread(s) "
                              f"({threads_processed} so far, hasNextPage={page_info['hasNextPage']})")

                for thread in threads:
                    all_comments.extend(self._extract_comments_from_thread(thread))

                has_next_page = bool(page_info['hasNextPage'])
                cursor = page_info.get('endCursor')
        except Exception as e:
            if is_domain_error(e):
                logging.error(str(e))
                raise
            error = ServiceError(
                'Failed to get review comments for pull request',
                {'owner': owner, 'repo': repo, 'prNumber': pr_number},
                e
            )
            logging.error(str(error))
            raise error from e

        logging.debug(f"Retrieved {len(all_comments)} comment(s) from {threads_processed} thread(s)")
        return all_comments

    def _fetch_review_threads_page(self, owner: str, repo: str, pr_number: int,
                                   cursor: Optional[str]) -> Dict:
        """Run one review-threads query and return its ``reviewThreads`` object."""
        data = self.api_client.post_graphql(REVIEW_THREADS_QUERY, {
            'owner': owner,
            'repo': repo,
            'pr': pr_number,
            'cursor': cursor,
        })

        pull_request = (data.get('repository') or {}).get('pullRequest')
        if pull_request is None:
            raise ServiceError('Pull request not found', {'owner': owner, 'repo': repo, 'prNumber': pr_number})

        return pull_request['reviewThreads']

    def _extract_comments_from_thread(self, thread: Dict) -> List[Comment]:
        """Flatten the first page of a thread's comments, copying the thread status onto each."""
        is_resolved = bool(thread['isResolved'])
        is_outdated = bool(thread['isOutdated'])
        comments_page = thread['comments']
        nodes = comments_page.get('nodes') or []

        comments = []
        for node in nodes:
            author = node.get('author') or {}
            comments.append(Comment(
                comment_id=node['databaseId'],
                body=node['body'],
                author=CommentAuthor(login=author.get('login')),
                created_at=node['createdAt'],
                url=node['url'],
                path=node.get('path'),
                position=node.get('position'),
                is_resolved=is_resolved,
                is_outdated=is_outdated,
                is_minimized=bool(node.get('isMinimized')),
            ))

        # TODO: follow comments.pageInfo.endCursor once dropping overflow comments is no longer accepted
        if (comments_page.get('pageInfo') or {}).get('hasNextPage'):
            logging.warning(
                f"Thread has more than {PAGE_SIZE} comments - some comments may be missing "
                f"(resolved={is_resolved}, outdated={is_outdated}, fetched={len(nodes)})"
            )

        logging.debug(f"Processed {len(comments)} comment(s) for thread "
                      f"(resolved={is_resolved}, outdated={is_outdated})")
        return comments
