"""Command line entry point: fetch and parse bot review comments of a PR."""

import sys
import logging
from typing import List

from dotenv import load_dotenv

from .api_client import GitHubAPIClient
from .config import AppConfig, load_config
from .errors import AppError
from .git_repo import get_current_repo_and_branch
from .github_service import GitHubQueryClient
from .models import CodeRabbitComment, PullRequest
from .output import OutputFormatter
from .parser import CommentParser, is_bot_comment

LOG_FORMAT = '%(asctime)s %(levelname)s: %(message)s'
LOG_DATE_FORMAT = '%m/%d/%Y %I:%M:%S %p'


def configure_logging(level: str):
    """Configure root logging on stderr so stdout only carries the report."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stderr,
        force=True
    )


def resolve_pull_request(config: AppConfig, client: GitHubQueryClient) -> PullRequest:
    """Find the PR to inspect: ``PR_URL`` if set, else the open PR of the branch."""
    if config.pr_url:
        logging.info(f"Using pull request from PR_URL: {config.pr_url}")
        return client.get_pull_request_by_url(config.pr_url)

    if config.owner and config.repo_name and config.branch:
        owner, repo_name, branch = config.owner, config.repo_name, config.branch
    else:
        detected = get_current_repo_and_branch()
        owner = config.owner or detected.owner
        repo_name = config.repo_name or detected.repo_name
        branch = config.branch or detected.branch

    logging.info(f"Looking up open pull request for {owner}/{repo_name} branch '{branch}'")
    return client.get_pull_request_for_branch(owner, repo_name, branch)


def fetch_parsed_comments(config: AppConfig, client: GitHubQueryClient, parser: CommentParser,
                          pr: PullRequest) -> List[CodeRabbitComment]:
    """Fetch all review comments of ``pr`` and parse those written by the bot."""
    comments = client.get_review_comments_for_pull_request(pr)
    bot_comments = [c for c in comments if is_bot_comment(c, config.bot_login)]
    logging.info(f"Fetched {len(comments)} review comment(s), {len(bot_comments)} by {config.bot_login}")

    if config.only_unresolved:
        bot_comments = [c for c in bot_comments if not c.is_resolved]
        logging.info(f"Keeping {len(bot_comments)} comment(s) from unresolved threads")

    return parser.parse_all(bot_comments)


def main() -> int:
    """Main entry point for the script."""
    # Load environment variables from .env file if it exists
    load_dotenv()

    try:
        config = load_config()
    except AppError as e:
        configure_logging('INFO')
        logging.error(str(e))
        return 1

    configure_logging(config.log_level)

    if not config.github_token:
        logging.error("GITHUB_TOKEN is required to query review threads")
        return 1

    client = GitHubQueryClient(GitHubAPIClient(config.github_token))
    parser = CommentParser()

    try:
        pr = resolve_pull_request(config, client)
        parsed = fetch_parsed_comments(config, client, parser, pr)
    except AppError as e:
        logging.error(f"Fetching review comments failed: {e}")
        return 1

    formatter = OutputFormatter(use_colors=sys.stdout.isatty())
    formatter.print_summary(pr, parsed)

    if config.output_file:
        formatter.write_json(pr, parsed, config.output_file)

    return 0


if __name__ == "__main__":
    sys.exit(main())
