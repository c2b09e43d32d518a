"""Detection of the GitHub repository and branch of the current working tree."""

import re
import logging
import subprocess
from typing import List, Optional, Tuple

from .errors import ParsingError, ServiceError
from .models import RepoBranch

_REMOTE_URL_RE = re.compile(r'(?:https?://github\.com/|git@github\.com:)([^/]+)/([^/\s.]+?)(?:\.git)?$')


def _run_git(args: List[str], cwd: Optional[str] = None) -> str:
    """Run a git command and return its stripped stdout."""
    cmd = ['git'] + args
    try:
        result = subprocess.run(cmd, cwd=cwd, check=True, capture_output=True, text=True, timeout=30)
    except subprocess.CalledProcessError as e:
        err = (e.stderr or e.stdout or '').strip()
        raise ServiceError('Failed to run git command', {'command': cmd, 'stderr': err}, e) from e
    except FileNotFoundError as e:
        raise ServiceError('git executable not found', {'command': cmd}, e) from e
    return result.stdout.strip()


def parse_remote_url(remote_url: str) -> Tuple[str, str]:
    """Return (owner, repo_name) for a GitHub HTTPS or SSH remote URL.

    Raises:
        ParsingError: If the URL does not point at github.com
    """
    match = _REMOTE_URL_RE.search(remote_url.strip())
    if not match:
        raise ParsingError('remote URL', {'remoteUrl': remote_url})
    return match.group(1), match.group(2)


def get_current_repo_and_branch(cwd: Optional[str] = None) -> RepoBranch:
    """Read owner, repository and checked-out branch from the local git checkout."""
    logging.debug("Detecting repository and branch from git")
    branch = _run_git(['rev-parse', '--abbrev-ref', 'HEAD'], cwd)
    remote_url = _run_git(['config', '--get', 'remote.origin.url'], cwd)

    owner, repo_name = parse_remote_url(remote_url)
    logging.debug(f"Detected {owner}/{repo_name} on branch '{branch}' (remote {remote_url})")
    return RepoBranch(owner=owner, repo_name=repo_name, branch=branch)
