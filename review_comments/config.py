"""
Configuration for the review comment fetcher.

Values come from environment variables (a ``.env`` file is loaded by the
entry point) and can be overridden with a nested dict, e.g. from tests.
"""

import os
import re
import copy
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

from .errors import ParsingError
from .parser import CODERABBIT_LOGIN

VALID_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR')
DEFAULT_LOG_LEVEL = 'INFO'

# Classic (ghp_, gho_, ghs_ ...) and fine-grained (github_pat_) tokens
_TOKEN_RE = re.compile(r'^(?:gh[opsur]_[A-Za-z0-9]{36}|github_pat_[A-Za-z0-9_]{22,})$')
_REPO_RE = re.compile(r'^([^/\s]+)/([^/\s]+)$')

REDACTED_KEYS = ('token',)


@dataclass(frozen=True)
class AppConfig:
    """Settings for a single fetch run."""
    github_token: Optional[str]
    log_level: str = DEFAULT_LOG_LEVEL
    owner: Optional[str] = None
    repo_name: Optional[str] = None
    branch: Optional[str] = None
    pr_url: Optional[str] = None
    bot_login: str = CODERABBIT_LOGIN
    only_unresolved: bool = False
    output_file: Optional[str] = None


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('true', '1', 'yes')


def _env_str(name: str) -> Optional[str]:
    value = os.environ.get(name)
    if value is None:
        return None
    return value.strip() or None


def deep_merge_dicts(target: Dict[str, Any], source: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``source`` into a copy of ``target``.

    Nested dicts are merged key by key; any other value in ``source`` replaces
    the one in ``target``. Neither input is modified.
    """
    merged = copy.copy(target)
    for key, source_value in source.items():
        target_value = merged.get(key)
        if isinstance(target_value, dict) and isinstance(source_value, dict):
            merged[key] = deep_merge_dicts(target_value, source_value)
        else:
            merged[key] = source_value
    return merged


def safe_config_value(config: Dict[str, Any], path: Sequence[str]) -> Any:
    """Look up a nested config value for display, hiding secrets."""
    if path and str(path[-1]).lower() in REDACTED_KEYS:
        return '<redacted>'
    value: Any = config
    for key in path:
        if not isinstance(value, dict) or key not in value:
            return None
        value = value[key]
    return value


def _default_settings() -> Dict[str, Any]:
    return {
        'github': {
            'token': _env_str('GITHUB_TOKEN'),
            'repo': _env_str('GITHUB_REPO'),
            'branch': _env_str('GITHUB_BRANCH'),
            'pr_url': _env_str('PR_URL'),
        },
        'logger': {
            'level': (_env_str('LOG_LEVEL') or DEFAULT_LOG_LEVEL).upper(),
        },
        'parser': {
            'bot_login': _env_str('BOT_LOGIN') or CODERABBIT_LOGIN,
            'only_unresolved': _env_flag('ONLY_UNRESOLVED'),
        },
        'output': {
            'file': _env_str('OUTPUT_FILE'),
        },
    }


def load_config(overrides: Optional[Dict[str, Any]] = None) -> AppConfig:
    """Build the configuration from the environment plus optional overrides.

    Raises:
        ParsingError: If ``github.repo`` is set but is not ``owner/repo``
    """
    settings = deep_merge_dicts(_default_settings(), overrides or {})
    github = settings['github']

    log_level = str(settings['logger']['level']).upper()
    if log_level not in VALID_LOG_LEVELS:
        logging.warning(f"Invalid LOG_LEVEL value '{log_level}', using default: {DEFAULT_LOG_LEVEL}")
        logging.warning(f"Valid options: {', '.join(VALID_LOG_LEVELS)}")
        log_level = DEFAULT_LOG_LEVEL

    token = github.get('token')
    if token and not _TOKEN_RE.match(token):
        logging.warning(f"GITHUB_TOKEN ({safe_config_value(settings, ['github', 'token'])}) "
                        f"does not look like a GitHub token")

    owner = repo_name = None
    repo = github.get('repo')
    if repo:
        match = _REPO_RE.match(repo)
        if not match:
            raise ParsingError('GITHUB_REPO', {'repo': repo, 'expected': 'owner/repo'})
        owner, repo_name = match.groups()

    return AppConfig(
        github_token=token,
        log_level=log_level,
        owner=owner,
        repo_name=repo_name,
        branch=github.get('branch'),
        pr_url=github.get('pr_url'),
        bot_login=settings['parser']['bot_login'],
        only_unresolved=bool(settings['parser']['only_unresolved']),
        output_file=settings['output']['file'],
    )
