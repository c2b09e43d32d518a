"""Data models for pull requests and review comments."""

from dataclasses import dataclass, field, fields
from typing import Dict, List, Optional

CODERABBIT_BOT = 'coderabbitai'


@dataclass(frozen=True)
class RepoBranch:
    """A repository and branch, e.g. the current working tree."""
    owner: str
    repo_name: str
    branch: str


@dataclass(frozen=True)
class PullRequest:
    """An open pull request; ``url`` is used to re-derive owner, repo and number."""
    number: int
    title: str
    head_ref_name: str
    base_ref_name: str
    url: str

    def to_dict(self) -> Dict:
        return {
            'number': self.number,
            'title': self.title,
            'headRefName': self.head_ref_name,
            'baseRefName': self.base_ref_name,
            'url': self.url,
        }


@dataclass(frozen=True)
class CommentAuthor:
    login: Optional[str]


@dataclass(frozen=True)
class Comment:
    """A single review comment.

    ``is_resolved`` and ``is_outdated`` belong to the containing thread and are
    copied onto every comment of that thread.
    """
    comment_id: int
    body: str
    author: CommentAuthor
    created_at: str
    url: str
    path: Optional[str]
    position: Optional[int]
    is_resolved: bool
    is_outdated: bool
    is_minimized: bool

    def to_dict(self) -> Dict:
        """Return a JSON-ready dict using GitHub's camelCase field names."""
        return {
            'commentId': self.comment_id,
            'body': self.body,
            'author': {'login': self.author.login},
            'createdAt': self.created_at,
            'url': self.url,
            'path': self.path,
            'position': self.position,
            'isResolved': self.is_resolved,
            'isOutdated': self.is_outdated,
            'isMinimized': self.is_minimized,
        }


@dataclass(frozen=True)
class CodeRabbitComment(Comment):
    """A review comment with the fields extracted from a CodeRabbit body.

    Optional fields stay None when nothing matched; ``tools`` is always a list.
    ``explanation`` is not extracted and is always None.
    """
    bot: str = CODERABBIT_BOT
    type: Optional[str] = None
    heading: Optional[str] = None
    summary: Optional[str] = None
    diff: Optional[str] = None
    suggested_code: Optional[str] = None
    committable_suggestion: Optional[str] = None
    ai_prompt: Optional[str] = None
    tools: List[str] = field(default_factory=list)
    internal_id: Optional[str] = None
    explanation: Optional[str] = None

    def to_dict(self) -> Dict:
        """Return a JSON-ready dict; absent optional fields are left out."""
        data = super().to_dict()
        data['bot'] = self.bot
        optional = {
            'type': self.type,
            'heading': self.heading,
            'summary': self.summary,
            'diff': self.diff,
            'suggestedCode': self.suggested_code,
            'committableSuggestion': self.committable_suggestion,
            'aiPrompt': self.ai_prompt,
            'internalId': self.internal_id,
        }
        data.update({key: value for key, value in optional.items() if value is not None})
        data['tools'] = list(self.tools)
        return data

    @classmethod
    def from_comment(cls, comment: Comment, **parsed_fields) -> 'CodeRabbitComment':
        """Layer parsed fields onto a shallow copy of ``comment``."""
        base = {f.name: getattr(comment, f.name) for f in fields(Comment)}
        return cls(**base, **parsed_fields, explanation=None)
