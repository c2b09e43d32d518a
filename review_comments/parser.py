"""Extraction of structured fields from CodeRabbit review comments.

Each field is described by a row in ``FIELD_EXTRACTORS``: a regex applied to
the whole comment body and a function that cleans up the captured text.
Extractors are independent of each other, so adding or removing a field is a
change to the table only.
"""

import re
import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

from .errors import ParsingError
from .models import CODERABBIT_BOT, CodeRabbitComment, Comment

CODERABBIT_LOGIN = 'coderabbitai[bot]'

BODY_PREVIEW_LENGTH = 200

TYPE_EMOJIS = ('⚠️', '💡', '❗', '💬', '🛠️')
_EMOJI_ALTERNATION = '|'.join(re.escape(emoji) for emoji in TYPE_EMOJIS)
_LEADING_EMOJI_RE = re.compile(rf'^(?:{_EMOJI_ALTERNATION})\s*')

TYPE_RE = re.compile(rf'^_((?:{_EMOJI_ALTERNATION}).+?)_', re.MULTILINE)
HEADING_RE = re.compile(r'^###[ \t]+(.+)$', re.MULTILINE)
SUMMARY_RE = re.compile(r'\*\*(.+?)\*\*')
DIFF_RE = re.compile(r'```diff\n(.+?)```', re.DOTALL)
SUGGESTED_CODE_RE = re.compile(r'```suggestion\n(.+?)```', re.DOTALL)
COMMITTABLE_RE = re.compile(r'📝 Committable suggestion\s*```[^\n]*\n(.*?)```', re.DOTALL)
AI_PROMPT_RE = re.compile(r'<summary>🤖 Prompt for AI Agents</summary>.*?```[^\n]*\n(.+?)```', re.DOTALL)
TOOLS_RE = re.compile(r'<summary>🪛 ([^<]+)</summary>')
INTERNAL_ID_RE = re.compile(r'<!-- fingerprinting:([a-z:]+) -->')


def _strip(text: str) -> Optional[str]:
    return text.strip() or None


def _strip_type(text: str) -> Optional[str]:
    return _LEADING_EMOJI_RE.sub('', text.strip()).strip() or None


def _keep(text: str) -> Optional[str]:
    return text


@dataclass(frozen=True)
class FieldExtractor:
    """One row of the extraction table.

    With ``collect_all`` every match is returned as a list (empty when nothing
    matched); otherwise only the first match is used and a miss gives None.
    """
    name: str
    pattern: re.Pattern
    clean: Callable[[str], Optional[str]] = _strip
    collect_all: bool = False

    def extract(self, body: str):
        if self.collect_all:
            return [self.clean(m.group(1)) for m in self.pattern.finditer(body)]
        match = self.pattern.search(body)
        return self.clean(match.group(1)) if match else None


FIELD_EXTRACTORS = (
    FieldExtractor('type', TYPE_RE, _strip_type),
    FieldExtractor('heading', HEADING_RE),
    FieldExtractor('summary', SUMMARY_RE),
    FieldExtractor('diff', DIFF_RE),
    FieldExtractor('suggested_code', SUGGESTED_CODE_RE),
    FieldExtractor('committable_suggestion', COMMITTABLE_RE),
    FieldExtractor('ai_prompt', AI_PROMPT_RE),
    FieldExtractor('tools', TOOLS_RE, lambda text: text.strip(), collect_all=True),
    FieldExtractor('internal_id', INTERNAL_ID_RE, _keep),
)


def is_bot_comment(comment: Comment, bot_login: str = CODERABBIT_LOGIN) -> bool:
    """Check whether a comment was written by the given bot account."""
    return comment.author.login == bot_login


def _body_preview(body: str) -> str:
    if len(body) > BODY_PREVIEW_LENGTH:
        return body[:BODY_PREVIEW_LENGTH] + '...'
    return body


class CommentParser:
    """Parses CodeRabbit review comments into ``CodeRabbitComment`` records."""

    def __init__(self, extractors=FIELD_EXTRACTORS):
        self.extractors = tuple(extractors)

    def parse(self, comment: Comment) -> CodeRabbitComment:
        """Extract all known fields from a comment body.

        Raises:
            ParsingError: If the comment or its body is missing or empty
        """
        if comment is None or not comment.body:
            comment_id = getattr(comment, 'comment_id', None)
            logging.warning(f"Invalid comment provided for parsing (commentId={comment_id})")
            raise ParsingError('Comment or comment body is required for parsing', {
                'commentId': comment_id,
                'hasComment': comment is not None,
                'hasBody': bool(getattr(comment, 'body', None)),
            })

        body = comment.body
        logging.debug(f"Parsing comment {comment.comment_id} by {comment.author.login} "
                      f"on {comment.path} ({len(body)} chars)")

        try:
            parsed_fields = {}
            for extractor in self.extractors:
                parsed_fields[extractor.name] = extractor.extract(body)
                logging.debug(f"Field '{extractor.name}': {parsed_fields[extractor.name]!r}")

            record = CodeRabbitComment.from_comment(comment, bot=CODERABBIT_BOT, **parsed_fields)
        except Exception as e:
            logging.error(f"Failed to parse comment {comment.comment_id}: {e}. "
                          f"Body preview: {_body_preview(body)!r}")
            raise

        found = sorted(name for name, value in parsed_fields.items() if value)
        logging.info(f"Parsed comment {comment.comment_id}: "
                     f"fields={', '.join(found) or 'none'}, tools={len(record.tools)}")
        return record

    def parse_all(self, comments: Iterable[Comment]) -> List[CodeRabbitComment]:
        """Parse comments in order; the first failure aborts the whole batch."""
        return [self.parse(comment) for comment in comments]
