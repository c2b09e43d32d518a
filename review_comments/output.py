"""Output formatting and export for parsed review comments."""

import json
import logging
from collections import Counter
from typing import List, Sequence

from .models import CodeRabbitComment, PullRequest


# ANSI color codes
GREEN = '\033[92m'
YELLOW = '\033[93m'
RED = '\033[91m'
CYAN = '\033[96m'
BOLD = '\033[1m'
RESET = '\033[0m'

UNTYPED_LABEL = '(no type)'


class OutputFormatter:
    """Formats and prints parsed review comments."""

    def __init__(self, show_comments: bool = True, use_colors: bool = True):
        """Initialize the output formatter.

        Args:
            show_comments: Whether to list every comment after the statistics
            use_colors: Whether to use ANSI colors
        """
        self.show_comments = show_comments
        self.use_colors = use_colors

    def _color(self, text: str, color: str) -> str:
        if not self.use_colors:
            return text
        return f"{color}{text}{RESET}"

    def print_summary(self, pr: PullRequest, comments: Sequence[CodeRabbitComment]):
        """Print PR header, comment statistics and (optionally) the comment list."""
        print("\n" + "="*80)
        print(self._color(f"REVIEW COMMENTS FOR PR #{pr.number}: {pr.title}", BOLD))
        print(f"{pr.head_ref_name} -> {pr.base_ref_name}  {pr.url}")
        print("="*80)

        if not comments:
            print("\nNo bot review comments found.")
            return

        self._print_statistics(comments)

        if self.show_comments:
            self._print_comments(comments)

    def _print_statistics(self, comments: Sequence[CodeRabbitComment]):
        """Print counts by type and by thread status."""
        unresolved = sum(1 for c in comments if not c.is_resolved)
        outdated = sum(1 for c in comments if c.is_outdated)
        with_fix = sum(1 for c in comments if c.committable_suggestion or c.suggested_code or c.diff)

        print(f"\nTotal comments: {len(comments)}")
        print(f"Unresolved:     {self._color(str(unresolved), RED if unresolved else GREEN)}")
        print(f"Outdated:       {outdated}")
        print(f"With code fix:  {with_fix}")

        type_counts = Counter(c.type or UNTYPED_LABEL for c in comments)
        print(f"\n{'Type':<40} {'Count':>6}")
        print("-"*47)
        for comment_type, count in type_counts.most_common():
            print(f"{comment_type:<40} {count:>6}")

    def _print_comments(self, comments: Sequence[CodeRabbitComment]):
        """Print one block per comment, in fetch order."""
        print("\n" + "="*80)
        print("COMMENTS")
        print("="*80)

        for comment in comments:
            status = self._color('resolved', GREEN) if comment.is_resolved else self._color('open', YELLOW)
            if comment.is_outdated:
                status += ', outdated'
            location = comment.path or '(no path)'
            if comment.position is not None:
                location += f":{comment.position}"

            print(f"\n{self._color(location, CYAN)} [{status}]")
            print(f"  {comment.type or UNTYPED_LABEL}: {comment.summary or comment.heading or ''}")
            if comment.tools:
                print(f"  Tools: {', '.join(comment.tools)}")
            print(f"  {comment.url}")

    @staticmethod
    def build_report(pr: PullRequest, comments: Sequence[CodeRabbitComment]) -> dict:
        """Build the JSON-ready export document."""
        return {
            'pullRequest': pr.to_dict(),
            'comments': [comment.to_dict() for comment in comments],
        }

    def write_json(self, pr: PullRequest, comments: List[CodeRabbitComment], output_file: str):
        """Write parsed comments as JSON to ``output_file``."""
        with open(output_file, 'w', encoding='utf-8') as f:
            json.dump(self.build_report(pr, comments), f, indent=2, ensure_ascii=False)
        logging.info(f"Wrote {len(comments)} parsed comment(s) to {output_file}")
