#!/usr/bin/env python3
"""
Review Comment Fetcher
Fetches the review comments of a pull request and parses CodeRabbit findings.
"""

import sys

from review_comments.cli import main


if __name__ == "__main__":
    sys.exit(main())
