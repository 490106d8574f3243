"""
PR Reviewer Assignment Service

Assigns code-review reviewers to pull requests within a team, swaps reviewers
on request and tracks the pull-request lifecycle from OPEN to MERGED.
"""

__version__ = "1.0.0"
__author__ = "PR Reviewer Assignment Team"
