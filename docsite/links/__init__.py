"""Link integrity checking for composed documentation sites."""

from .checker import LinkChecker, LinkIssue, LinkReport

__all__ = ["LinkChecker", "LinkIssue", "LinkReport"]
