"""GitHub community data bot.

Mirrors pull requests, issues, comments, reviews and contributor emails from
GitHub repositories into a relational store.
"""

__version__ = "0.1.0"
