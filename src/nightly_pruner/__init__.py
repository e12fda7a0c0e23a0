"""Nightly release pruner.

Keeps the newest assets on a repository's nightly release, deletes the
rest, and moves the nightly tag to the current commit.
"""

__version__ = "0.1.0"
