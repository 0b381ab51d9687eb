"""Feed service exceptions."""

from __future__ import annotations


class FeedLoadError(Exception):
    """Raised when any part of the personalized feed could not be loaded.

    No partial feed is ever returned alongside this error.
    """
