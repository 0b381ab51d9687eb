"""Feed composition service."""

from recibook.services.feed.batching import chunked, fan_out_merge, merge_sorted_desc
from recibook.services.feed.exceptions import FeedLoadError
from recibook.services.feed.service import FeedService


__all__ = [
    "FeedLoadError",
    "FeedService",
    "chunked",
    "fan_out_merge",
    "merge_sorted_desc",
]
