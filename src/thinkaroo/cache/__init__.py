"""
Content cache package.

- TimedContentCache (timed.py): hourly-bucketed generate-or-reuse policy over an ObjectStore
"""

from thinkaroo.cache.timed import MAX_OBJECTS_PER_HOUR, TimedContentCache, format_timed_prefix

__all__ = ["MAX_OBJECTS_PER_HOUR", "TimedContentCache", "format_timed_prefix"]
