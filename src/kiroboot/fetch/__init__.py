"""Source fetcher: locator validation, shallow clone and origin verification."""

from kiroboot.fetch.base import SourceFetcher
from kiroboot.fetch.git import GitFetcher
from kiroboot.fetch.locator import validate_locator

__all__ = ["SourceFetcher", "GitFetcher", "validate_locator"]
