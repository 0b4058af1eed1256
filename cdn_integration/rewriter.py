"""
Single-URL Rewriter

Combines the eligibility evaluator, the path mapper and a request-scoped
cache. Every higher-level rewriter goes through ``URLRewriter.rewrite``.
"""

import hashlib
import logging
from typing import Callable, Dict, Optional

from .config import ConfigurationSnapshot
from .eligibility import contains_admin_marker, should_rewrite
from .mapper import RemotePathResolver, map_to_cdn_url

logger = logging.getLogger(__name__)


def make_cache_key(url: str) -> str:
    # Lone surrogates (from decoded JSON or template data) must still hash
    return hashlib.md5(url.encode('utf-8', 'surrogatepass')).hexdigest()


class RewriteCache:
    """
    Memo table from original URL to final URL.

    Lives for one render pass; it only grows, bounded by the number of
    distinct URLs on a page.
    """

    def __init__(self):
        self._entries: Dict[str, str] = {}

    def get(self, url: str) -> Optional[str]:
        return self._entries.get(make_cache_key(url))

    def set(self, url: str, rewritten: str) -> None:
        self._entries[make_cache_key(url)] = rewritten

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, url: str) -> bool:
        return make_cache_key(url) in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class URLRewriter:
    """Rewrite single asset URLs to the CDN."""

    def __init__(self, config: ConfigurationSnapshot,
                 remote_path_resolver: Optional[RemotePathResolver] = None,
                 is_admin: Optional[Callable[[], bool]] = None,
                 debug: bool = False):
        self.config = config
        self.remote_path_resolver = remote_path_resolver
        self.is_admin = is_admin or (lambda: False)
        self.debug = debug
        self.cache = RewriteCache()

    def is_active(self) -> bool:
        """Whether any entry point may change its input."""
        return self.config.is_active and not self.is_admin()

    def reset(self) -> None:
        """Forget cached decisions before the instance serves another request."""
        self.cache.clear()

    def rewrite(self, url: str) -> str:
        """Rewrite a URL to the CDN, or return it unchanged."""
        # Admin decisions are never cached
        if self.is_admin():
            return url

        if not self.config.enabled or not url or not isinstance(url, str):
            return url

        if contains_admin_marker(url):
            return url

        cached = self.cache.get(url)
        if cached is not None:
            return cached

        if not self.config.cdn_base_url or not should_rewrite(url, self.config):
            self.cache.set(url, url)
            return url

        try:
            cdn_url = map_to_cdn_url(url, self.config, self.remote_path_resolver)
        except Exception as e:
            logger.error(f"Failed to map {url} to CDN: {e}")
            self.cache.set(url, url)
            return url

        if self.debug:
            logger.debug(f"Rewrote URL: {url} to {cdn_url}")

        self.cache.set(url, cdn_url)
        return cdn_url
