"""
CDN Integration Helper

Read-only access to the CDN settings, in the shape the rewriting core
consumes.
"""

import logging
from typing import List, Optional

from .conf import JSDELIVR_GITHUB_URL, get_setting
from .config import PathRule, normalize_file_types, parse_path_rules
from .mapper import remote_path_for_url

logger = logging.getLogger('cdn_integration')


class CDNIntegrationHelper:
    """Settings facade for the URL rewriter."""

    def __init__(self, site_url: Optional[str] = None):
        self.site_url = (site_url or get_setting('CDN_SITE_URL') or '').rstrip('/')

    def is_enabled(self) -> bool:
        return bool(get_setting('CDN_ENABLED'))

    def is_debug_enabled(self) -> bool:
        return bool(get_setting('CDN_DEBUG'))

    def get_cdn_base_url(self) -> str:
        """
        Get the CDN base URL.

        An explicit ``CDN_BASE_URL`` wins; otherwise the jsDelivr URL of
        the configured GitHub repository is used. Empty when neither is
        configured.
        """
        base_url = (get_setting('CDN_BASE_URL') or '').strip()
        if base_url:
            return base_url

        username = (get_setting('CDN_GITHUB_USERNAME') or '').strip()
        repository = (get_setting('CDN_GITHUB_REPOSITORY') or '').strip()
        if not username or not repository:
            return ''

        branch = (get_setting('CDN_GITHUB_BRANCH') or '').strip() or 'main'
        return JSDELIVR_GITHUB_URL.format(
            username=username,
            repository=repository,
            branch=branch,
        )

    def get_file_types(self) -> List[str]:
        return normalize_file_types(get_setting('CDN_FILE_TYPES'))

    def get_excluded_paths(self) -> List[PathRule]:
        return list(parse_path_rules(get_setting('CDN_EXCLUDE_PATHS')))

    def is_excluded_path(self, path: str) -> bool:
        return any(rule.matches(path) for rule in self.get_excluded_paths())

    def get_remote_path_for_url(self, url: str) -> str:
        return remote_path_for_url(url, self.site_url)

    def log(self, message: str, level: str = 'info'):
        """Log a message at a level given by name ('debug', 'info', ...)."""
        numeric_level = logging.getLevelName(level.upper())
        if not isinstance(numeric_level, int):
            numeric_level = logging.INFO
        logger.log(numeric_level, message)
