"""
CDN Integration Settings

Default values for the ``CDN_*`` settings read by the integration.
"""

from typing import Any, Dict
from django.conf import settings


DEFAULT_FILE_TYPES = 'js,css,png,jpg,jpeg,gif,svg,woff,woff2,ttf,eot'

DEFAULT_EXCLUDE_PATHS = '/wp-admin/*, /wp-login.php'

JSDELIVR_GITHUB_URL = 'https://cdn.jsdelivr.net/gh/{username}/{repository}@{branch}/'

DEFAULTS: Dict[str, Any] = {
    'CDN_ENABLED': False,            # Disabled until explicitly switched on
    'CDN_DEBUG': False,
    'CDN_GITHUB_USERNAME': '',
    'CDN_GITHUB_REPOSITORY': '',
    'CDN_GITHUB_BRANCH': 'main',
    'CDN_BASE_URL': '',
    'CDN_FILE_TYPES': DEFAULT_FILE_TYPES,
    'CDN_EXCLUDE_PATHS': DEFAULT_EXCLUDE_PATHS,
    'CDN_SITE_URL': '',
    'CDN_ADMIN_URL_PREFIXES': ('/wp-admin/', '/admin/'),
    'CDN_INJECT_CONFIG_SCRIPT': True,
    'CDN_MAX_CONTENT_LENGTH': 1048576,  # 1MB
}


def get_setting(name: str) -> Any:
    """Get a CDN setting, falling back to its default."""
    return getattr(settings, name, DEFAULTS[name])
