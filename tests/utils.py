"""
Shared test fixtures
"""

from cdn_integration.config import ConfigurationSnapshot, PathRule


CDN_BASE_URL = 'https://cdn.example/user/repo@main/'

SITE_URL = 'https://site.example'

CDN_SETTINGS = {
    'CDN_ENABLED': True,
    'CDN_BASE_URL': CDN_BASE_URL,
    'CDN_SITE_URL': SITE_URL,
}


def make_config(**overrides) -> ConfigurationSnapshot:
    """Build an active snapshot, overriding any field."""
    values = {
        'enabled': True,
        'cdn_base_url': CDN_BASE_URL,
        'accepted_extensions': frozenset(['js', 'css', 'png', 'jpg', 'svg', 'woff2']),
        'excluded_path_rules': (PathRule.parse('/wp-admin/*'), PathRule.parse('/wp-login.php')),
        'site_origin': SITE_URL,
    }
    values.update(overrides)
    return ConfigurationSnapshot(**values)
