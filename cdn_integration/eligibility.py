"""
Eligibility Evaluator

Decides whether an asset reference qualifies for CDN rewriting.
"""

from functools import lru_cache
from typing import Optional, Tuple
from urllib.parse import SplitResult, urlsplit

from .config import ConfigurationSnapshot


# Reserved login/admin path segments, never served from the CDN
ADMIN_PATH_MARKERS = ('/wp-admin', '/wp-login')

HTTP_SCHEMES = ('http', 'https')


def contains_admin_marker(url: str) -> bool:
    return any(marker in url for marker in ADMIN_PATH_MARKERS)


def split_url(url: str) -> Optional[SplitResult]:
    """Split a URL, or return None when it cannot be parsed."""
    try:
        return urlsplit(url)
    except ValueError:
        return None


@lru_cache(maxsize=64)
def _site_parts(site_origin: str) -> Tuple[str, str]:
    parts = split_url(site_origin)
    if parts is None:
        return '', ''
    return parts.scheme.lower(), parts.netloc.lower()


def is_same_origin(parts: SplitResult, site_origin: str) -> bool:
    """Compare scheme and host[:port] of an absolute URL with the site's."""
    site_scheme, site_netloc = _site_parts(site_origin)
    if not site_netloc:
        return False

    # Protocol-relative URLs inherit the site's scheme
    scheme = parts.scheme.lower() or site_scheme
    return scheme == site_scheme and parts.netloc.lower() == site_netloc


def resolve_path(url: str, config: ConfigurationSnapshot) -> Optional[str]:
    """
    Get the path used for rule matching and extension checks.

    Returns None for URLs that can never be rewritten: unparseable,
    non-HTTP schemes (data:, blob:, mailto: ...) and other origins.
    Query string and fragment are not part of the returned path.
    """
    parts = split_url(url)
    if parts is None:
        return None

    if parts.scheme and parts.scheme.lower() not in HTTP_SCHEMES:
        return None

    if parts.scheme or parts.netloc:
        if not is_same_origin(parts, config.site_origin):
            return None
        if not parts.path:
            return None

    return parts.path or None


def get_extension(path: str) -> str:
    """Get the substring after the last '.' of the final path segment."""
    basename = path.rsplit('/', 1)[-1]
    if '.' not in basename:
        return ''
    return basename.rsplit('.', 1)[1]


def should_rewrite(url: str, config: ConfigurationSnapshot) -> bool:
    """Check if a URL should be served from the CDN."""
    if not url or url[:5].lower() == 'data:':
        return False

    if contains_admin_marker(url):
        return False

    if not config.is_active:
        return False

    path = resolve_path(url, config)
    if path is None:
        return False

    if config.is_excluded(path):
        return False

    extension = get_extension(path)
    if not extension:
        return False

    return extension.lower() in config.accepted_extensions
