"""
Path Mapper

Maps an eligible origin reference to its CDN URL.
"""

from typing import Callable, Optional
from urllib.parse import urlsplit

from .config import ConfigurationSnapshot


RemotePathResolver = Callable[[str], str]


def strip_base_path(path: str, site_url: str) -> str:
    """Remove the site's base path when the site lives under a sub-path."""
    base_path = urlsplit(site_url).path.rstrip('/') if site_url else ''
    if base_path and (path == base_path or path.startswith(base_path + '/')):
        return path[len(base_path):]
    return path


def query_and_fragment(url: str) -> str:
    """Get everything from the first '?' or '#' on, as written."""
    ends = [index for index in (url.find('?'), url.find('#')) if index != -1]
    return url[min(ends):] if ends else ''


def remote_path_for_url(url: str, site_url: str = '') -> str:
    """
    Get the path of an asset relative to the site root.

    Query string and fragment are carried over verbatim, empty ones
    included, e.g. ``https://site.example/wp-content/a.css?ver=1.2`` gives
    ``wp-content/a.css?ver=1.2``.
    """
    parts = urlsplit(url)
    path = strip_base_path(parts.path, site_url).lstrip('/')
    return path + query_and_fragment(url)


def join_cdn_url(cdn_base_url: str, remote_path: str) -> str:
    return cdn_base_url.rstrip('/') + '/' + remote_path.lstrip('/')


def map_to_cdn_url(url: str, config: ConfigurationSnapshot,
                   remote_path_resolver: Optional[RemotePathResolver] = None) -> str:
    """Compose the CDN URL for an URL the evaluator accepted."""
    if remote_path_resolver is None:
        remote_path = remote_path_for_url(url, config.site_origin)
    else:
        remote_path = remote_path_resolver(url)

    return join_cdn_url(config.cdn_base_url, remote_path)
