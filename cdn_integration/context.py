"""
Request Context

Admin-context predicate and site URL detection for Django requests.
"""

from typing import Optional
from django.core.exceptions import DisallowedHost
from django.http import HttpRequest

from .conf import get_setting
from .eligibility import split_url


def is_admin_path(path: str) -> bool:
    prefixes = tuple(get_setting('CDN_ADMIN_URL_PREFIXES') or ())
    return bool(prefixes) and path.startswith(prefixes)


def is_admin_request(request: Optional[HttpRequest]) -> bool:
    """
    Check if a request belongs to the administrative area.

    AJAX calls routed through an admin endpoint but made from a front-end
    page (referer outside the admin area) count as front-end requests.
    """
    if request is None or not is_admin_path(request.path):
        return False

    if request.headers.get('x-requested-with') == 'XMLHttpRequest':
        referer = request.headers.get('referer')
        parts = split_url(referer) if referer else None
        if parts is not None:
            return is_admin_path(parts.path)

    return True


def get_site_url(request: Optional[HttpRequest]) -> str:
    """Get the configured site URL, or derive it from the request."""
    site_url = get_setting('CDN_SITE_URL')
    if site_url or request is None:
        return site_url or ''

    try:
        return f'{request.scheme}://{request.get_host()}'
    except DisallowedHost:
        return ''
