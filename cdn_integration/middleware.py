"""
CDN Middleware

Attaches a rewrite pipeline to every request and rewrites asset URLs in
HTML responses.
"""

import re
import logging
from typing import Optional
from django.http import HttpRequest, HttpResponse
from django.utils.deprecation import MiddlewareMixin

from .conf import get_setting
from .pipeline import RewritePipeline

logger = logging.getLogger(__name__)


HEAD_OPEN_RE = re.compile(r'<head\b[^>]*>', re.IGNORECASE)


def inject_into_head(content: str, markup: str) -> str:
    """Insert markup right after the opening <head> tag, if there is one."""
    if not markup:
        return content

    match = HEAD_OPEN_RE.search(content)
    if not match:
        return content

    return content[:match.end()] + markup + content[match.end():]


class CDNRewriteMiddleware(MiddlewareMixin):
    """
    Middleware to rewrite static asset URLs to the CDN.
    """

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        """Build the request's pipeline."""
        request.cdn_pipeline = RewritePipeline.for_request(request)
        request._cdn_config_emitted = False
        return None

    def process_response(self, request: HttpRequest, response: HttpResponse) -> HttpResponse:
        """Rewrite URLs in HTML responses."""
        pipeline = getattr(request, 'cdn_pipeline', None)
        if pipeline is None or not pipeline.is_active():
            return response

        if response.streaming or response.status_code != 200:
            return response

        # Only process HTML responses
        if not response.get('Content-Type', '').startswith('text/html'):
            return response

        # Skip if response is too large
        if len(response.content) > get_setting('CDN_MAX_CONTENT_LENGTH'):
            return response

        try:
            charset = response.charset or 'utf-8'
            content = response.content.decode(charset)

            content = pipeline.apply_filters('the_content', content)

            if get_setting('CDN_INJECT_CONFIG_SCRIPT') and not getattr(request, '_cdn_config_emitted', False):
                content = inject_into_head(content, pipeline.render_head())
                request._cdn_config_emitted = True

            response.content = content.encode(charset)
            if response.has_header('Content-Length'):
                response['Content-Length'] = len(response.content)

        except Exception as e:
            logger.error(f"Error rewriting URLs: {e}")

        return response
