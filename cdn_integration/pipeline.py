"""
Rewrite Pipeline

Per-request composition of the rewriting components. One pipeline builds
one configuration snapshot and owns one URL rewriter (and its cache).
"""

from typing import Any, Callable, Optional

from django.http import HttpRequest

from .config import ConfigurationSnapshot
from .context import get_site_url, is_admin_request
from .helper import CDNIntegrationHelper
from .hooks import HookLoader, register_rewrite_hooks
from .images import rewrite_image_src, rewrite_image_srcset
from .rewriter import URLRewriter
from .scanner import ContentScanner
from .script import emit_config_script


class RewritePipeline:
    """Entry points the host calls while rendering a page."""

    def __init__(self, helper: CDNIntegrationHelper,
                 is_admin: Optional[Callable[[], bool]] = None):
        self.helper = helper
        self.config = ConfigurationSnapshot.from_helper(helper)
        self.rewriter = URLRewriter(
            self.config,
            remote_path_resolver=helper.get_remote_path_for_url,
            is_admin=is_admin,
            debug=helper.is_debug_enabled(),
        )
        self.scanner = ContentScanner(self.rewriter)
        self.hooks = HookLoader()
        register_rewrite_hooks(self.hooks, self)

    @classmethod
    def for_request(cls, request: Optional[HttpRequest] = None) -> 'RewritePipeline':
        """Build the pipeline for one request (or for no request at all)."""
        helper = CDNIntegrationHelper(site_url=get_site_url(request))
        admin = is_admin_request(request)
        return cls(helper, is_admin=lambda: admin)

    def is_active(self) -> bool:
        return self.rewriter.is_active()

    def reset(self) -> None:
        """Clear cached decisions before reusing the pipeline for another request."""
        self.rewriter.reset()

    def rewrite_url(self, url: str) -> str:
        return self.rewriter.rewrite(url)

    def rewrite_content_urls(self, content: str) -> str:
        return self.scanner.rewrite_content(content)

    def rewrite_image_src(self, image: Any) -> Any:
        return rewrite_image_src(image, self.rewriter)

    def rewrite_image_srcset(self, sources: Any) -> Any:
        return rewrite_image_srcset(sources, self.rewriter)

    def emit_config_script(self) -> str:
        return emit_config_script(self.config, is_admin=self.rewriter.is_admin())

    def apply_filters(self, event: str, value: Any) -> Any:
        return self.hooks.apply_filters(event, value)

    def render_head(self) -> str:
        """Markup of every 'head' action."""
        return ''.join(str(output) for output in self.hooks.do_action('head') if output)
