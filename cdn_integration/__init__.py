"""
CDN Integration

Rewrites references to static assets in rendered HTML so they are served
from a CDN mirror of the site's files (by default jsDelivr serving a
GitHub repository).

The rewriting core (eligibility, mapping, caching, content scanning) is
framework-independent; Django integration is provided by a middleware,
template tags and a management command.
"""

from .config import ConfigurationSnapshot, PathRule
from .eligibility import should_rewrite
from .helper import CDNIntegrationHelper
from .hooks import HookLoader
from .images import ImageSource, SrcsetCandidate, rewrite_image_src, rewrite_image_srcset
from .mapper import map_to_cdn_url, remote_path_for_url
from .pipeline import RewritePipeline
from .rewriter import RewriteCache, URLRewriter
from .scanner import ContentScanner
from .script import emit_config_script

__version__ = "1.0.0"

__all__ = [
    # Configuration
    'ConfigurationSnapshot',
    'PathRule',
    'CDNIntegrationHelper',

    # Rewriting
    'should_rewrite',
    'map_to_cdn_url',
    'remote_path_for_url',
    'RewriteCache',
    'URLRewriter',
    'ContentScanner',
    'ImageSource',
    'SrcsetCandidate',
    'rewrite_image_src',
    'rewrite_image_srcset',
    'emit_config_script',

    # Host wiring
    'HookLoader',
    'RewritePipeline',
]
