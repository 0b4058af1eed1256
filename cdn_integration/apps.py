"""
CDN Integration app configuration.
"""

from django.apps import AppConfig


class CDNIntegrationConfig(AppConfig):
    """Configuration for the CDN Integration application."""

    name = 'cdn_integration'
    verbose_name = 'CDN Integration'

    def ready(self):
        """Warn about an enabled CDN that has nowhere to point."""
        from .helper import CDNIntegrationHelper

        helper = CDNIntegrationHelper()
        if helper.is_enabled() and not helper.get_cdn_base_url():
            helper.log(
                "CDN rewriting is enabled but no CDN base URL is configured; "
                "set CDN_BASE_URL or CDN_GITHUB_USERNAME and CDN_GITHUB_REPOSITORY",
                'warning'
            )
