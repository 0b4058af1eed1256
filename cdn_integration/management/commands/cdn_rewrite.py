"""
CDN Rewrite Management Command

Preview how URLs and content are rewritten with the current settings.
"""

import json
from django.core.management.base import BaseCommand, CommandError

from cdn_integration.helper import CDNIntegrationHelper
from cdn_integration.pipeline import RewritePipeline


class Command(BaseCommand):
    help = 'Preview CDN rewriting of URLs or of an HTML file'

    def add_arguments(self, parser):
        parser.add_argument(
            'urls',
            nargs='*',
            help='URLs to rewrite',
        )
        parser.add_argument(
            '--file',
            help='Rewrite the asset URLs of an HTML/CSS file and print the result',
        )
        parser.add_argument(
            '--site-url',
            help='Site URL used for same-origin checks (defaults to CDN_SITE_URL)',
        )
        parser.add_argument(
            '--show-config',
            action='store_true',
            help='Show the effective CDN configuration',
        )
        parser.add_argument(
            '--json',
            action='store_true',
            help='Output in JSON format',
        )

    def handle(self, *args, **options):
        """Handle CDN rewrite command."""
        pipeline = RewritePipeline(CDNIntegrationHelper(site_url=options.get('site_url')))
        output_json = options.get('json')

        if options.get('show_config'):
            self._show_config(pipeline, output_json)

        if options.get('urls'):
            self._rewrite_urls(pipeline, options['urls'], output_json)

        if options.get('file'):
            self._rewrite_file(pipeline, options['file'])

    def _show_config(self, pipeline, output_json):
        """Show CDN configuration."""
        config = pipeline.config
        data = {
            'enabled': config.enabled,
            'active': config.is_active,
            'cdn_base_url': config.cdn_base_url,
            'site_url': config.site_origin,
            'file_types': sorted(config.accepted_extensions),
            'excluded_paths': [rule.raw for rule in config.excluded_path_rules],
            'debug': pipeline.helper.is_debug_enabled(),
        }

        if output_json:
            self.stdout.write(json.dumps(data, indent=2))
            return

        self.stdout.write(self.style.SUCCESS('=== CDN Configuration ==='))
        if not config.enabled:
            self.stdout.write(self.style.WARNING('CDN is DISABLED in settings'))
        elif not config.cdn_base_url:
            self.stdout.write(self.style.WARNING('No CDN base URL configured'))

        self.stdout.write(f"Enabled: {data['enabled']}")
        self.stdout.write(f"CDN Base URL: {data['cdn_base_url']}")
        self.stdout.write(f"Site URL: {data['site_url']}")
        self.stdout.write(f"File Types: {', '.join(data['file_types'])}")

        if data['excluded_paths']:
            self.stdout.write("\nExcluded Paths:")
            for path in data['excluded_paths']:
                self.stdout.write(f"  - {path}")

    def _rewrite_urls(self, pipeline, urls, output_json):
        """Rewrite each URL."""
        results = [
            {'url': url, 'rewritten': pipeline.rewrite_url(url)}
            for url in urls
        ]

        if output_json:
            self.stdout.write(json.dumps(results, indent=2))
            return

        for result in results:
            if result['rewritten'] == result['url']:
                self.stdout.write(f"{result['url']} (unchanged)")
            else:
                self.stdout.write(f"{result['url']} -> {self.style.SUCCESS(result['rewritten'])}")

    def _rewrite_file(self, pipeline, path):
        """Rewrite URLs found in a file."""
        try:
            with open(path, 'r', encoding='utf-8') as f:
                content = f.read()
        except OSError as e:
            raise CommandError(f'Cannot read {path}: {e}')

        self.stdout.write(pipeline.rewrite_content_urls(content), ending='')
