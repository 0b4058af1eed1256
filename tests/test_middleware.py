"""
Tests for the CDN middleware, template tags and management command
"""

import json
import os
import tempfile
from io import StringIO
from unittest.mock import patch

from django.core.management import call_command
from django.core.management.base import CommandError
from django.template import Context, Template
from django.test import TestCase, override_settings

from cdn_integration.middleware import inject_into_head

from .urls import PAGE
from .utils import CDN_SETTINGS

CDN = 'https://cdn.example/user/repo@main'


@override_settings(**CDN_SETTINGS)
class TestCDNRewriteMiddleware(TestCase):
    """Test rewriting of rendered responses."""

    def test_html_response_rewritten(self):
        """Test asset URLs in HTML responses point to the CDN."""
        response = self.client.get('/')
        content = response.content.decode()

        self.assertIn(f'<img src="{CDN}/wp-content/uploads/logo.png" alt="Logo">', content)
        self.assertIn('<a href="/wp-content/uploads/report.pdf">', content)
        self.assertIn('<head><script id="cdn-integration-config"', content)
        self.assertEqual(int(response['Content-Length']), len(response.content))

    @override_settings(CDN_ENABLED=False)
    def test_disabled(self):
        """Test responses are untouched when disabled."""
        response = self.client.get('/')
        self.assertEqual(response.content.decode(), PAGE)

    @override_settings(CDN_INJECT_CONFIG_SCRIPT=False)
    def test_config_script_not_injected(self):
        """Test the config script injection can be switched off."""
        content = self.client.get('/').content.decode()

        self.assertNotIn('cdn-integration-config', content)
        self.assertIn(f'{CDN}/wp-content/uploads/logo.png', content)

    def test_admin_request(self):
        """Test admin pages are never rewritten."""
        response = self.client.get('/wp-admin/page/')
        self.assertEqual(response.content.decode(), PAGE)

    def test_non_html_response(self):
        """Test JSON responses are untouched."""
        response = self.client.get('/data/')
        self.assertEqual(response.json(), {'logo': '/wp-content/uploads/logo.png'})

    @override_settings(CDN_MAX_CONTENT_LENGTH=10)
    def test_large_response_skipped(self):
        """Test responses over the size limit are skipped."""
        response = self.client.get('/')
        self.assertEqual(response.content.decode(), PAGE)

    def test_rewrite_error(self):
        """Test errors are logged and the response is served unchanged."""
        with patch('cdn_integration.pipeline.RewritePipeline.apply_filters', side_effect=RuntimeError('boom')):
            with self.assertLogs('cdn_integration.middleware', level='ERROR') as logs:
                response = self.client.get('/')

        self.assertEqual(response.content.decode(), PAGE)
        self.assertIn('Error rewriting URLs: boom', logs.output[0])

    def test_template_tags(self):
        """Test template tags and the middleware share one pipeline."""
        content = self.client.get('/tagged/').content.decode()

        self.assertEqual(content.count('id="cdn-integration-config"'), 1)
        self.assertIn(f'<link href="{CDN}/static/css/site.css" rel="stylesheet" media="all">', content)
        self.assertIn(f'<script src="{CDN}/static/js/app.js" defer></script>', content)
        self.assertIn(f'<img src="{CDN}/wp-content/uploads/a.png">', content)
        self.assertIn(f'<img src="{CDN}/wp-content/uploads/b.png">', content)


class TestInjectIntoHead(TestCase):
    """Test head injection."""

    def test_after_opening_tag(self):
        """Test markup lands right after the opening head tag."""
        self.assertEqual(
            inject_into_head('<html><HEAD lang="en"><title>x</title>', '<meta>'),
            '<html><HEAD lang="en"><meta><title>x</title>'
        )

    def test_without_head(self):
        """Test content without a head element is unchanged."""
        self.assertEqual(inject_into_head('<p>fragment</p>', '<meta>'), '<p>fragment</p>')
        self.assertEqual(inject_into_head('<head></head>', ''), '<head></head>')


@override_settings(**CDN_SETTINGS)
class TestCDNTemplateTags(TestCase):
    """Test template tags rendered without a request."""

    def render(self, source, **context):
        return Template('{% load cdn_tags %}' + source).render(Context(context))

    def test_cdn_url(self):
        """Test rewriting of a media URL."""
        self.assertEqual(
            self.render('{% cdn_url url %}', url='/wp-content/uploads/a.png'),
            f'{CDN}/wp-content/uploads/a.png'
        )
        self.assertEqual(self.render('{% cdn_url url %}', url=''), '')

    def test_cdn_script(self):
        """Test script tag attributes."""
        self.assertEqual(
            self.render("{% cdn_script 'js/app.js' async_load=True module=True %}"),
            f'<script src="{CDN}/static/js/app.js" async type="module"></script>'
        )

    def test_cdn_style(self):
        """Test stylesheet link with a media query."""
        self.assertEqual(
            self.render("{% cdn_style 'https://other.example/a.css' media='print' %}"),
            '<link href="https://other.example/a.css" rel="stylesheet" media="print">'
        )

    def test_cdn_rewrite_block(self):
        """Test the block tag rewrites its content."""
        self.assertEqual(
            self.render('{% cdn_rewrite %}<img src="{{ src }}">{% endcdn_rewrite %}', src='/a.png'),
            f'<img src="{CDN}/a.png">'
        )

    def test_cdn_config_script(self):
        """Test the config script tag."""
        self.assertIn('id="cdn-integration-config"', self.render('{% cdn_config_script %}'))

    @override_settings(CDN_ENABLED=False)
    def test_disabled(self):
        """Test tags pass URLs through when disabled."""
        self.assertEqual(self.render('{% cdn_url "/a.png" %}'), '/a.png')
        self.assertEqual(self.render('{% cdn_config_script %}'), '')


class TestCDNRewriteCommand(TestCase):
    """Test the cdn_rewrite management command."""

    @override_settings(**CDN_SETTINGS)
    def test_rewrite_urls_json(self):
        """Test JSON output of URL rewrites."""
        out = StringIO()
        call_command('cdn_rewrite', '/wp-content/a.css', 'https://other.example/b.css', '--json', stdout=out)

        self.assertEqual(json.loads(out.getvalue()), [
            {'url': '/wp-content/a.css', 'rewritten': f'{CDN}/wp-content/a.css'},
            {'url': 'https://other.example/b.css', 'rewritten': 'https://other.example/b.css'},
        ])

    @override_settings(**CDN_SETTINGS)
    def test_rewrite_urls_text(self):
        """Test text output of URL rewrites."""
        out = StringIO()
        call_command('cdn_rewrite', '/wp-content/a.css', '/doc.pdf', stdout=out)

        output = out.getvalue()
        self.assertIn('/wp-content/a.css -> ', output)
        self.assertIn(f'{CDN}/wp-content/a.css', output)
        self.assertIn('/doc.pdf (unchanged)', output)

    @override_settings(**CDN_SETTINGS)
    def test_show_config(self):
        """Test the effective configuration."""
        out = StringIO()
        call_command('cdn_rewrite', '--show-config', '--json', '--site-url', 'https://other.example', stdout=out)

        data = json.loads(out.getvalue())
        self.assertTrue(data['enabled'])
        self.assertTrue(data['active'])
        self.assertEqual(data['site_url'], 'https://other.example')
        self.assertEqual(data['excluded_paths'], ['/wp-admin/*', '/wp-login.php'])
        self.assertIn('woff2', data['file_types'])
        self.assertFalse(data['debug'])

    def test_show_config_disabled(self):
        """Test the disabled warning."""
        out = StringIO()
        call_command('cdn_rewrite', '--show-config', stdout=out)

        self.assertIn('CDN is DISABLED in settings', out.getvalue())

    @override_settings(**CDN_SETTINGS)
    def test_rewrite_file(self):
        """Test rewriting the contents of a file."""
        with tempfile.NamedTemporaryFile('w', suffix='.html', delete=False, encoding='utf-8') as f:
            f.write('<img src="/a.png">\n')
        self.addCleanup(os.remove, f.name)

        out = StringIO()
        call_command('cdn_rewrite', '--file', f.name, stdout=out)

        self.assertEqual(out.getvalue(), f'<img src="{CDN}/a.png">\n')

    def test_missing_file(self):
        """Test a missing file is reported as a command error."""
        with self.assertRaises(CommandError):
            call_command('cdn_rewrite', '--file', '/nonexistent/page.html', stdout=StringIO())
