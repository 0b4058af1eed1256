"""
CDN Template Tags

Template tags routing asset URLs through the request's rewrite pipeline.
"""

from django import template
from django.templatetags.static import static
from django.utils.html import format_html
from django.utils.safestring import mark_safe

from cdn_integration.pipeline import RewritePipeline

register = template.Library()


def get_pipeline(context) -> RewritePipeline:
    """Get the request's pipeline, building one when no middleware did."""
    request = context.get('request')
    pipeline = getattr(request, 'cdn_pipeline', None)
    if pipeline is not None:
        return pipeline

    if request is not None:
        request.cdn_pipeline = RewritePipeline.for_request(request)
        return request.cdn_pipeline

    if 'cdn_pipeline' not in context.render_context:
        context.render_context['cdn_pipeline'] = RewritePipeline.for_request(None)
    return context.render_context['cdn_pipeline']


def asset_url(path: str) -> str:
    """Resolve a static file name; URLs and absolute paths are kept."""
    if path.startswith(('/', 'http://', 'https://')):
        return path
    return static(path)


@register.simple_tag(takes_context=True)
def cdn_config_script(context):
    """
    Emit the CDN config script once per request.

    Usage:
        <head>{% cdn_config_script %} ...
    """
    request = context.get('request')
    if getattr(request, '_cdn_config_emitted', False):
        return ''

    markup = get_pipeline(context).render_head()
    if request is not None:
        request._cdn_config_emitted = True

    return mark_safe(markup)


@register.simple_tag(takes_context=True)
def cdn_url(context, url):
    """
    Rewrite a media/attachment URL to the CDN.

    Usage:
        <a href="{% cdn_url document.file.url %}">
    """
    if not url:
        return url
    return get_pipeline(context).apply_filters('attachment_url', str(url))


@register.simple_tag(takes_context=True)
def cdn_script(context, path, async_load=False, defer=False, module=False):
    """
    Generate script tag with CDN URL.

    Usage:
        {% cdn_script 'js/app.js' defer=True %}
        {% cdn_script 'js/module.js' module=True %}
    """
    url = get_pipeline(context).apply_filters('script_loader_src', asset_url(path))

    attrs = []
    if async_load:
        attrs.append(' async')
    if defer:
        attrs.append(' defer')
    if module:
        attrs.append(' type="module"')

    return format_html('<script src="{}"{}></script>', url, mark_safe(''.join(attrs)))


@register.simple_tag(takes_context=True)
def cdn_style(context, path, media="all"):
    """
    Generate link tag for CSS with CDN URL.

    Usage:
        {% cdn_style 'css/style.css' %}
        {% cdn_style 'css/print.css' media='print' %}
    """
    url = get_pipeline(context).apply_filters('style_loader_src', asset_url(path))
    return format_html('<link href="{}" rel="stylesheet" media="{}">', url, media)


class CDNRewriteNode(template.Node):
    def __init__(self, nodelist):
        self.nodelist = nodelist

    def render(self, context):
        content = self.nodelist.render(context)
        return get_pipeline(context).apply_filters('the_content', content)


@register.tag('cdn_rewrite')
def do_cdn_rewrite(parser, token):
    """
    Rewrite asset URLs in the enclosed markup.

    Usage:
        {% cdn_rewrite %}{{ post.body|safe }}{% endcdn_rewrite %}
    """
    nodelist = parser.parse(('endcdn_rewrite',))
    parser.delete_first_token()
    return CDNRewriteNode(nodelist)
