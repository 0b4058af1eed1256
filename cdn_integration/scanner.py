"""
Content Scanner

Finds asset references in an HTML/CSS fragment and rewrites them to the
CDN.

This is a best-effort textual scan with regular expressions, not a
conformant HTML parse. Only the matched URL token (or the matched
``url(...)`` token) is substituted; the surrounding markup is never
re-serialized. Unterminated tags simply do not match, and ``url()``
values quoted with character references (``url(&quot;/a.png&quot;)``)
are left as they are.
"""

import re
from typing import List

from .rewriter import URLRewriter


# url(...) in CSS, optionally quoted
CSS_URL_RE = re.compile(r"url\(\s*(['\"]?)([^'\")\s]+)\1\s*\)", re.IGNORECASE)

STYLE_ATTRIBUTE_RE = re.compile(
    r"""(?<![\w-])style\s*=\s*(?:"([^"]*)"|'([^']*)')""",
    re.IGNORECASE,
)

BACKGROUND_DECLARATION_RE = re.compile(
    r'(?<![\w-])background(?:-image)?\s*:[^;]*',
    re.IGNORECASE,
)

STYLE_BLOCK_RE = re.compile(r'(<style\b[^>]*>)(.*?)(</style\s*>)', re.IGNORECASE | re.DOTALL)

# Characters that may delimit a URL token inside markup
TOKEN_BOUNDARY = r"""\s"'(),=<>"""


def attribute_pattern(tag: str, attribute: str) -> re.Pattern:
    """Pattern for one attribute value of a complete opening tag."""
    return re.compile(
        rf"""<{tag}\b[^>]*?(?<![\w-]){attribute}\s*=\s*(?:"([^"]+)"|'([^']+)')[^>]*>""",
        re.IGNORECASE,
    )


ATTRIBUTE_PATTERNS = [
    attribute_pattern('img', 'src'),
    attribute_pattern('link', 'href'),
    attribute_pattern('script', 'src'),
]


def replace_token(content: str, old: str, new: str) -> str:
    """
    Replace every occurrence of ``old`` delimited as a whole URL token.

    ``/a.png`` is replaced inside ``src="/a.png"`` or a srcset list, but
    not inside ``https://site.example/a.png``.
    """
    pattern = re.compile(
        rf'(?<![^{TOKEN_BOUNDARY}]){re.escape(old)}(?![^{TOKEN_BOUNDARY}])'
    )
    return pattern.sub(lambda m: new, content)


class ContentScanner:
    """Rewrite asset URLs found in rendered content."""

    def __init__(self, rewriter: URLRewriter):
        self.rewriter = rewriter

    def rewrite_content(self, content: str) -> str:
        """Rewrite image, stylesheet, script and CSS background URLs."""
        if not content or not self.rewriter.is_active():
            return content

        for pattern in ATTRIBUTE_PATTERNS:
            content = self._rewrite_attributes(pattern, content)

        content = STYLE_ATTRIBUTE_RE.sub(self._rewrite_style_attribute, content)
        content = STYLE_BLOCK_RE.sub(self._rewrite_style_block, content)

        return content

    def find_urls(self, pattern: re.Pattern, content: str) -> List[str]:
        urls = []
        for match in pattern.finditer(content):
            url = (match.group(1) or match.group(2) or '').strip()
            if url and url not in urls:
                urls.append(url)
        return urls

    def _rewrite_attributes(self, pattern: re.Pattern, content: str) -> str:
        for url in self.find_urls(pattern, content):
            new_url = self.rewriter.rewrite(url)
            if new_url != url:
                content = replace_token(content, url, new_url)
        return content

    def _rewrite_css_urls(self, css: str) -> str:
        def replace(match: re.Match) -> str:
            url = match.group(2)
            new_url = self.rewriter.rewrite(url)
            if new_url == url:
                return match.group(0)
            quote = match.group(1)
            return f'url({quote}{new_url}{quote})'

        return CSS_URL_RE.sub(replace, css)

    def _rewrite_style_attribute(self, match: re.Match) -> str:
        style = match.group(1) if match.group(1) is not None else match.group(2)
        if 'url(' not in style.lower():
            return match.group(0)

        new_style = BACKGROUND_DECLARATION_RE.sub(
            lambda m: self._rewrite_css_urls(m.group(0)), style
        )
        if new_style == style:
            return match.group(0)

        # Only the attribute value changes; quoting and spacing stay as found
        start, end = match.span(1) if match.group(1) is not None else match.span(2)
        offset = match.start(0)
        attribute = match.group(0)
        return attribute[:start - offset] + new_style + attribute[end - offset:]

    def _rewrite_style_block(self, match: re.Match) -> str:
        css = match.group(2)
        new_css = self._rewrite_css_urls(css)
        if new_css == css:
            return match.group(0)
        return match.group(1) + new_css + match.group(3)
