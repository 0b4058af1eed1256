"""
Client-Side Config Script

Emits the CDN configuration as a JSON data block plus a small script
that applies the same eligibility and mapping rules to assets added to
the page after the initial render.
"""

from typing import Any, Dict

from django.utils.html import json_script
from django.utils.safestring import mark_safe

from .config import ConfigurationSnapshot
from .eligibility import ADMIN_PATH_MARKERS


CONFIG_ELEMENT_ID = 'cdn-integration-config'

# Mirrors eligibility.should_rewrite and mapper.map_to_cdn_url
CLIENT_SCRIPT = r"""
(function () {
    var node = document.getElementById('cdn-integration-config');
    if (!node) return;

    var config = JSON.parse(node.textContent);
    window.cdnIntegrationConfig = config;
    if (!config.cdnBaseUrl) return;

    // scheme, host, path, query, fragment (same split as urlsplit)
    var urlPattern = /^(?:([a-z][a-z0-9+.\-]*):)?(?:\/\/([^\/?#]*))?([^?#]*)(?:\?([^#]*))?(?:#(.*))?$/i;
    var site = urlPattern.exec(config.baseUrl || '') || [];
    var siteScheme = (site[1] || '').toLowerCase();
    var siteHost = (site[2] || '').toLowerCase();
    var basePath = (site[3] || '').replace(/\/+$/, '');
    var cdnBaseUrl = config.cdnBaseUrl.replace(/\/+$/, '');

    var fileTypes = {};
    for (var t = 0; t < config.fileTypes.length; t++) {
        fileTypes[config.fileTypes[t].toLowerCase()] = true;
    }

    function resolvePath(parts) {
        var scheme = (parts[1] || '').toLowerCase();
        var host = (parts[2] || '').toLowerCase();

        if (scheme && scheme !== 'http' && scheme !== 'https') return null;

        if (scheme || host) {
            if (!siteHost || (scheme || siteScheme) !== siteScheme || host !== siteHost) return null;
            if (!parts[3]) return null;
        }

        return parts[3] || null;
    }

    function isExcluded(path) {
        for (var i = 0; i < config.excludedPaths.length; i++) {
            var rule = config.excludedPaths[i];
            if (rule.slice(-1) === '*') {
                if (path.indexOf(rule.slice(0, -1)) === 0) return true;
            } else if (path === rule) {
                return true;
            }
        }
        return false;
    }

    function shouldRewriteUrl(url) {
        if (!url || url.slice(0, 5).toLowerCase() === 'data:') return false;

        for (var m = 0; m < config.adminPathMarkers.length; m++) {
            if (url.indexOf(config.adminPathMarkers[m]) !== -1) return false;
        }

        var parts = urlPattern.exec(url);
        if (!parts) return false;

        var path = resolvePath(parts);
        if (path === null || isExcluded(path)) return false;

        var basename = path.slice(path.lastIndexOf('/') + 1);
        var dot = basename.lastIndexOf('.');
        if (dot === -1) return false;

        var extension = basename.slice(dot + 1).toLowerCase();
        return extension !== '' && fileTypes.hasOwnProperty(extension);
    }

    function rewriteUrl(url) {
        if (!shouldRewriteUrl(url)) return url;

        var parts = urlPattern.exec(url);
        var path = parts[3];
        if (basePath && (path === basePath || path.indexOf(basePath + '/') === 0)) {
            path = path.slice(basePath.length);
        }

        var remotePath = path.replace(/^\/+/, '');
        var suffixStart = url.search(/[?#]/);
        if (suffixStart !== -1) remotePath += url.slice(suffixStart);

        return cdnBaseUrl + '/' + remotePath;
    }

    function interceptProperty(element, property) {
        var proto = Object.getPrototypeOf(element);
        var descriptor;
        while (proto && !(descriptor = Object.getOwnPropertyDescriptor(proto, property))) {
            proto = Object.getPrototypeOf(proto);
        }
        if (!descriptor || !descriptor.set) return;

        Object.defineProperty(element, property, {
            configurable: true,
            enumerable: descriptor.enumerable,
            get: function () { return descriptor.get.call(this); },
            set: function (value) {
                descriptor.set.call(this, value ? rewriteUrl(String(value)) : value);
            }
        });
    }

    // Rewrite src/href of script and link elements created from scripts
    var originalCreateElement = document.createElement;
    document.createElement = function (tagName) {
        var element = originalCreateElement.apply(document, arguments);
        var name = String(tagName).toLowerCase();

        if (name === 'script' || name === 'link') {
            var originalSetAttribute = element.setAttribute;
            element.setAttribute = function (attribute, value) {
                var lowered = String(attribute).toLowerCase();
                if ((lowered === 'src' || lowered === 'href') && value) {
                    value = rewriteUrl(String(value));
                }
                return originalSetAttribute.call(this, attribute, value);
            };
            interceptProperty(element, name === 'script' ? 'src' : 'href');
        }

        return element;
    };

    var urlAttributes = { script: 'src', link: 'href', img: 'src' };

    function rewriteNode(node) {
        var attribute = urlAttributes[node.tagName.toLowerCase()];
        if (!attribute) return;

        var value = node.getAttribute(attribute);
        if (!value) return;

        var rewritten = rewriteUrl(value);
        if (rewritten !== value) node.setAttribute(attribute, rewritten);
    }

    // Rewrite elements inserted after the initial render
    if (window.MutationObserver) {
        new MutationObserver(function (mutations) {
            mutations.forEach(function (mutation) {
                if (mutation.type !== 'childList') return;

                mutation.addedNodes.forEach(function (added) {
                    if (added.nodeType !== 1) return;

                    rewriteNode(added);
                    if (added.querySelectorAll) {
                        var nested = added.querySelectorAll('script[src], link[href], img[src]');
                        for (var n = 0; n < nested.length; n++) rewriteNode(nested[n]);
                    }
                });
            });
        }).observe(document, { childList: true, subtree: true });
    }
})();
"""


def build_client_config(config: ConfigurationSnapshot) -> Dict[str, Any]:
    data = config.to_client_config()
    data['adminPathMarkers'] = list(ADMIN_PATH_MARKERS)
    return data


def emit_config_script(config: ConfigurationSnapshot, is_admin: bool = False) -> str:
    """
    Render the config data block and the client-side rewriting script.

    Returns an empty string when rewriting is disabled, the CDN base URL
    is missing or the request is administrative.
    """
    if is_admin or not config.is_active:
        return ''

    data_block = json_script(build_client_config(config), CONFIG_ELEMENT_ID)
    return mark_safe(
        f'{data_block}\n'
        f'<script type="text/javascript">{CLIENT_SCRIPT}</script>'
    )
