"""
Image Rewriters

Apply the single-URL rewriter to image data handed over by the host: an
image source record and a list of responsive image candidates.
"""

from dataclasses import dataclass, replace
from typing import Any, Iterable, MutableMapping, Optional

from .rewriter import URLRewriter


@dataclass(frozen=True)
class ImageSource:
    """Resolved image: URL plus its dimensions."""
    url: str
    width: Optional[int] = None
    height: Optional[int] = None
    is_intermediate: bool = False


@dataclass
class SrcsetCandidate:
    """One candidate of a responsive image ``srcset``."""
    url: Optional[str] = None
    descriptor: str = 'w'
    value: Optional[int] = None


def rewrite_image_src(image: Any, rewriter: URLRewriter) -> Any:
    """
    Rewrite the URL of an image source record.

    Accepts an ``ImageSource`` or a ``(url, width, height, ...)``
    sequence; anything else is returned unchanged.
    """
    if not rewriter.is_active():
        return image

    if isinstance(image, ImageSource):
        if not image.url or not isinstance(image.url, str):
            return image
        return replace(image, url=rewriter.rewrite(image.url))

    if isinstance(image, (list, tuple)) and image and isinstance(image[0], str) and image[0]:
        rewritten = [rewriter.rewrite(image[0])] + list(image[1:])
        return tuple(rewritten) if isinstance(image, tuple) else rewritten

    return image


def _candidates(sources: Any) -> Iterable[Any]:
    # Hosts key candidates by width ({320: {...}, 640: {...}}) or list them
    if isinstance(sources, MutableMapping):
        return sources.values()
    return sources


def rewrite_image_srcset(sources: Any, rewriter: URLRewriter) -> Any:
    """Rewrite, in place, the URL of every candidate that has one."""
    if not rewriter.is_active() or not isinstance(sources, (list, tuple, MutableMapping)):
        return sources

    for source in _candidates(sources):
        if isinstance(source, SrcsetCandidate):
            if source.url and isinstance(source.url, str):
                source.url = rewriter.rewrite(source.url)
        elif isinstance(source, MutableMapping) and isinstance(source.get('url'), str) and source['url']:
            source['url'] = rewriter.rewrite(source['url'])

    return sources
