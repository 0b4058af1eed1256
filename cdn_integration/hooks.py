"""
Hook Registrations

Ordered ``(event, priority, handler)`` registrations connecting host
render events to the rewriting entry points. Registrations are resolved
once into plain per-event handler tuples; calling them involves no
further lookup.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Tuple

logger = logging.getLogger(__name__)


DEFAULT_PRIORITY = 10

# Late priority so the rewrite sees URLs other handlers already produced
LATE_PRIORITY = 9999


@dataclass(frozen=True)
class HookRegistration:
    event: str
    priority: int
    handler: Callable
    kind: str = 'filter'


class HookLoader:
    """Collects filter and action registrations."""

    def __init__(self):
        self._registrations: List[HookRegistration] = []
        self._resolved: Dict[str, Tuple[Callable, ...]] = {}

    def add_filter(self, event: str, handler: Callable, priority: int = DEFAULT_PRIORITY) -> None:
        self._add(HookRegistration(event, priority, handler, 'filter'))

    def add_action(self, event: str, handler: Callable, priority: int = DEFAULT_PRIORITY) -> None:
        self._add(HookRegistration(event, priority, handler, 'action'))

    def _add(self, registration: HookRegistration) -> None:
        self._registrations.append(registration)
        self._resolved = {}
        logger.debug(
            f"Registered {registration.kind} for '{registration.event}' "
            f"at priority {registration.priority}"
        )

    @property
    def registrations(self) -> List[HookRegistration]:
        return list(self._registrations)

    def resolve(self) -> Dict[str, Tuple[Callable, ...]]:
        """Map each event to its handlers, by priority then registration order."""
        if not self._resolved:
            ordered = sorted(
                enumerate(self._registrations),
                key=lambda item: (item[1].priority, item[0])
            )
            resolved: Dict[str, List[Callable]] = {}
            for _, registration in ordered:
                resolved.setdefault(registration.event, []).append(registration.handler)
            self._resolved = {event: tuple(handlers) for event, handlers in resolved.items()}

        return self._resolved

    def handlers(self, event: str) -> Tuple[Callable, ...]:
        return self.resolve().get(event, ())

    def apply_filters(self, event: str, value: Any) -> Any:
        """Pass a value through every filter of an event."""
        for handler in self.handlers(event):
            value = handler(value)
        return value

    def do_action(self, event: str) -> List[Any]:
        """Run every action of an event and collect their results."""
        return [handler() for handler in self.handlers(event)]


def register_rewrite_hooks(loader: HookLoader, pipeline) -> None:
    """
    Register the front-end rewriting entry points of a pipeline.

    Nothing is registered when rewriting is inactive, so every event
    passes its value through untouched.
    """
    if not pipeline.is_active():
        return

    loader.add_action('head', pipeline.emit_config_script, 5)

    loader.add_filter('style_loader_src', pipeline.rewrite_url, LATE_PRIORITY)
    loader.add_filter('script_loader_src', pipeline.rewrite_url, LATE_PRIORITY)
    loader.add_filter('the_content', pipeline.rewrite_content_urls, LATE_PRIORITY)

    # Images and other media
    loader.add_filter('attachment_url', pipeline.rewrite_url, LATE_PRIORITY)
    loader.add_filter('attachment_image_src', pipeline.rewrite_image_src, LATE_PRIORITY)
    loader.add_filter('image_srcset', pipeline.rewrite_image_srcset, LATE_PRIORITY)
