"""
Configuration Snapshot

Immutable per-request view of the CDN configuration shared by the
evaluator, mapper, scanner and script emitter.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Tuple, Union


def split_setting_list(value: Union[str, Iterable[str], None]) -> List[str]:
    """Split a comma-separated setting (or a list) into stripped, non-empty items."""
    if not value:
        return []

    if isinstance(value, str):
        items = value.split(',')
    else:
        items = list(value)

    return [str(item).strip() for item in items if str(item).strip()]


def normalize_file_types(value: Union[str, Iterable[str], None]) -> List[str]:
    """Lower-case file types, drop leading dots and duplicates, keep order."""
    file_types = []

    for item in split_setting_list(value):
        extension = item.lstrip('.').lower()
        if extension and extension not in file_types:
            file_types.append(extension)

    return file_types


@dataclass(frozen=True)
class PathRule:
    """
    Excluded path rule.

    An exact rule matches a path verbatim; a wildcard rule (configured
    with a trailing ``*``) matches every path starting with its prefix.
    """
    pattern: str
    wildcard: bool = False

    @classmethod
    def parse(cls, raw: str) -> 'PathRule':
        raw = raw.strip()
        if raw.endswith('*'):
            return cls(pattern=raw[:-1], wildcard=True)
        return cls(pattern=raw)

    @property
    def raw(self) -> str:
        """Rule in its configured form."""
        return f'{self.pattern}*' if self.wildcard else self.pattern

    def matches(self, path: str) -> bool:
        if self.wildcard:
            return path.startswith(self.pattern)
        return path == self.pattern


def parse_path_rules(value: Union[str, Iterable[str], None]) -> Tuple[PathRule, ...]:
    return tuple(PathRule.parse(item) for item in split_setting_list(value))


@dataclass(frozen=True)
class ConfigurationSnapshot:
    """Read-only CDN configuration for one render pass."""
    enabled: bool = False
    cdn_base_url: str = ''
    accepted_extensions: FrozenSet[str] = field(default_factory=frozenset)
    excluded_path_rules: Tuple[PathRule, ...] = ()
    site_origin: str = ''

    @classmethod
    def from_helper(cls, helper) -> 'ConfigurationSnapshot':
        """Build a snapshot from a ``CDNIntegrationHelper``."""
        return cls(
            enabled=helper.is_enabled(),
            cdn_base_url=helper.get_cdn_base_url(),
            accepted_extensions=frozenset(helper.get_file_types()),
            excluded_path_rules=tuple(helper.get_excluded_paths()),
            site_origin=helper.site_url,
        )

    @property
    def is_active(self) -> bool:
        """Whether rewriting can happen at all."""
        return self.enabled and bool(self.cdn_base_url)

    def is_excluded(self, path: str) -> bool:
        return any(rule.matches(path) for rule in self.excluded_path_rules)

    def to_client_config(self) -> dict:
        """Serializable form exposed to the client-side script."""
        return {
            'baseUrl': self.site_origin,
            'cdnBaseUrl': self.cdn_base_url,
            'fileTypes': sorted(self.accepted_extensions),
            'excludedPaths': [rule.raw for rule in self.excluded_path_rules],
        }
