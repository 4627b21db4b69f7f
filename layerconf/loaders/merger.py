"""
Configuration Merger for layerconf.

Deep overlay of configuration layers:
- Mappings present in both layers are merged key by key, recursively
- Everything else (scalars, lists, type mismatches) is replaced by the later layer
- Keys missing from the later layer are left untouched

Usage:
    from layerconf.loaders import ConfigMerger, deep_merge

    # Merge into accumulated state, in place
    merger = ConfigMerger()
    merger.merge_into(state, parsed)

    # Non-mutating merge of two dicts
    result = deep_merge(base_dict, override_dict)
"""

from copy import deepcopy
from typing import Any, Dict, List, Mapping, MutableMapping, Optional, Union

from .parsers import parse_fragment
from ..schemas import ConfigFormat


class ConfigMerger:
    """
    Deep-overlay merger.

    Lists are always replaced wholesale, never concatenated or merged by
    element.
    """

    def merge_into(
        self,
        target: MutableMapping[str, Any],
        incoming: Mapping[str, Any],
    ) -> MutableMapping[str, Any]:
        """
        Overlay incoming onto target in place.

        Args:
            target: Accumulated state (mutated)
            incoming: New layer (takes precedence)

        Returns:
            target, for chaining
        """
        for key, value in incoming.items():
            current = target.get(key)
            if isinstance(current, MutableMapping) and isinstance(value, Mapping):
                self.merge_into(current, value)
            else:
                # Scalar, list or type mismatch: incoming wins
                target[key] = deepcopy(value)
        return target

    def merge(self, base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
        """Merge override on top of a copy of base."""
        result = deepcopy(dict(base))
        self.merge_into(result, override)
        return result

    def merge_many(self, configs: List[Mapping[str, Any]]) -> Dict[str, Any]:
        """
        Merge multiple configs in order.

        Args:
            configs: List of configs, later ones take precedence

        Returns:
            Merged configuration
        """
        result: Dict[str, Any] = {}
        for config in configs:
            self.merge_into(result, config)
        return result


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Convenience function for deep merging two dicts.

    Args:
        base: Base configuration
        override: Override configuration (takes precedence)

    Returns:
        Merged configuration
    """
    return ConfigMerger().merge(base, override)


def parse_and_merge(
    text: str,
    fmt: Union[str, ConfigFormat],
    state: MutableMapping[str, Any],
    source: Optional[str] = None,
) -> MutableMapping[str, Any]:
    """
    Parse a rendered document and overlay it onto state in place.

    Nothing is merged when parsing fails.

    Raises:
        UnsupportedFormatError: If fmt is not supported
        ParseError: If the document is malformed
    """
    parsed = parse_fragment(text, fmt, source=source)
    return ConfigMerger().merge_into(state, parsed)


def get_nested(data: Mapping[str, Any], key: str, default: Any = None) -> Any:
    """
    Read a value from a nested dict using a dot-notation key.

    Args:
        data: Nested dict to read
        key: Dot-notation key (e.g., "database.postgres.host")
        default: Returned when any path segment is missing

    Returns:
        The value at key, or default
    """
    current: Any = data
    for part in key.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return default
        current = current[part]
    return current


def flatten_dict(d: Mapping[str, Any], prefix: str = "") -> Dict[str, Any]:
    """
    Flatten a nested dict to dot-notation keys.

    Args:
        d: Nested dict to flatten
        prefix: Key prefix (for recursion)

    Returns:
        Flat dict with dot-notation keys
    """
    result = {}

    for key, value in d.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)

        if isinstance(value, Mapping) and value:
            result.update(flatten_dict(value, full_key))
        else:
            result[full_key] = value

    return result
