"""
Parsing and merging for layerconf.

Provides:
- Format resolution and safe YAML/JSON parsing
- Deep overlay merging of parsed layers
"""

from .merger import ConfigMerger, deep_merge, flatten_dict, get_nested, parse_and_merge
from .parsers import SUPPORTED_FORMATS, format_from_path, parse_fragment, resolve_format

__all__ = [
    "ConfigMerger",
    "deep_merge",
    "flatten_dict",
    "get_nested",
    "parse_and_merge",
    "SUPPORTED_FORMATS",
    "format_from_path",
    "parse_fragment",
    "resolve_format",
]
