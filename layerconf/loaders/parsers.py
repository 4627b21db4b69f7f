"""
Format-specific parsing for rendered configuration documents.

Uses safe_load for YAML (no arbitrary code execution) and the stdlib json
module for JSON. Every document root must be a mapping.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from ..errors import ParseError, UnsupportedFormatError
from ..schemas import ConfigFormat

SUPPORTED_FORMATS = [f.value for f in ConfigFormat]


def resolve_format(
    fmt: Union[str, ConfigFormat],
    source: Optional[Union[str, Path]] = None,
) -> ConfigFormat:
    """
    Resolve a format tag to a ConfigFormat.

    Tags are case-insensitive and may carry a leading dot (".yaml").

    Raises:
        UnsupportedFormatError: If the tag is not a supported format
    """
    if isinstance(fmt, ConfigFormat):
        return fmt

    tag = str(fmt).strip().lower().lstrip(".")
    try:
        return ConfigFormat(tag)
    except ValueError:
        raise UnsupportedFormatError(str(fmt), SUPPORTED_FORMATS, source=source)


def format_from_path(path: Union[str, Path]) -> ConfigFormat:
    """Infer the document format from a file extension."""
    return resolve_format(Path(path).suffix, source=path)


def parse_fragment(
    text: str,
    fmt: Union[str, ConfigFormat],
    source: Optional[Union[str, Path]] = None,
) -> Dict[str, Any]:
    """
    Parse rendered text into a mapping.

    Args:
        text: Rendered document text
        fmt: Format tag of the document
        source: Label used in error messages

    Returns:
        Parsed mapping ({} for an empty document)

    Raises:
        UnsupportedFormatError: If fmt is not supported
        ParseError: If the document is malformed or its root is not a mapping
    """
    config_format = resolve_format(fmt, source=source)

    if config_format.is_yaml:
        data = _parse_yaml(text, source)
    else:
        data = _parse_json(text, source)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ParseError(
            f"{config_format.value.upper()} root must be a mapping, "
            f"got {type(data).__name__}",
            format_tag=config_format.value,
            source=source,
        )
    return data


def _parse_yaml(text: str, source: Optional[Union[str, Path]]) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        # Extract line/column from PyYAML error
        line = column = None
        mark = getattr(e, "problem_mark", None)
        if mark is not None:
            line = mark.line + 1
            column = mark.column + 1

        raise ParseError(
            f"YAML syntax error: {e}",
            format_tag="yaml",
            source=source,
            line=line,
            column=column,
        ) from e


def _parse_json(text: str, source: Optional[Union[str, Path]]) -> Any:
    if not text.strip():
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(
            f"JSON syntax error: {e.msg}",
            format_tag="json",
            source=source,
            line=e.lineno,
            column=e.colno,
        ) from e
