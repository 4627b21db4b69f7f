"""
Custom Exceptions for layerconf.

Design Principles:
- Every exception names the source it came from (file path or inline index)
- Error messages include context (what was expected, what was provided)
- Exceptions are hierarchical for flexible catching
- All exceptions are serializable for CLI/API error reporting
"""

from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union


class ConfigLoaderError(Exception):
    """
    Base exception for all layerconf errors.

    Attributes:
        message: Human-readable error description
        context: Additional context as key-value pairs
        suggestion: Actionable suggestion to fix the error
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestion: Optional[str] = None,
    ):
        self.message = message
        self.context = context or {}
        self.suggestion = suggestion
        super().__init__(self._format_message())

    @property
    def source(self) -> Optional[str]:
        """Label of the source that triggered the error, if known."""
        return self.context.get("source")

    def with_source(self, source: Union[str, Path]) -> "ConfigLoaderError":
        """
        Attach the identifying source to this error and return it.

        The loader calls this before re-raising so the caught type never
        changes. An already attached source is kept.
        """
        if "source" not in self.context:
            self.context = {"source": str(source), **self.context}
            self.args = (self._format_message(),)
        return self

    def _format_message(self) -> str:
        """Format the complete error message."""
        parts = [self.message]

        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            parts.append(f"Context: {context_str}")

        if self.suggestion:
            parts.append(f"Suggestion: {self.suggestion}")

        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for CLI/API serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
            "suggestion": self.suggestion,
        }


class FileReadError(ConfigLoaderError):
    """Raised when a configuration file cannot be read."""

    def __init__(self, file_path: Union[str, Path], reason: Optional[str] = None):
        self.file_path = Path(file_path)

        context = {"source": str(file_path)}
        if reason:
            context["reason"] = reason

        super().__init__(
            f"Failed to read config file '{file_path}'",
            context=context,
            suggestion="Check that the file exists and is readable",
        )


class UnsupportedFormatError(ConfigLoaderError):
    """
    Raised when a format tag or file extension is not supported.

    Provides the list of supported formats.
    """

    def __init__(
        self,
        format_tag: str,
        supported: Optional[Iterable[str]] = None,
        source: Optional[Union[str, Path]] = None,
    ):
        self.format_tag = format_tag
        self.supported = list(supported or [])

        context: Dict[str, Any] = {}
        if source:
            context["source"] = str(source)
        context["format"] = format_tag

        suggestion = None
        if self.supported:
            suggestion = f"Supported formats: {', '.join(self.supported)}"

        super().__init__(
            f"Unsupported config type '{format_tag}'",
            context=context,
            suggestion=suggestion,
        )


class TemplateParseError(ConfigLoaderError):
    """
    Raised when a fragment contains malformed template syntax.

    Provides the line number if available.
    """

    def __init__(
        self,
        message: str,
        source: Optional[Union[str, Path]] = None,
        line: Optional[int] = None,
    ):
        self.line = line

        context: Dict[str, Any] = {}
        if source:
            context["source"] = str(source)
        if line is not None:
            context["line"] = line

        suggestion = "Check template delimiters and expression syntax"
        if line:
            suggestion = f"Check line {line} for template syntax errors"

        super().__init__(
            f"Failed to parse config template: {message}",
            context=context,
            suggestion=suggestion,
        )


class TemplateExecutionError(ConfigLoaderError):
    """Raised when rendering a parsed template fails."""

    def __init__(
        self,
        message: str,
        source: Optional[Union[str, Path]] = None,
        context: Optional[Dict[str, Any]] = None,
        suggestion: Optional[str] = None,
    ):
        full_context: Dict[str, Any] = {}
        if source:
            full_context["source"] = str(source)
        full_context.update(context or {})

        super().__init__(message, context=full_context, suggestion=suggestion)


class MissingSecretError(TemplateExecutionError):
    """
    Raised when a secret key is absent and no default was provided.
    """

    def __init__(self, key: str, path: str):
        self.key = key
        self.path = path

        super().__init__(
            f"Secret key '{key}' does not exist in '{path}' "
            "and no default value has been provided",
            context={"key": key, "path": path},
            suggestion="Add the key to the secrets store or pass a default",
        )


class SecretsStoreError(TemplateExecutionError):
    """Raised when the secrets store read itself fails."""

    def __init__(self, path: str, reason: Optional[str] = None):
        self.path = path

        context: Dict[str, Any] = {"path": path}
        if reason:
            context["reason"] = reason

        super().__init__(
            f"Failed to read secrets from path '{path}'",
            context=context,
        )


class ParseError(ConfigLoaderError):
    """
    Raised when rendered text is not a valid document of its format.

    Provides line number and column if available.
    """

    def __init__(
        self,
        message: str,
        format_tag: Optional[str] = None,
        source: Optional[Union[str, Path]] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.format_tag = format_tag
        self.line = line
        self.column = column

        context: Dict[str, Any] = {}
        if source:
            context["source"] = str(source)
        if format_tag:
            context["format"] = format_tag
        if line is not None:
            context["line"] = line
        if column is not None:
            context["column"] = column

        suggestion = None
        if line:
            suggestion = f"Check line {line} of the rendered document"

        super().__init__(message, context=context, suggestion=suggestion)


class UnmarshalError(ConfigLoaderError):
    """
    Raised when the merged state does not fit the destination type.

    Provides the first failing field path.
    """

    def __init__(
        self,
        message: str,
        destination: Optional[str] = None,
        field_path: Optional[str] = None,
        actual_value: Any = None,
    ):
        self.destination = destination
        self.field_path = field_path
        self.actual_value = actual_value

        context: Dict[str, Any] = {}
        if destination:
            context["destination"] = destination
        if field_path:
            context["field"] = field_path
        if actual_value is not None:
            context["actual_value"] = actual_value

        super().__init__(
            f"Failed to unmarshal config: {message}",
            context=context,
        )
