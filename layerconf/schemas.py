"""
Schema Definitions for layerconf.

Defines the value types shared by the loader pipeline:
- ConfigFormat: supported document formats
- Fragment: one unit of configuration text with its format
- Delimiters: template expression boundaries
- LoaderOptions: validated construction options for ConfigLoader
"""

import codecs
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# =============================================================================
# Enums
# =============================================================================


class ConfigFormat(str, Enum):
    """Supported configuration document formats."""

    JSON = "json"
    YAML = "yaml"
    YML = "yml"  # Alias of YAML

    @property
    def is_yaml(self) -> bool:
        return self in (ConfigFormat.YAML, ConfigFormat.YML)


# =============================================================================
# Value Types
# =============================================================================


@dataclass(frozen=True)
class Fragment:
    """
    One unit of configuration text.

    Attributes:
        text: Raw (unrendered) template text
        format: Document format of the rendered text; a plain tag such as
            "yaml" is resolved when the fragment is loaded
        source: Label identifying where the text came from
    """

    text: str
    format: ConfigFormat
    source: str = "<string>"


class Delimiters(BaseModel):
    """
    Template expression boundaries.

    Defaults match Jinja2's standard variable delimiters.
    """

    model_config = ConfigDict(frozen=True)

    left: str = Field(
        default="{{",
        description="Opening marker of a template expression",
    )
    right: str = Field(
        default="}}",
        description="Closing marker of a template expression",
    )

    @field_validator("left", "right")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Delimiters must contain at least one non-space character."""
        if not v or not v.strip():
            raise ValueError("Delimiter cannot be empty")
        return v

    @model_validator(mode="after")
    def validate_distinct(self) -> "Delimiters":
        """Left and right markers must differ."""
        if self.left == self.right:
            raise ValueError(
                f"Left and right delimiters must differ (both are {self.left!r})"
            )
        return self

    @classmethod
    def coerce(cls, value: Any) -> Optional["Delimiters"]:
        """Build Delimiters from a model, a (left, right) pair, or None."""
        if value is None or isinstance(value, cls):
            return value
        if isinstance(value, (tuple, list)) and len(value) == 2:
            return cls(left=value[0], right=value[1])
        raise ValueError(
            f"Delimiters must be a (left, right) pair, got {value!r}"
        )


class LoaderOptions(BaseModel):
    """
    Construction options for ConfigLoader.

    Validated once when the loader is built.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    secrets_client: Optional[Any] = Field(
        default=None,
        description="Secrets store client; enables secret_lookup when set",
    )
    delimiters: Optional[Delimiters] = Field(
        default=None,
        description="Template delimiters; Jinja2 defaults when unset",
    )
    encoding: str = Field(
        default="utf-8",
        description="Encoding used to read config files",
    )

    @field_validator("secrets_client")
    @classmethod
    def validate_secrets_client(cls, v: Any) -> Any:
        """Secrets clients must expose a callable read(path)."""
        if v is not None and not callable(getattr(v, "read", None)):
            raise ValueError("secrets_client must provide a read(path) method")
        return v

    @field_validator("delimiters", mode="before")
    @classmethod
    def validate_delimiters(cls, v: Any) -> Any:
        return Delimiters.coerce(v)

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        try:
            codecs.lookup(v)
        except LookupError:
            raise ValueError(f"Unknown encoding: {v}")
        return v
