"""
layerconf - Layered, templated JSON/YAML configuration.

Each source is rendered as a Jinja2 template (with env, secret_lookup and
caller-registered functions), parsed, and deep-merged over the sources
before it. The merged result is decoded into a typed structure.

Usage:
    from layerconf import ConfigLoader

    loader = ConfigLoader()
    loader.load_files("default.json", "override.yaml")
    config = loader.unmarshal(AppConfig)
"""

from layerconf.__version__ import __version__, __version_info__

from layerconf.errors import (
    ConfigLoaderError,
    FileReadError,
    MissingSecretError,
    ParseError,
    SecretsStoreError,
    TemplateExecutionError,
    TemplateParseError,
    UnmarshalError,
    UnsupportedFormatError,
)
from layerconf.functions import FunctionRegistry
from layerconf.loader import ConfigLoader
from layerconf.renderer import TemplateRenderer
from layerconf.schemas import ConfigFormat, Delimiters, Fragment, LoaderOptions
from layerconf.secrets import SecretsClient, VaultSecretsClient

__all__ = [
    "__version__",
    "ConfigLoader",
    "ConfigFormat",
    "Delimiters",
    "Fragment",
    "FunctionRegistry",
    "LoaderOptions",
    "SecretsClient",
    "TemplateRenderer",
    "VaultSecretsClient",
    "ConfigLoaderError",
    "FileReadError",
    "MissingSecretError",
    "ParseError",
    "SecretsStoreError",
    "TemplateExecutionError",
    "TemplateParseError",
    "UnmarshalError",
    "UnsupportedFormatError",
]
