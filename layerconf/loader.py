"""
Layered Configuration Loader.

The central entry point of layerconf. Each source is rendered as a Jinja2
template, parsed by format, and deep-merged onto the accumulated state in
the order given. The result is decoded into a typed destination with
pydantic.

Usage:
    from layerconf import ConfigLoader

    loader = ConfigLoader(secrets_client=VaultSecretsClient.from_env())
    loader.load_files("config/default.json", "config/production.yaml")
    loader.load_string('db:\\n  password: {{ secret_lookup("secret/db", "pw") }}', "yaml")

    config = loader.unmarshal(AppConfig)

Merges are cumulative and never rolled back: when a source fails, everything
merged before it stays in place.
"""

import logging
import os
from copy import deepcopy
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional, Tuple, Type, TypeVar, Union

from pydantic import TypeAdapter, ValidationError

from .errors import ConfigLoaderError, FileReadError, UnmarshalError
from .functions import FunctionRegistry
from .loaders import ConfigMerger, format_from_path, get_nested, parse_fragment, resolve_format
from .renderer import TemplateRenderer
from .schemas import ConfigFormat, Delimiters, Fragment, LoaderOptions
from .secrets import SecretsClient

logger = logging.getLogger("layerconf")

T = TypeVar("T")

PathLike = Union[str, os.PathLike]
Source = Union[PathLike, Fragment, Tuple[str, Union[str, ConfigFormat]]]


class ConfigLoader:
    """
    Renders, parses and merges configuration sources in order.

    Not safe for concurrent use: the merged state and function set are
    mutated in place without locking.
    """

    def __init__(
        self,
        secrets_client: Optional[SecretsClient] = None,
        delimiters: Optional[Union[Delimiters, Tuple[str, str]]] = None,
        encoding: str = "utf-8",
    ):
        """
        Initialize the loader.

        Args:
            secrets_client: Secrets store client; enables secret_lookup
            delimiters: Template delimiters, as Delimiters or (left, right)
            encoding: Encoding used to read config files
        """
        options = LoaderOptions(
            secrets_client=secrets_client,
            delimiters=delimiters,
            encoding=encoding,
        )
        self._encoding = options.encoding
        self._functions = FunctionRegistry(secrets_client=options.secrets_client)
        self._renderer = TemplateRenderer(self._functions, options.delimiters)
        self._merger = ConfigMerger()
        self._state: Dict[str, Any] = {}

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def functions(self) -> FunctionRegistry:
        return self._functions

    @property
    def delimiters(self) -> Delimiters:
        return self._renderer.delimiters

    @property
    def settings(self) -> Dict[str, Any]:
        """Snapshot (deep copy) of the merged state."""
        return deepcopy(self._state)

    # =========================================================================
    # Loading
    # =========================================================================

    def register_function(self, name: str, func: Callable[..., Any]) -> None:
        """Make func callable as name in templates rendered from now on."""
        self._functions.register(name, func)

    def load_files(self, *paths: PathLike) -> None:
        """
        Load config files in order; formats come from their extensions.

        Raises:
            UnsupportedFormatError: If an extension is not recognized
            FileReadError: If a file cannot be read
            ConfigLoaderError: Any render/parse failure, with the path attached
        """
        self.load_sources(paths)

    def load_string(self, text: str, fmt: Union[str, ConfigFormat]) -> None:
        """Load one inline fragment."""
        self.load_sources([(text, fmt)])

    def load_sources(self, sources: Iterable[Source]) -> None:
        """
        Process sources strictly in order.

        Each source is a file path, a (text, format) pair or a Fragment.
        Processing stops at the first failure; the error is re-raised with
        the offending source attached and earlier merges are kept.

        Raises:
            TypeError: If sources is a single path or Fragment, not an iterable
        """
        if isinstance(sources, (str, bytes, os.PathLike, Fragment)):
            raise TypeError(
                "load_sources() takes an iterable of sources, not a single "
                f"{type(sources).__name__}; use load_files() for paths"
            )

        count = 0
        for index, source in enumerate(sources):
            label = self._label(source, index)
            try:
                fragment = self._to_fragment(source, label)
                self._load_fragment(fragment)
            except ConfigLoaderError as e:
                e.with_source(label)
                raise
            count += 1

        logger.info(f"Merged {count} config source(s)")

    def _load_fragment(self, fragment: Fragment) -> None:
        rendered = self._renderer.render(fragment.text, source=fragment.source)
        parsed = parse_fragment(rendered, fragment.format, source=fragment.source)
        self._merger.merge_into(self._state, parsed)
        logger.debug(
            f"Merged {fragment.source} ({fragment.format.value}, {len(parsed)} top-level keys)"
        )

    @staticmethod
    def _label(source: Source, index: int) -> str:
        if isinstance(source, Fragment):
            return source.source
        if isinstance(source, tuple):
            return f"<string #{index}>"
        return os.fspath(source)

    def _to_fragment(self, source: Source, label: str) -> Fragment:
        if isinstance(source, Fragment):
            if isinstance(source.format, ConfigFormat):
                return source
            return replace(source, format=resolve_format(source.format, source=label))

        if isinstance(source, tuple):
            text, fmt = source
            return Fragment(text=text, format=resolve_format(fmt, source=label), source=label)

        path = Path(source)
        # Format is checked before touching the file
        config_format = format_from_path(path)
        try:
            text = path.read_text(encoding=self._encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise FileReadError(path, reason=str(e)) from e
        return Fragment(text=text, format=config_format, source=label)

    # =========================================================================
    # Reading
    # =========================================================================

    def get(self, key: str, default: Any = None) -> Any:
        """Read a dot-notation key from the merged state."""
        value = get_nested(self._state, key, default)
        return deepcopy(value)

    def unmarshal(self, destination: Type[T]) -> T:
        """
        Decode the merged state into a typed destination.

        Args:
            destination: pydantic model, dataclass, TypedDict or any type
                pydantic's TypeAdapter accepts

        Returns:
            Validated destination instance

        Raises:
            UnmarshalError: If the merged state does not fit destination
        """
        destination_name = getattr(destination, "__name__", repr(destination))
        try:
            adapter = TypeAdapter(destination)
            return adapter.validate_python(self.settings)
        except ValidationError as e:
            errors = e.errors()
            if errors:
                first = errors[0]
                field_path = ".".join(str(p) for p in first.get("loc", []))
                raise UnmarshalError(
                    first.get("msg", str(e)),
                    destination=destination_name,
                    field_path=field_path or None,
                    actual_value=first.get("input") if field_path else None,
                ) from e
            raise UnmarshalError(str(e), destination=destination_name) from e
