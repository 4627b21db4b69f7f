"""
Template Function Registry for layerconf.

Holds the callables visible inside configuration templates:
- env: environment variable lookup with optional default (always present)
- secret_lookup: secrets store lookup (present only with a secrets client)
- any caller-registered function

Usage:
    registry = FunctionRegistry(secrets_client=client)
    registry.register("upper", str.upper)

    # In a template:
    #   password: {{ secret_lookup("secret/db", "password", "changeme") }}
    #   host: {{ upper(env("DB_HOST", "localhost")) }}
"""

import logging
import os
from typing import Any, Callable, Dict, Iterator, List, Optional

from .errors import MissingSecretError, SecretsStoreError
from .secrets import SecretsClient

logger = logging.getLogger("layerconf")

ENV_FUNCTION = "env"
SECRET_FUNCTION = "secret_lookup"


class FunctionRegistry:
    """
    Name-to-callable mapping handed to the template renderer.

    The set only grows: registering an existing name replaces the previous
    entry (last registration wins) and nothing is ever removed.
    """

    def __init__(self, secrets_client: Optional[SecretsClient] = None):
        self._secrets_client = secrets_client
        self._functions: Dict[str, Callable[..., Any]] = {
            ENV_FUNCTION: self.env,
        }
        if secrets_client is not None:
            self._functions[SECRET_FUNCTION] = self.secret_lookup

    # =========================================================================
    # Registration
    # =========================================================================

    def register(self, name: str, func: Callable[..., Any]) -> None:
        """
        Register a template function, replacing any entry with that name.

        Args:
            name: Name the function is called by inside templates
            func: Any callable; its signature is up to the caller
        """
        if not isinstance(name, str) or not name:
            raise ValueError(f"Function name must be a non-empty string, got {name!r}")
        if not callable(func):
            raise TypeError(f"Template function '{name}' is not callable")

        if name in self._functions:
            logger.debug(f"Replacing template function '{name}'")
        self._functions[name] = func

    def get(self, name: str) -> Optional[Callable[..., Any]]:
        return self._functions.get(name)

    def names(self) -> List[str]:
        return list(self._functions)

    def as_dict(self) -> Dict[str, Callable[..., Any]]:
        """Copy of the current function set."""
        return dict(self._functions)

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def __len__(self) -> int:
        return len(self._functions)

    def __iter__(self) -> Iterator[str]:
        return iter(self._functions)

    @property
    def secrets_client(self) -> Optional[SecretsClient]:
        return self._secrets_client

    # =========================================================================
    # Built-in Functions
    # =========================================================================

    @staticmethod
    def env(name: str, default: Optional[str] = None) -> str:
        """
        Look up an environment variable.

        A set variable always wins over ``default``. An unset variable
        yields ``default`` when given, otherwise an empty string.
        """
        value = os.environ.get(name)
        if value is not None:
            return value
        if default is not None:
            return default
        return ""

    def secret_lookup(self, path: str, key: str, default: Optional[str] = None) -> str:
        """
        Look up ``key`` in the secrets stored at ``path``.

        Raises:
            SecretsStoreError: If the store read fails (default is ignored)
            MissingSecretError: If the key is absent and no default is given
        """
        if self._secrets_client is None:
            raise SecretsStoreError(path, reason="no secrets client configured")

        try:
            secrets = self._secrets_client.read(path)
        except Exception as e:
            raise SecretsStoreError(path, reason=str(e)) from e

        if secrets and key in secrets:
            return str(secrets[key])

        if default is not None:
            logger.debug(f"Secret '{key}' not found in '{path}', using default")
            return default
        raise MissingSecretError(key, path)
