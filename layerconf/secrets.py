"""
Secrets store clients for layerconf.

The loader only needs ``read(path) -> Optional[Mapping]``; any object with
that method can be passed as ``secrets_client``.  ``VaultSecretsClient``
adapts an ``hvac.Client`` to that contract.

hvac is an optional dependency (``pip install layerconf[vault]``).
"""

import logging
import os
from typing import Any, Mapping, Optional

from typing_extensions import Protocol, runtime_checkable

logger = logging.getLogger("layerconf")


@runtime_checkable
class SecretsClient(Protocol):
    """
    Read-only view of a path-addressed secrets store.

    ``read`` returns the key/value secrets stored at ``path``, or None when
    nothing is stored there.  Any exception it raises is treated as a hard
    failure of the lookup.
    """

    def read(self, path: str) -> Optional[Mapping[str, Any]]:
        ...


class VaultSecretsClient:
    """
    SecretsClient backed by HashiCorp Vault through hvac.

    KV v2 responses nest the secret under ``data.data``; they are unwrapped
    so templates address secret keys directly for both engine versions.
    """

    def __init__(self, client: Any):
        self._client = client

    @classmethod
    def from_env(cls, **client_kwargs: Any) -> "VaultSecretsClient":
        """Build a client from VAULT_ADDR / VAULT_TOKEN."""
        try:
            import hvac
        except ImportError:
            raise ImportError(
                "VaultSecretsClient requires the vault extra. "
                "Install with: pip install layerconf[vault]"
            )

        client_kwargs.setdefault("url", os.environ.get("VAULT_ADDR"))
        client_kwargs.setdefault("token", os.environ.get("VAULT_TOKEN"))
        return cls(hvac.Client(**client_kwargs))

    @property
    def client(self) -> Any:
        return self._client

    def read(self, path: str) -> Optional[Mapping[str, Any]]:
        logger.debug(f"Reading secrets from vault path '{path}'")
        response = self._client.read(path)
        if not response:
            return None

        data = response.get("data")
        if not data:
            return None

        # KV v2: {"data": {"data": {...}, "metadata": {...}}}
        if isinstance(data.get("data"), Mapping) and "metadata" in data:
            return data["data"]
        return data
