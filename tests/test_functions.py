"""
Tests for the template function registry.
"""

import pytest

from layerconf.errors import MissingSecretError, SecretsStoreError
from layerconf.functions import ENV_FUNCTION, SECRET_FUNCTION, FunctionRegistry


class TestBuiltins:
    """Test which built-ins are present."""

    def test_env_always_present(self):
        registry = FunctionRegistry()

        assert ENV_FUNCTION in registry
        assert registry.names() == ["env"]

    def test_secret_lookup_only_with_client(self, fake_secrets):
        assert SECRET_FUNCTION not in FunctionRegistry()
        assert SECRET_FUNCTION in FunctionRegistry(secrets_client=fake_secrets)


class TestEnv:
    """Test the env function."""

    def test_unset_without_default_is_empty(self, monkeypatch):
        monkeypatch.delenv("A_VAL", raising=False)
        assert FunctionRegistry.env("A_VAL") == ""

    def test_unset_with_default(self, monkeypatch):
        monkeypatch.delenv("A_VAL", raising=False)
        assert FunctionRegistry.env("A_VAL", "fallback") == "fallback"

    def test_set_value_overrides_default(self, monkeypatch):
        monkeypatch.setenv("A_VAL", "from_env")
        assert FunctionRegistry.env("A_VAL") == "from_env"
        assert FunctionRegistry.env("A_VAL", "fallback") == "from_env"

    def test_set_but_empty_wins(self, monkeypatch):
        monkeypatch.setenv("A_VAL", "")
        assert FunctionRegistry.env("A_VAL", "fallback") == ""

    def test_rejects_extra_defaults(self):
        with pytest.raises(TypeError):
            FunctionRegistry.env("A_VAL", "one", "two")


class TestSecretLookup:
    """Test the secret_lookup function."""

    def test_returns_value(self, fake_secrets):
        registry = FunctionRegistry(secrets_client=fake_secrets)

        assert registry.secret_lookup("secret/db", "password") == "s3cr3t"
        assert fake_secrets.reads == ["secret/db"]

    def test_non_string_value_stringified(self, fake_secrets):
        registry = FunctionRegistry(secrets_client=fake_secrets)
        assert registry.secret_lookup("secret/db", "port") == "5432"

    def test_missing_key_without_default_raises(self, fake_secrets):
        registry = FunctionRegistry(secrets_client=fake_secrets)

        with pytest.raises(MissingSecretError) as exc_info:
            registry.secret_lookup("secret/db", "username")

        assert exc_info.value.key == "username"
        assert exc_info.value.path == "secret/db"

    def test_missing_key_with_default(self, fake_secrets):
        registry = FunctionRegistry(secrets_client=fake_secrets)
        assert registry.secret_lookup("secret/db", "username", "admin") == "admin"

    def test_missing_path_uses_default(self, fake_secrets):
        registry = FunctionRegistry(secrets_client=fake_secrets)

        assert registry.secret_lookup("secret/none", "k", "d") == "d"
        with pytest.raises(MissingSecretError):
            registry.secret_lookup("secret/none", "k")

    def test_store_failure_ignores_default(self, make_secrets):
        client = make_secrets(error=ConnectionError("vault unreachable"))
        registry = FunctionRegistry(secrets_client=client)

        with pytest.raises(SecretsStoreError) as exc_info:
            registry.secret_lookup("secret/db", "password", "fallback")

        assert exc_info.value.path == "secret/db"
        assert "vault unreachable" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, ConnectionError)


class TestRegister:
    """Test custom function registration."""

    def test_register_custom(self):
        registry = FunctionRegistry()
        registry.register("upper", str.upper)

        assert registry.get("upper") is str.upper
        assert len(registry) == 2

    def test_last_registration_wins(self):
        registry = FunctionRegistry()
        first = lambda: "first"  # noqa: E731
        second = lambda: "second"  # noqa: E731

        registry.register("pick", first)
        registry.register("pick", second)

        assert registry.get("pick") is second
        assert registry.names().count("pick") == 1

    def test_builtin_can_be_replaced(self):
        registry = FunctionRegistry()
        registry.register("env", lambda name, default=None: "stub")

        assert registry.as_dict()["env"]("ANY") == "stub"

    def test_as_dict_is_copy(self):
        registry = FunctionRegistry()
        functions = registry.as_dict()
        functions["injected"] = print

        assert "injected" not in registry

    @pytest.mark.parametrize("name", ["", None, 42])
    def test_invalid_name(self, name):
        with pytest.raises(ValueError):
            FunctionRegistry().register(name, str.upper)

    def test_not_callable(self):
        with pytest.raises(TypeError):
            FunctionRegistry().register("value", "not callable")
