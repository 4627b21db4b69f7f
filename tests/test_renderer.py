"""
Tests for the Jinja2 template renderer.
"""

import pytest

from layerconf.errors import (
    MissingSecretError,
    SecretsStoreError,
    TemplateExecutionError,
    TemplateParseError,
)
from layerconf.functions import FunctionRegistry
from layerconf.renderer import TemplateRenderer
from layerconf.schemas import Delimiters


@pytest.fixture
def renderer():
    return TemplateRenderer(FunctionRegistry())


class TestRender:
    """Test basic rendering."""

    def test_plain_text_unchanged(self, renderer):
        text = 'a: 1\nb: "x"\n'
        assert renderer.render(text) == text

    def test_json_braces_not_expressions(self, renderer):
        text = '{"a": {"b": {"c": 1}}}'
        assert renderer.render(text) == text

    def test_trailing_newline_kept(self, renderer):
        assert renderer.render("a: 1\n").endswith("\n")

    def test_env_value(self, renderer, monkeypatch):
        monkeypatch.setenv("A_VAL", "override_a_env")
        assert renderer.render('a: {{ env("A_VAL") }}') == "a: override_a_env"

    def test_env_default(self, renderer, monkeypatch):
        monkeypatch.delenv("B_VAL", raising=False)
        assert renderer.render('b: {{ env("B_VAL", "fallback") }}') == "b: fallback"

    def test_no_data_context(self, renderer):
        """Only registered functions are visible."""
        with pytest.raises(TemplateExecutionError):
            renderer.render("a: {{ some_value }}")

    def test_functions_read_at_render_time(self):
        registry = FunctionRegistry()
        renderer = TemplateRenderer(registry)
        registry.register("greet", lambda name: f"hello {name}")

        assert renderer.render('msg: {{ greet("ops") }}') == "msg: hello ops"

    def test_custom_function_signature(self):
        registry = FunctionRegistry()
        registry.register("join", lambda *parts, sep=",": sep.join(parts))
        renderer = TemplateRenderer(registry)

        assert renderer.render('x: {{ join("a", "b", sep="-") }}') == "x: a-b"


class TestDelimiters:
    """Test custom delimiter pairs."""

    def test_custom_delimiters_render_identically(self, monkeypatch):
        monkeypatch.setenv("X", "value")
        default = TemplateRenderer(FunctionRegistry())
        custom = TemplateRenderer(FunctionRegistry(), Delimiters(left="[[", right="]]"))

        assert custom.render('k: [[ env("X") ]]') == default.render('k: {{ env("X") }}')

    def test_default_markers_literal_under_custom(self):
        custom = TemplateRenderer(FunctionRegistry(), Delimiters(left="[[", right="]]"))
        assert custom.render("k: '{{ not_a_call }}'") == "k: '{{ not_a_call }}'"

    @pytest.mark.parametrize("text", [
        "note: 'a {# keep #} b'\n",
        'greeting: "Hi {% if user %}there{% endif %}"\n',
    ])
    def test_block_and_comment_markup_literal_under_custom(self, text):
        custom = TemplateRenderer(FunctionRegistry(), Delimiters(left="[[", right="]]"))
        assert custom.render(text) == text

    @pytest.mark.parametrize("text", [
        "pattern: '{% raw %}'\n",
        "note: '{# not a comment #}'\n",
    ])
    def test_block_and_comment_markup_literal_under_default(self, renderer, text):
        assert renderer.render(text) == text

    def test_default_delimiters(self, renderer):
        assert renderer.delimiters == Delimiters()
        assert renderer.delimiters.left == "{{"


class TestErrors:
    """Test parse and execution failures."""

    def test_malformed_syntax(self, renderer):
        with pytest.raises(TemplateParseError) as exc_info:
            renderer.render('a: 1\nb: {{ env("X" }}\n', source="bad.yaml")

        assert exc_info.value.line == 2
        assert exc_info.value.source == "bad.yaml"

    def test_unclosed_expression(self, renderer):
        with pytest.raises(TemplateParseError):
            renderer.render('a: {{ env("X")')

    def test_unknown_function(self, renderer):
        with pytest.raises(TemplateExecutionError):
            renderer.render('a: {{ vault("secret/db", "pw") }}')

    def test_env_too_many_arguments(self, renderer):
        with pytest.raises(TemplateExecutionError) as exc_info:
            renderer.render('a: {{ env("A", "b", "c") }}')

        assert isinstance(exc_info.value.__cause__, TypeError)

    def test_custom_function_failure_wrapped(self):
        def explode():
            raise RuntimeError("boom")

        registry = FunctionRegistry()
        registry.register("explode", explode)
        renderer = TemplateRenderer(registry)

        with pytest.raises(TemplateExecutionError, match="boom"):
            renderer.render("a: {{ explode() }}", source="x.yaml")

    def test_missing_secret_propagates(self, fake_secrets):
        renderer = TemplateRenderer(FunctionRegistry(secrets_client=fake_secrets))

        with pytest.raises(MissingSecretError):
            renderer.render('a: {{ secret_lookup("secret/db", "username") }}')

    def test_secret_default(self, fake_secrets):
        renderer = TemplateRenderer(FunctionRegistry(secrets_client=fake_secrets))
        text = 'u: {{ secret_lookup("secret/db", "username", "admin") }}'

        assert renderer.render(text) == "u: admin"

    def test_store_failure_propagates(self, make_secrets):
        client = make_secrets(error=TimeoutError("timed out"))
        renderer = TemplateRenderer(FunctionRegistry(secrets_client=client))

        with pytest.raises(SecretsStoreError):
            renderer.render('a: {{ secret_lookup("secret/db", "pw", "d") }}')
