"""
Template Renderer for layerconf.

Renders one configuration fragment with Jinja2 before it is parsed.
Templates see only the registered functions; there is no data context.

Usage:
    renderer = TemplateRenderer(registry, Delimiters(left="[[", right="]]"))
    text = renderer.render('host: [[ env("DB_HOST", "localhost") ]]')
"""

import logging
from typing import Optional

from jinja2 import Environment, StrictUndefined, TemplateSyntaxError

from .errors import ConfigLoaderError, TemplateExecutionError, TemplateParseError
from .functions import FunctionRegistry
from .schemas import Delimiters

logger = logging.getLogger("layerconf")


class TemplateRenderer:
    """
    Jinja2-backed renderer bound to one function registry and delimiter pair.

    The registry is read at every render call, so functions registered
    between renders are visible to later fragments only.
    """

    def __init__(
        self,
        functions: FunctionRegistry,
        delimiters: Optional[Delimiters] = None,
    ):
        self.functions = functions
        self.delimiters = delimiters or Delimiters()
        self._env = self._build_environment(self.delimiters)

    @staticmethod
    def _build_environment(delimiters: Delimiters) -> Environment:
        # Block and comment markers are nested inside the pair, so "{%" and
        # "{#" in config values stay literal text.
        # autoescape stays off: output is YAML/JSON, not markup
        return Environment(
            variable_start_string=delimiters.left,
            variable_end_string=delimiters.right,
            block_start_string=delimiters.left + "%",
            block_end_string="%" + delimiters.right,
            comment_start_string=delimiters.left + "#",
            comment_end_string="#" + delimiters.right,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            autoescape=False,
        )

    def render(self, text: str, source: Optional[str] = None) -> str:
        """
        Render a fragment's text.

        Args:
            text: Raw template text
            source: Label used in error messages

        Returns:
            Rendered text

        Raises:
            TemplateParseError: If the template syntax is malformed
            TemplateExecutionError: If a function fails or rendering errors
        """
        try:
            template = self._env.from_string(text)
        except TemplateSyntaxError as e:
            raise TemplateParseError(e.message or str(e), source=source, line=e.lineno) from e

        try:
            rendered = template.render(**self.functions.as_dict())
        except ConfigLoaderError:
            raise
        except Exception as e:
            raise TemplateExecutionError(
                f"Failed to render config template: {e}",
                source=source,
                context={"error": type(e).__name__},
            ) from e

        logger.debug(f"Rendered template {source or '<string>'}")
        return rendered
