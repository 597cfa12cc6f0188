"""Renderers that turn a compiled diagram back into output text."""

from sankey_dsl.renderers.base import Renderer
from sankey_dsl.renderers.text import DefinitionRenderer

__all__ = ["DefinitionRenderer", "Renderer"]
