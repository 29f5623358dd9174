"""Textual front end for the edit session."""

from .controller import TextualEditorAdapter, TextualUIHooks, create_default_resolver

__all__ = ["TextualEditorAdapter", "TextualUIHooks", "create_default_resolver"]
