"""Key token to command bindings for input adapters."""

from .models import Binding, KeyStroke
from .registry import KeymapConflictError, KeymapRegistry, RegistryStats
from .resolver import KeymapResolver, ResolutionResult, is_printable
from .defaults import default_bindings, load_default_keymaps

__all__ = [
    "Binding",
    "KeyStroke",
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
    "KeymapResolver",
    "ResolutionResult",
    "default_bindings",
    "is_printable",
    "load_default_keymaps",
]
