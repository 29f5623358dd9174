"""Terminal line editor built around a UI-agnostic edit session."""

__all__ = [
    "adapters",
    "buffer",
    "config",
    "keymaps",
    "modes",
    "runtime",
    "search",
    "session",
    "view",
]

__version__ = "0.1.0"
