"""quicknotes: a small notes client with debounced autosave."""

__version__ = "0.1.0"
