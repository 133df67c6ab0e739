"""cglctl: book, chapter and record store with visible numbering."""

__version__ = "0.1.0"
