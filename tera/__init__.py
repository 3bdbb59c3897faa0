"""A small terminal text editor with syntax highlighting, search and line numbers."""

__version__ = "0.0.1"