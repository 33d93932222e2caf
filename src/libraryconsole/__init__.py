"""Administrative console for a library-lending service."""

__version__ = "0.1.0"
