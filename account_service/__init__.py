"""User account service: registration, bearer tokens, and profile management."""

__version__ = "1.0.0"
