"""
Dependency injection container for the account service.
"""

from .container import Container

__all__ = ["Container"]
