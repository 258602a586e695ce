"""Repository base classes."""

from .repository import Repository

__all__ = ["Repository"]
