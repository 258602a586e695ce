"""Security models."""

from .claims import TokenClaims

__all__ = ["TokenClaims"]
