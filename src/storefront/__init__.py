"""Storefront API.

Product catalogue CRUD service gated by password login and signed bearer tokens.
"""

__version__ = "0.1.0"
