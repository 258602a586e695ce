"""Test configuration and fixtures for storefront-api."""

from tests.fixtures import *  # noqa: F401,F403
