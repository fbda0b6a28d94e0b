"""Test configuration for the marketplace API."""

from tests.fixtures import *  # noqa: F401,F403
