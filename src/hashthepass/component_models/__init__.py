"""
Component models.

This package provides the Pydantic data model for component.json, the
manifest every component publishes at the root of its repository.
"""

from .manifest import Manifest, WILDCARD_VERSION

__all__ = [
    "Manifest",
    "WILDCARD_VERSION",
]
