"""
Deterministic site passwords.

This package handles:
1. Reducing a URL or host to its registrable domain
2. Deriving a password from a secret, salted with that domain
"""

from .domain import get_domain
from .hasher import hash_password

__all__ = ["get_domain", "hash_password"]
