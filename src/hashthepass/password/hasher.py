"""
Site password derivation.

The password is PBKDF2-HMAC-SHA1 over the secret, salted with the site's
normalized domain, base64 encoded. A "$" prefix and a single uppercased
letter make the result acceptable to most password rules.
"""

import base64
import hashlib
import re
from typing import Optional

from hashthepass.password.domain import get_domain

PREFIX = "$"
ITERATIONS = 500
# Two 32-bit words
KEY_SIZE = 8
DIGEST = "sha1"

_LOWERCASE = re.compile("[a-z]")


def derive_key(secret: str, salt: str) -> bytes:
    return hashlib.pbkdf2_hmac(
        DIGEST, secret.encode("utf-8"), salt.encode("utf-8"), ITERATIONS, KEY_SIZE
    )


def hash_password(site: Optional[str], secret: Optional[str]) -> Optional[str]:
    """
    Derive the password for ``site`` from ``secret``.

    Args:
        site: URL or host name of the site
        secret: The master password

    Returns:
        The derived password, or None if the site has no usable domain or
        the secret is empty
    """
    domain = get_domain(site)
    if not domain or not secret:
        return None

    encoded = PREFIX + base64.b64encode(derive_key(secret, domain)).decode("ascii")

    # Only the first lowercase letter is uppercased; existing hashes depend on it
    return _LOWERCASE.sub(lambda m: m.group(0).upper(), encoded, count=1)
