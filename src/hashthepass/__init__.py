"""
hashthepass: deterministic site passwords and a component installer.
"""

from hashthepass.password import get_domain, hash_password
from hashthepass.component_installer import Package, install_component
from hashthepass.hashthepass_config import InstallerConfig

hash = hash_password

__all__ = [
    "hash",
    "hash_password",
    "get_domain",
    "Package",
    "install_component",
    "InstallerConfig",
]
