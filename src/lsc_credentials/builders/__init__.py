"""
Artifact builders.

Provides the keypair generator, RPM/Debian package builders and the
Windows installer builder.
"""

from .keypair import KeyMaterial, KeyPairGenerator, public_key_from_private
from .packages import PackageRequest, PackageBuilder, RPMBuilder, DebBuilder
from .installer import InstallerBuilder, render_nsis_script

__all__ = [
    "KeyMaterial",
    "KeyPairGenerator",
    "public_key_from_private",
    "PackageRequest",
    "PackageBuilder",
    "RPMBuilder",
    "DebBuilder",
    "InstallerBuilder",
    "render_nsis_script",
]
