"""Sudoers and polkit privilege policy enforcement."""

__version__ = "0.1.0"
