"""
Configuration package for syslogview.

Classes:
    Settings: Application settings loaded from YAML
"""

from .settings import Settings

__all__ = ['Settings']
