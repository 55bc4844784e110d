"""
Client Module

Remote access to the forwarding module's stats and configuration endpoints.

Classes:
    BackendClient: aiohttp client for the module endpoints
"""

from .backend import BackendClient

__all__ = ['BackendClient']
