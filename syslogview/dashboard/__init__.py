"""
Dashboard Module

This module provides the web-based dashboard for the forwarding module:
a Statistics tab with the scrolling rate chart and a Configuration tab with
the configuration editor.

Classes:
    Dashboard: Main dashboard class handling component lifecycle and routes
"""

from .server import Dashboard

__all__ = ['Dashboard']
