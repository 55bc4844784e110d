"""
syslogview

Operator dashboard for the syslog forwarding module. Polls the module's
statistics and configuration endpoints and serves a two-tab web view.
"""

__version__ = "0.1.0"
