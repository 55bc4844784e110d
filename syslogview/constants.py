"""
Process-wide dashboard constants.

These values form part of the contract with the forwarding module and are
deliberately not exposed through :class:`~syslogview.config.settings.Settings`.
"""

# Polling cadence for the stats endpoint
POLL_INTERVAL_MS = 2000

# Rolling window: number of samples kept and the span of the time axis
WINDOW_SAMPLES = 300
WINDOW_MS = 300000

# A stats payload carrying this counter comes from a Collector
COLLECTOR_MARKER = "RawDiskBytes"
