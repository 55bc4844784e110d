"""
syslogview Application Entry Point
==================================

This module is the executable entry point for the **syslogview** dashboard.
It is responsible for:

* Loading the application configuration via :class:`syslogview.config.settings.Settings`.
* Initialising console and rotating-file logging based on the configuration.
* Instantiating the :class:`~syslogview.client.backend.BackendClient` for the
  forwarding module and the :class:`~syslogview.dashboard.server.Dashboard`.
* Running until cancelled and shutting everything down cleanly.

The module also provides a small ``_run`` helper that is used when the file
is executed directly (``python run.py``).
"""

import asyncio
import logging

from syslogview.client import BackendClient
from syslogview.config import Settings
from syslogview.dashboard import Dashboard
from syslogview.utils import setup_logging


async def main() -> None:
    """
    Main application entry point.

    Starts the dashboard web server, which in turn classifies the attached
    module and begins polling it, then waits until cancelled.
    """
    settings = Settings.load()

    log_cfg = settings.logging
    setup_logging(level=log_cfg.get("level", "INFO"), file=log_cfg.get("file"))

    # Get module logger after logging is configured
    logger = logging.getLogger(__name__)
    logger.info(f"Starting syslogview for {settings.backend_url}")

    client = BackendClient(settings.backend_url, timeout=settings.backend_timeout)
    dashboard = Dashboard(settings, client)

    try:
        await dashboard.start()
        # Wait indefinitely until cancelled (e.g., Ctrl-C)
        await asyncio.Event().wait()
    except (asyncio.CancelledError, KeyboardInterrupt):
        logger.info("Shutdown requested by user / cancellation")
    except Exception:
        logger.exception("Unexpected error - shutting down")
    finally:
        logger.info("Stopping services...")
        await dashboard.stop()
        await client.close()


def _run() -> None:
    """
    Entry-point used when executing ``run.py`` directly.

    It wraps :func:`asyncio.run` around :func:`main` and provides a minimal
    fallback logger so a clean shutdown message is always emitted.
    """
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logging.basicConfig(level=logging.INFO)
        logging.getLogger(__name__).info("Application shutdown by user")


if __name__ == "__main__":
    _run()
