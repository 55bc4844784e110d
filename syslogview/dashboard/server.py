"""
Dashboard Web Interface Module

This module provides the web-based dashboard for the forwarding module. It
composes the stats buffer, the chart, the configuration editor and the module
type detector into a two-tab page (Statistics / Configuration) served by
aiohttp.

Classes:
    Dashboard: Main dashboard class handling component lifecycle and routes
"""

import asyncio
import html
import logging
from datetime import datetime
from pathlib import Path
from string import Template
from typing import Any, Callable, Dict, Optional

from aiohttp import web

from syslogview.chart import ChartSurface, TimeAxisAligner
from syslogview.config import Settings
from syslogview.constants import POLL_INTERVAL_MS
from syslogview.module import (
    BoolValue,
    ConfigEditor,
    ModuleKind,
    ModuleProfile,
    ModuleTypeDetector,
    profile_for,
)
from syslogview.stats import SlidingStatsBuffer

logger = logging.getLogger(__name__)

TEMPLATES = Path(__file__).parent / "templates"
TITLE = "Syslog Module"


class Dashboard:
    """
    Main dashboard class handling component lifecycle and route management.

    Until the attached module has been classified the page is an empty
    placeholder. Classification is attempted once per poll interval until it
    first succeeds; the dashboard then picks the matching profile, loads the
    configuration and starts polling statistics. Every applied sample
    triggers a full chart redraw.

    Attributes:
        settings (Settings): Application configuration settings
        client: Backend client for the forwarding module
        app (web.Application): aiohttp web application instance
        runner (web.AppRunner): Application runner for the web server
        site (web.TCPSite): TCP site for serving the web application
        detector (ModuleTypeDetector): One-shot module classification
        aligner (TimeAxisAligner): Window and labels of the time axis
        surface (ChartSurface): Owner of the chart figure
        profile (Optional[ModuleProfile]): Field set, once the module is known
        stats (Optional[SlidingStatsBuffer]): Polling history, once active
        editor (Optional[ConfigEditor]): Configuration mirror, once active
    """

    def __init__(self, settings: Settings, client: Any,
                 clock: Callable[[], datetime] = datetime.now):
        """
        Initialize the Dashboard with application settings and the backend client.

        Args:
            settings: Application configuration settings containing HTTP server
                      configuration (IP address, port)
            client: Backend client used by every component
            clock: Source of the current time for timestamps and the axis window
        """
        self.settings = settings
        self.client = client
        self.app = web.Application()
        self.runner: Optional[web.AppRunner] = None
        self.site: Optional[web.TCPSite] = None
        self.app['dashboard'] = self

        self.detector = ModuleTypeDetector(client)
        self.aligner = TimeAxisAligner(clock=clock)
        self.surface = ChartSurface()
        self.profile: Optional[ModuleProfile] = None
        self.stats: Optional[SlidingStatsBuffer] = None
        self.editor: Optional[ConfigEditor] = None
        self.retry_interval = POLL_INTERVAL_MS / 1000.0
        self._clock = clock
        self._detect_task: Optional[asyncio.Task] = None

        self.app.add_routes([
            web.get("/", self.handle_index),
            web.get("/chart.png", self.handle_chart),
            web.get("/api/config", self.handle_get_config),
            web.post("/api/config", self.handle_save_config),
            web.post("/api/config/refresh", self.handle_refresh_config),
            web.post("/api/config/reload", self.handle_reload_config),
            web.get("/api/status", self.handle_status),
            web.get("/health", self.handle_health),
        ])

    # -----------------------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------------------
    async def start(self) -> None:
        """
        Start the dashboard web server and the module detection.

        Raises:
            OSError: If the web server cannot bind its address
        """
        logger.info("Starting dashboard")
        address = self.settings.http_address

        self.runner = web.AppRunner(self.app)
        await self.runner.setup()
        self.site = web.TCPSite(self.runner, address["ip"], address["port"])
        await self.site.start()

        self.start_detection()
        logger.info(f"Dashboard started on http://{address['ip']}:{address['port']}")

    def start_detection(self) -> asyncio.Task:
        if self._detect_task is None:
            self._detect_task = asyncio.create_task(self._detect_loop())
        return self._detect_task

    async def _detect_loop(self) -> None:
        while True:
            try:
                kind = await self.detector.detect()
                if kind is not ModuleKind.UNKNOWN:
                    await self.activate(kind)
                    return
            except Exception:
                logger.exception("Module detection failed; retrying")
            await asyncio.sleep(self.retry_interval)

    async def activate(self, kind: ModuleKind) -> None:
        """
        Build the components for ``kind`` and start polling statistics.
        """
        profile = profile_for(kind)
        editor = ConfigEditor(self.client, profile.config_fields)
        stats = SlidingStatsBuffer(self.client, clock=self._clock)
        stats.add_listener(self.redraw)
        await editor.load()

        # Components become visible to the routes only once fully built
        self.profile, self.editor, self.stats = profile, editor, stats
        await stats.start()
        logger.info(f"Dashboard active for {kind.value} module")

    async def stop(self) -> None:
        """
        Stop polling, release the chart and shut the web server down.
        """
        logger.info("Stopping dashboard")
        if self._detect_task is not None and not self._detect_task.done():
            self._detect_task.cancel()
            try:
                await self._detect_task
            except asyncio.CancelledError:
                pass
        self._detect_task = None

        if self.stats is not None:
            await self.stats.stop()
        self.surface.release()

        if self.site:
            await self.site.stop()
        if self.runner:
            await self.runner.cleanup()
        logger.info("Dashboard stopped")

    # -----------------------------------------------------------------
    # Chart
    # -----------------------------------------------------------------
    def redraw(self, stats: SlidingStatsBuffer) -> None:
        """Rebuild the chart from the current history snapshot."""
        if self.profile is None or not self.surface.available:
            return

        # Renders on the event loop; a 300-point figure takes milliseconds
        snapshot = stats.history.snapshot()
        now = self.aligner.now()
        labels = self.aligner.labels([ts for ts, _ in snapshot], now)
        datasets = [dataset.render(snapshot) for dataset in self.profile.datasets]
        self.surface.render(
            labels,
            datasets,
            self.aligner.window(now),
            locator=self.aligner.locator(),
            formatter=self.aligner.formatter(),
        )

    # -----------------------------------------------------------------
    # Pages
    # -----------------------------------------------------------------
    def render_page(self) -> str:
        if self.profile is None or self.editor is None:
            return self._template("placeholder.html").safe_substitute(title=TITLE)

        return self._template("index.html").safe_substitute(
            title=f"{TITLE} ({self.profile.kind.value})",
            kind=self.profile.kind.value,
            width=self.surface.width,
            height=self.surface.height,
            chart_hidden="" if self.surface.png() else " hidden",
            waiting_hidden=" hidden" if self.surface.png() else "",
            interval=POLL_INTERVAL_MS,
            fields="\n".join(self._render_field(c) for c in self.editor.controls()),
        )

    @staticmethod
    def _template(name: str) -> Template:
        with open(TEMPLATES / name, "r", encoding="utf-8") as f:
            return Template(f.read())

    @staticmethod
    def _render_field(control) -> str:
        name = html.escape(control.name)
        if control.kind == BoolValue.kind:
            checked = " checked" if control.value else ""
            widget = f'<input type="checkbox" name="{name}" id="{name}"{checked}>'
        else:
            widget = f'<input type="text" name="{name}" id="{name}" value="{html.escape(control.value)}">'
        return (
            f'                    <div class="form-group">\n'
            f'                        <label class="control-label" for="{name}">{name}</label>\n'
            f'                        {widget}\n'
            f'                    </div>'
        )

    async def handle_index(self, request: web.Request) -> web.Response:
        """
        Serve the dashboard page, or an empty placeholder while the module
        type is still unknown.
        """
        return web.Response(text=self.render_page(), content_type="text/html")

    async def handle_chart(self, request: web.Request) -> web.Response:
        png = self.surface.png()
        if png is None:
            return web.Response(status=204)
        return web.Response(body=png, content_type="image/png",
                            headers={"Cache-Control": "no-store"})

    # -----------------------------------------------------------------
    # Configuration API
    # -----------------------------------------------------------------
    def _require_editor(self) -> ConfigEditor:
        if self.editor is None:
            raise web.HTTPServiceUnavailable(text="Module type not detected yet")
        return self.editor

    def _config_response(self, request: web.Request, ok: bool = True) -> web.Response:
        if request.content_type == "application/json":
            return web.json_response({"ok": ok, "config": self.editor.state})
        # Relative redirect back to the page so the dashboard works behind a path prefix
        depth = len(request.path.rstrip("/").split("/")) - 2
        raise web.HTTPFound("../" * depth + "#config")

    async def handle_get_config(self, request: web.Request) -> web.Response:
        editor = self._require_editor()
        return web.json_response(editor.state)

    async def handle_save_config(self, request: web.Request) -> web.Response:
        """
        Apply submitted edits to the local configuration and send it to the module.

        Accepts either a JSON object of field values or an HTML form post.
        """
        editor = self._require_editor()
        if request.content_type == "application/json":
            try:
                edits = await request.json()
            except ValueError as e:
                raise web.HTTPBadRequest(text=f"Invalid JSON body: {e}")
            if not isinstance(edits, dict):
                raise web.HTTPBadRequest(text="Expected a JSON object")
            try:
                editor.edit_many(edits)
            except KeyError as e:
                raise web.HTTPBadRequest(text=f"Unknown configuration field: {e.args[0]}")
        else:
            editor.apply_form(await request.post())
        editor.save()
        return self._config_response(request)

    async def handle_refresh_config(self, request: web.Request) -> web.Response:
        editor = self._require_editor()
        ok = await editor.load()
        return self._config_response(request, ok)

    async def handle_reload_config(self, request: web.Request) -> web.Response:
        editor = self._require_editor()
        ok = await editor.reload_then_load()
        return self._config_response(request, ok)

    # -----------------------------------------------------------------
    # Status
    # -----------------------------------------------------------------
    def status(self) -> Dict[str, Any]:
        stats = self.stats
        return {
            "module": self.detector.kind.value,
            "polling": bool(stats and stats.active),
            "samples": len(stats.history) if stats else 0,
            "failures": stats.failures if stats else 0,
            "last_error": (stats.last_error if stats else None) or getattr(self.client, "last_error", None),
            "timestamp": self._clock().isoformat(),
        }

    async def handle_status(self, request: web.Request) -> web.Response:
        return web.json_response(self.status())

    async def handle_health(self, request: web.Request) -> web.Response:
        """
        Simple health-check endpoint.

        Returns a JSON payload indicating that the service is alive.
        """
        return web.json_response({"status": "ok"})
