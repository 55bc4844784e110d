"""Test helper utilities."""

import asyncio
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional


class FakeModuleClient:
    """In-memory stand-in for BackendClient recording every call."""

    def __init__(self, stats: Optional[List[Optional[Dict[str, Any]]]] = None,
                 config: Optional[Dict[str, Any]] = None):
        self.stats_payloads = list(stats or [])
        self.config = config
        self.calls: List[str] = []
        self.saved: List[Dict[str, Any]] = []
        self.reload_ok = True
        self.reload_gate: Optional[asyncio.Event] = None
        self.stats_gates: List[Optional[asyncio.Event]] = []
        self.last_error: Optional[str] = None
        self._pending = set()

    async def stats(self):
        self.calls.append("stats")
        gate = self.stats_gates.pop(0) if self.stats_gates else None
        payload = self.stats_payloads.pop(0) if self.stats_payloads else None
        if gate is not None:
            await gate.wait()
        if isinstance(payload, Exception):
            raise payload
        if payload is None:
            self.last_error = "stats: unavailable"
        return payload

    async def get_config(self):
        self.calls.append("getConfig")
        return dict(self.config) if self.config is not None else None

    async def save_config(self, state):
        self.calls.append("saveConfig")
        self.saved.append(state)

    async def reload_config(self):
        self.calls.append("reloadConfig")
        if self.reload_gate is not None:
            await self.reload_gate.wait()
        return self.reload_ok

    def dispatch(self, call):
        task = asyncio.ensure_future(call)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def close(self):
        if self._pending:
            await asyncio.gather(*self._pending)


class StepClock:
    """Clock advancing two seconds on every reading."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, 0)):
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(seconds=2)
        return value


