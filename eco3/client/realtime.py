"""
Realtime channel for the client store.

A channel exposes ``subscribe(event, handler)``, ``open()`` and an async
``close()``. ``SSEChannel`` reads the server's ``/api/events/stream``;
there is no reconnection, a dropped stream stays closed.
"""
import asyncio
import contextlib
import json
from typing import Any, Callable, Dict, List, Optional

import httpx

from ..logging_config import get_logger

LEADERBOARD_UPDATE = "challenge_leaderboard_update"
IMPACT_METRIC_UPDATE = "impact_metric_update"

Handler = Callable[[Dict[str, Any]], None]

logger = get_logger("client")


class SSEChannel:
    def __init__(self, url: str, client: Optional[httpx.AsyncClient] = None):
        self.url = url
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(10.0, read=None))
        self._handlers: Dict[str, List[Handler]] = {}
        self._task: Optional[asyncio.Task] = None
        self._closed = False
        self.connected = False

    def subscribe(self, event: str, handler: Handler) -> None:
        self._handlers.setdefault(event, []).append(handler)

    def open(self) -> None:
        """Start reading the stream. Must be called from a running event loop."""
        if self._task is not None or self._closed:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def wait(self) -> None:
        """Wait until the stream ends."""
        if self._task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await self._task

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._task is not None and not self._task.done():
            self._task.cancel()
        await self.wait()
        if self._owns_client:
            await self._client.aclose()

    def _deliver(self, event: str, raw: str) -> None:
        handlers = self._handlers.get(event)
        if not handlers:
            return
        try:
            payload = json.loads(raw)
        except ValueError:
            logger.warning("Dropping malformed realtime event", event=event)
            return
        # Server frames carry {"type", "data", "timestamp"}
        data = payload.get("data", payload) if isinstance(payload, dict) else payload
        for handler in handlers:
            try:
                handler(data)
            except Exception as e:
                # One bad frame must not end the stream
                logger.error("Realtime handler failed", error=e, event=event)

    async def _run(self) -> None:
        try:
            async with self._client.stream("GET", self.url, headers={"Accept": "text/event-stream"}) as response:
                response.raise_for_status()
                self.connected = True
                logger.info("Realtime channel connected", url=self.url)

                event, data_lines = "message", []
                async for line in response.aiter_lines():
                    if not line:
                        if data_lines:
                            self._deliver(event, "\n".join(data_lines))
                        event, data_lines = "message", []
                        continue
                    if line.startswith(":"):
                        continue  # keepalive comment
                    field, _, value = line.partition(":")
                    if value.startswith(" "):
                        value = value[1:]
                    if field == "event":
                        event = value
                    elif field == "data":
                        data_lines.append(value)
                if data_lines:
                    self._deliver(event, "\n".join(data_lines))
        except httpx.HTTPError as e:
            logger.warning("Realtime channel failed", url=self.url, error_message=str(e))
        finally:
            self.connected = False
