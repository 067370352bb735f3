"""
Realtime gateway connection.

Only the connection lifecycle is handled; no messages are exchanged yet.
"""

import logging
from typing import Optional

import websocket

from ..config import MakuwroConfig
from ..exceptions import MakuwroConnectionError

logger = logging.getLogger(__name__)


class Gateway:
    """A websocket connection to the Makuwro gateway."""

    def __init__(self, config: MakuwroConfig):
        self.config = config
        self._ws: Optional[websocket.WebSocket] = None

    @property
    def url(self) -> str:
        return self.config.endpoints.gateway

    @property
    def is_connected(self) -> bool:
        return self._ws is not None and self._ws.connected

    def connect(self) -> None:
        """Open the connection; does nothing if already open."""
        if self.is_connected:
            return

        try:
            self._ws = websocket.create_connection(self.url, timeout=self.config.timeout)
        except (websocket.WebSocketException, OSError) as e:
            raise MakuwroConnectionError(f"Could not connect to gateway {self.url}: {e}")

        logger.debug("Connected to gateway %s", self.url)

    def close(self) -> None:
        """Close the connection if open."""
        if self._ws is not None:
            self._ws.close()
            self._ws = None
            logger.debug("Disconnected from gateway %s", self.url)
