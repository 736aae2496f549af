# sana/services/quality_client.py
import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from ..core.config import Settings, settings as default_settings
from ..schemas.common import Coordinate, MetricKind
from ..utils.http import PayloadError, get_json
from .decoder import DecodeError

logger = logging.getLogger(__name__)


class QualityClient:
    """One GET per metric against the quality index provider.

    No retry, caching or rate limiting: a new attempt only happens on the
    next fetch cycle.
    """

    def __init__(self, settings: Optional[Settings] = None, client: Optional[httpx.AsyncClient] = None):
        self.settings = settings or default_settings
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=self.settings.quality_api_base,
            timeout=self.settings.quality_api_timeout,
        )

    def _params(self, coordinate: Coordinate) -> Dict[str, Any]:
        # fixed-point so small values never go out as 1e-05
        return {
            "lat": f"{coordinate.latitude:.6f}",
            "lng": f"{coordinate.longitude:.6f}",
            "apikey": self.settings.quality_api_key,
        }

    async def fetch(self, coordinate: Coordinate, kind: MetricKind) -> Any:
        """Raw JSON payload for one metric; raises TransportError / DecodeError."""
        logger.debug("GET %s lat=%s lng=%s", kind.path, coordinate.latitude, coordinate.longitude)
        try:
            return await get_json(self._client, kind.path, params=self._params(coordinate))
        except PayloadError as e:
            raise DecodeError(kind, str(e)) from e

    def fetch_all(self, coordinate: Coordinate) -> Dict[MetricKind, "asyncio.Task[Any]"]:
        # All three start now; each task resolves on its own.
        return {
            kind: asyncio.create_task(self.fetch(coordinate, kind), name=f"fetch-{kind.value}")
            for kind in MetricKind
        }

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
