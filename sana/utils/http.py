# sana/utils/http.py
import httpx
from typing import Optional


class TransportError(Exception):
    """Network failure, timeout or non-2xx status from an upstream call."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class PayloadError(Exception):
    """Upstream answered 2xx but the body is not JSON."""


async def get_json(client: httpx.AsyncClient, url: str, params: Optional[dict] = None, headers: Optional[dict] = None):
    try:
        r = await client.get(url, params=params, headers=headers)
        r.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise TransportError(f"HTTP {e.response.status_code} from {e.request.url.path}", e.response.status_code) from e
    except httpx.HTTPError as e:
        raise TransportError(f"{type(e).__name__}: {e}") from e
    try:
        return r.json()
    except ValueError as e:
        raise PayloadError(f"invalid JSON from {r.request.url.path}") from e
