from __future__ import annotations

import httpx
import pytest

from sana.core.config import Settings


def quality_payload(
    qualification: str = "Good",
    value: float = 42.1,
    found: bool = True,
    recommendation: str | None = "Enjoy your usual outdoor activities.",
    with_index: bool = True,
) -> dict:
    payload: dict = {"found": found, "datetime": "2024-10-01T12:00:00Z"}
    if with_index:
        payload["index"] = {"qualification": qualification, "value": value}
    if recommendation is not None:
        payload["health_recommendations"] = {"all": recommendation}
    return payload


@pytest.fixture
def settings() -> Settings:
    return Settings(quality_api_key="test-key", quality_api_base="http://quality.test", log_level="DEBUG")


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url="http://quality.test", transport=httpx.MockTransport(handler))
