# sana/schemas/common.py
from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

NO_DATA_QUALIFICATION = "No data found"


class Coordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class MetricKind(str, Enum):
    AIR = "air"
    WATER = "water"
    UV = "uv"

    @property
    def path(self) -> str:
        return f"/{self.value}/current"

    @property
    def label(self) -> str:
        return {
            MetricKind.AIR: "Air quality",
            MetricKind.WATER: "Water quality",
            MetricKind.UV: "UV index",
        }[self]


class QualityReading(BaseModel):
    """Normalized result of one metric fetch.

    When ``found`` is False the qualification/value fields carry the fixed
    "no data" placeholders, never a stale or zero reading.
    """
    model_config = ConfigDict(frozen=True)

    found: bool
    qualification: str
    value: float | None = None
    display_value: str = ""
    recommendation: str = ""
    observed_at: datetime | None = None

    @classmethod
    def not_found(cls, kind: MetricKind) -> "QualityReading":
        return cls(
            found=False,
            qualification=NO_DATA_QUALIFICATION,
            recommendation=f"{kind.label} data is not available for this location.",
        )


class FetchResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["pending", "ready", "failed"] = "pending"
    reading: QualityReading | None = None
    error: str | None = None

    @classmethod
    def pending(cls) -> "FetchResult":
        return cls(status="pending")

    @classmethod
    def ready(cls, reading: QualityReading) -> "FetchResult":
        return cls(status="ready", reading=reading)

    @classmethod
    def failed(cls, reason: str) -> "FetchResult":
        return cls(status="failed", error=reason)


class AggregationSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    cycle: int = 0
    version: int = 0
    coordinate: Coordinate | None = None
    air: FetchResult = FetchResult()
    water: FetchResult = FetchResult()
    uv: FetchResult = FetchResult()

    def slot(self, kind: MetricKind) -> FetchResult:
        return getattr(self, kind.value)
