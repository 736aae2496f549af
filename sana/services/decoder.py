# sana/services/decoder.py
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..schemas.common import MetricKind, QualityReading


class DecodeError(Exception):
    """Payload does not match the quality index schema."""

    def __init__(self, kind: MetricKind, message: str):
        super().__init__(f"{kind.value}: {message}")
        self.kind = kind


# ---- wire schema (shared by /air, /water and /uv) ----
class _Index(BaseModel):
    model_config = ConfigDict(strict=True)

    qualification: str
    value: float = Field(allow_inf_nan=False)


class _HealthRecommendations(BaseModel):
    model_config = ConfigDict(strict=True)

    all: Optional[str] = None


class _QualityPayload(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore", populate_by_name=True)

    found: bool
    # ISO string on the wire
    observed_at: Optional[datetime] = Field(default=None, alias="datetime", strict=False)
    index: Optional[_Index] = None
    health_recommendations: Optional[_HealthRecommendations] = None


def format_value(value: float) -> str:
    return f"{value:.2f}"


def decode_reading(kind: MetricKind, payload: Any) -> QualityReading:
    """
    Normalize one metric payload into a QualityReading.

    Every metric uses the same found-check: ``found`` false, or ``found`` true
    with no ``index``, gives the not-found reading. A schema mismatch raises
    DecodeError and nothing is extracted.
    """
    try:
        parsed = _QualityPayload.model_validate(payload)
    except ValidationError as e:
        raise DecodeError(kind, f"{e.error_count()} schema error(s): {e.errors()[0]['msg']}") from e

    if not parsed.found or parsed.index is None:
        return QualityReading.not_found(kind)

    recs = parsed.health_recommendations
    return QualityReading(
        found=True,
        qualification=parsed.index.qualification,
        value=parsed.index.value,
        display_value=format_value(parsed.index.value),
        recommendation=(recs.all if recs and recs.all else ""),
        observed_at=parsed.observed_at,
    )
