# sana/schemas/requests.py
from pydantic import BaseModel, Field


class AuthorizationUpdate(BaseModel):
    granted: bool


class AuthorizationState(BaseModel):
    granted: bool


class CycleAccepted(BaseModel):
    cycle: int | None = None
    detail: str = "accepted"


class SurveyAnswers(BaseModel):
    drinks: bool = False
    smokes: bool = False
    family_history: bool = Field(False, description="Family history of breast cancer")


class SurveyResult(BaseModel):
    risk: int
    checked: int
