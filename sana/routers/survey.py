# sana/routers/survey.py
from fastapi import APIRouter

from ..schemas.requests import SurveyAnswers, SurveyResult
from ..services.survey import QUESTIONS, score_survey

router = APIRouter(prefix="/survey", tags=["survey"])


@router.get("/questions")
def questions():
    return QUESTIONS


@router.post("/risk", response_model=SurveyResult)
def risk(answers: SurveyAnswers):
    score, checked = score_survey(answers)
    return SurveyResult(risk=score, checked=checked)
