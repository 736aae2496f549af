# sana/services/survey.py
from typing import Iterable, List

from ..schemas.requests import SurveyAnswers

POINTS_PER_ANSWER = 33

QUESTIONS: List[dict] = [
    {"key": "drinks", "question": "Do you drink?"},
    {"key": "smokes", "question": "Do you smoke?"},
    {"key": "family_history", "question": "Do you have a family history of breast cancer?"},
]


def calculate_risk(answers: Iterable[bool]) -> int:
    # Each checked answer adds roughly a third
    return sum(1 for a in answers if a) * POINTS_PER_ANSWER


def score_survey(answers: SurveyAnswers) -> tuple[int, int]:
    flags = [answers.drinks, answers.smokes, answers.family_history]
    return calculate_risk(flags), sum(flags)
