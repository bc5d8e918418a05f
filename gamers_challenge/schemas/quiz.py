"""Quiz schemas"""

from typing import Any, Dict, List

from pydantic import BaseModel


class QuestionsResponse(BaseModel):
    questions: List[Dict[str, Any]]


class QuizSubmission(BaseModel):
    username: str
    answers: List[Any]


class ScoreResponse(BaseModel):
    score: int


class MessageResponse(BaseModel):
    message: str
