"""
Quiz endpoints
Every quiz instance gets the same three routes under its own prefix
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, status

from gamers_challenge.api.deps import quiz_service_for
from gamers_challenge.schemas.quiz import (
    MessageResponse,
    QuestionsResponse,
    QuizSubmission,
    ScoreResponse,
)
from gamers_challenge.services.quiz import QuizInstance, QuizService


def build_quiz_router(instance: QuizInstance) -> APIRouter:
    """Create the router for one quiz instance, mounted at /<instance name>"""
    router = APIRouter(prefix=f"/{instance.name}")
    get_quiz_service = quiz_service_for(instance)

    @router.post(
        "/questions/add-multiple",
        response_model=MessageResponse,
        status_code=status.HTTP_201_CREATED,
        name=f"{instance.name}_add_questions",
    )
    async def add_questions(
        payload: Any = Body(None), quiz: QuizService = Depends(get_quiz_service)
    ):
        """Bulk insert the questions listed under "questions" in the body"""
        questions = payload.get("questions") if isinstance(payload, dict) else None
        return {"message": await quiz.add_questions(questions)}

    @router.get(
        "/questions", response_model=QuestionsResponse, name=f"{instance.name}_list_questions"
    )
    async def list_questions(quiz: QuizService = Depends(get_quiz_service)):
        """All questions in store order"""
        return {"questions": await quiz.list_questions()}

    @router.post("/submit", response_model=ScoreResponse, name=f"{instance.name}_submit")
    async def submit(payload: QuizSubmission, quiz: QuizService = Depends(get_quiz_service)):
        """Score the answers and record the result on the leaderboard"""
        return {"score": await quiz.submit(payload.username, payload.answers)}

    return router
