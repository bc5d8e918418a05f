"""
Quiz service
Question ingestion, retrieval and scored submissions for each quiz instance
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from gamers_challenge.core.exceptions import ValidationException
from gamers_challenge.services.leaderboard import LeaderboardService
from gamers_challenge.utils.documents import serialize_documents

logger = logging.getLogger(__name__)

_MISSING = object()


@dataclass(frozen=True)
class QuizInstance:
    """A quiz stored in its own collection; ``name`` is both collection and URL prefix"""

    name: str
    added_message: str


PRIMARY_QUIZ = QuizInstance(name="quiz", added_message="Questions added successfully")
SECONDARY_QUIZ = QuizInstance(name="quiz2", added_message="Questions added successfully to quiz2")
QUIZ_INSTANCES = (PRIMARY_QUIZ, SECONDARY_QUIZ)


class Scorer(ABC):
    """Counts how many submitted answers are correct"""

    @abstractmethod
    def score(self, answers: Sequence[Any], questions: Sequence[Dict[str, Any]]) -> int:
        ...


def answers_match(expected: Any, given: Any) -> bool:
    # True == 1 in Python; a boolean answer only matches a boolean
    if isinstance(expected, bool) != isinstance(given, bool):
        return False
    return expected == given


class PositionalScorer(Scorer):
    """
    Answer ``i`` is compared with ``questions[i]["correctAnswer"]``.

    Answers past the last question and questions past the last answer are
    ignored. A question without ``correctAnswer`` never matches.
    """

    def score(self, answers: Sequence[Any], questions: Sequence[Dict[str, Any]]) -> int:
        correct = 0
        for question, answer in zip(questions, answers):
            expected = question.get("correctAnswer", _MISSING)
            if expected is not _MISSING and answers_match(expected, answer):
                correct += 1
        return correct


class QuizService:
    """Operations on one quiz instance's question collection"""

    def __init__(
        self,
        db,
        instance: QuizInstance,
        leaderboard: LeaderboardService,
        scorer: Optional[Scorer] = None,
    ):
        self.instance = instance
        self.questions = db[instance.name]
        self.leaderboard = leaderboard
        self.scorer = scorer or PositionalScorer()

    async def add_questions(self, questions: Any) -> str:
        """
        Insert every question verbatim

        Raises:
            ValidationException: If ``questions`` is not a list of objects
        """
        if not isinstance(questions, list) or not all(isinstance(q, dict) for q in questions):
            raise ValidationException("Data must be an array of questions")

        if questions:
            await self.questions.insert_many(questions)
        logger.info(f"Added {len(questions)} questions to '{self.instance.name}'")
        return self.instance.added_message

    async def _fetch_questions(self) -> List[Dict[str, Any]]:
        return await self.questions.find().to_list(length=None)

    async def list_questions(self) -> List[Dict[str, Any]]:
        return serialize_documents(await self._fetch_questions())

    def score(self, answers: Sequence[Any], questions: Sequence[Dict[str, Any]]) -> int:
        return self.scorer.score(answers, questions)

    async def submit(self, username: str, answers: Sequence[Any]) -> int:
        """Score a submission against the stored questions and record it on the leaderboard"""
        questions = await self._fetch_questions()
        score = self.score(answers, questions)
        await self.leaderboard.upsert(username, score)

        logger.info(
            f"'{username}' scored {score}/{len(questions)} on '{self.instance.name}'",
            extra={"answers": len(answers)},
        )
        return score
