"""
Quiz Session Controller - ведёт игру через API.

Один поток управления: вызовы идут от действий игрока (кнопки, Enter)
и ждут только ответов API.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import replace
from typing import Callable, Optional, Protocol

from .client import GameApiError
from .session import (
    CatalogEntry,
    QuizSession,
    QuizState,
    ScoreReport,
    DEFAULT_POINTS,
    DEFAULT_SESSION_SIZE,
    advance,
    begin_loading,
    build_report,
    check_answer,
    game_over,
    no_questions,
    select_questions,
)


logger = logging.getLogger(__name__)


class GameApi(Protocol):
    """То, что контроллеру нужно от API."""

    def fetch_questions(self) -> list[CatalogEntry]: ...

    def fetch_image(self, user_id: str, question_id: str, slot: int) -> bytes: ...

    def submit_score(self, report: ScoreReport) -> Optional[int]: ...


class QuizController:
    """
    Связывает переходы QuizSession с вызовами API.

    Состояние хранится только в self.session и заменяется целиком
    после каждого перехода.
    """

    def __init__(
        self,
        api: GameApi,
        session_size: int = DEFAULT_SESSION_SIZE,
        points_per_correct: int = DEFAULT_POINTS,
        clock: Callable[[], float] = time.time,
        rng: Optional[random.Random] = None,
    ):
        self.api = api
        self.session_size = session_size
        self.points_per_correct = points_per_correct
        self.clock = clock
        self.rng = rng
        self.session = QuizSession()

    @property
    def state(self) -> QuizState:
        return self.session.state

    def start(self) -> bool:
        """Загружает каталог и показывает первый вопрос."""
        if self.session.state not in (QuizState.IDLE, QuizState.FINISHED):
            logger.debug("start ignored in state %s", self.session.state.value)
            return False

        self.session = begin_loading(self.session)
        try:
            candidates = self.api.fetch_questions()
        except GameApiError as e:
            logger.error("Error fetching game data: %s", e)
            candidates = []

        if not candidates:
            self.session = no_questions(self.session)
            return False

        self.session = select_questions(
            self.session, candidates, now=self.clock(),
            size=self.session_size, rng=self.rng,
        )
        return self.load_next()

    def load_next(self) -> bool:
        """
        Следующий вопрос; за последним - завершение игры.

        Returns:
            bool: True, если показан новый вопрос
        """
        if self.session.state not in (QuizState.LOADING, QuizState.CHECKING):
            logger.debug("load_next ignored in state %s", self.session.state.value)
            return False

        self.session = advance(self.session)
        if self.session.state is QuizState.FINISHED:
            self.finish()
            return False

        self.session = replace(self.session, images=self._load_images(self.session.current))
        return True

    def _load_images(self, entry: CatalogEntry) -> Optional[tuple[bytes, bytes]]:
        try:
            return (
                self.api.fetch_image(entry.user_id, entry.question_id, 1),
                self.api.fetch_image(entry.user_id, entry.question_id, 2),
            )
        except GameApiError as e:
            logger.warning("Error loading images for question %s: %s", entry.question_id, e)
            return None

    def check_answer(self, raw_input: str) -> bool:
        """Проверка ответа; False, если проверка сейчас невозможна или ввод пуст."""
        if self.session.state is not QuizState.PRESENTING:
            return False
        self.session = check_answer(self.session, raw_input, points=self.points_per_correct)
        return self.session.state is QuizState.CHECKING

    def handle_enter(self, raw_input: str) -> bool:
        """Enter проверяет ответ до проверки и переходит дальше после неё."""
        if self.session.state is QuizState.PRESENTING:
            return self.check_answer(raw_input)
        return self.load_next()

    def finish(self) -> ScoreReport:
        """Отправляет результат и сбрасывает игру."""
        report = build_report(self.session, now=self.clock())
        high_score = None
        try:
            high_score = self.api.submit_score(report)
        except GameApiError as e:
            logger.error("Error submitting score: %s", e)

        self.session = game_over(self.session, report, high_score)
        return report
