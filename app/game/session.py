"""
Quiz Session - состояние одной игры и переходы между состояниями.

Переходы:
    IDLE -> LOADING -> PRESENTING(i) -> CHECKING(i) -> PRESENTING(i+1) | FINISHED

Каждая функция принимает QuizSession и возвращает новую; сеть здесь не
используется, её вызывает QuizController.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Sequence


DEFAULT_SESSION_SIZE = 10
DEFAULT_POINTS = 10

NO_GAME_DATA = 'No game data available. Please try again later.'
ENTER_ANSWER = 'Please enter an answer.'
CORRECT = 'Correct! +{points} points'
INCORRECT = 'Incorrect! Correct answer: {answer}'
NEXT_LABEL = 'Next Question'
FINISH_LABEL = 'Finish'


class QuizState(Enum):
    """Состояние игры."""
    IDLE = "idle"
    LOADING = "loading"
    PRESENTING = "presenting"
    CHECKING = "checking"
    FINISHED = "finished"


class InvalidTransition(Exception):
    """Переход не разрешён из текущего состояния."""

    def __init__(self, state: QuizState, action: str):
        self.state = state
        self.action = action
        super().__init__(f"Cannot {action} while {state.value}")


@dataclass(frozen=True)
class CatalogEntry:
    """Вопрос из каталога: владелец, ID и ответ."""
    user_id: str
    username: str
    question_id: str
    answer: str

    @classmethod
    def from_dict(cls, data: dict) -> "CatalogEntry":
        return cls(
            user_id=str(data.get("userId", "")),
            username=data.get("username") or "",
            question_id=str(data.get("questionId", "")),
            answer=data.get("answer") or "",
        )


@dataclass(frozen=True)
class ScoreReport:
    """Итог игры, отправляемый на сервер."""
    score: int
    correct: int
    total: int
    time_spent_seconds: int

    def to_payload(self) -> dict:
        return {
            "score": self.score,
            "correct": self.correct,
            "total": self.total,
            "timeSpentSeconds": self.time_spent_seconds,
        }


@dataclass
class QuizSession:
    """
    Состояние одной игры на клиенте. Никогда не сохраняется.

    Поля message, input_enabled, advance_label и images описывают то,
    что видит игрок.
    """
    state: QuizState = QuizState.IDLE
    questions: list[CatalogEntry] = field(default_factory=list)
    index: int = -1
    score: int = 0
    correct: int = 0
    started_at: Optional[float] = None

    message: str = ""
    answer_input: str = ""
    input_enabled: bool = False
    advance_enabled: bool = False
    advance_label: str = NEXT_LABEL
    images: tuple[bytes, bytes] | None = None
    high_score: Optional[int] = None

    @property
    def current(self) -> Optional[CatalogEntry]:
        if 0 <= self.index < len(self.questions):
            return self.questions[self.index]
        return None

    @property
    def total(self) -> int:
        return len(self.questions)

    @property
    def is_last(self) -> bool:
        return self.index + 1 >= len(self.questions)


def _require(session: QuizSession, action: str, *states: QuizState) -> None:
    if session.state not in states:
        raise InvalidTransition(session.state, action)


def begin_loading(session: QuizSession) -> QuizSession:
    """IDLE/FINISHED -> LOADING."""
    _require(session, "start", QuizState.IDLE, QuizState.FINISHED)
    return replace(session, state=QuizState.LOADING, message="")


def no_questions(session: QuizSession) -> QuizSession:
    """LOADING -> IDLE, когда каталог пуст или недоступен."""
    return replace(session, state=QuizState.IDLE, questions=[], index=-1, message=NO_GAME_DATA)


def select_questions(
    session: QuizSession,
    candidates: Sequence[CatalogEntry],
    now: float,
    size: int = DEFAULT_SESSION_SIZE,
    rng: Optional[random.Random] = None,
) -> QuizSession:
    """
    Выбирает min(size, N) случайных вопросов и сбрасывает счёт.

    Если кандидатов меньше size, используются все.
    """
    _require(session, "select questions", QuizState.LOADING)
    if not candidates:
        return no_questions(session)

    pool = list(candidates)
    (rng or random).shuffle(pool)
    selected = pool[:min(size, len(pool))]

    return replace(
        session,
        questions=selected,
        index=-1,
        score=0,
        correct=0,
        started_at=now,
        message="",
    )


def advance(session: QuizSession) -> QuizSession:
    """
    Переход к следующему вопросу.

    За последним вопросом - FINISHED; иначе PRESENTING с очищенным
    ответом и сообщением. Изображения подставляет контроллер.
    """
    _require(session, "advance", QuizState.LOADING, QuizState.CHECKING)
    index = session.index + 1
    if index >= len(session.questions):
        return replace(session, state=QuizState.FINISHED, index=index,
                       input_enabled=False, advance_enabled=False)

    return replace(
        session,
        state=QuizState.PRESENTING,
        index=index,
        images=None,
        message="",
        answer_input="",
        input_enabled=True,
        advance_enabled=False,
        advance_label=NEXT_LABEL,
    )


def check_answer(session: QuizSession, raw_input: str, points: int = DEFAULT_POINTS) -> QuizSession:
    """
    Проверяет ответ без учёта регистра.

    Пустой ввод ничего не меняет, кроме подсказки. Верный ответ даёт
    очки, неверный показывает правильный ответ и блокирует ввод.
    """
    _require(session, "check an answer", QuizState.PRESENTING)
    raw = (raw_input or "").strip()
    if not raw:
        return replace(session, message=ENTER_ANSWER, answer_input=raw_input or "")

    expected = session.current.answer if session.current else ""
    label = FINISH_LABEL if session.is_last else NEXT_LABEL

    if raw.lower() == expected.lower():
        return replace(
            session,
            state=QuizState.CHECKING,
            score=session.score + points,
            correct=session.correct + 1,
            message=CORRECT.format(points=points),
            answer_input=raw_input,
            advance_enabled=True,
            advance_label=label,
        )

    return replace(
        session,
        state=QuizState.CHECKING,
        message=INCORRECT.format(answer=expected),
        answer_input=raw_input,
        input_enabled=False,
        advance_enabled=True,
        advance_label=label,
    )


def build_report(session: QuizSession, now: float) -> ScoreReport:
    """Итог игры; время - целые секунды с начала."""
    started = session.started_at if session.started_at is not None else now
    return ScoreReport(
        score=session.score,
        correct=session.correct,
        total=len(session.questions),
        time_spent_seconds=max(0, int(now - started)),
    )


def game_over(session: QuizSession, report: ScoreReport, high_score: Optional[int] = None) -> QuizSession:
    """Итоговое сообщение, новый рекорд и сброс списка вопросов."""
    minutes, seconds = divmod(report.time_spent_seconds, 60)
    message = (
        f"Game Over! Final Score: {report.score}\n"
        f"Time: {minutes}m {seconds}s\n"
        f"Correct Answers: {report.correct}/{report.total}"
    )
    return replace(
        session,
        state=QuizState.FINISHED,
        questions=[],
        index=-1,
        images=None,
        message=message,
        input_enabled=False,
        advance_enabled=False,
        high_score=high_score if high_score is not None else session.high_score,
    )
