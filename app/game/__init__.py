"""
Клиентская часть игры: состояние сессии, контроллер и HTTP-клиент API.
"""

from .session import QuizSession, QuizState, CatalogEntry, ScoreReport, InvalidTransition
from .controller import QuizController
from .client import GameApiClient, GameApiError, NotLoggedIn

__all__ = [
    "QuizSession", "QuizState", "CatalogEntry", "ScoreReport", "InvalidTransition",
    "QuizController", "GameApiClient", "GameApiError", "NotLoggedIn",
]
