# app/models/__init__.py
"""
Инициализация моделей данных приложения
Объединение всех моделей в одном месте
"""
from .user import User
from .question import Question
from .score import Score

__all__ = ['User', 'Question', 'Score']
