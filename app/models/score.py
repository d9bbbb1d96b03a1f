# app/models/score.py
"""
Модель результата игры приложения PictureQuiz
Запись неизменяема после создания
"""
from app import db
from datetime import datetime
from sqlalchemy import Integer, BigInteger, DateTime, ForeignKey

class Score(db.Model):
    """
    Модель результата игры

    Attributes:
        id (int): Уникальный идентификатор результата
        user_id (int): ID пользователя
        score (int): Набранные очки
        correct (int): Количество правильных ответов
        total (int): Количество вопросов в игре
        time_spent_seconds (int): Продолжительность игры в секундах
        created_at (datetime): Время сохранения результата
        user (relationship): Связь с пользователем
    """

    __tablename__ = 'scores'

    # Основные поля
    id = db.Column(Integer, primary_key=True)
    user_id = db.Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    score = db.Column(BigInteger, nullable=False, default=0)
    correct = db.Column(Integer, nullable=False, default=0)
    total = db.Column(Integer, nullable=False, default=0)
    time_spent_seconds = db.Column(Integer, nullable=False, default=0)
    created_at = db.Column(DateTime, default=datetime.utcnow)

    user = db.relationship('User', back_populates='scores')

    def __repr__(self):
        """
        Строковое представление объекта результата

        Returns:
            str: Строковое представление результата
        """
        return f'<Score user_id={self.user_id}, score={self.score}, correct={self.correct}/{self.total}>'
