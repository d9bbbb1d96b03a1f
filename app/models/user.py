# app/models/user.py
"""
Модель пользователя приложения PictureQuiz
Содержит учётные данные, рекорд и устаревшие поля одиночного вопроса
"""
from flask_login import UserMixin
from app import db
from datetime import datetime
from sqlalchemy import String, Integer, BigInteger, DateTime, LargeBinary, Text
import re
from werkzeug.security import generate_password_hash, check_password_hash

class User(UserMixin, db.Model):
    """
    Модель пользователя (аккаунта)

    Attributes:
        id (int): Уникальный идентификатор пользователя
        username (str): Имя пользователя (уникальное)
        email (str): Email пользователя (уникальный, используется как логин)
        password_hash (str): Хеш пароля; пустой у аккаунтов, созданных через OAuth
        language (str): Язык интерфейса ('ru', 'en')
        high_score (int): Лучший результат, никогда не уменьшается
        oauth_provider (str): Имя OAuth-провайдера
        oauth_subject (str): Идентификатор пользователя у провайдера
        legacy_image1_data (bytes): Устаревшее изображение 1 (до появления вопросов)
        legacy_image2_data (bytes): Устаревшее изображение 2
        legacy_answer (str): Устаревший ответ
        created_at (datetime): Дата создания пользователя
    """

    __tablename__ = 'users'

    # Основные поля
    id = db.Column(Integer, primary_key=True)
    username = db.Column(String(80), unique=True, nullable=False)
    email = db.Column(String(120), unique=True, nullable=False)
    password_hash = db.Column(String(256))
    language = db.Column(String(5))
    high_score = db.Column(BigInteger, nullable=False, default=0)
    created_at = db.Column(DateTime, default=datetime.utcnow)

    # Вход через OAuth
    oauth_provider = db.Column(String(50))
    oauth_subject = db.Column(String(255), index=True)

    # Устаревшие поля: одна пара изображений прямо в аккаунте
    legacy_image1_data = db.Column(LargeBinary)
    legacy_image1_content_type = db.Column(String(100))
    legacy_image2_data = db.Column(LargeBinary)
    legacy_image2_content_type = db.Column(String(100))
    legacy_answer = db.Column(Text)

    # Связи с другими моделями
    questions = db.relationship('Question', back_populates='owner', lazy=True,
                                cascade='all, delete-orphan', order_by='Question.created_at')
    scores = db.relationship('Score', back_populates='user', lazy=True,
                             cascade='all, delete-orphan', order_by='Score.id')


    def __repr__(self):
        """
        Строковое представление объекта пользователя

        Returns:
            str: Строковое представление пользователя
        """
        return f'<User {self.username} ({self.email})>'

    @property
    def has_legacy_images(self):
        """True, если в аккаунте остались изображения старого формата"""
        return bool(self.legacy_image1_data or self.legacy_image2_data)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    @staticmethod
    def is_valid_email(email):
        """
        Проверяет корректность формата email

        Args:
            email (str): Email для проверки

        Returns:
            bool: True если формат корректен, иначе False
        """
        pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
        return re.match(pattern, email) is not None
