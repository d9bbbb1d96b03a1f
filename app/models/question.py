# app/models/question.py
"""
Модель вопроса приложения PictureQuiz
Вопрос: пара изображений и один текстовый ответ, принадлежит одному пользователю
"""
from app import db
from datetime import datetime
from sqlalchemy import String, Integer, Text, DateTime, LargeBinary, ForeignKey
import uuid


def _new_question_id():
    return uuid.uuid4().hex


class Question(db.Model):
    """
    Модель вопроса

    Attributes:
        id (str): Непрозрачный уникальный идентификатор (uuid4 hex)
        owner_id (int): ID владельца вопроса
        image1_data (bytes): Первое изображение
        image1_content_type (str): MIME-тип первого изображения
        image2_data (bytes): Второе изображение
        image2_content_type (str): MIME-тип второго изображения
        answer (str): Правильный ответ
        created_at (datetime): Дата создания вопроса
        owner (relationship): Связь с владельцем
    """

    __tablename__ = 'questions'

    # Основные поля
    id = db.Column(String(32), primary_key=True, default=_new_question_id)
    owner_id = db.Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    image1_data = db.Column(LargeBinary)
    image1_content_type = db.Column(String(100))
    image2_data = db.Column(LargeBinary)
    image2_content_type = db.Column(String(100))
    answer = db.Column(Text)
    created_at = db.Column(DateTime, default=datetime.utcnow)

    owner = db.relationship('User', back_populates='questions')


    def __repr__(self):
        return f'<Question {self.id} owner={self.owner_id}>'

    def get_image(self, slot):
        """
        Возвращает изображение из слота 1 или 2

        Args:
            slot (int): Номер слота

        Returns:
            tuple: (bytes, content_type) или (None, None), если слота нет или он пуст
        """
        if slot == 1:
            return self.image1_data, self.image1_content_type
        if slot == 2:
            return self.image2_data, self.image2_content_type
        return None, None

    def set_image(self, slot, data, content_type):
        if slot == 1:
            self.image1_data, self.image1_content_type = data, content_type
        elif slot == 2:
            self.image2_data, self.image2_content_type = data, content_type
        else:
            raise ValueError(f'Unknown image slot: {slot}')
