# app/services/catalog.py
"""
Каталог вопросов для игры
Плоский список чужих вопросов и выдача изображений по пользователю, вопросу и слоту
"""
import base64
from app import db
from app.errors import NotAuthenticated, NotFound
from app.models.user import User
from app.models.question import Question


def list_questions(requester_id):
    """
    Собирает вопросы всех пользователей, кроме запрашивающего

    Ответ отдаётся клиенту вместе с вопросом: клиент сам сверяет ввод.

    Args:
        requester_id (int): ID текущего пользователя

    Returns:
        list: Словари {userId, username, questionId, answer}
    """
    if requester_id is None:
        raise NotAuthenticated('Not authenticated')

    rows = (
        db.session.query(Question, User.username)
        .join(User, Question.owner_id == User.id)
        .filter(Question.owner_id != requester_id)
        .order_by(User.id, Question.created_at)
        .all()
    )

    questions = []
    for question, username in rows:
        # Вопросы без ответа в игру не попадают
        if not question.answer:
            continue
        questions.append({
            'userId': str(question.owner_id),
            'username': username,
            'questionId': question.id,
            'answer': question.answer,
        })
    return questions


def _load_owner(owner_id):
    try:
        owner = db.session.get(User, int(owner_id))
    except (TypeError, ValueError):
        owner = None
    if owner is None:
        raise NotFound('User not found')
    return owner


def get_image(owner_id, question_id, slot):
    """
    Возвращает изображение вопроса

    Args:
        owner_id: ID владельца вопроса
        question_id (str): ID вопроса
        slot (int): Номер изображения (1 или 2)

    Returns:
        tuple: (bytes, content_type)

    Raises:
        NotFound: Нет пользователя, вопроса или изображения в слоте
    """
    owner = _load_owner(owner_id)

    question = Question.query.filter_by(id=question_id, owner_id=owner.id).first()
    if question is None:
        raise NotFound('Question not found')

    data, content_type = question.get_image(slot)
    if not data:
        raise NotFound('Image not found')
    return data, content_type or 'application/octet-stream'


def get_legacy_image(owner_id, slot):
    """Изображение из устаревших полей аккаунта (до перехода на вопросы)"""
    owner = _load_owner(owner_id)

    if slot == 1:
        data, content_type = owner.legacy_image1_data, owner.legacy_image1_content_type
    else:
        data, content_type = owner.legacy_image2_data, owner.legacy_image2_content_type
    if not data:
        raise NotFound('Image not found')
    return data, content_type or 'application/octet-stream'


def image_etag(data):
    """Отпечаток изображения: первые 10 символов base64"""
    return base64.b64encode(data[:16]).decode('ascii')[:10]
