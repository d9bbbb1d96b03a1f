# app/services/scores.py
"""
Сохранение результатов игры и таблица рекордов
"""
import math
from flask import current_app
from app import db
from app.errors import NotFound
from app.models.user import User
from app.models.score import Score

MAX_STORED_NUMBER = 2 ** 63 - 1
MIN_STORED_NUMBER = -2 ** 63


def coerce_number(value):
    """
    Приводит значение к целому числу; всё нечисловое считается нулём

    Args:
        value: Значение из тела запроса

    Returns:
        int: Число или 0
    """
    if value is None or value == '':
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(number) or math.isinf(number):
        return 0
    # Столбцы INTEGER хранят знаковое 64-битное значение
    return max(MIN_STORED_NUMBER, min(MAX_STORED_NUMBER, int(number)))


def submit_score(account_id, payload):
    """
    Добавляет результат игры и обновляет рекорд

    Args:
        account_id (int): ID пользователя из сессии
        payload (dict): {score, correct, total, timeSpentSeconds}

    Returns:
        int: Обновлённый рекорд пользователя

    Raises:
        NotFound: Пользователь больше не существует
    """
    user = db.session.get(User, account_id) if account_id is not None else None
    if user is None:
        raise NotFound('User not found')

    payload = payload or {}
    points = coerce_number(payload.get('score'))
    record = Score(
        score=points,
        correct=coerce_number(payload.get('correct')),
        total=coerce_number(payload.get('total')),
        time_spent_seconds=coerce_number(payload.get('timeSpentSeconds')),
    )
    user.scores.append(record)
    user.high_score = max(user.high_score or 0, points)

    db.session.commit()
    current_app.logger.info(
        f"Score submitted: user={user.id} score={points} high_score={user.high_score}"
    )
    return user.high_score


def leaderboard(limit=5):
    """Лучшие пользователи по рекорду (только с рекордом больше нуля)"""
    return (
        User.query.filter(User.high_score > 0)
        .order_by(User.high_score.desc(), User.id)
        .limit(limit)
        .all()
    )
