# app/services/questions.py
"""
Создание, изменение и удаление вопросов пользователя
Включает одноразовый перенос изображений из устаревших полей аккаунта
"""
from flask import current_app
from app import db
from app.errors import NotFound, ValidationFailure
from app.models.question import Question


# === Вспомогательные функции ===

def allowed_file(filename, extensions_set):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in extensions_set


def read_upload(file_storage):
    """
    Читает загруженный файл изображения в память

    Args:
        file_storage: werkzeug FileStorage или None

    Returns:
        tuple: (bytes, content_type) или None, если файл не передан

    Raises:
        ValidationFailure: Недопустимое расширение файла
    """
    if file_storage is None or not file_storage.filename:
        return None

    allowed_ext = set(current_app.config.get('ALLOWED_IMAGE_EXTENSIONS', {'png', 'jpg', 'jpeg'}))
    if not allowed_file(file_storage.filename, allowed_ext):
        raise ValidationFailure('Invalid image file format')

    data = file_storage.read()
    if not data:
        return None
    return data, file_storage.mimetype or 'application/octet-stream'


def _get_own_question(account, question_id):
    question = Question.query.filter_by(id=question_id, owner_id=account.id).first()
    if question is None:
        raise NotFound('Question not found')
    return question


# === Операции ===

def create_question(account, image1=None, image2=None, answer=None):
    """
    Создаёт вопрос из двух изображений и ответа

    Args:
        account (User): Владелец
        image1 (tuple): (bytes, content_type) или None
        image2 (tuple): (bytes, content_type) или None
        answer (str): Ответ

    Returns:
        Question: Созданный вопрос
    """
    question = Question(owner_id=account.id, answer=answer)
    if image1:
        question.set_image(1, *image1)
    if image2:
        question.set_image(2, *image2)

    db.session.add(question)
    db.session.commit()
    current_app.logger.info(f"Question created: {question.id} by user {account.id}")
    return question


def update_question(account, question_id, image1=None, image2=None, answer=None):
    """Частичное обновление: меняются только переданные части"""
    question = _get_own_question(account, question_id)

    if image1:
        question.set_image(1, *image1)
    if image2:
        question.set_image(2, *image2)
    if answer is not None:
        question.answer = answer

    db.session.commit()
    return question


def delete_question(account, question_id):
    """
    Удаляет вопрос по ID; неизвестный ID ничего не меняет

    Returns:
        bool: True если вопрос был удалён
    """
    question = Question.query.filter_by(id=question_id, owner_id=account.id).first()
    if question is None:
        return False

    db.session.delete(question)
    db.session.commit()
    current_app.logger.info(f"Question deleted: {question_id} by user {account.id}")
    return True


def migrate_legacy_question(account):
    """
    Переносит устаревшие изображения аккаунта в отдельный вопрос

    Срабатывает, только если у аккаунта есть старые изображения и нет вопросов.

    Returns:
        Question: Созданный вопрос или None
    """
    if not account.has_legacy_images or account.questions:
        return None

    question = Question(owner_id=account.id, answer=account.legacy_answer or None)
    if account.legacy_image1_data:
        question.set_image(1, account.legacy_image1_data, account.legacy_image1_content_type)
    if account.legacy_image2_data:
        question.set_image(2, account.legacy_image2_data, account.legacy_image2_content_type)

    account.legacy_image1_data = None
    account.legacy_image1_content_type = None
    account.legacy_image2_data = None
    account.legacy_image2_content_type = None
    account.legacy_answer = None

    db.session.add(question)
    db.session.commit()
    current_app.logger.info(f"Legacy images migrated to question {question.id} for user {account.id}")
    return question
