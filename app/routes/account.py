# app/routes/account.py
"""
Маршруты управления вопросами пользователя
Создание, редактирование и удаление пар изображений с ответом
"""
from flask import Blueprint, render_template, request, redirect, url_for, flash, current_app
from flask_login import login_required, current_user
from app import db
from app.errors import NotFound, ValidationFailure
from app.models.question import Question
from app.services.questions import (
    read_upload, create_question, update_question, delete_question, migrate_legacy_question
)
from flask_babel import _

bp = Blueprint('account', __name__)


@bp.route('/account')
@login_required
def index():
    """Страница аккаунта: рекорд и история игр"""
    try:
        migrate_legacy_question(current_user)
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Legacy migration failed")
        return 'Server Error', 500

    scores = sorted(current_user.scores, key=lambda s: s.created_at, reverse=True)
    return render_template('account/index.html', user=current_user, scores=scores)


@bp.route('/questions')
@login_required
def questions():
    """Список своих вопросов и форма добавления"""
    try:
        migrate_legacy_question(current_user)
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Legacy migration failed")
        return 'Server Error', 500

    return render_template('account/questions.html', user=current_user)


def _create_from_request(error_message):
    try:
        image1 = read_upload(request.files.get('image1'))
        image2 = read_upload(request.files.get('image2'))
        create_question(current_user, image1, image2, request.form.get('answer'))
    except ValidationFailure as e:
        flash(e.message)
        return redirect(url_for('account.questions'))
    except Exception:
        db.session.rollback()
        current_app.logger.exception(error_message)
        return error_message, 500

    flash(_('Вопрос добавлен'))
    return redirect(url_for('account.index'))


@bp.route('/account/questions', methods=['POST'])
@login_required
def create():
    """Создание вопроса (image1, image2, answer)"""
    return _create_from_request('Error creating question')


@bp.route('/account/upload-images', methods=['POST'])
@login_required
def upload_images():
    """Устаревший маршрут загрузки изображений, создаёт вопрос"""
    return _create_from_request('Error uploading images')


@bp.route('/account/questions/<qid>', methods=['POST'])
@login_required
def update(qid):
    """Частичное обновление вопроса: изображения и ответ необязательны"""
    try:
        image1 = read_upload(request.files.get('image1'))
        image2 = read_upload(request.files.get('image2'))
        update_question(current_user, qid, image1, image2, request.form.get('answer'))
    except NotFound as e:
        return e.message, 404
    except ValidationFailure as e:
        flash(e.message)
        return redirect(url_for('account.edit', qid=qid))
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Error updating question")
        return 'Error updating question', 500

    flash(_('Вопрос обновлён'))
    return redirect(url_for('account.index'))


@bp.route('/account/questions/<qid>/delete', methods=['POST'])
@login_required
def delete(qid):
    """Удаление вопроса"""
    try:
        delete_question(current_user, qid)
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Error deleting question")
        return 'Error deleting question', 500

    return redirect(url_for('account.index'))


@bp.route('/account/questions/<qid>/edit')
@login_required
def edit(qid):
    """Страница редактирования вопроса"""
    question = Question.query.filter_by(id=qid, owner_id=current_user.id).first()
    if question is None:
        return 'Question not found', 404

    return render_template('account/edit_question.html', user=current_user, question=question)
