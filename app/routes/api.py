# app/routes/api.py
"""
JSON API игры: каталог вопросов, изображения и отправка результата
"""
from flask import Blueprint, request, jsonify, current_app, make_response
from flask_login import login_required
from app import db
from app.errors import NotFound
from app.services.accounts import current_account_id
from app.services.catalog import list_questions, get_image, get_legacy_image, image_etag
from app.services.scores import submit_score

bp = Blueprint('api', __name__)


def _image_response(data, content_type, cacheable=True):
    response = make_response(data)
    response.headers['Content-Type'] = content_type
    response.headers['Content-Length'] = str(len(data))
    if cacheable:
        max_age = current_app.config.get('IMAGE_CACHE_MAX_AGE', 604800)
        response.headers['Cache-Control'] = f'public, max-age={max_age}'
        response.set_etag(image_etag(data))
        response.make_conditional(request)
    return response


@bp.route('/game-data')
@login_required
def game_data():
    """Плоский список вопросов других пользователей"""
    try:
        questions = list_questions(current_account_id())
    except Exception:
        current_app.logger.exception("Error building game data")
        return jsonify({'error': 'Server Error'}), 500
    return jsonify({'questions': questions})


@bp.route('/questions/<user_id>/<question_id>/<int:image_num>')
def question_image(user_id, question_id, image_num):
    """Изображение вопроса (слот 1 или 2) с кэшированием на 7 дней"""
    if image_num not in (1, 2):
        return 'Image not found', 404
    try:
        data, content_type = get_image(user_id, question_id, image_num)
    except NotFound as e:
        return e.message, 404
    except Exception:
        current_app.logger.exception(f"Error serving image {user_id}/{question_id}/{image_num}")
        return 'Server Error', 500
    return _image_response(data, content_type)


@bp.route('/images/<user_id>/<int:image_num>')
def legacy_image(user_id, image_num):
    """Устаревший маршрут: изображение из полей аккаунта"""
    if image_num not in (1, 2):
        return 'Image not found', 404
    try:
        data, content_type = get_legacy_image(user_id, image_num)
    except NotFound as e:
        return e.message, 404
    except Exception:
        current_app.logger.exception(f"Error serving legacy image {user_id}/{image_num}")
        return 'Server Error', 500
    return _image_response(data, content_type, cacheable=False)


@bp.route('/game/submit', methods=['POST'])
@login_required
def submit_game():
    """Сохранение результата игры"""
    payload = request.get_json(silent=True)
    if payload is None:
        payload = request.form.to_dict()
    elif not isinstance(payload, dict):
        payload = {}

    try:
        high_score = submit_score(current_account_id(), payload)
    except NotFound as e:
        return jsonify({'error': e.message}), 404
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Error submitting score")
        return jsonify({'error': 'Server Error'}), 500

    return jsonify({'ok': True, 'highScore': high_score})
