"""
Основные маршруты приложения PictureQuiz
Содержит главную страницу с таблицей рекордов и страницу игры
"""
from flask import Blueprint, render_template, current_app
from flask_login import login_required, current_user
from app.services.scores import leaderboard

# Создание Blueprint для основных маршрутов
bp = Blueprint('main', __name__)


@bp.route('/')
def index():
    """
    Главная страница: лучшие игроки по рекорду
    """
    try:
        top_users = leaderboard(current_app.config.get('LEADERBOARD_SIZE', 5))
    except Exception:
        current_app.logger.exception("Error loading leaderboard")
        top_users = []

    return render_template('main/index.html', user=current_user, top_users=top_users)


@bp.route('/game')
@login_required
def game():
    """
    Страница игры; сам ход игры ведёт static/js/game.js через API
    """
    return render_template(
        'main/game.html',
        user=current_user,
        session_size=current_app.config.get('QUIZ_SESSION_SIZE', 10),
        points_per_correct=current_app.config.get('POINTS_PER_CORRECT', 10),
    )
