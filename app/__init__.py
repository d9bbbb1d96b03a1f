"""
Инициализация Flask-приложения PictureQuiz
Создание экземпляра приложения, инициализация расширений
"""
from flask import Flask, session, request, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_babel import _, Babel
from authlib.integrations.flask_client import OAuth
from config import Config
import logging


# Инициализация расширений Flask (до create_app)
db = SQLAlchemy()
login_manager = LoginManager()
oauth = OAuth()


def create_app(config_class=Config):
    """
    Создание и настройка экземпляра Flask-приложения

    Args:
        config_class: Класс конфигурации приложения

    Returns:
        app: Настроенный экземпляр Flask-приложения
    """
    # Создание экземпляра приложения
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO))

    # Инициализация расширений
    db.init_app(app)
    # === Включение внешних ключей для SQLite ===
    if 'sqlite' in app.config.get('SQLALCHEMY_DATABASE_URI'):
        from sqlalchemy import event
        from sqlalchemy.engine import Engine

        @event.listens_for(Engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    login_manager.init_app(app)
    login_manager.login_view = 'auth.login'
    login_manager.login_message = _('Пожалуйста, войдите для доступа к этой странице.')

    # === OAuth: провайдер регистрируется только при наличии ключей ===
    oauth.init_app(app)
    if app.config.get('OAUTH_CLIENT_ID') and app.config.get('OAUTH_CLIENT_SECRET'):
        oauth.register(
            name=app.config['OAUTH_PROVIDER_NAME'],
            client_id=app.config['OAUTH_CLIENT_ID'],
            client_secret=app.config['OAUTH_CLIENT_SECRET'],
            server_metadata_url=app.config['OAUTH_SERVER_METADATA_URL'],
            client_kwargs={'scope': 'openid email profile'},
        )
        app.logger.info(f"OAuth provider registered: {app.config['OAUTH_PROVIDER_NAME']}")

    # === Babel: get_locale ДО инициализации ===
    def get_locale():
        # 1. Сессия
        lang = session.get('language')
        if lang in app.config.get('LANGUAGES', {}):
            return lang

        # 2. Текущий пользователь (если есть и авторизован)
        try:
            from flask_login import current_user
            if hasattr(current_user, 'is_authenticated') and current_user.is_authenticated:
                if current_user.language in app.config.get('LANGUAGES', {}):
                    return current_user.language
        except RuntimeError:
            # Вне контекста запроса (например, при CLI-инициализации)
            pass

        # 3. Дефолт
        return app.config.get('BABEL_DEFAULT_LOCALE', 'ru')

    Babel(app, locale_selector=get_locale)
    app.jinja_env.globals['get_locale'] = get_locale

    # Функция для имени приложения
    def get_app_name():
        return app.config.get('APP_NAME', 'PictureQuiz')

    app.jinja_env.globals['get_app_name'] = get_app_name

    # === Регистрация Blueprints ===
    from app.routes.auth import bp as auth_bp
    app.register_blueprint(auth_bp, url_prefix='/auth')

    from app.routes.main import bp as main_bp
    app.register_blueprint(main_bp)

    from app.routes.api import bp as api_bp
    app.register_blueprint(api_bp, url_prefix='/api')

    from app.routes.account import bp as account_bp
    app.register_blueprint(account_bp)

    # === Обработка ошибок ===
    from app.errors import NotFound

    @app.errorhandler(NotFound)
    def handle_not_found(error):
        return error.message, 404

    @app.errorhandler(413)
    def handle_too_large(error):
        return 'File too large', 413

    @app.errorhandler(500)
    def handle_server_error(error):
        if request.path.startswith('/api/'):
            return jsonify({'error': 'Server Error'}), 500
        return 'Server Error', 500

    # === CLI-команды ===
    from app.cli import register_commands
    register_commands(app)

    # === Инициализация БД ===
    with app.app_context():
        # Импорт моделей (чтобы SQLAlchemy их увидел)
        from app.models.user import User
        from app.models.question import Question
        from app.models.score import Score

        db.create_all()

    return app

# Функция загрузки пользователя для Flask-Login
@login_manager.user_loader
def load_user(user_id):
    from app.models.user import User
    if user_id is None:
        return None
    try:
        return db.session.get(User, int(user_id))
    except (ValueError, TypeError):
        return None
