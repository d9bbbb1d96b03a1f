import os
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()


class Config:
    """Базовый класс конфигурации приложения"""

    # Название приложения
    APP_NAME = 'PictureQuiz'

    # Настройки безопасности
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'your-secret-key-here'

    # Настройки базы данных
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///picture_quiz.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Настройки загрузки файлов (изображения хранятся в БД)
    MAX_CONTENT_LENGTH = 5 * 1024 * 1024  # 5MB max file size
    ALLOWED_IMAGE_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}

    # Указываем путь к каталогу с переводами
    BABEL_TRANSLATION_DIRECTORIES = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'translations')
    BABEL_DEFAULT_LOCALE = 'ru'  # Язык по умолчанию
    BABEL_DEFAULT_TIMEZONE = 'UTC'
    # Поддерживаемые языки
    LANGUAGES = {
        'ru': 'Русский',
        'en': 'English'
    }

    # Настройки приложения
    PERMANENT_SESSION_LIFETIME = timedelta(days=7)
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Параметры игры
    QUIZ_SESSION_SIZE = 10
    POINTS_PER_CORRECT = 10
    IMAGE_CACHE_MAX_AGE = 7 * 24 * 60 * 60  # 7 дней
    LEADERBOARD_SIZE = 5
    QUIZ_HTTP_TIMEOUT = float(os.environ.get('QUIZ_HTTP_TIMEOUT', 10))

    # OAuth (OpenID Connect), отключён без client id/secret
    OAUTH_PROVIDER_NAME = os.environ.get('OAUTH_PROVIDER_NAME', 'google')
    OAUTH_CLIENT_ID = os.environ.get('OAUTH_CLIENT_ID')
    OAUTH_CLIENT_SECRET = os.environ.get('OAUTH_CLIENT_SECRET')
    OAUTH_SERVER_METADATA_URL = os.environ.get(
        'OAUTH_SERVER_METADATA_URL',
        'https://accounts.google.com/.well-known/openid-configuration'
    )


class TestConfig(Config):
    """Конфигурация для тестов"""

    TESTING = True
    SECRET_KEY = 'test-secret-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    BABEL_DEFAULT_LOCALE = 'en'
    OAUTH_CLIENT_ID = None
    OAUTH_CLIENT_SECRET = None
