"""
Фикстуры pytest: приложение на временной SQLite, клиент и тестовые данные
"""
import pytest

from app import create_app, db
from app.models.user import User
from app.models.question import Question
from config import TestConfig


PNG = b'\x89PNG\r\n\x1a\n' + b'\x00\x00\x00\rIHDR' + bytes(range(32))
JPEG = b'\xff\xd8\xff\xe0' + bytes(range(64, 96))


@pytest.fixture
def app(tmp_path):
    """Приложение с отдельной БД на каждый тест"""
    class _Config(TestConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'quiz.db'}"

    app = create_app(_Config)
    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def app_ctx(app):
    with app.app_context():
        yield


@pytest.fixture
def make_user(app):
    """Создаёт пользователя и возвращает его ID"""
    def _make(username, email=None, password='secret', high_score=0, **fields):
        with app.app_context():
            user = User(
                username=username,
                email=email or f'{username}@example.com',
                high_score=high_score,
                **fields,
            )
            user.set_password(password)
            db.session.add(user)
            db.session.commit()
            return user.id
    return _make


@pytest.fixture
def make_question(app):
    """Создаёт вопрос и возвращает его ID"""
    def _make(owner_id, answer='cat', image1=PNG, image2=JPEG):
        with app.app_context():
            question = Question(owner_id=owner_id, answer=answer)
            if image1 is not None:
                question.set_image(1, image1, 'image/png')
            if image2 is not None:
                question.set_image(2, image2, 'image/jpeg')
            db.session.add(question)
            db.session.commit()
            return question.id
    return _make


@pytest.fixture
def login(client):
    """Вход через форму; пароль по умолчанию совпадает с make_user"""
    def _login(email, password='secret'):
        return client.post('/auth/login', data={'email': email, 'password': password})
    return _login
