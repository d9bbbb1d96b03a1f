# app/services/accounts.py
"""
Регистрация, проверка учётных данных и аккаунты OAuth
"""
import re
from flask import current_app
from flask_login import current_user
from app import db
from app.errors import ValidationFailure, UpstreamFailure
from app.models.user import User


def current_account_id():
    """ID авторизованного пользователя или None"""
    if current_user and current_user.is_authenticated:
        return current_user.id
    return None


def register_account(username, email, password):
    """
    Создаёт новый аккаунт

    Args:
        username (str): Имя пользователя
        email (str): Email (логин)
        password (str): Пароль в открытом виде

    Returns:
        User: Созданный пользователь

    Raises:
        ValidationFailure: Пустые поля, неверный email, занятый email или имя
    """
    username = (username or '').strip()
    email = (email or '').strip().lower()

    if not username or not email or not password:
        raise ValidationFailure('All fields are required')

    if not User.is_valid_email(email):
        raise ValidationFailure('Invalid email format')

    if User.query.filter_by(email=email).first():
        raise ValidationFailure('Email is already registered')

    if User.query.filter_by(username=username).first():
        raise ValidationFailure('Username is already taken')

    user = User(username=username, email=email)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    current_app.logger.info(f"Account created: {user.username} ({user.email})")
    return user


def authenticate(email, password):
    """Возвращает пользователя при верных учётных данных, иначе None"""
    email = (email or '').strip().lower()
    if not email or not password:
        return None

    user = User.query.filter_by(email=email).first()
    if user and user.check_password(password):
        return user
    return None


def _unique_username(base):
    base = re.sub(r'[^\w.-]+', '', base or '') or 'player'
    base = base[:70]
    candidate = base
    suffix = 1
    while User.query.filter_by(username=candidate).first():
        suffix += 1
        candidate = f'{base}{suffix}'
    return candidate


def get_or_create_oauth_account(provider, userinfo):
    """
    Находит или создаёт аккаунт по профилю OAuth-провайдера

    Порядок: по идентификатору у провайдера, затем по email (привязка),
    иначе новый аккаунт без пароля.

    Args:
        provider (str): Имя провайдера
        userinfo (dict): Профиль OpenID Connect (sub, email, name)

    Returns:
        User: Пользователь

    Raises:
        UpstreamFailure: В профиле нет sub или email
    """
    subject = userinfo.get('sub') if userinfo else None
    email = (userinfo.get('email') or '').strip().lower() if userinfo else ''
    if not subject or not email:
        raise UpstreamFailure('Identity provider returned an incomplete profile')

    user = User.query.filter_by(oauth_provider=provider, oauth_subject=str(subject)).first()
    if user:
        return user

    user = User.query.filter_by(email=email).first()
    if user:
        user.oauth_provider = provider
        user.oauth_subject = str(subject)
        db.session.commit()
        current_app.logger.info(f"OAuth identity linked to existing account {user.id}")
        return user

    name = userinfo.get('name') or userinfo.get('given_name') or email.split('@')[0]
    user = User(
        username=_unique_username(name.replace(' ', '')),
        email=email,
        oauth_provider=provider,
        oauth_subject=str(subject),
    )
    db.session.add(user)
    db.session.commit()
    current_app.logger.info(f"Account created via OAuth: {user.username} ({user.email})")
    return user
