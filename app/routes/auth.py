# app/routes/auth.py
"""
Маршруты аутентификации приложения PictureQuiz
Содержит логику входа, регистрации, выхода и входа через OAuth
"""
from flask import Blueprint, render_template, request, redirect, url_for, flash, session, current_app
from flask_login import login_user, logout_user, login_required, current_user
from app import db, oauth
from app.errors import ValidationFailure, UpstreamFailure
from app.services.accounts import register_account, authenticate, get_or_create_oauth_account
from flask_babel import _
from urllib.parse import urlparse, urljoin

# Создание Blueprint для маршрутов аутентификации
bp = Blueprint('auth', __name__)


@bp.route('/login', methods=['GET', 'POST'])
def login():
    """Маршрут для входа в систему"""
    if current_user.is_authenticated:
        return redirect(url_for('main.index'))

    if request.method == 'POST':
        email = request.form.get('email', '')
        password = request.form.get('password', '')

        user = authenticate(email, password)
        if user:
            login_user(user)

            # Восстанавливаем язык из профиля
            if user.language:
                session['language'] = user.language

            next_page = url_for('main.index')
            # Безопасный редирект с next
            next_arg = request.args.get('next')
            if next_arg and is_safe_url(next_arg):
                next_page = next_arg

            return redirect(next_page)
        else:
            flash(_('Неверные учетные данные'))

    return render_template('auth/login.html', oauth_enabled=_oauth_client() is not None)

@bp.route('/register', methods=['GET', 'POST'])
def register():
    """Маршрут для регистрации нового пользователя"""
    if current_user.is_authenticated:
        return redirect(url_for('main.index'))

    if request.method == 'POST':
        username = request.form.get('username', '')
        email = request.form.get('email', '')
        password = request.form.get('password', '')

        try:
            register_account(username, email, password)
            flash(_('Регистрация прошла успешно. Вы можете войти.'))
            return redirect(url_for('auth.login'))
        except ValidationFailure as e:
            flash(e.message)
            return render_template('auth/register.html'), 400
        except Exception:
            db.session.rollback()
            current_app.logger.exception("Error during registration")
            flash(_('Ошибка при регистрации. Попробуйте позже.'))

    return render_template('auth/register.html')

@bp.route('/logout')
@login_required
def logout():
    """Выход из системы"""
    logout_user()
    session.clear()
    flash(_('Вы вышли из системы'))
    return redirect(url_for('auth.login'))


# === OAuth ===

def _oauth_client():
    """Зарегистрированный OAuth-клиент или None, если OAuth не настроен"""
    if not (current_app.config.get('OAUTH_CLIENT_ID') and current_app.config.get('OAUTH_CLIENT_SECRET')):
        return None
    return oauth.create_client(current_app.config.get('OAUTH_PROVIDER_NAME', 'google'))


@bp.route('/oauth/login')
def oauth_login():
    """Перенаправление к провайдеру за кодом авторизации"""
    client = _oauth_client()
    if client is None:
        flash(_('Вход через внешний сервис не настроен'))
        return redirect(url_for('auth.login'))

    redirect_uri = url_for('auth.oauth_callback', _external=True)
    return client.authorize_redirect(redirect_uri)


@bp.route('/oauth/callback')
def oauth_callback():
    """Обмен кода на токен, получение профиля и вход"""
    client = _oauth_client()
    if client is None:
        flash(_('Вход через внешний сервис не настроен'))
        return redirect(url_for('auth.login'))

    provider = current_app.config.get('OAUTH_PROVIDER_NAME', 'google')
    try:
        try:
            token = client.authorize_access_token()
            userinfo = token.get('userinfo') or client.userinfo(token=token)
        except Exception as e:
            raise UpstreamFailure(f'OAuth exchange failed: {e}') from e

        user = get_or_create_oauth_account(provider, userinfo)
    except UpstreamFailure as e:
        db.session.rollback()
        current_app.logger.warning(f"OAuth login failed: {e.message}")
        return render_template('auth/login.html', oauth_enabled=True,
                               error=_('Не удалось войти через внешний сервис')), e.status_code

    login_user(user)
    if user.language:
        session['language'] = user.language
    return redirect(url_for('main.index'))


@bp.route('/change_language/<language>')
def change_language(language):
    """Изменение языка интерфейса (доступно и без авторизации)"""
    supported_langs = current_app.config.get('LANGUAGES', {})
    if language in supported_langs:
        session['language'] = language

        if current_user.is_authenticated:
            current_user.language = language
            try:
                db.session.commit()
            except Exception:
                db.session.rollback()
                current_app.logger.exception("Error saving language")

        flash(_('Язык интерфейса изменён'))
    else:
        flash(_('Неподдерживаемый язык'))

    # Безопасный редирект: только локальные пути
    referrer = request.referrer
    if referrer and is_safe_url(referrer):
        # Избегаем зацикливания на /change_language/...
        parsed = urlparse(referrer)
        if not parsed.path.startswith('/auth/change_language/'):
            return redirect(referrer)

    return redirect(url_for('main.index'))

# === Вспомогательные функции ===

def is_safe_url(target):
    """Проверка безопасности URL для редиректа"""
    if not target:
        return False

    host_url = request.host_url.rstrip('/')
    target_url = urljoin(host_url + '/', target).rstrip('/')

    ref = urlparse(host_url)
    test = urlparse(target_url)

    return (
        test.scheme in ('http', 'https') and
        ref.netloc == test.netloc and
        test.path.startswith('/')
    )
