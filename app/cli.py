# app/cli.py
"""
CLI-команды приложения: тестовые данные и консольный клиент игры
"""
import os
import click
from flask import current_app
from app import db


# Картинка 1x1 PNG для тестовых вопросов
PIXEL_PNG = bytes([
    0x89, 0x50, 0x4E, 0x47, 0x0D, 0x0A, 0x1A, 0x0A, 0x00, 0x00, 0x00, 0x0D,
    0x49, 0x48, 0x44, 0x52, 0x00, 0x00, 0x00, 0x01, 0x00, 0x00, 0x00, 0x01,
    0x08, 0x02, 0x00, 0x00, 0x00, 0x90, 0x77, 0x53, 0xDE, 0x00, 0x00, 0x00,
    0x0C, 0x49, 0x44, 0x41, 0x54, 0x08, 0xD7, 0x63, 0xF8, 0xCF, 0xC0, 0x00,
    0x00, 0x03, 0x01, 0x01, 0x00, 0x18, 0xDD, 0x8D, 0xB4, 0x00, 0x00, 0x00,
    0x00, 0x49, 0x45, 0x4E, 0x44, 0xAE, 0x42, 0x60, 0x82
])

TEST_ANSWERS = ['cat', 'dog', 'tree', 'house', 'car', 'flower', 'mountain', 'river', 'book', 'computer',
                'phone', 'chair', 'table', 'window', 'door', 'bicycle', 'airplane', 'ship', 'train', 'guitar']
TEST_PASSWORD = 'TestPassword123!'


def seed_test_data(users=3, questions_per_user=10):
    """
    Создаёт тестовых пользователей testuserN с вопросами

    Returns:
        int: Количество созданных пользователей (0, если данные уже есть)
    """
    from app.models.user import User
    from app.models.question import Question

    if User.query.filter(User.username.like('testuser%')).first():
        current_app.logger.info('Test data already exists. Skipping...')
        return 0

    for user_num in range(1, users + 1):
        user = User(username=f'testuser{user_num}', email=f'testuser{user_num}@test.com')
        user.set_password(TEST_PASSWORD)
        for q_num in range(questions_per_user):
            user.questions.append(Question(
                image1_data=PIXEL_PNG, image1_content_type='image/png',
                image2_data=PIXEL_PNG, image2_content_type='image/png',
                answer=TEST_ANSWERS[q_num % len(TEST_ANSWERS)],
            ))
        db.session.add(user)

    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception('Error seeding data')
        raise
    return users


def register_commands(app):
    """Регистрация CLI-команд во Flask"""

    @app.cli.command('seed-data')
    @click.option('--users', default=3, show_default=True, help='Количество тестовых пользователей')
    @click.option('--questions', default=10, show_default=True, help='Вопросов на пользователя')
    def seed_data(users, questions):
        """Заполнить БД тестовыми пользователями и вопросами"""
        created = seed_test_data(users, questions)
        if not created:
            click.echo('Test data already exists. Skipping...')
            return
        click.echo(f'Created {created} users x {questions} questions')
        for user_num in range(1, created + 1):
            click.echo(f'- testuser{user_num}@test.com / {TEST_PASSWORD}')

    @app.cli.command('play')
    @click.option('--url', default='http://127.0.0.1:5000', show_default=True, help='Адрес сервера')
    @click.option('--email', prompt=True)
    @click.option('--password', prompt=True, hide_input=True)
    @click.option('--save-images', type=click.Path(file_okay=False), default=None,
                  help='Каталог для сохранения изображений вопросов')
    def play(url, email, password, save_images):
        """Сыграть в консоли против запущенного сервера"""
        from app.game import GameApiClient, QuizController, QuizState, GameApiError

        client = GameApiClient(url, timeout=app.config.get('QUIZ_HTTP_TIMEOUT', 10.0))
        try:
            client.login(email, password)
        except GameApiError as e:
            raise click.ClickException(str(e))

        controller = QuizController(
            client,
            session_size=app.config.get('QUIZ_SESSION_SIZE', 10),
            points_per_correct=app.config.get('POINTS_PER_CORRECT', 10),
        )
        if not controller.start():
            raise click.ClickException(controller.session.message)

        shown_index = None
        while controller.state is not QuizState.FINISHED:
            session = controller.session
            if session.state is QuizState.PRESENTING and session.index != shown_index:
                shown_index = session.index
                click.echo(f'\nQuestion {session.index + 1}/{session.total} '
                           f'(by {session.current.username})')
                if save_images and session.images:
                    _save_images(save_images, session.index + 1, session.images)

            raw = click.prompt('Answer' if session.state is QuizState.PRESENTING
                               else f'[Enter] {session.advance_label}',
                               default='', show_default=False)
            controller.handle_enter(raw)
            if controller.session.message and controller.state is not QuizState.FINISHED:
                click.echo(controller.session.message)

        click.echo(controller.session.message)
        if controller.session.high_score is not None:
            click.echo(f'High score: {controller.session.high_score}')


def _save_images(directory, number, images):
    os.makedirs(directory, exist_ok=True)
    for slot, data in enumerate(images, start=1):
        path = os.path.join(directory, f'q{number}_{slot}.img')
        with open(path, 'wb') as f:
            f.write(data)
    click.echo(f'Images saved to {directory}')
