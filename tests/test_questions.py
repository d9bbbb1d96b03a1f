"""
Tests for question authoring.

Tests:
- Create / partial update / delete via the account routes
- Ownership checks
- One-time migration of legacy account images
- Seed data command
"""

import io

from app import db
from app.models.question import Question
from app.models.user import User
from app.services.questions import migrate_legacy_question

from .conftest import PNG, JPEG


def upload(data, filename):
    return (io.BytesIO(data), filename)


class TestCreateQuestion:

    def test_create_with_two_images(self, client, app, make_user, login):
        user_id = make_user('alice')
        login('alice@example.com')

        response = client.post('/account/questions', data={
            'image1': upload(PNG, 'left.png'),
            'image2': upload(JPEG, 'right.jpg'),
            'answer': 'bridge',
        }, content_type='multipart/form-data')

        assert response.status_code == 302
        assert response.headers['Location'].endswith('/account')
        with app.app_context():
            question = Question.query.filter_by(owner_id=user_id).one()
            assert question.answer == 'bridge'
            assert question.get_image(1) == (PNG, 'image/png')
            assert question.get_image(2) == (JPEG, 'image/jpeg')

    def test_rejects_non_image_file(self, client, app, make_user, login):
        make_user('alice')
        login('alice@example.com')

        response = client.post('/account/questions', data={
            'image1': upload(b'MZ', 'virus.exe'),
            'image2': upload(JPEG, 'right.jpg'),
            'answer': 'nope',
        }, content_type='multipart/form-data')

        assert response.status_code == 302
        assert response.headers['Location'].endswith('/questions')
        with app.app_context():
            assert Question.query.count() == 0

    def test_legacy_upload_endpoint(self, client, app, make_user, login):
        user_id = make_user('alice')
        login('alice@example.com')

        response = client.post('/account/upload-images', data={
            'image1': upload(PNG, 'a.png'),
            'answer': 'lamp',
        }, content_type='multipart/form-data')

        assert response.status_code == 302
        with app.app_context():
            question = Question.query.filter_by(owner_id=user_id).one()
            assert question.answer == 'lamp'
            assert question.image2_data is None

    def test_requires_login(self, client):
        response = client.post('/account/questions', data={'answer': 'x'})

        assert response.status_code == 302
        assert '/auth/login' in response.headers['Location']


class TestUpdateQuestion:

    def test_answer_only_keeps_images(self, client, app, make_user, make_question, login):
        user_id = make_user('alice')
        qid = make_question(user_id, answer='old')
        login('alice@example.com')

        response = client.post(f'/account/questions/{qid}', data={'answer': 'new'},
                               content_type='multipart/form-data')

        assert response.status_code == 302
        with app.app_context():
            question = db.session.get(Question, qid)
            assert question.answer == 'new'
            assert question.image1_data == PNG
            assert question.image2_data == JPEG

    def test_replace_one_image(self, client, app, make_user, make_question, login):
        user_id = make_user('alice')
        qid = make_question(user_id, answer='keep')
        login('alice@example.com')

        client.post(f'/account/questions/{qid}', data={'image2': upload(PNG, 'new.png')},
                    content_type='multipart/form-data')

        with app.app_context():
            question = db.session.get(Question, qid)
            assert question.answer == 'keep'
            assert question.get_image(2) == (PNG, 'image/png')
            assert question.get_image(1) == (PNG, 'image/png')

    def test_unknown_question(self, client, make_user, login):
        make_user('alice')
        login('alice@example.com')

        response = client.post('/account/questions/missing', data={'answer': 'x'})

        assert response.status_code == 404
        assert response.get_data(as_text=True) == 'Question not found'

    def test_cannot_edit_foreign_question(self, client, app, make_user, make_question, login):
        make_user('alice')
        bob = make_user('bob')
        qid = make_question(bob, answer='bobs')
        login('alice@example.com')

        response = client.post(f'/account/questions/{qid}', data={'answer': 'hacked'})

        assert response.status_code == 404
        with app.app_context():
            assert db.session.get(Question, qid).answer == 'bobs'

    def test_edit_page(self, client, make_user, make_question, login):
        user_id = make_user('alice')
        qid = make_question(user_id, answer='lighthouse')
        login('alice@example.com')

        assert 'lighthouse' in client.get(f'/account/questions/{qid}/edit').get_data(as_text=True)
        assert client.get('/account/questions/missing/edit').status_code == 404


class TestDeleteQuestion:

    def test_delete(self, client, app, make_user, make_question, login):
        user_id = make_user('alice')
        qid = make_question(user_id)
        other = make_question(user_id)
        login('alice@example.com')

        response = client.post(f'/account/questions/{qid}/delete')

        assert response.status_code == 302
        with app.app_context():
            assert [q.id for q in Question.query.all()] == [other]

    def test_delete_unknown_is_noop(self, client, app, make_user, make_question, login):
        user_id = make_user('alice')
        make_question(user_id)
        login('alice@example.com')

        response = client.post('/account/questions/missing/delete')

        assert response.status_code == 302
        with app.app_context():
            assert Question.query.count() == 1

    def test_cannot_delete_foreign_question(self, client, app, make_user, make_question, login):
        make_user('alice')
        bob = make_user('bob')
        qid = make_question(bob)
        login('alice@example.com')

        client.post(f'/account/questions/{qid}/delete')

        with app.app_context():
            assert db.session.get(Question, qid) is not None


class TestLegacyMigration:

    def test_migrates_on_account_page(self, client, app, make_user, login):
        user_id = make_user('alice', legacy_image1_data=PNG, legacy_image1_content_type='image/png',
                            legacy_image2_data=JPEG, legacy_image2_content_type='image/jpeg',
                            legacy_answer='owl')
        login('alice@example.com')

        assert client.get('/account').status_code == 200

        with app.app_context():
            user = db.session.get(User, user_id)
            assert not user.has_legacy_images
            assert user.legacy_answer is None
            assert len(user.questions) == 1
            question = user.questions[0]
            assert question.answer == 'owl'
            assert question.get_image(1) == (PNG, 'image/png')
            assert question.get_image(2) == (JPEG, 'image/jpeg')

    def test_migrates_once(self, client, app, make_user, login):
        make_user('alice', legacy_image1_data=PNG, legacy_answer='owl')
        login('alice@example.com')

        client.get('/questions')
        client.get('/account')

        with app.app_context():
            assert Question.query.count() == 1

    def test_skipped_when_questions_exist(self, app, make_user, make_question):
        user_id = make_user('alice', legacy_image1_data=PNG, legacy_answer='owl')
        make_question(user_id, answer='cat')

        with app.app_context():
            user = db.session.get(User, user_id)
            assert migrate_legacy_question(user) is None
            assert user.has_legacy_images
            assert len(user.questions) == 1

    def test_noop_without_legacy_images(self, app, make_user):
        user_id = make_user('alice')

        with app.app_context():
            assert migrate_legacy_question(db.session.get(User, user_id)) is None
            assert Question.query.count() == 0


class TestPages:

    def test_questions_page_lists_own_questions(self, client, make_user, make_question, login):
        alice = make_user('alice')
        bob = make_user('bob')
        make_question(alice, answer='kettle')
        make_question(bob, answer='secret-of-bob')
        login('alice@example.com')

        page = client.get('/questions').get_data(as_text=True)

        assert 'kettle' in page
        assert 'secret-of-bob' not in page

    def test_account_page_shows_history(self, client, make_user, login):
        make_user('alice')
        login('alice@example.com')
        client.post('/api/game/submit', json={'score': 30, 'correct': 3, 'total': 5, 'timeSpentSeconds': 75})

        page = client.get('/account').get_data(as_text=True)

        assert '3/5' in page
        assert '1m 15s' in page

    def test_game_page(self, client, make_user, login):
        make_user('alice')
        login('alice@example.com')

        response = client.get('/game')

        assert response.status_code == 200
        assert 'js/game.js' in response.get_data(as_text=True)

    def test_game_script_resets_session_before_submitting(self, client):
        script = client.get('/static/js/game.js').get_data(as_text=True)
        finish = script[script.index('async function finish()'):]
        finish = finish[:finish.index("el.start.addEventListener")]

        reset = finish.index('session = { ...newSession(), state: STATES.FINISHED }')
        assert reset < finish.index("await fetch('/api/game/submit'")
        assert finish.count('session =') == 1


class TestSeedData:

    def test_seed_command(self, app):
        runner = app.test_cli_runner()

        result = runner.invoke(args=['seed-data'])

        assert result.exit_code == 0
        assert 'testuser1@test.com' in result.output
        with app.app_context():
            assert User.query.count() == 3
            assert Question.query.count() == 30

        again = runner.invoke(args=['seed-data'])
        assert 'already exists' in again.output
        with app.app_context():
            assert User.query.count() == 3
