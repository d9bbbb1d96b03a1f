# app/errors.py
"""
Исключения приложения PictureQuiz
Каждое исключение знает свой HTTP-код; маршруты переводят их в ответы
"""


class QuizError(Exception):
    """Базовая ошибка приложения"""

    status_code = 500

    def __init__(self, message=None):
        self.message = message or self.__class__.__name__
        super().__init__(self.message)


class NotAuthenticated(QuizError):
    """Нет сессии или она недействительна"""

    status_code = 401


class NotFound(QuizError):
    """Отсутствует пользователь, вопрос, изображение или слот"""

    status_code = 404


class ValidationFailure(QuizError):
    """Некорректные данные формы; состояние не меняется"""

    status_code = 400


class UpstreamFailure(QuizError):
    """Ошибка обмена кода OAuth или получения профиля"""

    status_code = 502
