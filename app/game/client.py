"""
HTTP-клиент API игры на requests.

Вход по форме /auth/login, затем каталог вопросов, изображения и
отправка результата в одной cookie-сессии.
"""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urljoin, urlparse

import requests

from .session import CatalogEntry, ScoreReport


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class GameApiError(Exception):
    """Ошибка обращения к API игры."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class NotLoggedIn(GameApiError):
    """Сервер перенаправил на страницу входа."""


class GameApiClient:
    """
    Клиент API игры.

    Сессия requests хранит cookie авторизации между вызовами.
    """

    def __init__(self, base_url: str, session: Optional[requests.Session] = None,
                 timeout: float = DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip("/") + "/"
        self.session = session or requests.Session()
        self.timeout = timeout

    def _url(self, path: str) -> str:
        return urljoin(self.base_url, path.lstrip("/"))

    def _send(self, method: str, path: str, **kwargs) -> requests.Response:
        kwargs.setdefault("allow_redirects", False)
        kwargs.setdefault("timeout", self.timeout)
        try:
            response = self.session.request(method, self._url(path), **kwargs)
        except requests.RequestException as e:
            raise GameApiError(f"Request to {path} failed: {e}") from e
        return response

    def _check(self, response: requests.Response) -> requests.Response:
        # login_required отвечает редиректом на /auth/login
        if response.is_redirect or urlparse(response.url).path.startswith("/auth/login"):
            raise NotLoggedIn("Not authenticated", response.status_code)
        if response.status_code >= 400:
            raise GameApiError(
                response.text.strip() or f"HTTP {response.status_code}",
                response.status_code,
            )
        return response

    @staticmethod
    def _json(response: requests.Response) -> dict:
        try:
            data = response.json()
        except ValueError as e:
            raise GameApiError(f"Invalid JSON response: {e}", response.status_code) from e
        return data if isinstance(data, dict) else {}

    def login(self, email: str, password: str) -> None:
        response = self._send("POST", "/auth/login", data={"email": email, "password": password})
        location = response.headers.get("Location", "")
        if response.status_code not in (301, 302, 303) or "/auth/login" in location:
            raise NotLoggedIn("Invalid credentials", response.status_code)
        logger.info("Logged in as %s", email)

    def fetch_questions(self) -> list[CatalogEntry]:
        response = self._check(self._send("GET", "/api/game-data"))
        data = self._json(response)
        return [CatalogEntry.from_dict(item) for item in data.get("questions") or []]

    def fetch_image(self, user_id: str, question_id: str, slot: int) -> bytes:
        response = self._check(self._send("GET", f"/api/questions/{user_id}/{question_id}/{slot}"))
        return response.content

    def submit_score(self, report: ScoreReport) -> Optional[int]:
        response = self._check(self._send("POST", "/api/game/submit", json=report.to_payload()))
        data = self._json(response)
        return data.get("highScore")
