"""
Helpers for tests: stand-ins for ``requests`` responses and a router that
answers API calls by ``(METHOD, path)``.

    api = FakeApi({("GET", "/campaigns"): (200, {"data": {...}})})
    with patch("apps.core.api.requests.request", side_effect=api):
        ...
    api.calls  # every request that went out
"""
import json as jsonlib
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple
from unittest.mock import patch
from urllib.parse import urlparse

import requests
from django.conf import settings

from .api import TOKEN_SESSION_KEY

MEMBER = {
    "id": 7,
    "first_name": "Siti",
    "last_name": "Aminah",
    "username": "siti",
    "email": "siti@example.com",
    "phone": "+6281234567890",
    "isAdmin": False,
}

ADMIN = {
    "id": 1,
    "first_name": "Admin",
    "last_name": "SAS",
    "username": "admin",
    "email": "admin@amalsas.id",
    "isAdmin": True,
}


class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None):
        self.status_code = status_code
        self._body = body
        self.content = b"" if body is None else jsonlib.dumps(body).encode("utf-8")

    def json(self):
        if self._body is None:
            raise ValueError("No JSON body")
        return self._body


@dataclass
class RecordedCall:
    method: str
    path: str
    kwargs: Dict[str, Any]

    @property
    def headers(self) -> Dict[str, str]:
        return self.kwargs.get("headers") or {}


@dataclass
class FakeApi:
    routes: Dict[Tuple[str, str], Any] = field(default_factory=dict)
    calls: List[RecordedCall] = field(default_factory=list)

    def __call__(self, method, url, **kwargs):
        base_path = urlparse(settings.AMALSAS_API_BASE_URL).path.rstrip("/")
        path = urlparse(url).path
        if path.startswith(base_path):
            path = path[len(base_path):]
        self.calls.append(RecordedCall(method, path, kwargs))

        answer = self.routes.get((method, path))
        if answer is None:
            return FakeResponse(404, {"code": 404, "message": "Not found"})
        if isinstance(answer, Exception):
            raise answer
        status, body = answer
        return FakeResponse(status, body)

    def called(self, method: str, path: str) -> List[RecordedCall]:
        return [c for c in self.calls if c.method == method and c.path == path]


def unreachable(method, url, **kwargs):
    raise requests.ConnectionError("connection refused")


def ok(data: Any, status: int = 200):
    return status, {"code": status, "data": data}


def fail(message: str, status: int = 400):
    return status, {"code": status, "message": message}


class ApiTestMixin:
    """``TestCase`` mixin: route API calls to a ``FakeApi`` and fake a signed-in session."""

    def mock_api(self, routes=None) -> FakeApi:
        api = FakeApi(dict(routes or {}))
        patcher = patch("apps.core.api.requests.request", side_effect=api)
        patcher.start()
        self.addCleanup(patcher.stop)
        return api

    def sign_in_as(self, user: dict, api: FakeApi, token: str = "test-token") -> None:
        session = self.client.session
        session[TOKEN_SESSION_KEY] = token
        session.save()
        api.routes[("GET", "/check-auth")] = ok(user)
