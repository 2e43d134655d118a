"""
Thin client over the AmalSAS REST API.

Every response of the API is wrapped in an envelope::

    {"code": 200, "data": {...}}            # success
    {"code": 400, "message": "..."}         # failure

The client unwraps ``data`` on success and turns any failure (HTTP status,
transport error, non-JSON body) into an ``ApiError`` carrying the server's
message so views can show it as is.
"""
import logging
from typing import Any, Optional

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

TOKEN_SESSION_KEY = "token"

PLACEHOLDER_IMAGE_URL = "https://via.placeholder.com/600x400?text=No+Image"


class ApiError(Exception):
    """A failed call. ``message`` is the server's own message when it sent one."""

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message or "API request failed")
        self.message = message
        self.status_code = status_code

    def message_or(self, default: str) -> str:
        return self.message or default

    def __str__(self):
        text = self.message or "API request failed"
        if self.status_code:
            return f"{text} (HTTP {self.status_code})"
        return text


class ApiClient:
    def __init__(self, base_url: Optional[str] = None, token: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = (base_url or settings.AMALSAS_API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.AMALSAS_API_TIMEOUT
        self.headers: dict[str, str] = {"Accept": "application/json"}
        self.set_auth_token(token)

    def set_auth_token(self, token: Optional[str]) -> None:
        if token:
            self.headers["Authorization"] = f"Bearer {token}"
        else:
            self.headers.pop("Authorization", None)

    @property
    def token(self) -> Optional[str]:
        value = self.headers.get("Authorization", "")
        return value[len("Bearer "):] if value.startswith("Bearer ") else None

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(self, method: str, path: str, *, json=None, data=None, files=None, params=None) -> Any:
        kwargs: dict[str, Any] = {"headers": dict(self.headers), "timeout": self.timeout}
        if params:
            kwargs["params"] = params
        if files:
            # multipart: requests sets the boundary itself
            kwargs["data"] = data or {}
            kwargs["files"] = files
        elif json is not None:
            kwargs["json"] = json
        elif data is not None:
            kwargs["data"] = data

        try:
            response = requests.request(method, self.url(path), **kwargs)
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise ApiError() from exc

        body = None
        if response.content:
            try:
                body = response.json()
            except ValueError:
                body = None

        if not 200 <= response.status_code < 300:
            message = body.get("message") if isinstance(body, dict) else None
            logger.warning("%s %s -> %s %s", method, path, response.status_code, message or "")
            raise ApiError(message, response.status_code)

        if body is None and response.content:
            raise ApiError(None, response.status_code)

        if isinstance(body, dict) and "data" in body:
            return body["data"]
        return body

    def get(self, path: str, **kwargs) -> Any:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs) -> Any:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs) -> Any:
        return self.request("PUT", path, **kwargs)

    def patch(self, path: str, **kwargs) -> Any:
        return self.request("PATCH", path, **kwargs)

    def delete(self, path: str, **kwargs) -> Any:
        return self.request("DELETE", path, **kwargs)


def get_api_client(request) -> ApiClient:
    """Client carrying the bearer token stored in the visitor's session."""
    return ApiClient(token=request.session.get(TOKEN_SESSION_KEY))


def get_image_url(photo: Optional[str]) -> str:
    if not photo:
        return PLACEHOLDER_IMAGE_URL
    if photo.startswith("http"):
        return photo
    return f"{settings.AMALSAS_IMAGE_BASE_URL.rstrip('/')}/uploads/{photo.lstrip('/')}"
