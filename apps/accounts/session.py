"""
Session state of the visitor.

The state is the pair ``(is_login, user)``. It only changes through
``reduce``, a pure function over four actions; ``dispatch`` applies it to a
request and persists the single piece of client state we keep: the bearer
token, under the session key ``"token"``.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from apps.core.api import TOKEN_SESSION_KEY, ApiClient, ApiError

from .records import User

logger = logging.getLogger(__name__)

USER_SUCCESS = "USER_SUCCESS"
LOGIN_SUCCESS = "LOGIN_SUCCESS"
AUTH_ERROR = "AUTH_ERROR"
LOGOUT = "LOGOUT"


@dataclass(frozen=True)
class AuthState:
    is_login: bool = False
    user: Optional[User] = None

    @property
    def is_admin(self) -> bool:
        return self.is_login and self.user is not None and self.user.is_admin

    @property
    def token(self) -> str:
        return self.user.token if self.user else ""


LOGGED_OUT = AuthState()


def reduce(state: AuthState, action: str, payload: Optional[dict] = None) -> AuthState:
    if action in (USER_SUCCESS, LOGIN_SUCCESS):
        return AuthState(is_login=True, user=User.from_api(payload))
    if action in (AUTH_ERROR, LOGOUT):
        return LOGGED_OUT
    return state


def dispatch(request, action: str, payload: Optional[dict] = None) -> AuthState:
    current = getattr(request, "auth", LOGGED_OUT)
    state = reduce(current, action, payload)

    if action in (USER_SUCCESS, LOGIN_SUCCESS):
        token = state.token or request.session.get(TOKEN_SESSION_KEY)
        if action == LOGIN_SUCCESS:
            # new session key on every sign in
            request.session.cycle_key()
        if token:
            request.session[TOKEN_SESSION_KEY] = token
            if not state.user.token:
                state.user.token = token
    elif action == LOGOUT:
        request.session.flush()
    elif action == AUTH_ERROR:
        request.session.pop(TOKEN_SESSION_KEY, None)

    request.auth = state
    return state


def check_auth(request) -> AuthState:
    """Validate the stored token against ``/check-auth``. A failure is terminal."""
    token = request.session.get(TOKEN_SESSION_KEY)
    if not token:
        return dispatch(request, AUTH_ERROR)

    client = ApiClient(token=token)
    try:
        data = client.get("/check-auth") or {}
    except ApiError as exc:
        logger.info("Stored session rejected: %s", exc)
        return dispatch(request, AUTH_ERROR)

    return dispatch(request, USER_SUCCESS, {**data, "token": token})
