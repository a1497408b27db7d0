"""Authentication submodule – session state, login, token refresh."""

from unleashed_web.auth.login import LOGIN_FIELDS, login, parse_login_page
from unleashed_web.auth.refresh import (
    DoubleCheckedRefresher,
    SingleFlightRefresher,
    TokenRefresher,
)
from unleashed_web.auth.session import ControllerSession
from unleashed_web.auth.state import Credentials, LoginResult, SessionState

__all__ = [
    "LOGIN_FIELDS",
    "login",
    "parse_login_page",
    "DoubleCheckedRefresher",
    "SingleFlightRefresher",
    "TokenRefresher",
    "ControllerSession",
    "Credentials",
    "LoginResult",
    "SessionState",
]
