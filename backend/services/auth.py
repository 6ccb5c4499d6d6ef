"""Static API key check for the proxied endpoint."""

from enum import Enum


class AuthResult(Enum):
    OK = "ok"
    MISSING = "missing"
    INVALID = "invalid"


class Authenticator:
    def __init__(self, api_key: str):
        self._api_key = api_key

    def authenticate(self, supplied: str | None) -> AuthResult:
        # Plain equality, not constant-time.
        if not supplied:
            return AuthResult.MISSING
        if supplied != self._api_key:
            return AuthResult.INVALID
        return AuthResult.OK
