"""
Imob API — Credential Check for Token Issuance
===============================================

What:  Exchanges a username/password for a bearer token.
How:   Compares against the single configured account (ADMIN_USERNAME /
       ADMIN_PASSWORD) in constant time, then asks TokenService to sign a
       token for ADMIN_SUBJECT_ID / ADMIN_EMAIL.
Who:   POST /auth/token.
"""

import hmac
import logging

from imob_api.config import Settings
from imob_api.exceptions import AuthenticationError
from imob_api.services.token_service import TokenService

logger = logging.getLogger(__name__)


def _matches(given: str, expected: str) -> bool:
    return hmac.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


class AuthService:
    def __init__(self, settings: Settings, token_service: TokenService):
        self._username = settings.admin_username
        self._password = settings.admin_password
        self._subject_id = settings.admin_subject_id
        self._subject_email = settings.admin_email
        self._tokens = token_service

    def authenticate(self, user_name: str, password: str) -> str:
        """
        Returns a signed token for valid credentials.

        Raises:
            AuthenticationError: username or password does not match
        """
        # Evaluate both comparisons so timing does not reveal which one failed
        user_ok = _matches(user_name, self._username)
        password_ok = _matches(password, self._password)
        if not (user_ok and password_ok):
            logger.warning("Token request rejected for user %r", user_name)
            raise AuthenticationError()

        logger.info("Token issued for subject %s", self._subject_id)
        return self._tokens.issue(self._subject_id, self._subject_email)
