"""
Imob API — Token Service
=========================

What:  Issues and verifies signed, time-limited bearer tokens (JWT, HMAC).
How:   python-jose signs {sub, email, iat, exp, iss, aud} with the process-wide
       secret; verification checks signature, expiry, issuer and audience.
Who:   AuthService (issue) and AuthGateMiddleware (verify).

Verification is stateless: there is no session store, only the immutable
secret and claims configuration captured at construction.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import ValidationError as PydanticValidationError

from imob_api.config import Settings
from imob_api.exceptions import ExpiredTokenError, InvalidTokenError
from imob_api.schemas.auth import TokenPayload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenSettings:
    secret: str
    ttl_seconds: int
    issuer: str
    audience: str
    algorithm: str = "HS256"

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenSettings":
        return cls(
            secret=settings.jwt_secret,
            ttl_seconds=settings.jwt_expires_in,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            algorithm=settings.jwt_algorithm,
        )


class TokenService:
    def __init__(self, config: TokenSettings):
        self._config = config

    @property
    def ttl_seconds(self) -> int:
        return self._config.ttl_seconds

    def issue(
        self,
        subject_id: str,
        subject_email: str,
        now: Optional[datetime] = None,
    ) -> str:
        """
        Sign a token for the given subject.

        Args:
            subject_id:    Goes into the `sub` claim
            subject_email: Goes into the `email` claim
            now:           Reference issue time; defaults to the current UTC time

        Returns:
            Compact JWT string
        """
        issued = now or datetime.now(timezone.utc)
        expires = issued + timedelta(seconds=self._config.ttl_seconds)
        claims = {
            "sub": str(subject_id),
            "email": subject_email,
            "iat": int(issued.timestamp()),
            "exp": int(expires.timestamp()),
            "iss": self._config.issuer,
            "aud": self._config.audience,
        }
        return jwt.encode(claims, self._config.secret, algorithm=self._config.algorithm)

    def verify(self, token: str) -> TokenPayload:
        """
        Check a token and return its claims.

        Raises:
            ExpiredTokenError: signature valid but `exp` has passed
            InvalidTokenError: anything else (signature, format, iss/aud, claims)
        """
        try:
            claims = jwt.decode(
                token,
                self._config.secret,
                algorithms=[self._config.algorithm],
                audience=self._config.audience,
                issuer=self._config.issuer,
            )
        except ExpiredSignatureError:
            raise ExpiredTokenError() from None
        except JWTError as e:
            # The reason is logged, never returned
            logger.debug("Token rejected: %s", type(e).__name__)
            raise InvalidTokenError() from None

        try:
            return TokenPayload.model_validate(claims)
        except PydanticValidationError:
            logger.debug("Token rejected: claims do not match the expected payload")
            raise InvalidTokenError() from None
