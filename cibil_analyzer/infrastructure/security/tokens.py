"""Stateless JWT session tokens"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from cibil_analyzer.config import settings
from cibil_analyzer.domain.exceptions import InvalidTokenError


class TokenIssuer:
    """
    Signs and verifies session tokens.

    Tokens carry the account id in "sub" and expire after a fixed window;
    nothing is stored server-side, so validity is signature plus expiry.
    """

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        ttl: Optional[timedelta] = None,
    ):
        self.secret_key = secret_key or settings.jwt_secret_key
        self.algorithm = algorithm or settings.jwt_algorithm
        self.ttl = ttl or timedelta(days=settings.token_ttl_days)

    def issue(self, account_id: str, now: Optional[datetime] = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": account_id,
            "iat": issued_at,
            "exp": issued_at + self.ttl,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def decode(self, token: str) -> str:
        """
        Return the account id a token was issued for.

        Raises:
            InvalidTokenError: On bad signature, expiry or missing subject
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            raise InvalidTokenError() from e

        subject = payload.get("sub")
        if not subject:
            raise InvalidTokenError()
        return subject
