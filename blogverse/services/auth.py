"""
JWT Token Authority

This module handles creation and verification of JSON Web Tokens (JWTs)
for stateless authentication. JWTs are self-contained tokens that encode
the account id and are cryptographically signed to prevent tampering.

Key concepts:
- Tokens are signed with HMAC-SHA256 using the process-wide secret key
- The key is handed to TokenAuthority explicitly, never read from globals
- Tokens carry no expiry unless one is configured
- No database lookup needed to verify tokens (stateless)
"""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from blogverse.errors import InvalidTokenError, MissingTokenError


# HMAC-SHA256: symmetric signing, same key signs and verifies
ALGORITHM = "HS256"


class TokenAuthority:
    """
    Issues and verifies access tokens binding an account id.

    One instance is built at startup from configuration and shared by all
    requests; it holds no mutable state.
    """

    def __init__(self, secret_key: str, algorithm: str = ALGORITHM, expires_delta: timedelta | None = None):
        if not secret_key:
            raise ValueError("Token signing key must not be empty")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expires_delta = expires_delta

    def issue(self, subject_id: int) -> str:
        """
        Create a signed access token for an account.

        Args:
            subject_id: Account id placed in the "sub" claim
                        (the JWT standard claim for the subject)

        Returns:
            Encoded JWT string that can be sent to the client

        Example:
            token = authority.issue(42)
            # Returns: "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."
        """
        # The "sub" claim must be a string per RFC 7519
        to_encode = {"sub": str(subject_id)}

        if self._expires_delta is not None:
            # "exp" is checked automatically by jwt.decode()
            to_encode["exp"] = datetime.now(timezone.utc) + self._expires_delta

        return jwt.encode(to_encode, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str | None) -> int:
        """
        Verify a token and return the account id it was issued for.

        This checks:
        1. A token was supplied at all
        2. Signature is valid (token hasn't been tampered with)
        3. Token hasn't expired (only if it has an "exp" claim)
        4. The subject is an account id

        Raises:
            MissingTokenError: no token supplied
            InvalidTokenError: anything else wrong with the token
        """
        if not token:
            raise MissingTokenError()

        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except JWTError as exc:
            # Don't expose the specific reason to the client
            raise InvalidTokenError() from exc

        subject = str(payload.get("sub") or "").strip()
        if not subject.isdigit():
            raise InvalidTokenError()
        return int(subject)
