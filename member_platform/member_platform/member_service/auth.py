from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
from typing import Optional
import jwt

from .errors import MissingSigningKeyError, PasswordHashingError

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_HOURS = 24

# Use pbkdf2_sha256 to avoid external bcrypt backend issues in some environments
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    try:
        return pwd_context.hash(password)
    except (TypeError, ValueError) as e:
        raise PasswordHashingError("Failed to hash password") from e


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (TypeError, ValueError) as e:
        # Raised for stored hashes passlib cannot identify
        raise PasswordHashingError("Failed to verify password") from e


class TokenService:
    """
    Issues and verifies signed bearer tokens carrying a user id.

    Tokens are never revoked server-side; expiry is the only way one stops
    being valid.
    """

    def __init__(
        self,
        secret: Optional[str],
        algorithm: str = ALGORITHM,
        expires_delta: timedelta = timedelta(hours=ACCESS_TOKEN_EXPIRE_HOURS),
    ):
        if not secret:
            raise MissingSigningKeyError("JWT_SECRET must be set to issue or verify tokens")
        self._secret = secret
        self.algorithm = algorithm
        self.expires_delta = expires_delta

    def issue(self, user_id: str, issued_at: Optional[datetime] = None) -> str:
        issued_at = issued_at or datetime.now(timezone.utc)
        payload = {"id": user_id, "iat": issued_at, "exp": issued_at + self.expires_delta}
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Optional[str]:
        """
        Return the user id embedded in ``token``, or None.

        Bad signatures, corrupted tokens and expired tokens all come back as
        None so callers cannot tell them apart.
        """
        try:
            data = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["id", "iat", "exp"]},
            )
        except jwt.PyJWTError:
            return None

        user_id = data.get("id")
        if not isinstance(user_id, str) or not user_id:
            return None
        return user_id
