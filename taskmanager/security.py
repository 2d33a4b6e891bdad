import logging
from itsdangerous import URLSafeTimedSerializer, BadData, SignatureExpired
from passlib.context import CryptContext

from taskmanager.config import DEFAULT_TOKEN_EXPIRES_IN
from taskmanager.errors import InvalidTokenError

logger = logging.getLogger(__name__)

# -------------------------
# PASSWORD HASHING
# -------------------------
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(plain_password: str) -> str:
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


# -------------------------
# BEARER TOKENS
# -------------------------
class TokenCodec:
    """
    Stateless signed tokens carrying a user id.

    The serializer stamps the issue time into the signature, so expiry is
    checked against it on every validate() call; nothing is stored server-side.
    """

    salt = "taskmanager.auth"

    def __init__(self, secret_key: str, expires_in: int = DEFAULT_TOKEN_EXPIRES_IN):
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self.expires_in = expires_in
        self._serializer = URLSafeTimedSerializer(secret_key, salt=self.salt)

    def issue(self, user_id: int) -> str:
        return self._serializer.dumps({"userId": user_id})

    def validate(self, token: str) -> int:
        try:
            payload = self._serializer.loads(token, max_age=self.expires_in)
        except SignatureExpired:
            logger.warning("Rejected expired token")
            raise InvalidTokenError() from None
        except BadData:
            logger.warning("Rejected malformed or tampered token")
            raise InvalidTokenError() from None

        user_id = payload.get("userId") if isinstance(payload, dict) else None
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise InvalidTokenError()
        return user_id
