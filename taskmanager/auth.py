import logging
from fastapi import Depends, Header, Request
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from taskmanager.database import get_db
from taskmanager.errors import (
    ConflictError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
    ValidationError,
)
from taskmanager.models import User
from taskmanager.security import TokenCodec, hash_password, verify_password
from taskmanager.utils import PASSWORD_POLICY_MESSAGE, validate_email, validate_password

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, db: Session, tokens: TokenCodec):
        self.db = db
        self.tokens = tokens

    def signup(self, email: str | None, full_name: str | None, password: str | None) -> tuple[str, User]:
        if not email or not email.strip() or not full_name or not full_name.strip() or not password:
            raise ValidationError("All fields are required")

        email = email.strip()
        if not validate_email(email):
            raise ValidationError("Invalid email format")

        if not validate_password(password):
            raise ValidationError(PASSWORD_POLICY_MESSAGE)

        if self.db.query(User).filter(User.email == email).first():
            raise ConflictError("User already exists")

        user = User(
            email=email,
            full_name=full_name.strip(),
            password_hash=hash_password(password),
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # lost a race with a concurrent signup for the same email
            self.db.rollback()
            raise ConflictError("User already exists") from None
        self.db.refresh(user)

        logger.info(f"Registered user {user.id}")
        return self.tokens.issue(user.id), user

    def login(self, email: str | None, password: str | None) -> tuple[str, User]:
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = self.db.query(User).filter(User.email == email.strip()).first()

        if not user or not verify_password(password, user.password_hash):
            logger.warning("Failed sign-in attempt")
            raise InvalidCredentialsError()

        logger.info(f"User {user.id} signed in")
        return self.tokens.issue(user.id), user


# -------------------------
# DEPENDENCIES
# -------------------------
def get_token_codec(request: Request) -> TokenCodec:
    return request.app.state.tokens


def get_auth_service(
    db: Session = Depends(get_db),
    tokens: TokenCodec = Depends(get_token_codec),
) -> AuthService:
    return AuthService(db, tokens)


def extract_bearer_token(authorization: str | None) -> str:
    if not authorization:
        raise MissingTokenError()

    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise MissingTokenError()
    return token


def get_current_user(
    authorization: str | None = Header(None),
    db: Session = Depends(get_db),
    tokens: TokenCodec = Depends(get_token_codec),
) -> User:
    token = extract_bearer_token(authorization)
    user_id = tokens.validate(token)

    user = db.get(User, user_id)
    if not user:
        logger.warning(f"Token for missing user {user_id}")
        raise InvalidTokenError()
    return user
