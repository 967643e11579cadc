
import logging

from fastapi import Request, Depends
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session
from jose import JWTError
from app.config import settings
from app.db.session import SessionLocal
from app.errors import AuthenticationError, StorageUnavailableError
from app.utils.security import decode_token
from app.models.user import User

logger = logging.getLogger(__name__)

COOKIE_NAME = "me_jwt"


def get_db():
    db = SessionLocal()
    try:
        db.connection()
    except OperationalError as e:
        db.close()
        logger.error("Database connection failed: %s", e)
        raise StorageUnavailableError("Database connection failed, please try again later") from e
    try:
        yield db
    finally:
        db.close()


def _get_token(request: Request) -> str | None:
    auth = request.headers.get("Authorization")
    if auth and auth.startswith("Bearer "):
        return auth.split(" ", 1)[1]
    return request.cookies.get(COOKIE_NAME)


def get_default_user(db: Session) -> User:
    """Stand-in identity while authentication is stubbed; created on first use."""
    user = db.query(User).filter(User.email == settings.default_user_email).first()
    if user is None:
        user = User(email=settings.default_user_email, name=settings.default_user_name)
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info("Created default user %s", user.email)
    return user


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    token = _get_token(request)
    if not token:
        return get_default_user(db)

    if not settings.secret_key:
        raise AuthenticationError("Token authentication is not configured")
    try:
        payload = decode_token(token)
        user_id = int(payload.get("sub"))
    except (JWTError, TypeError, ValueError):
        raise AuthenticationError("Invalid token")

    user = db.get(User, user_id)
    if user is None:
        raise AuthenticationError("User not found")

    return user
