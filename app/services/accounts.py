import logging
import re
import uuid
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.security import check_password_hash, generate_password_hash

from app.exceptions import (
    AccountDisabledError,
    AuthError,
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidEmailError,
    WeakPasswordError,
)
from app.schemas.auth import EMAIL_PATTERN
from app.utils.db import transactional
from models import db
from models.user import ROLES, UserProfile

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def _normalize_email(email: str) -> str:
    email = (email or "").strip().lower()
    if not re.match(EMAIL_PATTERN, email):
        raise InvalidEmailError()
    return email


def register_user(email: str, password: str, role: str) -> UserProfile:
    """Create an account and its profile; the role is fixed from here on."""
    email = _normalize_email(email)
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise WeakPasswordError()
    if role not in ROLES:
        raise AuthError("Choose a role: customer or seller")
    if UserProfile.query.filter_by(email=email).first():
        raise DuplicateEmailError()

    user = UserProfile(
        uid=uuid.uuid4().hex,
        email=email,
        password_hash=generate_password_hash(password),
        role=role,
    )
    try:
        with transactional("Failed to register user"):
            db.session.add(user)
    except IntegrityError:
        raise DuplicateEmailError()
    except SQLAlchemyError:
        raise AuthError("Registration failed. Please try again.")
    logger.info("Registered %s account %s", role, user.uid)
    return user


def login_user(email: str, password: str) -> UserProfile:
    email = _normalize_email(email)
    user = UserProfile.query.filter_by(email=email).first()
    if not user or not check_password_hash(user.password_hash, password or ""):
        raise InvalidCredentialsError()
    if user.is_disabled:
        raise AccountDisabledError()
    return user


def get_user_profile(uid: str) -> Optional[UserProfile]:
    try:
        return db.session.get(UserProfile, uid)
    except SQLAlchemyError as e:
        logger.error("Error getting user profile %s: %s", uid, e)
        return None
