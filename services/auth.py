"""
Authentication Service

Registration and credential checks. Session handling itself is done by
Flask-Login on top of Flask's signed session cookie.
"""

import logging
import re

from constants import EMAIL_PATTERN, MIN_PASSWORD_LENGTH, MAX_LENGTHS
from models import db, User
from utils.sanitizer import sanitize_name, sanitize_email

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Raised with a user-facing message when registration or login fails."""
    pass


def is_valid_email(email):
    return bool(email) and re.match(EMAIL_PATTERN, email) is not None


def is_valid_password(password):
    return bool(password) and len(password) >= MIN_PASSWORD_LENGTH


def register_user(name, email, password):
    """
    Create a user account.

    Raises:
        AuthError: invalid email, short password or email already taken
    """
    name = sanitize_name(name, max_length=MAX_LENGTHS['user_name'])
    email = sanitize_email(email, max_length=MAX_LENGTHS['email'])

    if not name:
        raise AuthError('Name is required')
    if not is_valid_email(email):
        raise AuthError('Please enter a valid email address')
    if User.query.filter_by(email=email).first():
        raise AuthError('User with this email already exists')
    if not is_valid_password(password):
        raise AuthError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters long')

    user = User(name=name, email=email)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    logger.info("Registered user %s", user.id)
    return user


def authenticate(email, password):
    """
    Check credentials and return the matching user.

    Raises:
        AuthError: unknown email or wrong password (same message for both)
    """
    if not email or not password:
        raise AuthError('Email and password are required')

    user = User.query.filter_by(email=sanitize_email(email)).first()
    if user is None or not user.check_password(password):
        logger.warning("Failed login attempt for %s", sanitize_email(email))
        raise AuthError('Invalid email or password')
    return user
