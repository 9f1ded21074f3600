"""
User Model

Contains the User model used for cookie-session authentication.
"""

from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash

from .base import db, TimestampMixin


class User(UserMixin, TimestampMixin, db.Model):
    """Account owning recipes, menus and custom ingredients."""
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(254), unique=True, nullable=False, index=True)  # stored lower-cased
    password_hash = db.Column(db.String(255), nullable=False)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)
