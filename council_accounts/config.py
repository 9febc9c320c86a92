"""Flask configuration."""
import secrets
import os

#################### General config for app ####################
SECRET_KEY = os.environ.get('SECRET_KEY', secrets.token_urlsafe(16))

LOGLEVEL = os.environ.get('LOGLEVEL', 'INFO')
"""Level of the ``council_accounts`` loggers."""

DEFAULT_COUNCIL_NAME = os.environ.get('DEFAULT_COUNCIL_NAME', 'Valle Verde I')
"""Council assigned to users who register without naming one."""

DEFAULT_LOGIN_REDIRECT_URL = os.environ.get('DEFAULT_LOGIN_REDIRECT_URL',
                                            '/profile')
"""Where the user is sent after logging in."""

DEFAULT_LOGOUT_REDIRECT_URL = os.environ.get('DEFAULT_LOGOUT_REDIRECT_URL',
                                             '/login')
"""Where the user is sent after logging out."""


#################### Sessions ####################
JWT_SECRET = os.environ.get('JWT_SECRET', secrets.token_urlsafe(16))
"""Secret used to sign session tokens."""

SESSION_DURATION = int(os.environ.get('SESSION_DURATION', '36000'))
"""Session lifetime, in seconds."""

AUTH_SESSION_COOKIE_NAME = os.environ.get('AUTH_SESSION_COOKIE_NAME',
                                          'COUNCIL_SESSION_ID')
AUTH_SESSION_COOKIE_SECURE = bool(int(os.environ.get(
    'AUTH_SESSION_COOKIE_SECURE', '1'
)))


#################### Credentials ####################
COUNCIL_DATABASE_URI = os.environ.get('COUNCIL_DATABASE_URI',
                                      'sqlite:///council.db')
"""SQLAlchemy URI of the database holding users and councils."""

BCRYPT_ROUNDS = int(os.environ.get('BCRYPT_ROUNDS', '12'))
"""Cost factor for password and security answer hashes."""

CREATE_DB = bool(int(os.environ.get('CREATE_DB', '0')))
"""Create the tables at startup. For development and testing only."""
